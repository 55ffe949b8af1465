import pytest

from ffnet import SGDOptimizer
from ffnet.helpers.lr_scheduler import (
    CosineAnnealingLR,
    ExponentialLR,
    ReduceLROnPlateau,
    StepLR,
    get_scheduler,
)


def test_step_lr():
    rule = SGDOptimizer(lr=1.0)
    sched = StepLR(rule, step_size=2, gamma=0.5)
    assert sched.step(1) == pytest.approx(1.0)
    assert sched.step(2) == pytest.approx(0.5)
    assert sched.step(4) == pytest.approx(0.25)
    assert rule.lr == pytest.approx(0.25)


def test_exponential_lr():
    rule = SGDOptimizer(lr=0.2)
    ExponentialLR(rule, gamma=0.9).step(3)
    assert rule.lr == pytest.approx(0.2 * 0.9**3)


def test_cosine_reaches_min_lr():
    rule = SGDOptimizer(lr=0.1)
    sched = CosineAnnealingLR(rule, T_max=10, min_lr=0.01)
    assert sched.step(5) == pytest.approx(0.055)
    assert sched.step(10) == pytest.approx(0.01)
    assert sched.step(50) == pytest.approx(0.01)


def test_plateau_reduces_after_patience():
    rule = SGDOptimizer(lr=0.1)
    sched = ReduceLROnPlateau(rule, factor=0.5, patience=2)
    sched.step(1, {"loss": 1.0})
    sched.step(2, {"loss": 1.0})
    assert rule.lr == pytest.approx(0.1)
    sched.step(3, {"loss": 1.0})
    assert rule.lr == pytest.approx(0.05)
    # improvement resets the counter
    sched.step(4, {"loss": 0.5})
    sched.step(5, {"loss": 0.5})
    assert rule.lr == pytest.approx(0.05)


def test_plateau_ignores_missing_metric():
    rule = SGDOptimizer(lr=0.1)
    sched = ReduceLROnPlateau(rule, patience=1)
    for i in range(5):
        sched.step(i)
    assert rule.lr == pytest.approx(0.1)


def test_factory():
    rule = SGDOptimizer(lr=0.1)
    assert isinstance(get_scheduler("step", rule, step_size=3), StepLR)
    with pytest.raises(ValueError):
        get_scheduler("cyclic", rule)
    with pytest.raises(ValueError):
        ReduceLROnPlateau(rule, mode="sideways")
