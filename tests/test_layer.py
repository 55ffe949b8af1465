import numpy as np
import pytest

from ffnet import (
    FullyConnectedLayer,
    MomentumOptimizer,
    SGDOptimizer,
    ShapeMismatchError,
    StaleGradientError,
    UnknownActivationError,
)


def test_forward_shapes_and_cache():
    layer = FullyConnectedLayer((3, 2), 4, activation="relu", seed=0)
    assert layer.get_weights().shape == (2, 4)
    x = np.arange(6, dtype=float).reshape(3, 2)
    out = layer.forward(x)
    assert out.shape == (3, 4)
    assert layer.get_output_shape() == (3, 4)
    np.testing.assert_allclose(out, np.maximum(0.0, x @ layer.get_weights()))


def test_forward_rejects_wrong_input_shape():
    layer = FullyConnectedLayer((1, 2), 1, seed=0)
    with pytest.raises(ShapeMismatchError):
        layer.forward(np.ones((1, 3)))


def test_forward_promotes_vector_to_row():
    layer = FullyConnectedLayer((1, 2), 1, weights=[[2.0], [3.0]])
    np.testing.assert_allclose(layer.forward([1.0, 1.0]), [[5.0]])


def test_backward_before_forward_is_stale():
    layer = FullyConnectedLayer((1, 2), 1, seed=0)
    with pytest.raises(StaleGradientError):
        layer.backward(np.ones((1, 1)))


def test_backward_identity_layer():
    layer = FullyConnectedLayer((2, 2), 1, weights=[[1.0], [-2.0]])
    x = np.array([[1.0, 2.0], [3.0, 4.0]])
    layer.forward(x)
    upstream = np.array([[0.5], [-1.0]])
    err, grad = layer.backward(upstream)
    np.testing.assert_allclose(grad, x.T @ upstream)
    np.testing.assert_allclose(err, upstream @ np.array([[1.0, -2.0]]))
    assert err.shape == x.shape
    assert layer.get_err() is err
    assert layer.get_gradient() is grad


def test_backward_rejects_wrong_upstream_shape():
    layer = FullyConnectedLayer((2, 2), 1, seed=0)
    layer.forward(np.ones((2, 2)))
    with pytest.raises(ShapeMismatchError):
        layer.backward(np.ones((3, 1)))


def test_forward_clears_previous_gradient():
    layer = FullyConnectedLayer((1, 2), 1, seed=0)
    layer.forward([[1.0, 1.0]])
    layer.backward([[1.0]])
    assert layer.get_gradient() is not None
    layer.forward([[1.0, 1.0]])
    assert layer.get_gradient() is None
    assert layer.get_err() is None


def test_update_requires_gradient():
    layer = FullyConnectedLayer((1, 1), 1, weights=[[1.0]])
    with pytest.raises(StaleGradientError):
        layer.update_weights()


def test_failed_update_keeps_configured_rule():
    rule = SGDOptimizer(lr=0.1)
    layer = FullyConnectedLayer((1, 1), 1, weights=[[1.0]], update_rule=rule)
    with pytest.raises(StaleGradientError):
        layer.update_weights(MomentumOptimizer(lr=0.5))
    assert layer.update_rule is rule


def test_update_uses_configured_rule():
    layer = FullyConnectedLayer((1, 1), 1, weights=[[1.0]], update_rule=SGDOptimizer(lr=0.1))
    layer.forward([[3.0]])
    layer.backward([[-3.0]])  # dL/dA for L2 with target 6
    layer.update_weights()
    np.testing.assert_allclose(layer.get_weights(), [[1.0 + 0.1 * 9.0]])


def test_update_with_explicit_rule_replaces_configured_one():
    layer = FullyConnectedLayer((1, 1), 1, weights=[[1.0]], update_rule=SGDOptimizer(lr=0.1))
    rule = MomentumOptimizer(lr=0.5, momentum=0.0)
    layer.forward([[1.0]])
    layer.backward([[1.0]])
    layer.update_weights(rule)
    assert layer.update_rule is rule
    np.testing.assert_allclose(layer.get_weights(), [[0.5]])


def test_set_weights_shape_precondition():
    layer = FullyConnectedLayer((1, 2), 3, seed=0)
    before = layer.get_weights()
    with pytest.raises(ShapeMismatchError):
        layer.set_weights(np.ones((3, 2)))
    np.testing.assert_array_equal(layer.get_weights(), before)


def test_get_weights_returns_copy():
    layer = FullyConnectedLayer((1, 2), 1, weights=[[1.0], [2.0]])
    w = layer.get_weights()
    w[0, 0] = 100.0
    assert layer.get_weights()[0, 0] == 1.0


def test_set_input_shape_keeps_weights_for_new_row_count():
    layer = FullyConnectedLayer((1, 2), 3, seed=0)
    before = layer.get_weights()
    layer.set_input_shape((5, 2))
    assert layer.get_input_shape() == (5, 2)
    np.testing.assert_array_equal(layer.get_weights(), before)


def test_set_input_shape_reinitialises_for_new_columns():
    layer = FullyConnectedLayer((1, 2), 3, update_rule=MomentumOptimizer(), seed=0)
    layer.update_state["velocity"] = np.ones((2, 3))
    layer.set_input_shape((1, 4))
    assert layer.get_weights().shape == (4, 3)
    assert layer.update_state == {}


def test_set_num_outputs_resizes_weights():
    layer = FullyConnectedLayer((2, 3), 1, seed=0)
    layer.set_num_outputs(5)
    assert layer.num_outputs == 5
    assert layer.get_weights().shape == (3, 5)
    assert layer.get_output_shape() == (2, 5)


def test_unknown_activation():
    with pytest.raises(UnknownActivationError):
        FullyConnectedLayer((1, 1), 1, activation="swishy")
    layer = FullyConnectedLayer((1, 1), 1, activation="relu")
    with pytest.raises(UnknownActivationError):
        layer.set_activation("swishy")
    assert layer.activation == "relu"


def test_invalid_shapes():
    with pytest.raises(ShapeMismatchError):
        FullyConnectedLayer((0, 2), 1)
    with pytest.raises(ShapeMismatchError):
        FullyConnectedLayer((1, 2, 3), 1)
    with pytest.raises(ShapeMismatchError):
        FullyConnectedLayer((1, 2), 0)


def test_seed_makes_initialisation_reproducible():
    a = FullyConnectedLayer((1, 3), 2, seed=7)
    b = FullyConnectedLayer((1, 3), 2, seed=7)
    np.testing.assert_array_equal(a.get_weights(), b.get_weights())
