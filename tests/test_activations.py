import numpy as np
import pytest

from ffnet import ACTIVATIONS, UnknownActivationError, get_activation

# keep clear of the relu kink at 0
Z = np.array([[-2.5, -1.3, -0.4], [0.5, 1.2, 3.0]])


@pytest.mark.parametrize("name", sorted(ACTIVATIONS))
def test_derivative_matches_finite_difference(name):
    f, df = get_activation(name)
    h = 1e-6
    numeric = (f(Z + h) - f(Z - h)) / (2 * h)
    np.testing.assert_allclose(df(Z), numeric, rtol=1e-5, atol=1e-7)


def test_values():
    np.testing.assert_allclose(get_activation("relu").function(Z), np.maximum(0, Z))
    np.testing.assert_allclose(get_activation("identity").function(Z), Z)
    np.testing.assert_allclose(get_activation("tanh").function(Z), np.tanh(Z))
    np.testing.assert_allclose(
        get_activation("sigmoid").function(Z), 1.0 / (1.0 + np.exp(-Z))
    )
    np.testing.assert_allclose(
        get_activation("softplus").function(Z), np.log1p(np.exp(Z))
    )


def test_sigmoid_does_not_overflow():
    z = np.array([[-1000.0, 1000.0]])
    with np.errstate(over="raise"):
        out = get_activation("sigmoid").function(z)
    np.testing.assert_allclose(out, [[0.0, 1.0]])


def test_lookup_is_case_insensitive():
    assert get_activation("ReLU") is ACTIVATIONS["relu"]


def test_unknown_name():
    with pytest.raises(UnknownActivationError):
        get_activation("gelu")
    with pytest.raises(LookupError):
        get_activation("gelu")
