"""
Activation functions by name.

Every entry maps a name to a pair (f, df). Both take the pre-activation Z;
df returns dA/dZ element-wise, which is all a dense layer needs for its
backward pass.
"""
from collections import namedtuple
from types import MappingProxyType

from ..helpers.Backend import backend
from ..helpers.errors import UnknownActivationError

Activation = namedtuple("Activation", ["function", "derivative"])

LEAKY_SLOPE = 0.01


def identity(z):
    return z


def identity_derivative(z):
    return backend.ones_like(z)


def relu(z):
    return backend.maximum(0.0, z)


def relu_derivative(z):
    return (z > 0).astype(z.dtype)


def leaky_relu(z):
    return backend.where(z > 0, z, LEAKY_SLOPE * z)


def leaky_relu_derivative(z):
    return backend.where(z > 0, 1.0, LEAKY_SLOPE).astype(z.dtype)


def sigmoid(z):
    # split by sign so exp never overflows
    out = backend.zeros_like(z)
    pos = z >= 0
    out[pos] = 1.0 / (1.0 + backend.exp(-z[pos]))
    ez = backend.exp(z[~pos])
    out[~pos] = ez / (1.0 + ez)
    return out


def sigmoid_derivative(z):
    sig = sigmoid(z)
    return sig * (1 - sig)


def tanh(z):
    return backend.tanh(z)


def tanh_derivative(z):
    return 1.0 - backend.tanh(z) ** 2


def softplus(z):
    return backend.maximum(z, 0.0) + backend.log1p(backend.exp(-backend.abs(z)))


ACTIVATIONS = MappingProxyType({
    "identity": Activation(identity, identity_derivative),
    "linear": Activation(identity, identity_derivative),
    "relu": Activation(relu, relu_derivative),
    "leaky_relu": Activation(leaky_relu, leaky_relu_derivative),
    "sigmoid": Activation(sigmoid, sigmoid_derivative),
    "tanh": Activation(tanh, tanh_derivative),
    # d/dz softplus(z) is the logistic function
    "softplus": Activation(softplus, sigmoid),
})


def get_activation(name):
    """Look up an activation pair by (case-insensitive) name."""
    key = str(name).lower()
    if key not in ACTIVATIONS:
        raise UnknownActivationError(
            f"Unknown activation: {name}. Available: {sorted(ACTIVATIONS)}"
        )
    return ACTIVATIONS[key]
