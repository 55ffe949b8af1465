"""
Loss functions by name.

A registry is immutable: adding a loss returns a new registry, so a Network
holding one registry never sees another instance's overrides.
"""
from collections import namedtuple
from types import MappingProxyType

from ..helpers.Backend import backend
from ..helpers.errors import UnknownLossError

LossPair = namedtuple("LossPair", ["loss", "derivative"])


# ---- built-in losses; r = prediction - target ----
def l2_loss(pred, obs):
    resid = pred - obs
    return 0.5 * float(backend.sum(resid * resid))


def l2_derivative(pred, obs):
    return pred - obs


def mse_loss(pred, obs):
    resid = pred - obs
    return float(backend.mean(resid * resid))


def mse_derivative(pred, obs):
    resid = pred - obs
    return 2.0 * resid / resid.size


def mae_loss(pred, obs):
    return float(backend.mean(backend.abs(pred - obs)))


def mae_derivative(pred, obs):
    resid = pred - obs
    return backend.sign(resid) / resid.size


def _softmax(logits):
    z = logits - backend.max(logits, axis=-1, keepdims=True)  # stable
    e = backend.exp(z)
    return e / backend.sum(e, axis=-1, keepdims=True)


def cross_entropy_loss(logits, Y_onehot, eps=1e-12):
    """Softmax over the last axis fused with cross-entropy, averaged over rows."""
    probs = _softmax(logits)
    m = probs.shape[0] if probs.ndim > 1 else 1
    return float(-backend.sum(Y_onehot * backend.log(probs + eps)) / m)


def cross_entropy_derivative(logits, Y_onehot):
    # dL/dlogits = (probs - Y) / m
    probs = _softmax(logits)
    m = probs.shape[0] if probs.ndim > 1 else 1
    return (probs - Y_onehot) / m


class LossRegistry:
    def __init__(self, losses=None):
        entries = {}
        for name, pair in dict(losses or {}).items():
            loss, derivative = pair
            entries[str(name)] = LossPair(loss, derivative)
        self._losses = MappingProxyType(entries)

    def get(self, name):
        try:
            return self._losses[name]
        except KeyError:
            raise UnknownLossError(
                f"Unknown loss: {name}. Available: {list(self._losses.keys())}"
            ) from None

    __getitem__ = get

    def with_loss(self, name, loss, derivative):
        """Return a new registry that also knows `name`."""
        entries = dict(self._losses)
        entries[str(name)] = LossPair(loss, derivative)
        return LossRegistry(entries)

    def names(self):
        return list(self._losses.keys())

    def __contains__(self, name):
        return name in self._losses

    def __iter__(self):
        return iter(self._losses)

    def __len__(self):
        return len(self._losses)

    def __repr__(self):
        return f"LossRegistry({self.names()})"


DEFAULT_LOSSES = LossRegistry({
    "L2": (l2_loss, l2_derivative),
    "MSE": (mse_loss, mse_derivative),
    "MAE": (mae_loss, mae_derivative),
    "cross_entropy": (cross_entropy_loss, cross_entropy_derivative),
})
