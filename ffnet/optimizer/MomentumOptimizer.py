from ..helpers.Backend import backend
from .UpdateRule import UpdateRule


class MomentumOptimizer(UpdateRule):
    """
    Heavy-ball momentum:
        v <- momentum * v + g
        W <- W - lr * v                  (or lr * (g + momentum * v) with nesterov)
    """

    name = "momentum"

    def __init__(self, lr=1e-2, momentum=0.9, nesterov=False):
        super().__init__(lr)
        if not 0.0 <= momentum < 1.0:
            raise ValueError(f"momentum must be in [0, 1), got {momentum}")
        self.momentum = float(momentum)
        self.nesterov = bool(nesterov)

    def compute_update(self, gradient, weights, state):
        v = state.get("velocity")
        if v is None or v.shape != gradient.shape:
            v = backend.zeros_like(gradient)
        v = self.momentum * v + gradient
        state["velocity"] = v
        if self.nesterov:
            return self.lr * (gradient + self.momentum * v)
        return self.lr * v
