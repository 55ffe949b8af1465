from ..helpers.Backend import backend
from .UpdateRule import UpdateRule


class AdamWOptimizer(UpdateRule):
    name = "adamw"

    def __init__(self, lr=1e-3, weight_decay=0.0, beta1=0.9, beta2=0.999, eps=1e-8):
        super().__init__(lr)
        for label, beta in (("beta1", beta1), ("beta2", beta2)):
            if not 0.0 <= beta < 1.0:
                raise ValueError(f"{label} must be in [0, 1), got {beta}")
        self.weight_decay = float(weight_decay)
        self.beta1 = float(beta1)
        self.beta2 = float(beta2)
        self.eps = float(eps)

    def compute_update(self, gradient, weights, state):
        m = state.get("m")
        v = state.get("v")
        if m is None or m.shape != gradient.shape:
            m = backend.zeros_like(gradient)
            v = backend.zeros_like(gradient)
            state["t"] = 0
        state["t"] += 1
        t = state["t"]
        b1t = 1.0 - self.beta1**t
        b2t = 1.0 - self.beta2**t

        # Adam moments
        m = self.beta1 * m + (1.0 - self.beta1) * gradient
        v = self.beta2 * v + (1.0 - self.beta2) * (gradient * gradient)
        state["m"] = m
        state["v"] = v
        m_hat = m / b1t
        v_hat = v / b2t

        step = self.lr * (m_hat / (backend.sqrt(v_hat) + self.eps))
        # decoupled weight decay
        if self.weight_decay != 0.0:
            step = step + self.lr * self.weight_decay * weights
        return step
