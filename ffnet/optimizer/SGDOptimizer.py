from .UpdateRule import UpdateRule


class SGDOptimizer(UpdateRule):
    """Fixed-step gradient descent with optional L2 weight decay."""

    name = "sgd"

    def __init__(self, lr=1e-2, weight_decay=0.0):
        super().__init__(lr)
        self.weight_decay = float(weight_decay)

    def compute_update(self, gradient, weights, state):
        if self.weight_decay != 0.0:
            return self.lr * (gradient + self.weight_decay * weights)  # L2 weight decay
        return self.lr * gradient
