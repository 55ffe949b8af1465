"""
Runtime update strategies.

A rule only holds hyperparameters. Anything that evolves between steps
(velocities, moment estimates, step counters) lives in a per-layer `state`
dict owned by the layer, so one rule instance can drive every layer.
"""


class UpdateRule:
    """Base class: subclasses implement compute_update()."""

    name = "base"

    def __init__(self, lr):
        if lr <= 0:
            raise ValueError(f"lr must be positive, got {lr}")
        self.lr = float(lr)

    def compute_update(self, gradient, weights, state):
        """Return the step to subtract from `weights`; may mutate `state`."""
        raise NotImplementedError

    def apply(self, weights, gradient, state):
        # in-place so the layer keeps ownership of its weight buffer
        weights -= self.compute_update(gradient, weights, state)
        return weights

    def hyperparameters(self):
        return {k: v for k, v in vars(self).items() if not k.startswith("_")}

    def __repr__(self):
        args = ", ".join(f"{k}={v!r}" for k, v in self.hyperparameters().items())
        return f"{type(self).__name__}({args})"


def get_update_rule(name, **kwargs):
    """Factory function to create update rules by name."""
    from .SGDOptimizer import SGDOptimizer
    from .MomentumOptimizer import MomentumOptimizer
    from .AdamWOptimizer import AdamWOptimizer

    rules = {
        "sgd": SGDOptimizer,
        "momentum": MomentumOptimizer,
        "adamw": AdamWOptimizer,
        "adam": AdamWOptimizer,
    }

    if name not in rules:
        raise ValueError(f"Unknown update rule: {name}. Available: {list(rules.keys())}")

    return rules[name](**kwargs)
