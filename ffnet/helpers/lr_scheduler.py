"""
Learning Rate Schedulers for the training loop.
A scheduler drives the `lr` of one update rule; the loop steps it once per iteration.
"""
import math


class LRScheduler:
    """Base class for learning rate schedulers."""

    def __init__(self, rule, verbose=False):
        self.rule = rule
        self.verbose = verbose
        self.initial_lr = rule.lr
        self.current_lr = rule.lr

    def step(self, iteration, metrics=None):
        """Update learning rate based on iteration and optionally metrics."""
        new_lr = self.get_lr(iteration, metrics)
        if new_lr != self.current_lr:
            self.current_lr = new_lr
            self.rule.lr = new_lr
            if self.verbose:
                print(f"   LR updated: {new_lr:.6f}")
        return new_lr

    def get_lr(self, iteration, metrics=None):
        """Override this method in subclasses."""
        return self.current_lr


class StepLR(LRScheduler):
    """Step decay: reduce LR by gamma every step_size iterations."""

    def __init__(self, rule, step_size, gamma=0.1, verbose=False):
        super().__init__(rule, verbose)
        if step_size < 1:
            raise ValueError(f"step_size must be >= 1, got {step_size}")
        self.step_size = step_size
        self.gamma = gamma

    def get_lr(self, iteration, metrics=None):
        return self.initial_lr * (self.gamma ** (iteration // self.step_size))


class ExponentialLR(LRScheduler):
    """Exponential decay: LR = initial_lr * gamma^iteration."""

    def __init__(self, rule, gamma=0.95, verbose=False):
        super().__init__(rule, verbose)
        self.gamma = gamma

    def get_lr(self, iteration, metrics=None):
        return self.initial_lr * (self.gamma ** iteration)


class CosineAnnealingLR(LRScheduler):
    """Cosine annealing: smooth cosine decay from initial_lr to min_lr."""

    def __init__(self, rule, T_max, min_lr=0, verbose=False):
        super().__init__(rule, verbose)
        self.T_max = T_max
        self.min_lr = min_lr

    def get_lr(self, iteration, metrics=None):
        progress = min(iteration, self.T_max) / self.T_max
        return self.min_lr + (self.initial_lr - self.min_lr) * \
               (1 + math.cos(math.pi * progress)) / 2


class ReduceLROnPlateau(LRScheduler):
    """Reduce LR when the monitored loss stops improving."""

    def __init__(self, rule, monitor='loss', mode='min', factor=0.5,
                 patience=10, threshold=1e-4, min_lr=0, verbose=False):
        super().__init__(rule, verbose)
        if mode not in ('min', 'max'):
            raise ValueError(f"mode must be 'min' or 'max', got {mode!r}")
        self.monitor = monitor
        self.mode = mode
        self.factor = factor
        self.patience = patience
        self.threshold = threshold
        self.min_lr = min_lr

        self.best = None
        self.num_bad_steps = 0

    def get_lr(self, iteration, metrics=None):
        if metrics is None or self.monitor not in metrics:
            return self.current_lr

        current = metrics[self.monitor]

        if self.best is None:
            self.best = current
        else:
            if self.mode == 'min':
                improved = current < self.best - self.threshold
            else:  # mode == 'max'
                improved = current > self.best + self.threshold

            if improved:
                self.best = current
                self.num_bad_steps = 0
            else:
                self.num_bad_steps += 1

        if self.num_bad_steps >= self.patience:
            new_lr = max(self.current_lr * self.factor, self.min_lr)
            if new_lr < self.current_lr:
                self.num_bad_steps = 0
                if self.verbose:
                    print(f"   ReduceLROnPlateau: {self.monitor} didn't improve for {self.patience} iterations")
                return new_lr

        return self.current_lr


def get_scheduler(name, rule, **kwargs):
    """Factory function to create schedulers by name."""
    schedulers = {
        'step': StepLR,
        'exponential': ExponentialLR,
        'cosine': CosineAnnealingLR,
        'plateau': ReduceLROnPlateau,
    }

    if name not in schedulers:
        raise ValueError(f"Unknown scheduler: {name}. Available: {list(schedulers.keys())}")

    return schedulers[name](rule, **kwargs)
