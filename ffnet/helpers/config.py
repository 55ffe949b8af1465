"""Configuration for the training loop."""
from dataclasses import dataclass, replace as _replace
from typing import Any, Optional


@dataclass
class TrainConfig:
    """
    Options for Network.train().

    stop_tol:  stop once the recorded scalar loss is <= stop_tol
    max_iter:  maximum number of recorded training steps
    quiet:     suppress the ConvergenceWarning when max_iter is hit
    inputs:    replacement input matrix, used for the first iteration only
    target:    replacement target, used for the first iteration only
    verbose:   > 0 prints progress roughly ten times per run
    scheduler: optional LRScheduler stepped once per iteration
    runs_root: directory for a RunLogger; None disables file logging
    tag:       run name used by the RunLogger
    """
    stop_tol: float = 1e-5
    max_iter: int = 1000
    quiet: bool = False
    inputs: Optional[Any] = None
    target: Optional[Any] = None
    verbose: int = 0
    scheduler: Optional[Any] = None
    runs_root: Optional[str] = None
    tag: str = "run"

    def __post_init__(self):
        if int(self.max_iter) < 1:
            raise ValueError(f"max_iter must be >= 1, got {self.max_iter}")
        if self.stop_tol < 0:
            raise ValueError(f"stop_tol must be >= 0, got {self.stop_tol}")
        self.max_iter = int(self.max_iter)
        self.stop_tol = float(self.stop_tol)

    def replace(self, **changes):
        """Return a copy with the given fields changed (validated again)."""
        return _replace(self, **changes)
