"""
Error types raised by the network engine.

Every error is raised before the offending operation mutates anything, so a
caught error always leaves the network in its previous valid state.
"""


class NetworkError(Exception):
    """Base class for all engine errors."""


class ShapeMismatchError(NetworkError, ValueError):
    """Input, target or weight dimensions disagree with the declared shapes."""


class ArityMismatchError(NetworkError, ValueError):
    """A per-layer list does not have exactly one entry per layer."""


class UnknownLossError(NetworkError, LookupError):
    """A loss name is not present in the registry."""


class UnknownActivationError(NetworkError, LookupError):
    """An activation name is not present in the activation registry."""


class StaleGradientError(NetworkError, RuntimeError):
    """Backward or update requested without a fresh forward pass."""


class MissingDataError(NetworkError, RuntimeError):
    """A forward pass was requested before any inputs were set."""


class ConvergenceWarning(UserWarning):
    """Training stopped at the iteration limit without reaching the tolerance."""
