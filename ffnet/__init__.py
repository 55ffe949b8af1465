from .Network import Network, TrainingState, TrainResult
from .layers import Layer, FullyConnectedLayer, ACTIVATIONS, get_activation
from .loss import LossPair, LossRegistry, DEFAULT_LOSSES
from .optimizer import (
    UpdateRule,
    get_update_rule,
    SGDOptimizer,
    MomentumOptimizer,
    AdamWOptimizer,
)
from .helpers.config import TrainConfig
from .helpers.errors import (
    NetworkError,
    ShapeMismatchError,
    ArityMismatchError,
    UnknownLossError,
    UnknownActivationError,
    StaleGradientError,
    MissingDataError,
    ConvergenceWarning,
)

__version__ = "0.1.0"

__all__ = [
    "Network",
    "TrainingState",
    "TrainResult",
    "Layer",
    "FullyConnectedLayer",
    "ACTIVATIONS",
    "get_activation",
    "LossPair",
    "LossRegistry",
    "DEFAULT_LOSSES",
    "UpdateRule",
    "get_update_rule",
    "SGDOptimizer",
    "MomentumOptimizer",
    "AdamWOptimizer",
    "TrainConfig",
    "NetworkError",
    "ShapeMismatchError",
    "ArityMismatchError",
    "UnknownLossError",
    "UnknownActivationError",
    "StaleGradientError",
    "MissingDataError",
    "ConvergenceWarning",
]
