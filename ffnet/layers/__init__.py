from .Layer import Layer
from .FullyConnectedLayer import FullyConnectedLayer
from .activations import ACTIVATIONS, get_activation

__all__ = [
    "Layer",
    "FullyConnectedLayer",
    "ACTIVATIONS",
    "get_activation",
]
