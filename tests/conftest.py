import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from ffnet import FullyConnectedLayer, Network, SGDOptimizer


@pytest.fixture
def linear_net():
    """1x1 identity network fitting y = 2x, weight starting at 1.0."""
    net = Network((1, 1), 1, activation="identity", update_rule=SGDOptimizer(lr=0.1))
    net.set_weights([np.array([[1.0]])])
    net.set_inputs([[3.0]])
    net.set_target([6.0])
    return net


@pytest.fixture
def two_layer_net():
    """(3 x 2) -> 4 tanh -> 1 identity."""
    layers = [
        FullyConnectedLayer((3, 2), 4, activation="tanh", seed=0),
        FullyConnectedLayer((3, 4), 1, activation="identity", seed=1),
    ]
    net = Network.from_layers(layers, loss="L2")
    net.set_inputs(np.array([[0.5, -1.0], [1.5, 0.3], [-0.7, 0.8]]))
    net.set_target(np.array([[0.2], [-0.4], [1.1]]))
    return net
