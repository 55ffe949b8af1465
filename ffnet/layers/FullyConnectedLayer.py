import numpy as np
from .Layer import Layer
from .activations import get_activation
from ..helpers.Backend import backend
from ..helpers.errors import ShapeMismatchError, StaleGradientError


def _check_shape(shape):
    if len(shape) != 2:
        raise ShapeMismatchError(f"input shape must be (rows, cols), got {shape}")
    rows, cols = int(shape[0]), int(shape[1])
    if rows < 1 or cols < 1:
        raise ShapeMismatchError(f"input shape must be positive, got {shape}")
    return (rows, cols)


class FullyConnectedLayer(Layer):
    def __init__(
        self,
        input_shape,
        num_outputs,
        activation="identity",
        update_rule=None,
        weights=None,
        seed=None,
    ):
        # input:   (rows, cols)
        # weights: (cols, num_outputs)
        # output:  (rows, num_outputs)
        self.input_shape = _check_shape(input_shape)
        self.num_outputs = int(num_outputs)
        if self.num_outputs < 1:
            raise ShapeMismatchError(f"num_outputs must be positive, got {num_outputs}")

        self.activation = str(activation).lower()
        self._act = get_activation(self.activation)
        self.update_rule = update_rule
        self.update_state = {}
        self._rng = backend.rng(seed)

        if weights is None:
            self.weights = self._init_weights()
        else:
            self.weights = self._init_weights()
            self.set_weights(weights)

        # caches (filled during forward / backward)
        self.x = None
        self.z = None
        self.output = None
        self.delta = None
        self.err = None
        self.dW = None

    # ----- helpers -----
    def _init_weights(self):
        # He initialization
        fan_in = self.input_shape[1]
        return self._rng.standard_normal((fan_in, self.num_outputs)) * np.sqrt(2.0 / fan_in)

    def _reset(self, reinit_weights):
        if reinit_weights:
            self.weights = self._init_weights()
            self.update_state = {}
        self.x = self.z = self.output = None
        self.delta = self.err = self.dW = None

    # ----- forward / backward -----
    def forward(self, x):
        x = backend.as_matrix(x)
        if x.shape != self.input_shape:
            raise ShapeMismatchError(
                f"layer expects input of shape {self.input_shape}, got {x.shape}"
            )
        self.x = x  # cache for backward
        self.z = backend.matmul(x, self.weights)
        self.output = self._act.function(self.z)
        # error/gradient belong to the previous forward pass
        self.delta = self.err = self.dW = None
        return self.output

    def backward(self, upstream):
        if self.x is None:
            raise StaleGradientError("backward() called before forward()")
        upstream = backend.ensure_array(upstream)
        if upstream.shape != self.output.shape:
            # a loss gradient for a single-row output may arrive as a vector
            if upstream.size != self.output.size:
                raise ShapeMismatchError(
                    f"upstream gradient of shape {upstream.shape} does not match "
                    f"layer output {self.output.shape}"
                )
            upstream = backend.reshape(upstream, self.output.shape)
        self.delta = upstream * self._act.derivative(self.z)
        self.dW = backend.matmul(backend.transpose(self.x), self.delta)  # (cols, out)
        self.err = backend.matmul(self.delta, backend.transpose(self.weights))  # (rows, cols)
        return self.err, self.dW

    def update_weights(self, rule=None):
        if self.dW is None:
            raise StaleGradientError("update_weights() called without a backward pass")
        if rule is not None:
            self.set_update_rule(rule)
        if self.update_rule is None:
            from ..optimizer.SGDOptimizer import SGDOptimizer
            self.update_rule = SGDOptimizer()
        self.update_rule.apply(self.weights, self.dW, self.update_state)

    # ----- accessors -----
    def get_weights(self):
        return self.weights.copy()

    def set_weights(self, weights):
        weights = backend.ensure_array(weights, copy=True)
        if weights.shape != self.weights.shape:
            raise ShapeMismatchError(
                f"weights must have shape {self.weights.shape}, got {weights.shape}"
            )
        self.weights[...] = weights

    def get_err(self):
        return self.err

    def get_gradient(self):
        return self.dW

    def set_input_shape(self, shape):
        shape = _check_shape(shape)
        reinit = shape[1] != self.input_shape[1]
        self.input_shape = shape
        self._reset(reinit)

    def set_num_outputs(self, num_outputs):
        num_outputs = int(num_outputs)
        if num_outputs < 1:
            raise ShapeMismatchError(f"num_outputs must be positive, got {num_outputs}")
        reinit = num_outputs != self.num_outputs
        self.num_outputs = num_outputs
        self._reset(reinit)

    def set_activation(self, name):
        self._act = get_activation(name)
        self.activation = str(name).lower()
        self.delta = self.err = self.dW = None

    def params(self):
        return [self.weights]

    def grads(self):
        return [self.dW]

    def __repr__(self):
        rows, cols = self.input_shape
        return (
            f"FullyConnectedLayer(({rows}, {cols}) -> {self.num_outputs}, "
            f"activation={self.activation!r})"
        )
