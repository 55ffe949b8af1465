import warnings
from collections import namedtuple
from enum import Enum

from .layers import Layer, FullyConnectedLayer, get_activation
from .loss.LossRegistry import DEFAULT_LOSSES, LossRegistry
from .optimizer.UpdateRule import UpdateRule
from .helpers.Backend import backend
from .helpers.config import TrainConfig
from .helpers.errors import (
    ArityMismatchError,
    ConvergenceWarning,
    MissingDataError,
    ShapeMismatchError,
    StaleGradientError,
)
from .helpers.logger import RunLogger


class TrainingState(Enum):
    IDLE = "idle"
    ITERATING = "iterating"
    CONVERGED = "converged"
    MAX_ITERATIONS_REACHED = "max_iterations_reached"


TrainResult = namedtuple("TrainResult", ["state", "iterations", "scalar_loss"])


def _coerce_registry(registry):
    if registry is None:
        return DEFAULT_LOSSES
    if isinstance(registry, LossRegistry):
        return registry
    # plain mappings of name -> (loss, derivative)
    return LossRegistry(registry)


def _validate_chain(layers):
    if len(layers) == 0:
        raise ArityMismatchError("a network needs at least one layer")
    for i, layer in enumerate(layers):
        if not isinstance(layer, Layer):
            raise TypeError(f"layer {i} is not a Layer: {layer!r}")
    for i in range(len(layers) - 1):
        out_shape = tuple(layers[i].get_output_shape())
        in_shape = tuple(layers[i + 1].get_input_shape())
        if out_shape != in_shape:
            raise ShapeMismatchError(
                f"layer {i} produces {out_shape} but layer {i + 1} expects {in_shape}"
            )


class Network:
    """
    Ordered stack of layers trained against a single target.

    The network owns the current input matrix, the target, the active loss
    pair and everything derived from them in the last forward pass. The
    cached loss gradient is "fresh" only between a forward pass and the
    backward pass that consumes it; structural edits make it stale.
    """

    def __init__(
        self,
        input_shape,
        num_outputs,
        activation="identity",
        loss="L2",
        registry=None,
        update_rule=None,
        seed=None,
    ):
        registry = _coerce_registry(registry)
        loss_pair = registry.get(loss)
        layer = FullyConnectedLayer(
            input_shape, num_outputs, activation, update_rule=update_rule, seed=seed
        )
        self._setup([layer], registry, loss, loss_pair)

    @classmethod
    def from_layers(cls, layers, loss="L2", registry=None, activation=None):
        """Build a network from pre-built layers, input side first."""
        registry = _coerce_registry(registry)
        loss_pair = registry.get(loss)
        layers = list(layers)
        _validate_chain(layers)
        if activation is not None:
            get_activation(activation)
            for layer in layers:
                layer.set_activation(activation)
        net = cls.__new__(cls)
        net._setup(layers, registry, loss, loss_pair)
        return net

    def _setup(self, layers, registry, loss_name, loss_pair):
        self._layers = layers
        self._registry = registry
        self._loss_name = loss_name
        self._loss_pair = loss_pair

        self._inputs = None
        self._target = None
        self._outputs = None
        self._resid = None
        self._scalar_loss = None
        self._loss_deriv = None
        self._gradient = None
        self._training_loss = []  # append-only
        self.training_state = TrainingState.IDLE
        self._fresh = False
        self._sync_shapes()

    def _sync_shapes(self):
        # always a full recomputation
        self._layer_input_shapes = [tuple(l.get_input_shape()) for l in self._layers]
        self._input_shape = self._layer_input_shapes[0]
        self._num_outputs = self._layers[-1].num_outputs
        self._fresh = False

    # ================== read-only state ==================
    @property
    def layers(self):
        return list(self._layers)

    @property
    def layer_input_shapes(self):
        return list(self._layer_input_shapes)

    @property
    def input_shape(self):
        return self._input_shape

    @property
    def num_outputs(self):
        return self._num_outputs

    @property
    def inputs(self):
        return backend.copy(self._inputs)

    @property
    def target(self):
        return backend.copy(self._target)

    @property
    def outputs(self):
        return backend.copy(self._outputs)

    @property
    def resid(self):
        return backend.copy(self._resid)

    @property
    def scalar_loss(self):
        return self._scalar_loss

    @property
    def loss_deriv(self):
        return backend.copy(self._loss_deriv)

    @property
    def gradient(self):
        return backend.copy(self._gradient)

    @property
    def training_loss(self):
        return list(self._training_loss)

    @property
    def loss_name(self):
        return self._loss_name

    @property
    def registry(self):
        return self._registry

    def __len__(self):
        return len(self._layers)

    # ================== inputs / target ==================
    def _coerce_inputs(self, inputs):
        x = backend.as_matrix(backend.ensure_array(inputs, copy=True))
        if x.ndim != 2:
            raise ShapeMismatchError(f"inputs must be a matrix, got {x.ndim} dimensions")
        return x

    def _check_inputs(self, x):
        rows, cols = self._input_shape
        if x.shape[0] != rows:
            raise ShapeMismatchError(
                f"new input matrix must have {rows} rows (input_shape[0]), got {x.shape[0]}"
            )
        if x.shape[1] != cols:
            raise ShapeMismatchError(
                f"new input matrix must have {cols} cols (input_shape[1]), got {x.shape[1]}"
            )

    def _coerce_target(self, target):
        y = backend.ensure_array(target, copy=True)
        if y.ndim == 0:
            y = y.reshape(1)
        if y.ndim > 2:
            raise ShapeMismatchError(f"target must be a vector or matrix, got {y.ndim} dimensions")
        return y

    def _check_target(self, y, check_width=True):
        rows = self._input_shape[0]
        if y.ndim == 2 and y.shape[0] != rows:
            raise ShapeMismatchError(
                f"target matrix must have {rows} rows to match the inputs, got {y.shape[0]}"
            )
        if check_width and y.shape[-1] != self._num_outputs:
            raise ShapeMismatchError(
                f"target must have length {self._num_outputs} (num_outputs), got {y.shape[-1]}"
            )

    def set_inputs(self, inputs, override_input_shape=False):
        x = self._coerce_inputs(inputs)
        if not override_input_shape or x.shape == self._input_shape:
            self._check_inputs(x)
            self._inputs = x
            self._fresh = False
            return
        # adopt the new shape: the first layer takes the new columns and
        # every layer takes the new row count
        rows, cols = x.shape
        self._layers[0].set_input_shape((rows, cols))
        for layer in self._layers[1:]:
            layer.set_input_shape((rows, layer.get_input_shape()[1]))
        self._inputs = x
        self._sync_shapes()

    def set_target(self, target, override_target_size=False):
        y = self._coerce_target(target)
        self._check_target(y, check_width=not override_target_size)
        if y.shape[-1] != self._num_outputs:
            self._layers[-1].set_num_outputs(y.shape[-1])
            self._sync_shapes()
        self._target = y
        self._fresh = False

    # ================== structural edits ==================
    def _commit_layers(self, layers):
        _validate_chain(layers)
        self._layers = layers
        self._sync_shapes()

    def set_layers(self, layers):
        self._commit_layers(list(layers))

    def append_layers(self, layers):
        self._commit_layers(self._layers + list(layers))

    def insert_layer(self, index, layer):
        if not 0 <= index <= len(self._layers):
            raise IndexError(f"insert position {index} out of range 0..{len(self._layers)}")
        if index == len(self._layers):
            self.append_layers([layer])
            return
        layers = list(self._layers)
        layers.insert(index, layer)
        self._commit_layers(layers)

    def replace_layer(self, index, layer):
        layers = list(self._layers)
        layers[index] = layer
        self._commit_layers(layers)

    # ================== parameters ==================
    def get_weights(self):
        return [l.get_weights() for l in self._layers]

    def set_weights(self, weights):
        weights = list(weights)
        if len(weights) != len(self._layers):
            raise ArityMismatchError(
                f"must provide exactly one weight matrix for each layer "
                f"({len(self._layers)}), got {len(weights)}"
            )
        for i, (layer, w) in enumerate(zip(self._layers, weights)):
            expected = layer.get_weights().shape
            if backend.shape(w) != expected:
                raise ShapeMismatchError(
                    f"weights for layer {i} must have shape {expected}, got {backend.shape(w)}"
                )
        for layer, w in zip(self._layers, weights):
            layer.set_weights(w)
        self._fresh = False

    def get_err_gradient_list(self):
        """(error term, parameter gradient) per layer from the last backward pass."""
        pairs = []
        for i, layer in enumerate(self._layers):
            err, grad = layer.get_err(), layer.get_gradient()
            if err is None or grad is None:
                raise StaleGradientError(f"layer {i} has no error/gradient; run backward() first")
            pairs.append((err.copy(), grad.copy()))
        return pairs

    def _per_layer(self, values, what):
        values = list(values)
        if len(values) != len(self._layers):
            raise ArityMismatchError(
                f"must provide exactly one {what} for each layer "
                f"({len(self._layers)}), got {len(values)}"
            )
        return values

    def set_update_rules(self, rules):
        """One shared UpdateRule for every layer, or a list with one per layer."""
        if isinstance(rules, UpdateRule):
            for layer in self._layers:
                layer.set_update_rule(rules)
            return
        rules = self._per_layer(rules, "update rule")
        for i, rule in enumerate(rules):
            if not isinstance(rule, UpdateRule):
                raise TypeError(f"update rule for layer {i} is not an UpdateRule: {rule!r}")
        for layer, rule in zip(self._layers, rules):
            layer.set_update_rule(rule)

    def set_activations(self, activations):
        if isinstance(activations, str):
            activations = [activations] * len(self._layers)
        activations = self._per_layer(activations, "activation")
        for name in activations:
            get_activation(name)
        for layer, name in zip(self._layers, activations):
            layer.set_activation(name)
        self._fresh = False

    def set_loss(self, name):
        loss_pair = self._registry.get(name)
        self._loss_name = name
        self._loss_pair = loss_pair
        self._fresh = False

    def set_loss_functions(self, loss, derivative):
        if not callable(loss) or not callable(derivative):
            raise TypeError("loss and derivative must both be callable")
        self._loss_name = getattr(loss, "__name__", "custom")
        self._loss_pair = (loss, derivative)
        self._fresh = False

    # ================== forward ==================
    def _forward(self, inputs=None, target=None):
        x = y = None
        if inputs is not None:
            x = self._coerce_inputs(inputs)
            self._check_inputs(x)
        if target is not None:
            y = self._coerce_target(target)
            self._check_target(y)
        if x is not None:
            self._inputs = x
        if y is not None:
            self._target = y

        if self._inputs is None:
            raise MissingDataError("no inputs set; pass inputs or call set_inputs() first")
        # cached data may predate a structural edit
        self._check_inputs(self._inputs)

        out = self._inputs
        for layer in self._layers:
            # output of this layer is the input to the next one
            out = layer.forward(out)
        self._outputs = out

        if self._target is None:
            self._resid = self._scalar_loss = self._loss_deriv = None
            self._fresh = False
            return
        self._check_target(self._target)

        loss_fn, loss_derivative = self._loss_pair
        self._resid = self._outputs - self._target
        self._scalar_loss = float(loss_fn(self._outputs, self._target))
        self._loss_deriv = backend.ensure_array(loss_derivative(self._outputs, self._target))
        self._fresh = True

    def predict(self, inputs=None, target=None):
        """Forward pass; updates outputs, residual, loss and loss gradient."""
        self._forward(inputs, target)

    def predict_value(self, inputs=None, target=None):
        """Same as predict(), but returns the output."""
        self._forward(inputs, target)
        return self._outputs.copy()

    # ================== backward / update ==================
    def backward(self):
        if not self._fresh:
            raise StaleGradientError(
                "backward() needs a fresh loss gradient; call predict() with a target first"
            )
        upstream = self._loss_deriv
        grad = None
        for layer in reversed(self._layers):
            # each layer hands its error term to the layer before it
            upstream, grad = layer.backward(upstream)
        self._gradient = grad
        self._fresh = False

    def update_weights(self, rules=None):
        for i, layer in enumerate(self._layers):
            if any(g is None for g in layer.grads()):
                raise StaleGradientError(f"layer {i} has no gradient; run backward() first")
        if rules is not None:
            self.set_update_rules(rules)
        for layer in self._layers:
            layer.update_weights()

    # ================== training ==================
    def _train_step(self, inputs=None, target=None):
        self.predict(inputs, target)
        if self._scalar_loss is None:
            raise MissingDataError("training needs a target; pass one or call set_target() first")
        self.backward()
        self._training_loss.append(self._scalar_loss)
        self.update_weights()

    def train(self, config=None, **overrides):
        """
        Repeat predict -> backward -> record loss -> update until the loss is
        <= config.stop_tol or config.max_iter steps have been recorded. The
        first step always runs. Returns a TrainResult.
        """
        config = TrainConfig() if config is None else config
        if overrides:
            config = config.replace(**overrides)
        logger = RunLogger(root=config.runs_root, tag=config.tag) if config.runs_root else None
        log_interval = max(1, config.max_iter // 10)

        self.training_state = TrainingState.ITERATING
        if config.verbose > 0:
            print(f"Starting training for up to {config.max_iter} iterations...")

        # run first training round with the optional replacement data
        self._train_step(config.inputs, config.target)
        iterations = 1
        self._after_step(iterations, config, logger, log_interval)

        # run until stopping criteria are hit; a NaN loss never meets stop_tol
        while iterations < config.max_iter and not self._scalar_loss <= config.stop_tol:
            self._train_step()
            iterations += 1
            self._after_step(iterations, config, logger, log_interval)

        final_loss = self._training_loss[-1]
        if final_loss <= config.stop_tol:
            self.training_state = TrainingState.CONVERGED
        else:
            self.training_state = TrainingState.MAX_ITERATIONS_REACHED
            if not config.quiet:
                warnings.warn(
                    f"Network hit max iterations ({config.max_iter}) in training. "
                    f"Scalar loss is {final_loss:.6g}.",
                    ConvergenceWarning,
                    stacklevel=2,
                )

        if config.verbose > 0:
            print(
                f"Training finished: {self.training_state.value} after {iterations} "
                f"iterations - loss: {final_loss:.6g}"
            )
        if logger is not None:
            logger.save_json(state=self.training_state.value, iterations=iterations)
            logger.plot_loss()

        return TrainResult(self.training_state, iterations, final_loss)

    def _after_step(self, iteration, config, logger, log_interval):
        loss = self._scalar_loss
        if logger is not None:
            logger.log_iteration(iteration, loss=loss)
        if config.scheduler is not None:
            config.scheduler.step(iteration, {"loss": loss})
        if config.verbose > 0:
            if iteration % log_interval == 0 or iteration == 1:
                print(f"Iteration {iteration}/{config.max_iter} - loss: {loss:.6g}")

    # ================== reporting ==================
    def summary(self):
        lines = [
            "===============================",
            "      Network Summary:",
            "",
            " (input size) -> (output size)",
            "",
        ]
        for i, (layer, (rows, cols)) in enumerate(zip(self._layers, self._layer_input_shapes), 1):
            activation = getattr(layer, "activation", "")
            lines.append(f"Layer {i}: ({rows} x {cols}) -> ({layer.num_outputs}) {activation}".rstrip())
        lines.append(f"Loss: {self._loss_name}")
        lines.append("===============================")
        text = "\n".join(lines)
        print(text)
        return text
