class Layer:
    """
    Contract a Network relies on. Subclasses override as needed.

    backward() always receives dL/dA for this layer's output: the loss
    gradient for the last layer, the next layer's error term otherwise.
    """

    def forward(self, x):
        raise NotImplementedError

    def backward(self, upstream):
        # Return (error term, parameter gradient)
        raise NotImplementedError

    def update_weights(self, rule=None):
        # Layers without parameters have nothing to update
        return

    def get_weights(self):
        raise NotImplementedError

    def get_err(self):
        # Error term from the last backward pass, or None
        return None

    def get_gradient(self):
        return None

    def set_weights(self, weights):
        raise NotImplementedError

    def get_input_shape(self):
        return self.input_shape

    def set_input_shape(self, shape):
        raise NotImplementedError

    def get_output_shape(self):
        return (self.input_shape[0], self.num_outputs)

    def set_num_outputs(self, num_outputs):
        raise NotImplementedError

    def set_activation(self, name):
        raise NotImplementedError

    def set_update_rule(self, rule):
        self.update_rule = rule

    def params(self):
        # Return list of parameter ndarrays
        return []

    def grads(self):
        # Return list of gradient ndarrays matching params()
        return []
