"""
Feed-forward building blocks: Neuron, Layer and MLP.

Each module composes Values into a parameterized function. Calling a module
builds a fresh computation graph from its inputs and its persistent
Parameters, so gradients from a later backward pass land on the parameters.
"""

import numpy as np

from ..utils.initialization import INITIALIZERS
from .autograd import Value, get_activation
from .module import Module
from .parameter import Parameter


def _check_width(inputs: list, expected: int, owner: str):
    if len(inputs) != expected:
        raise ValueError(f"{owner} expects {expected} inputs, got {len(inputs)}")


class Neuron(Module):
    """
    A single unit: activation(bias + sum(w_i * x_i)).

    Weights are drawn from rng (uniform on [-1, 1) by default); the bias
    starts at 0. Parameter order is w0..w{n-1} followed by the bias.
    """

    def __init__(
        self,
        n_inputs: int,
        nonlin: bool = True,
        activation: str = "relu",
        init: str = "uniform",
        rng: np.random.Generator | None = None,
    ):
        """
        Args:
            n_inputs: Number of inputs (and weights)
            nonlin: Apply the activation; False gives a linear unit
            activation: 'relu' (default), 'tanh' or 'sigmoid'
            init: Weight initialization scheme, 'uniform' or 'kaiming'
            rng: Random generator used to draw the weights
        """
        super().__init__()
        if n_inputs < 1:
            raise ValueError(f"Neuron needs at least one input, got {n_inputs}")
        if init not in INITIALIZERS:
            raise ValueError(f"Unknown init {init!r}, expected one of {sorted(INITIALIZERS)}")

        self.nonlin = nonlin
        self.activation = activation
        self._activation_fn = get_activation(activation)

        for i in range(n_inputs):
            self._parameters[f"w{i}"] = Parameter(0.0)
        self._parameters["b"] = Parameter(0.0)

        INITIALIZERS[init](self.weights, rng=rng)

    @property
    def weights(self) -> list[Parameter]:
        return [p for name, p in self._parameters.items() if name != "b"]

    @property
    def bias(self) -> Parameter:
        return self._parameters["b"]

    @property
    def in_features(self) -> int:
        return len(self._parameters) - 1

    def forward(self, inputs: list[Value]) -> list[Value]:
        _check_width(inputs, self.in_features, "Neuron")

        # Left-to-right accumulation keeps floating-point results reproducible
        out = self.bias
        for w, x in zip(self.weights, inputs):
            out = out + w * x

        if self.nonlin:
            out = self._activation_fn(out)
        return [out]

    def __repr__(self):
        kind = self.activation if self.nonlin else "linear"
        return f"Neuron({self.in_features}, {kind})"


class Layer(Module):
    """A row of independent neurons sharing the same inputs."""

    def __init__(
        self,
        n_inputs: int,
        n_outputs: int,
        nonlin: bool = True,
        activation: str = "relu",
        init: str = "uniform",
        rng: np.random.Generator | None = None,
    ):
        super().__init__()
        if n_outputs < 1:
            raise ValueError(f"Layer needs at least one neuron, got {n_outputs}")

        self.in_features = n_inputs
        self.out_features = n_outputs
        self.nonlin = nonlin
        self.activation = activation

        # One generator for the whole layer so every neuron gets its own draws
        rng = rng if rng is not None else np.random.default_rng()
        for i in range(n_outputs):
            self._modules[str(i)] = Neuron(
                n_inputs, nonlin=nonlin, activation=activation, init=init, rng=rng
            )

    @property
    def neurons(self) -> list[Neuron]:
        return list(self._modules.values())

    def forward(self, inputs: list[Value]) -> list[Value]:
        _check_width(inputs, self.in_features, "Layer")

        outputs = []
        for neuron in self.neurons:
            outputs.extend(neuron.forward(inputs))
        return outputs

    def __repr__(self):
        kind = self.activation if self.nonlin else "linear"
        return f"Layer({self.in_features} -> {self.out_features}, {kind})"


class MLP(Module):
    """
    Multi-layer perceptron.

    Layer i maps layer_sizes[i - 1] (or n_inputs) values to layer_sizes[i].
    Hidden layers use `activation`; the output layer is linear unless
    `output_activation` names an activation.

    Example:
        >>> model = MLP(3, [4, 4, 1], rng=np.random.default_rng(0))
        >>> out = model([1.0, -2.0, 0.5])
        >>> len(out)
        1
    """

    def __init__(
        self,
        n_inputs: int,
        layer_sizes: list[int],
        activation: str = "relu",
        output_activation: str | None = None,
        init: str = "uniform",
        rng: np.random.Generator | None = None,
    ):
        super().__init__()
        layer_sizes = list(layer_sizes)
        if not layer_sizes:
            raise ValueError("MLP needs at least one layer")
        if n_inputs < 1 or any(size < 1 for size in layer_sizes):
            raise ValueError(
                f"Layer widths must be positive, got inputs={n_inputs}, layers={layer_sizes}"
            )

        self.in_features = n_inputs
        self.layer_sizes = layer_sizes

        rng = rng if rng is not None else np.random.default_rng()
        sizes = [n_inputs] + layer_sizes
        for i in range(len(layer_sizes)):
            is_output = i == len(layer_sizes) - 1
            if is_output:
                nonlin = output_activation is not None
                act = output_activation or activation
            else:
                nonlin = True
                act = activation
            self._modules[str(i)] = Layer(
                sizes[i], sizes[i + 1], nonlin=nonlin, activation=act, init=init, rng=rng
            )

    @property
    def layers(self) -> list[Layer]:
        return list(self._modules.values())

    @property
    def out_features(self) -> int:
        return self.layer_sizes[-1]

    def forward(self, inputs: list[Value]) -> list[Value]:
        x = inputs
        for layer in self.layers:
            x = layer.forward(x)
        return x

    def __repr__(self):
        body = ", ".join(repr(layer) for layer in self.layers)
        return f"MLP([{body}])"
