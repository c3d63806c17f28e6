"""
Base Module class (PyTorch-like)
"""

from collections.abc import Iterator
from typing import Any

import numpy as np

from .autograd import Value
from .parameter import Parameter


class Module:
    """Base class for scalargrad neural network modules."""

    def __init__(self):
        self._parameters: dict[str, Parameter] = {}
        self._modules: dict[str, Module] = {}

    def _convert_input(self, x: Any):
        """
        Lift raw inputs to Values.

        Numbers become constant leaves, sequences (lists, tuples, 1-D numpy
        arrays) become lists of Values. Existing Values pass through untouched
        so they keep their place in the graph.
        """
        if isinstance(x, Value):
            return x
        if isinstance(x, np.ndarray):
            x = x.tolist()
        if isinstance(x, (list, tuple)):
            return [xi if isinstance(xi, Value) else Value(xi) for xi in x]
        return Value(x)

    def forward(self, *args, **kwargs):
        raise NotImplementedError

    def __call__(self, *args, **kwargs):
        converted_args = tuple(self._convert_input(arg) for arg in args)
        return self.forward(*converted_args, **kwargs)

    def parameters(self) -> list[Parameter]:
        """
        Return all parameters as a flat list.

        Own parameters come first, then each submodule's in registration
        order. The order is stable for the lifetime of the module, which is
        what position-keyed optimizer state relies on.
        """
        params = list(self._parameters.values())
        for module in self._modules.values():
            params.extend(module.parameters())
        return params

    def named_parameters(self) -> Iterator[tuple[str, Parameter]]:
        """Return iterator over all parameters with dotted names"""
        for name, param in self._parameters.items():
            yield name, param
        for prefix, module in self._modules.items():
            for name, param in module.named_parameters():
                yield f"{prefix}.{name}", param

    def children(self) -> Iterator["Module"]:
        """Return iterator over direct submodules"""
        yield from self._modules.values()

    def num_parameters(self) -> int:
        """Total number of scalar parameters."""
        return len(self.parameters())

    def zero_grad(self):
        """Set the gradient of every parameter to 0"""
        for param in self.parameters():
            param.zero_grad()

    def register_parameter(self, name: str, param: float | Value | None):
        """
        Register a parameter with the module.

        Args:
            name: Parameter name
            param: Parameter, Value or number (converted to Parameter if needed)
        """
        if param is None:
            self._parameters.pop(name, None)
            return

        if not isinstance(param, Parameter):
            param = Parameter(param)

        self._parameters[name] = param

    def state_dict(self) -> dict[str, float]:
        """Snapshot parameter values as plain floats keyed by dotted name."""
        return {name: param.data for name, param in self.named_parameters()}

    def load_state_dict(self, state_dict: dict[str, float]):
        """
        Restore parameter values from state_dict.

        Every parameter of the module must be present; gradients are left
        untouched.
        """
        params = dict(self.named_parameters())
        missing = [name for name in params if name not in state_dict]
        if missing:
            raise KeyError(f"Missing parameters in state_dict: {missing}")
        for name, param in params.items():
            param.data = float(state_dict[name])

    def __repr__(self):
        return f"{self.__class__.__name__}()"
