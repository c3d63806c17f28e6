"""
Parameter class for learnable scalars (PyTorch-like)

A Parameter is a leaf Value that optimizers are allowed to update in place.
"""

from .autograd import Value


class Parameter(Value):
    """
    A learnable leaf Value.

    Similar to torch.nn.Parameter, but wraps a single float. Gradients are
    accumulated in the .grad attribute by Value.backward() and read by the
    optimizers; requires_grad=False freezes the parameter.
    """

    def __init__(self, data: float, requires_grad: bool = True):
        """
        Create a new Parameter.

        Args:
            data: Initial value (a number or a Value whose data is copied)
            requires_grad: Whether optimizers should update this parameter
        """
        super().__init__(data)
        self.requires_grad = requires_grad

    def __repr__(self):
        return (
            f"Parameter(data={self.data}, grad={self.grad}, requires_grad={self.requires_grad})"
        )


def parameter(data: float, requires_grad: bool = True) -> Parameter:
    """
    Create a Parameter from a number.

    Args:
        data: Initial value
        requires_grad: Whether optimizers should update it (default: True)

    Returns:
        Parameter object
    """
    return Parameter(data, requires_grad=requires_grad)
