"""
SGD Optimizer

Gradient descent with optional momentum.
"""

from collections.abc import Iterable

from ..nn.autograd import Value
from .base import Optimizer


class SGD(Optimizer):
    """
    Stochastic Gradient Descent optimizer.

    Implements:
    - momentum == 0: param = param - lr * grad
    - momentum != 0: velocity = momentum * velocity - lr * grad
                     param = param + velocity
    """

    def __init__(self, params: Iterable[Value], lr: float = 0.01, momentum: float = 0.0):
        """
        Initialize SGD optimizer.

        Args:
            params: Iterable of Values to optimize
            lr: Learning rate (default: 0.01)
            momentum: Momentum factor (default: 0.0)
        """
        if lr < 0.0:
            raise ValueError(f"Invalid learning rate: {lr}")
        if momentum < 0.0:
            raise ValueError(f"Invalid momentum value: {momentum}")
        defaults = {"lr": lr, "momentum": momentum}
        super().__init__(params, defaults)

    def step(self, closure=None):
        """
        Perform a single optimization step.

        Args:
            closure: Optional closure that reevaluates the model and returns loss
        """
        loss = None
        if closure is not None:
            loss = closure()

        self.step_count += 1
        lr = self.defaults["lr"]
        momentum = self.defaults["momentum"]

        for p, state in self._trainable():
            if momentum != 0:
                velocity = momentum * state.get("velocity", 0.0) - lr * p.grad
                state["velocity"] = velocity
                p.data += velocity
            else:
                p.data -= lr * p.grad

        return loss
