"""
Base Optimizer class (PyTorch-like)

Similar to torch.optim.Optimizer
"""

import copy
import logging
from collections.abc import Iterable
from typing import Any

from ..nn.autograd import Value

logger = logging.getLogger(__name__)


class Optimizer:
    """
    Base class for all optimizers.

    Parameters are kept in the order they were given. Per-parameter state
    (velocities, moment estimates) lives in `state`, a list parallel to
    `params`, so the parameter order must not change during a run.
    """

    def __init__(self, params: Iterable[Value], defaults: dict[str, Any]):
        """
        Initialize optimizer.

        Args:
            params: Iterable of Values to optimize
            defaults: Dictionary of hyperparameter values
        """
        self.defaults = defaults
        self.params: list[Value] = list(params)
        if len(self.params) == 0:
            raise ValueError("Optimizer got an empty parameter list")

        for p in self.params:
            if not isinstance(p, Value):
                raise TypeError(
                    f"Optimizer can only optimize Value objects, got {type(p).__name__}"
                )

        self.state: list[dict[str, Any]] = [{} for _ in self.params]
        # Shared by every parameter, incremented once per step()
        self.step_count = 0

        logger.debug(
            "%s created for %d parameters with %s",
            self.__class__.__name__,
            len(self.params),
            self.defaults,
        )

    @property
    def lr(self) -> float:
        return self.defaults["lr"]

    @lr.setter
    def lr(self, value: float):
        self.defaults["lr"] = value

    def _trainable(self):
        """Yield (param, state) pairs for parameters that are not frozen."""
        for p, state in zip(self.params, self.state):
            if getattr(p, "requires_grad", True):
                yield p, state

    def zero_grad(self):
        """Set the gradient of every parameter to 0."""
        for p in self.params:
            p.grad = 0.0

    def step(self, closure=None):
        """
        Perform a single optimization step.

        Args:
            closure: Optional closure that reevaluates the model and returns loss

        Must be implemented by subclasses.
        """
        raise NotImplementedError

    def state_dict(self) -> dict[str, Any]:
        """
        Return the state of the optimizer as a dict.

        Returns:
            Dictionary containing optimizer state
        """
        return {
            "state": copy.deepcopy(self.state),
            "step_count": self.step_count,
            "defaults": dict(self.defaults),
        }

    def load_state_dict(self, state_dict: dict[str, Any]):
        """
        Load optimizer state from state_dict.

        Args:
            state_dict: Dictionary containing optimizer state
        """
        state = state_dict.get("state", [])
        if len(state) != len(self.params):
            raise ValueError(
                f"state_dict holds state for {len(state)} parameters, "
                f"optimizer has {len(self.params)}"
            )
        self.state = copy.deepcopy(state)
        self.step_count = state_dict.get("step_count", 0)
        self.defaults.update(state_dict.get("defaults", {}))

    def __repr__(self):
        return f"{self.__class__.__name__}(lr={self.defaults.get('lr', 'N/A')})"
