"""
Adam Optimizer
"""

import math
from collections.abc import Iterable

from ..nn.autograd import Value
from .base import Optimizer


class Adam(Optimizer):
    """
    Adam optimizer.

    Implements the Adam algorithm:
    - m = beta1 * m + (1 - beta1) * grad
    - v = beta2 * v + (1 - beta2) * grad^2
    - m_hat = m / (1 - beta1^t)
    - v_hat = v / (1 - beta2^t)
    - param = param - lr * m_hat / (sqrt(v_hat) + eps)

    t is the optimizer's step counter, shared by every parameter and
    incremented once per step().
    """

    def __init__(
        self,
        params: Iterable[Value],
        lr: float = 1e-3,
        betas: tuple = (0.9, 0.999),
        eps: float = 1e-8,
    ):
        """
        Initialize Adam optimizer.

        Args:
            params: Iterable of Values to optimize
            lr: Learning rate (default: 1e-3)
            betas: Coefficients for computing running averages (default: (0.9, 0.999))
            eps: Term added to denominator for numerical stability (default: 1e-8)
        """
        if lr < 0.0:
            raise ValueError(f"Invalid learning rate: {lr}")
        beta1, beta2 = betas
        if not 0.0 <= beta1 < 1.0 or not 0.0 <= beta2 < 1.0:
            raise ValueError(f"Invalid beta parameters: {betas}")
        defaults = {"lr": lr, "betas": (beta1, beta2), "eps": eps}
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
        beta1, beta2 = self.defaults["betas"]
        lr = self.defaults["lr"]
        eps = self.defaults["eps"]

        # Bias correction terms
        bias_correction1 = 1 - beta1**self.step_count
        bias_correction2 = 1 - beta2**self.step_count

        for p, state in self._trainable():
            grad = p.grad
            exp_avg = beta1 * state.get("exp_avg", 0.0) + (1 - beta1) * grad
            exp_avg_sq = beta2 * state.get("exp_avg_sq", 0.0) + (1 - beta2) * grad * grad
            state["exp_avg"] = exp_avg
            state["exp_avg_sq"] = exp_avg_sq

            m_hat = exp_avg / bias_correction1
            v_hat = exp_avg_sq / bias_correction2
            p.data -= lr * m_hat / (math.sqrt(v_hat) + eps)

        return loss
