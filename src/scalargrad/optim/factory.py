"""
Optimizer lookup by name.
"""

from collections.abc import Iterable

from ..nn.autograd import Value
from .adam import Adam
from .base import Optimizer
from .sgd import SGD

OPTIMIZERS = ("sgd", "momentum", "adam")


def create_optimizer(
    name: str,
    params: Iterable[Value],
    lr: float = 0.01,
    momentum: float = 0.9,
    betas: tuple = (0.9, 0.999),
    eps: float = 1e-8,
) -> Optimizer:
    """
    Build an optimizer from its name.

    Args:
        name: 'sgd' (plain gradient descent), 'momentum' or 'adam'
        params: Values to optimize
        lr: Learning rate
        momentum: Momentum factor, used by 'momentum' only
        betas: Moment decay rates, used by 'adam' only
        eps: Denominator term, used by 'adam' only

    Returns:
        Optimizer instance
    """
    if name == "sgd":
        return SGD(params, lr=lr)
    if name == "momentum":
        return SGD(params, lr=lr, momentum=momentum)
    if name == "adam":
        return Adam(params, lr=lr, betas=betas, eps=eps)
    raise ValueError(f"Unknown optimizer {name!r}, expected one of {list(OPTIMIZERS)}")
