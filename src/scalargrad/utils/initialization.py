"""
Weight Initialization Utilities

Similar to torch.nn.init, but for sequences of scalar parameters. Every
initializer takes an explicit numpy Generator so runs can be reproduced from a
seed instead of ambient global random state.
"""

from collections.abc import Sequence

import numpy as np

from ..nn.autograd import Value


def _generator(rng: np.random.Generator | None) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def uniform_(
    params: Sequence[Value],
    low: float = -1.0,
    high: float = 1.0,
    rng: np.random.Generator | None = None,
) -> Sequence[Value]:
    """
    Fill params with values drawn from U(low, high).

    Args:
        params: Parameters to initialize (modified in place)
        low: Lower bound
        high: Upper bound
        rng: Random generator (a fresh one when omitted)

    Returns:
        The same sequence of parameters
    """
    if low >= high:
        raise ValueError(f"uniform_ requires low < high, got [{low}, {high})")
    draws = _generator(rng).uniform(low, high, size=len(params))
    for param, value in zip(params, draws):
        param.data = float(value)
    return params


def kaiming_uniform_(
    params: Sequence[Value], rng: np.random.Generator | None = None
) -> Sequence[Value]:
    """
    Fill params from the Kaiming (He) uniform distribution for ReLU units.

    The fan-in is the number of parameters, i.e. the width of the neuron's
    input.

    Args:
        params: Weights of a single neuron (modified in place)
        rng: Random generator (a fresh one when omitted)

    Returns:
        The same sequence of parameters
    """
    if len(params) == 0:
        raise ValueError("Kaiming initialization requires at least one weight")
    limit = np.sqrt(6.0 / len(params))
    return uniform_(params, -limit, limit, rng)


def constant_(params: Sequence[Value], value: float) -> Sequence[Value]:
    """Fill params with a constant value."""
    for param in params:
        param.data = float(value)
    return params


def zeros_(params: Sequence[Value]) -> Sequence[Value]:
    """Fill params with zeros."""
    return constant_(params, 0.0)


INITIALIZERS = {
    "uniform": uniform_,
    "kaiming": kaiming_uniform_,
}
