"""
Optimizers Module (PyTorch-like)

Gradient-based update rules for scalar parameters.
"""

from .adam import Adam
from .base import Optimizer
from .factory import OPTIMIZERS, create_optimizer
from .sgd import SGD

__all__ = [
    "Optimizer",
    "Adam",
    "SGD",
    "OPTIMIZERS",
    "create_optimizer",
]
