"""
scalargrad - scalar reverse-mode automatic differentiation.

PyTorch-like API built on single-number graph nodes:
- nn: Value autograd engine, Module, Neuron, Layer, MLP and losses
- optim: Optimizers (SGD, momentum SGD, Adam)
- trainer: Mini-batch training loop with configurable optimizer and loss
- utils: Utilities (data loading, initialization, network inspection)
"""

import scalargrad.nn as nn
import scalargrad.optim as optim
import scalargrad.utils as utils
from scalargrad.nn import MLP, Layer, Module, Neuron, Parameter, Value, no_grad
from scalargrad.optim import SGD, Adam, create_optimizer
from scalargrad.trainer import Trainer, TrainingConfig, TrainingHistory

__version__ = "0.1.0"

__all__ = [
    "nn",
    "optim",
    "utils",
    "Value",
    "no_grad",
    "Module",
    "Parameter",
    "Neuron",
    "Layer",
    "MLP",
    "SGD",
    "Adam",
    "create_optimizer",
    "Trainer",
    "TrainingConfig",
    "TrainingHistory",
]
