"""Neural network module namespace for scalargrad."""

# Autograd utilities
from .autograd import (
    ACTIVATIONS,
    Value,
    add,
    clamp,
    div,
    enable_grad,
    exp,
    get_activation,
    is_grad_enabled,
    log,
    mul,
    neg,
    no_grad,
    pow,
    relu,
    sigmoid,
    sub,
    tanh,
    topological_order,
)
from .module import Module
from .parameter import Parameter, parameter
from .modules import MLP, Layer, Neuron
from .loss import LOSSES, BCELoss, MSELoss, bce_loss, mse_loss

__all__ = [
    # Autograd
    "Value",
    "topological_order",
    "no_grad",
    "enable_grad",
    "is_grad_enabled",
    "add",
    "sub",
    "mul",
    "div",
    "neg",
    "pow",
    "relu",
    "sigmoid",
    "tanh",
    "exp",
    "log",
    "clamp",
    "ACTIVATIONS",
    "get_activation",
    # Modules
    "Module",
    "Parameter",
    "parameter",
    "Neuron",
    "Layer",
    "MLP",
    # Losses
    "MSELoss",
    "BCELoss",
    "mse_loss",
    "bce_loss",
    "LOSSES",
]
