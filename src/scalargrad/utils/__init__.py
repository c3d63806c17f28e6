"""Utility functions for scalargrad."""

from .data import (
    DataLoader,
    Example,
    as_example,
    make_regression_dataset,
    make_xor_dataset,
    split_data,
)
from .initialization import INITIALIZERS, constant_, kaiming_uniform_, uniform_, zeros_
from .visualizer import (
    NetworkSnapshot,
    gradient_norm,
    graph_stats,
    render_ascii,
    snapshot,
    snapshot_forward_backward,
)

__all__ = [
    # Data
    "Example",
    "as_example",
    "DataLoader",
    "split_data",
    "make_xor_dataset",
    "make_regression_dataset",
    # Initialization
    "uniform_",
    "kaiming_uniform_",
    "constant_",
    "zeros_",
    "INITIALIZERS",
    # Visualization
    "NetworkSnapshot",
    "snapshot",
    "snapshot_forward_backward",
    "gradient_norm",
    "render_ascii",
    "graph_stats",
]
