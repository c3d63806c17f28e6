"""
Data Loading Utilities for scalargrad

Examples, a shuffling batch loader, train/validation splitting and a couple
of toy dataset factories. Randomness always comes from an explicit numpy
Generator.
"""

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

# ============================================================================
# Examples
# ============================================================================


@dataclass
class Example:
    """
    One training example.

    Args:
        inputs: Input vector
        target: Scalar target or target vector
    """

    inputs: list[float]
    target: float | list[float]


def as_example(obj: Any) -> Example:
    """
    Normalize obj into an Example.

    Accepts an Example, an (inputs, target) pair, or a mapping with
    'inputs' and 'target' keys. Numpy arrays are converted to lists.
    """
    if isinstance(obj, Example):
        inputs, target = obj.inputs, obj.target
    elif isinstance(obj, Mapping):
        inputs, target = obj["inputs"], obj["target"]
    elif isinstance(obj, Sequence) and len(obj) == 2:
        inputs, target = obj
    else:
        raise TypeError(f"Cannot interpret {type(obj).__name__} as an (inputs, target) example")

    inputs = np.asarray(inputs, dtype=float).tolist()
    if not isinstance(inputs, list):
        inputs = [inputs]
    target = np.asarray(target, dtype=float).tolist()
    return Example(inputs=inputs, target=target)


# ============================================================================
# DataLoader
# ============================================================================


class DataLoader:
    """
    Batches a list of examples, optionally reshuffling on every pass.

    Args:
        data: Sequence of examples
        batch_size: Number of examples per batch
        shuffle: If True, reshuffle data at every iteration
        rng: Random generator used for shuffling

    Example:
        >>> loader = DataLoader(make_xor_dataset(8), batch_size=4)
        >>> for batch in loader:
        ...     # Training step
        ...     pass
    """

    def __init__(
        self,
        data: Sequence,
        batch_size: int = 32,
        shuffle: bool = True,
        rng: np.random.Generator | None = None,
    ):
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.data = list(data)
        self.batch_size = batch_size
        self.shuffle = shuffle
        self.rng = rng if rng is not None else np.random.default_rng()

    def __iter__(self) -> Iterator[list]:
        if self.shuffle:
            indices = self.rng.permutation(len(self.data)).tolist()
        else:
            indices = list(range(len(self.data)))

        for i in range(0, len(indices), self.batch_size):
            yield [self.data[idx] for idx in indices[i : i + self.batch_size]]

    def __len__(self) -> int:
        """Number of batches per pass."""
        return (len(self.data) + self.batch_size - 1) // self.batch_size

    @property
    def size(self) -> int:
        """Number of examples."""
        return len(self.data)


# ============================================================================
# Utility Functions
# ============================================================================


def split_data(
    data: Sequence, train_ratio: float = 0.8, rng: np.random.Generator | None = None
) -> tuple[list, list]:
    """
    Randomly split data into training and validation lists.

    Args:
        data: Sequence of examples
        train_ratio: Fraction of examples that go to the training split
        rng: Random generator (optional)

    Returns:
        (train, val)
    """
    if not 0.0 <= train_ratio <= 1.0:
        raise ValueError(f"train_ratio must be in [0, 1], got {train_ratio}")

    rng = rng if rng is not None else np.random.default_rng()
    indices = rng.permutation(len(data)).tolist()
    split = int(len(data) * train_ratio)
    train = [data[i] for i in indices[:split]]
    val = [data[i] for i in indices[split:]]
    return train, val


def make_xor_dataset(
    num_examples: int = 100, rng: np.random.Generator | None = None
) -> list[Example]:
    """Random binary input pairs labelled with their XOR."""
    rng = rng if rng is not None else np.random.default_rng()
    bits = rng.integers(0, 2, size=(num_examples, 2))
    return [
        Example(inputs=[float(a), float(b)], target=float(a != b)) for a, b in bits.tolist()
    ]


def make_regression_dataset(
    num_examples: int = 100, noise: float = 0.1, rng: np.random.Generator | None = None
) -> list[Example]:
    """Noisy samples of y = x^2 + 2x + 1 with x drawn from [-5, 5)."""
    rng = rng if rng is not None else np.random.default_rng()
    xs = rng.uniform(-5.0, 5.0, size=num_examples)
    if noise > 0:
        noise_vals = rng.uniform(-noise, noise, size=num_examples)
    else:
        noise_vals = np.zeros(num_examples)
    return [
        Example(inputs=[float(x)], target=float(x * x + 2 * x + 1 + n))
        for x, n in zip(xs, noise_vals)
    ]
