"""
Training loop for scalargrad models.

Mini-batch training with gradient accumulation: gradients from every example
in a batch are summed by backward(), averaged, and applied in a single
optimizer step.
"""

import dataclasses
import json
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np

from .nn.autograd import Value, no_grad
from .nn.loss import LOSSES
from .nn.module import Module
from .optim import OPTIMIZERS, create_optimizer
from .utils.data import DataLoader, Example, as_example

logger = logging.getLogger(__name__)

EpochCallback = Callable[[int, float, dict[str, float]], None]


@dataclass
class TrainingConfig:
    """
    Configuration for Trainer.

    Attributes:
        learning_rate: Optimizer step size
        batch_size: Examples per optimizer step
        epochs: Number of passes over the dataset
        optimizer: 'sgd', 'momentum' or 'adam'
        momentum: Momentum factor for 'momentum'
        betas: Moment decay rates for 'adam'
        eps: Denominator term for 'adam'
        loss: 'mse' or 'bce'
        shuffle: Reshuffle the dataset every epoch
        seed: Seed for the shuffling generator (None for fresh entropy)
    """

    learning_rate: float = 0.01
    batch_size: int = 1
    epochs: int = 10
    optimizer: str = "sgd"
    momentum: float = 0.9
    betas: tuple = (0.9, 0.999)
    eps: float = 1e-8
    loss: str = "mse"
    shuffle: bool = True
    seed: int | None = None

    def __post_init__(self):
        if self.optimizer not in OPTIMIZERS:
            raise ValueError(
                f"Unknown optimizer {self.optimizer!r}, expected one of {list(OPTIMIZERS)}"
            )
        if self.loss not in LOSSES:
            raise ValueError(f"Unknown loss {self.loss!r}, expected one of {sorted(LOSSES)}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.epochs < 1:
            raise ValueError(f"epochs must be positive, got {self.epochs}")
        if self.learning_rate <= 0:
            raise ValueError(f"learning_rate must be positive, got {self.learning_rate}")
        self.betas = tuple(self.betas)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return {
            "learning_rate": self.learning_rate,
            "batch_size": self.batch_size,
            "epochs": self.epochs,
            "optimizer": self.optimizer,
            "momentum": self.momentum,
            "betas": list(self.betas),
            "eps": self.eps,
            "loss": self.loss,
            "shuffle": self.shuffle,
            "seed": self.seed,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "TrainingConfig":
        """Create config from dictionary."""
        return cls(**d)

    def save(self, path: str | Path) -> None:
        """Save config to JSON file."""
        path = Path(path)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str | Path) -> "TrainingConfig":
        """Load config from JSON file."""
        path = Path(path)
        with open(path) as f:
            return cls.from_dict(json.load(f))


@dataclass
class TrainingHistory:
    """Per-epoch mean losses and metrics recorded by Trainer.train()."""

    losses: list[float] = field(default_factory=list)
    metrics: list[dict[str, float]] = field(default_factory=list)

    @property
    def final_loss(self) -> float | None:
        return self.losses[-1] if self.losses else None


class Trainer:
    """
    Fits a model to a dataset of (inputs, target) examples.

    Example:
        >>> model = MLP(2, [4, 1], output_activation="sigmoid", rng=rng)
        >>> trainer = Trainer(model, loss="bce", learning_rate=0.5, epochs=50, seed=0)
        >>> history = trainer.train(make_xor_dataset(64, rng=rng))
    """

    def __init__(
        self,
        model: Module,
        config: TrainingConfig | None = None,
        callback: EpochCallback | None = None,
        **overrides,
    ):
        """
        Args:
            model: Module whose parameters are trained
            config: Training configuration (defaults to TrainingConfig())
            callback: Called as callback(epoch, loss, metrics) after every epoch
            **overrides: Config fields to replace, e.g. learning_rate=0.1
        """
        config = config if config is not None else TrainingConfig()
        if overrides:
            config = dataclasses.replace(config, **overrides)

        self.model = model
        self.config = config
        self.callback = callback
        self.rng = np.random.default_rng(config.seed)
        self.loss_fn = LOSSES[config.loss]
        self.optimizer = create_optimizer(
            config.optimizer,
            model.parameters(),
            lr=config.learning_rate,
            momentum=config.momentum,
            betas=config.betas,
            eps=config.eps,
        )

    def _forward(self, inputs) -> list[Value]:
        return self.model(list(inputs))

    def _example_loss(self, example: Example) -> tuple[Value, list[Value]]:
        outputs = self._forward(example.inputs)
        return self.loss_fn(outputs, example.target), outputs

    def train_batch(self, batch: Sequence) -> float:
        """
        Run one optimizer step on a batch and return its mean example loss.

        Gradients are zeroed once, accumulated over every example, divided by
        the batch length and then applied.
        """
        examples = [as_example(obj) for obj in batch]
        if not examples:
            raise ValueError("Cannot train on an empty batch")

        self.optimizer.zero_grad()
        total = 0.0
        for example in examples:
            loss, _ = self._example_loss(example)
            loss.backward()
            total += loss.data

        if len(examples) > 1:
            for p in self.optimizer.params:
                p.grad /= len(examples)

        self.optimizer.step()
        return total / len(examples)

    def train(self, dataset: Sequence) -> TrainingHistory:
        """
        Train for config.epochs epochs.

        Returns:
            TrainingHistory with the mean batch loss and the metrics of every epoch
        """
        examples = [as_example(obj) for obj in dataset]
        if not examples:
            raise ValueError("Cannot train on an empty dataset")

        loader = DataLoader(
            examples, batch_size=self.config.batch_size, shuffle=self.config.shuffle, rng=self.rng
        )
        history = TrainingHistory()

        logger.info(
            "Training %d parameters on %d examples: %d epochs, %d batches/epoch, %s",
            self.model.num_parameters(),
            len(examples),
            self.config.epochs,
            len(loader),
            self.optimizer,
        )

        for epoch in range(self.config.epochs):
            batch_losses = [self.train_batch(batch) for batch in loader]
            epoch_loss = float(np.mean(batch_losses))
            metrics = self.evaluate(examples)

            history.losses.append(epoch_loss)
            history.metrics.append(metrics)
            logger.debug(
                "epoch %d/%d loss=%.6f %s", epoch + 1, self.config.epochs, epoch_loss, metrics
            )

            if self.callback is not None:
                self.callback(epoch, epoch_loss, metrics)

        logger.info("Training finished, final loss %.6f", history.final_loss)
        return history

    def evaluate(self, dataset: Sequence) -> dict[str, float]:
        """
        Score the model on dataset without building a graph.

        Returns:
            {'loss': mean loss, 'accuracy': ...} for bce, {'loss': ..., 'mae': ...} otherwise.
            Accuracy and mae look at the first output and first target component.
        """
        examples = [as_example(obj) for obj in dataset]
        if not examples:
            raise ValueError("Cannot evaluate on an empty dataset")

        losses = []
        hits = 0
        abs_errors = []
        with no_grad():
            for example in examples:
                loss, outputs = self._example_loss(example)
                losses.append(loss.data)
                first = outputs[0].data
                target = np.ravel(example.target)[0]
                hits += int((first >= 0.5) == (target >= 0.5))
                abs_errors.append(abs(first - target))

        metrics = {"loss": float(np.mean(losses))}
        if self.config.loss == "bce":
            metrics["accuracy"] = hits / len(examples)
        else:
            metrics["mae"] = float(np.mean(abs_errors))
        return metrics

    def predict(self, inputs) -> list[float]:
        """Forward inputs through the model without building a graph."""
        with no_grad():
            return [out.data for out in self._forward(inputs)]
