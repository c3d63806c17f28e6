"""Full training loop: small MLP on the XOR problem."""

import logging

import numpy as np

import scalargrad.nn as nn
from scalargrad import Trainer, TrainingConfig
from scalargrad.utils import make_xor_dataset, render_ascii, snapshot

logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

rng = np.random.default_rng(42)

# Model: 2 -> 8 -> 1 with tanh hidden units and a sigmoid output
model = nn.MLP(2, [8, 1], activation="tanh", output_activation="sigmoid", rng=rng)

config = TrainingConfig(
    learning_rate=0.1,
    batch_size=4,
    epochs=200,
    optimizer="adam",
    loss="bce",
    seed=0,
)

dataset = make_xor_dataset(64, rng=rng)


def report(epoch, loss, metrics):
    if (epoch + 1) % 20 == 0:
        acc = metrics["accuracy"]
        print(f"Epoch {epoch + 1:3d}/{config.epochs}  loss={loss:.4f}  acc={acc:.2f}")


trainer = Trainer(model, config, callback=report)
trainer.train(dataset)

for a in (0.0, 1.0):
    for b in (0.0, 1.0):
        print(f"{a:.0f} xor {b:.0f} -> {trainer.predict([a, b])[0]:.3f}")

print(render_ascii(snapshot(model, [1.0, 0.0])))
print("Training complete.")
