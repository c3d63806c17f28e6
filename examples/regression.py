"""Fit y = x^2 + 2x + 1 with a ReLU network and momentum SGD."""

import numpy as np

from scalargrad import MLP, Trainer
from scalargrad.utils import make_regression_dataset, split_data

rng = np.random.default_rng(7)

data = make_regression_dataset(200, noise=0.1, rng=rng)
# Scale targets so plain SGD stays stable
data = [(ex.inputs, ex.target / 10.0) for ex in data]
train, val = split_data(data, train_ratio=0.8, rng=rng)

model = MLP(1, [16, 16, 1], init="kaiming", rng=rng)
trainer = Trainer(
    model,
    learning_rate=0.005,
    batch_size=8,
    epochs=50,
    optimizer="momentum",
    momentum=0.9,
    seed=1,
)

history = trainer.train(train)
print(f"train loss: {history.losses[0]:.4f} -> {history.final_loss:.4f}")
print(f"validation: {trainer.evaluate(val)}")

for x in (-4.0, -1.0, 0.0, 2.0):
    y = trainer.predict([x])[0] * 10.0
    print(f"f({x:+.1f}) = {y:7.3f}  (true {x * x + 2 * x + 1:7.3f})")
