"""
Loss Functions (PyTorch-like)

Losses are composed from Value operations, so the result is an ordinary node
of the computation graph and backward() reaches the network through it.
"""

from collections.abc import Sequence

from .autograd import Value, clamp, log
from .module import Module


def _as_components(prediction, target) -> tuple[list, list]:
    """Pair prediction and target components, wrapping scalars in lists."""
    preds = list(prediction) if isinstance(prediction, Sequence) else [prediction]
    targets = list(target) if isinstance(target, Sequence) else [target]
    if len(preds) != len(targets):
        raise ValueError(
            f"Prediction has {len(preds)} components but target has {len(targets)}"
        )
    if not preds:
        raise ValueError("Cannot compute a loss over zero components")
    return preds, targets


def _sum(terms: list[Value]) -> Value:
    total = terms[0]
    for term in terms[1:]:
        total = total + term
    return total


def mse_loss(prediction, target) -> Value:
    """
    Squared-error loss.

    (p - t)^2 for scalars, sum((p_i - t_i)^2) over components for sequences.
    A one-element prediction list may be paired with a scalar target.
    """
    preds, targets = _as_components(prediction, target)
    return _sum([(p - t) ** 2 for p, t in zip(preds, targets)])


def bce_loss(prediction, target, eps: float = 1e-7) -> Value:
    """
    Binary cross-entropy: -t*log(p) - (1-t)*log(1-p), summed over components.

    p is clamped into [eps, 1 - eps] first so the logarithms stay defined.
    Predictions outside that interval get no gradient through the clamp, so
    pair this loss with a sigmoid output layer.
    """
    preds, targets = _as_components(prediction, target)
    terms = []
    for p, t in zip(preds, targets):
        p = clamp(p, eps, 1.0 - eps)
        terms.append(-(t * log(p)) - (1 - t) * log(1 - p))
    return _sum(terms)


class MSELoss(Module):
    """
    Squared Error Loss

    Loss = sum((input - target)^2)
    """

    def forward(self, input, target) -> Value:
        return mse_loss(input, target)


class BCELoss(Module):
    """
    Binary Cross Entropy Loss

    Loss = -sum(target * log(input) + (1 - target) * log(1 - input))
    """

    def __init__(self, eps: float = 1e-7):
        """
        Args:
            eps: Clamp margin keeping predictions inside (0, 1)
        """
        super().__init__()
        self.eps = eps

    def forward(self, input, target) -> Value:
        return bce_loss(input, target, eps=self.eps)


LOSSES = {
    "mse": mse_loss,
    "bce": bce_loss,
}
