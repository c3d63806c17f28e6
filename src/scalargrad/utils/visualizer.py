"""Network inspection for scalargrad.

Captures read-only snapshots of an MLP (parameter values, gradients and the
activations produced by one input) and renders them as terminal-friendly
ASCII. Also summarizes the shape of an arbitrary Value graph.

Usage:
    from scalargrad.utils.visualizer import render_ascii, snapshot

    snap = snapshot(model, [1.0, 0.5])
    print(render_ascii(snap))

    # Architecture only, no forward pass
    print(render_ascii(model))
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from io import StringIO
from typing import Any

import numpy as np

from ..nn.autograd import Value, no_grad, topological_order
from ..nn.loss import mse_loss

# ---------------------------------------------------------------------------
# Snapshot records
# ---------------------------------------------------------------------------


@dataclass
class ConnectionSnapshot:
    """One incoming weight of a neuron."""

    source: int
    weight: float
    grad: float


@dataclass
class NeuronSnapshot:
    """State of a single neuron."""

    index: int
    activation: str
    bias: float
    bias_grad: float
    connections: list[ConnectionSnapshot] = field(default_factory=list)
    output: float | None = None


@dataclass
class LayerSnapshot:
    """State of one layer, in neuron order."""

    index: int
    in_features: int
    out_features: int
    neurons: list[NeuronSnapshot] = field(default_factory=list)


@dataclass
class NetworkSnapshot:
    """Read-only picture of a network, optionally for one input."""

    inputs: list[float] | None
    layers: list[LayerSnapshot] = field(default_factory=list)
    loss: float | None = None

    @property
    def outputs(self) -> list[float] | None:
        if not self.layers or self.inputs is None:
            return None
        return [n.output for n in self.layers[-1].neurons]

    @property
    def num_parameters(self) -> int:
        return sum(
            len(n.connections) + 1 for layer in self.layers for n in layer.neurons
        )


# ---------------------------------------------------------------------------
# Snapshot extraction
# ---------------------------------------------------------------------------


def _neuron_activation(neuron: Any) -> str:
    if not getattr(neuron, "nonlin", True):
        return "linear"
    return getattr(neuron, "activation", "linear")


def _layers_of(model: Any) -> list[tuple[list, Callable]]:
    """Return (neurons, forward) per layer for an MLP, a Layer or a Neuron."""
    if hasattr(model, "layers"):
        return [(list(layer.neurons), layer.forward) for layer in model.layers]
    if hasattr(model, "neurons"):
        return [(list(model.neurons), model.forward)]
    if hasattr(model, "weights") and hasattr(model, "bias"):
        return [([model], model.forward)]
    raise TypeError(
        f"Cannot inspect {type(model).__name__}: expected layers, neurons or weights"
    )


def _snapshot_layer(index: int, neurons: list, outputs: list[Value] | None) -> LayerSnapshot:
    snap = LayerSnapshot(
        index=index,
        in_features=len(neurons[0].weights) if neurons else 0,
        out_features=len(neurons),
    )
    for i, neuron in enumerate(neurons):
        snap.neurons.append(
            NeuronSnapshot(
                index=i,
                activation=_neuron_activation(neuron),
                bias=neuron.bias.data,
                bias_grad=neuron.bias.grad,
                connections=[
                    ConnectionSnapshot(source=j, weight=w.data, grad=w.grad)
                    for j, w in enumerate(neuron.weights)
                ],
                output=outputs[i].data if outputs is not None else None,
            )
        )
    return snap


def snapshot(model: Any, inputs=None, loss: float | Value | None = None) -> NetworkSnapshot:
    """
    Capture parameters, gradients and activations of a model.

    Accepts an MLP (anything with `layers`), a single Layer (anything with
    `neurons`) or a single Neuron (anything with `weights` and `bias`).
    The forward pass runs under no_grad(), so neither parameters nor
    gradients are touched.

    Args:
        model: Model to inspect
        inputs: Input vector to propagate, or None for parameters only
        loss: Loss value to attach to the snapshot

    Returns:
        NetworkSnapshot
    """
    layers = _layers_of(model)
    values = None
    if inputs is not None:
        values = [x if isinstance(x, Value) else Value(x) for x in inputs]

    snap = NetworkSnapshot(
        inputs=[v.data for v in values] if values is not None else None,
        loss=float(loss) if loss is not None else None,
    )

    with no_grad():
        for index, (neurons, forward) in enumerate(layers):
            outputs = forward(values) if values is not None else None
            snap.layers.append(_snapshot_layer(index, neurons, outputs))
            values = outputs

    return snap


def snapshot_forward_backward(
    model: Any, inputs, target, loss_fn: Callable = mse_loss
) -> NetworkSnapshot:
    """
    Run one forward/backward cycle and snapshot the resulting gradients.

    Unlike snapshot(), this overwrites the model's gradients: they are
    zeroed, the loss of `inputs` against `target` is backpropagated, and the
    snapshot records the fresh gradients together with the loss value.
    Parameter values are not changed.

    Args:
        model: Module with zero_grad() and a layered structure
        inputs: Input vector
        target: Target for loss_fn (scalar or vector)
        loss_fn: Loss built from Value operations (default: mse_loss)

    Returns:
        NetworkSnapshot with `loss` set
    """
    model.zero_grad()
    outputs = model(list(inputs))
    loss = loss_fn(outputs, target)
    loss.backward()
    return snapshot(model, inputs, loss=loss)


def gradient_norm(model: Any) -> float:
    """L2 norm of the gradients of every parameter of model."""
    grads = np.array([p.grad for p in model.parameters()], dtype=np.float64)
    return float(np.linalg.norm(grads))


# ---------------------------------------------------------------------------
# ASCII / Terminal renderer
# ---------------------------------------------------------------------------

_BOX_TL = "┌"
_BOX_TR = "┐"
_BOX_BL = "└"
_BOX_BR = "┘"
_BOX_H = "─"
_BOX_V = "│"
_ARROW_DOWN = "▼"


def _draw_box(lines: list[str], width: int) -> list[str]:
    """Wrap lines in a box of the given content width."""
    result = [f"  {_BOX_TL}{_BOX_H * (width + 2)}{_BOX_TR}"]
    for line in lines:
        result.append(f"  {_BOX_V} {line.ljust(width)} {_BOX_V}")
    result.append(f"  {_BOX_BL}{_BOX_H * (width + 2)}{_BOX_BR}")
    return result


def _format_vector(values: list[float] | None) -> str:
    if values is None:
        return "-"
    return "[" + ", ".join(f"{v:.4f}" for v in values) + "]"


def _layer_lines(layer: LayerSnapshot) -> list[str]:
    kinds = ", ".join(sorted({n.activation for n in layer.neurons}))
    lines = [f"Layer {layer.index}: {layer.in_features} -> {layer.out_features} ({kinds})"]
    for n in layer.neurons:
        weights = ", ".join(f"{c.weight:+.4f}" for c in n.connections)
        lines.append(f"  n{n.index}: b={n.bias:+.4f} w=[{weights}]")
        grads = ", ".join(f"{c.grad:+.4f}" for c in n.connections)
        lines.append(f"      grad b={n.bias_grad:+.4f} w=[{grads}]")
        if n.output is not None:
            lines.append(f"      out={n.output:.4f}")
    return lines


def render_ascii(target: Any) -> str:
    """
    Render a NetworkSnapshot, or a layered model, as boxed ASCII text.

    Models are snapshotted without inputs first, so only parameters and
    gradients are shown.
    """
    snap = target if isinstance(target, NetworkSnapshot) else snapshot(target)

    blocks = [_layer_lines(layer) for layer in snap.layers]
    header = [f"Network: {len(snap.layers)} layers, {snap.num_parameters} parameters"]
    if snap.inputs is not None:
        header.append(f"Inputs:  {_format_vector(snap.inputs)}")
        header.append(f"Outputs: {_format_vector(snap.outputs)}")
    if snap.loss is not None:
        header.append(f"Loss:    {snap.loss:.6f}")

    width = max(len(line) for block in [header, *blocks] for line in block)

    out = StringIO()
    for line in _draw_box(header, width):
        out.write(line + "\n")
    for block in blocks:
        out.write(" " * (width // 2 + 4) + _ARROW_DOWN + "\n")
        for line in _draw_box(block, width):
            out.write(line + "\n")
    return out.getvalue()


# ---------------------------------------------------------------------------
# Graph statistics
# ---------------------------------------------------------------------------


def graph_stats(root: Value) -> dict[str, Any]:
    """
    Summarize the computation graph that produced root.

    Returns:
        Dictionary with 'nodes', 'edges', 'leaves', 'max_fan_in' and
        'ops' (a count of nodes per operation label, leaves excluded)
    """
    nodes = topological_order(root)
    edges = sum(len(node._prev) for node in nodes)
    ops = Counter(node._op for node in nodes if node._op)
    return {
        "nodes": len(nodes),
        "edges": edges,
        "leaves": sum(1 for node in nodes if node.is_leaf),
        "max_fan_in": max((len(node._prev) for node in nodes), default=0),
        "ops": dict(ops),
    }
