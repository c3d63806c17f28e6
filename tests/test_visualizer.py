"""Tests for utils.visualizer (snapshots, ASCII rendering, graph statistics)."""

import math

import numpy as np
import pytest

try:
    from scalargrad.nn import MLP, Layer, Neuron, Value, bce_loss, mse_loss, relu
    from scalargrad.utils.visualizer import (
        LayerSnapshot,
        NetworkSnapshot,
        gradient_norm,
        graph_stats,
        render_ascii,
        snapshot,
        snapshot_forward_backward,
    )
except ImportError:
    pytest.skip("scalargrad not available", allow_module_level=True)


@pytest.fixture
def model(rng):
    return MLP(2, [3, 1], rng=rng)


class TestSnapshot:
    """Tests for snapshot."""

    def test_structure(self, model):
        """Layers, neurons and connections mirror the model."""
        snap = snapshot(model, [0.5, -1.0])
        assert isinstance(snap, NetworkSnapshot)
        assert [len(layer.neurons) for layer in snap.layers] == [3, 1]
        assert all(isinstance(layer, LayerSnapshot) for layer in snap.layers)
        assert len(snap.layers[0].neurons[0].connections) == 2
        assert len(snap.layers[1].neurons[0].connections) == 3
        assert snap.num_parameters == model.num_parameters()

    def test_values_match_model(self, model):
        """Weights, biases and outputs are read from the model."""
        snap = snapshot(model, [0.5, -1.0])
        neuron = model.layers[0].neurons[1]
        record = snap.layers[0].neurons[1]
        assert [c.weight for c in record.connections] == [w.data for w in neuron.weights]
        assert record.bias == neuron.bias.data
        assert record.activation == "relu"
        assert snap.layers[1].neurons[0].activation == "linear"
        assert snap.outputs == [model([0.5, -1.0])[0].data]
        assert snap.inputs == [0.5, -1.0]

    def test_does_not_mutate(self, model):
        """Parameters and gradients are left as they were."""
        for i, p in enumerate(model.parameters()):
            p.grad = 0.1 * i
        before = [(p.data, p.grad) for p in model.parameters()]
        snap = snapshot(model, [1.0, 2.0], loss=Value(0.25))
        assert [(p.data, p.grad) for p in model.parameters()] == before
        assert snap.layers[0].neurons[0].connections[1].grad == pytest.approx(0.1)
        assert snap.loss == 0.25

    def test_without_inputs(self, model):
        """Without inputs only parameters are recorded."""
        snap = snapshot(model)
        assert snap.inputs is None
        assert snap.outputs is None
        assert snap.layers[0].neurons[0].output is None

    def test_width_mismatch(self, model):
        """Inputs of the wrong width raise ValueError."""
        with pytest.raises(ValueError):
            snapshot(model, [1.0, 2.0, 3.0])

    def test_single_layer(self, rng):
        """A bare Layer is inspected as a one-layer network."""
        layer = Layer(2, 2, rng=rng)
        snap = snapshot(layer, [1.0, 2.0])
        assert len(snap.layers) == 1
        assert snap.layers[0].out_features == 2
        assert snap.outputs == [v.data for v in layer([1.0, 2.0])]

    def test_single_neuron(self, rng):
        """A bare Neuron is inspected as a one-neuron layer."""
        neuron = Neuron(3, nonlin=False, rng=rng)
        snap = snapshot(neuron, [1.0, 0.0, -1.0])
        assert snap.num_parameters == 4
        assert snap.layers[0].neurons[0].activation == "linear"
        assert snap.outputs == [neuron([1.0, 0.0, -1.0])[0].data]

    def test_rejects_other_objects(self):
        """Objects without layers, neurons or weights raise TypeError."""
        with pytest.raises(TypeError, match="Cannot inspect"):
            snapshot(object())


class TestSnapshotForwardBackward:
    """Tests for snapshot_forward_backward."""

    def test_records_loss_and_gradients(self, model):
        """The loss and fresh gradients of one cycle are captured."""
        before = model.state_dict()
        snap = snapshot_forward_backward(model, [0.5, -1.0], 2.0)

        expected = mse_loss(model([0.5, -1.0]), 2.0).data
        assert snap.loss == pytest.approx(expected)
        assert model.state_dict() == before
        neuron = model.layers[1].neurons[0]
        assert snap.layers[1].neurons[0].bias_grad == neuron.bias.grad
        # d(out - t)^2 / d bias of a linear output neuron
        assert neuron.bias.grad == pytest.approx(2 * (snap.outputs[0] - 2.0))

    def test_stale_gradients_are_cleared(self, model):
        """Two cycles on the same input give the same gradients."""
        first = snapshot_forward_backward(model, [0.5, -1.0], 2.0)
        second = snapshot_forward_backward(model, [0.5, -1.0], 2.0)
        assert first == second

    def test_custom_loss(self, rng):
        """loss_fn selects the loss."""
        model = MLP(2, [2, 1], output_activation="sigmoid", rng=rng)
        snap = snapshot_forward_backward(model, [1.0, 1.0], 1.0, loss_fn=bce_loss)
        assert snap.loss == pytest.approx(-math.log(snap.outputs[0]), rel=1e-6)


class TestGradientNorm:
    """Tests for gradient_norm."""

    def test_zero_after_zero_grad(self, model):
        """No gradients give norm 0."""
        model.zero_grad()
        assert gradient_norm(model) == 0.0

    def test_l2_norm(self, model):
        """The norm is sqrt(sum(grad^2)) over all parameters."""
        for i, p in enumerate(model.parameters()):
            p.grad = float(i) - 3.0
        grads = np.array([p.grad for p in model.parameters()])
        assert gradient_norm(model) == pytest.approx(math.sqrt(float(np.sum(grads**2))))

    def test_after_backward(self, model):
        """Non-zero after a forward/backward cycle with a non-zero loss."""
        snapshot_forward_backward(model, [0.5, -1.0], 100.0)
        assert gradient_norm(model) > 0.0


class TestRenderAscii:
    """Tests for render_ascii."""

    def test_render_snapshot(self, model):
        """The rendering lists every layer and the loss."""
        text = render_ascii(snapshot(model, [0.5, -1.0], loss=1.5))
        assert "Network: 2 layers, 13 parameters" in text
        assert "Layer 0: 2 -> 3 (relu)" in text
        assert "Layer 1: 3 -> 1 (linear)" in text
        assert "Loss:    1.500000" in text
        assert "out=" in text

    def test_render_model(self, model):
        """Models can be rendered directly."""
        text = render_ascii(model)
        assert "Layer 1" in text
        assert "Inputs" not in text
        assert "out=" not in text


class TestGraphStats:
    """Tests for graph_stats."""

    def test_diamond(self):
        """Counts for relu(x*y + x**2)."""
        x, y = Value(2.0), Value(3.0)
        stats = graph_stats(relu(x * y + x**2))
        assert stats["nodes"] == 6
        assert stats["edges"] == 6
        assert stats["leaves"] == 2
        assert stats["max_fan_in"] == 2
        assert stats["ops"] == {"*": 1, "**2": 1, "+": 1, "ReLU": 1}

    def test_single_leaf(self):
        """A lone leaf has no edges."""
        stats = graph_stats(Value(1.0))
        assert stats == {"nodes": 1, "edges": 0, "leaves": 1, "max_fan_in": 0, "ops": {}}
