"""Tests for nn.module and nn.modules (Neuron, Layer, MLP)."""

import numpy as np
import pytest

try:
    from scalargrad.nn import MLP, Layer, Module, Neuron, Parameter, Value
except ImportError:
    pytest.skip("scalargrad not available", allow_module_level=True)


class TestNeuron:
    """Tests for Neuron."""

    def test_parameter_order(self, rng):
        """Weights come first, the bias last."""
        neuron = Neuron(3, rng=rng)
        params = neuron.parameters()
        assert len(params) == 4
        assert params[:3] == neuron.weights
        assert params[-1] is neuron.bias
        assert all(isinstance(p, Parameter) for p in params)

    def test_initialization(self, rng):
        """Weights are drawn from [-1, 1), the bias starts at zero."""
        neuron = Neuron(50, rng=rng)
        values = np.array([w.data for w in neuron.weights])
        assert np.all(values >= -1.0) and np.all(values < 1.0)
        assert len(set(values.tolist())) == 50
        assert neuron.bias.data == 0.0

    def test_forward_linear(self):
        """A linear neuron computes bias + sum(w * x)."""
        neuron = Neuron(2, nonlin=False)
        neuron.weights[0].data = 2.0
        neuron.weights[1].data = -1.0
        neuron.bias.data = 0.5
        (out,) = neuron([3.0, 4.0])
        assert out.data == pytest.approx(2.5)

    def test_forward_relu(self):
        """relu clips a negative pre-activation."""
        neuron = Neuron(1)
        neuron.weights[0].data = -1.0
        (out,) = neuron([2.0])
        assert out.data == 0.0

    @pytest.mark.parametrize("activation", ["tanh", "sigmoid"])
    def test_other_activations(self, rng, activation):
        """tanh and sigmoid outputs stay in their ranges."""
        neuron = Neuron(2, activation=activation, rng=rng)
        (out,) = neuron([5.0, -5.0])
        assert -1.0 <= out.data <= 1.0
        assert out.op == activation

    def test_width_mismatch(self, rng):
        """Wrong input width raises ValueError."""
        neuron = Neuron(3, rng=rng)
        with pytest.raises(ValueError, match="expects 3 inputs, got 2"):
            neuron([1.0, 2.0])

    def test_unknown_activation(self):
        """Unknown activation names are rejected."""
        with pytest.raises(ValueError, match="Unknown activation"):
            Neuron(2, activation="gelu")

    def test_kaiming_init(self, rng):
        """kaiming init keeps weights inside sqrt(6 / fan_in)."""
        neuron = Neuron(6, init="kaiming", rng=rng)
        assert all(abs(w.data) <= 1.0 for w in neuron.weights)

    def test_gradients_reach_parameters(self, rng):
        """backward() from the output fills weight and bias gradients."""
        neuron = Neuron(2, nonlin=False, rng=rng)
        (out,) = neuron([3.0, -2.0])
        out.backward()
        assert neuron.weights[0].grad == pytest.approx(3.0)
        assert neuron.weights[1].grad == pytest.approx(-2.0)
        assert neuron.bias.grad == pytest.approx(1.0)

    def test_value_inputs_keep_identity(self, rng):
        """Value inputs are used as-is and receive gradients."""
        neuron = Neuron(1, nonlin=False, rng=rng)
        x = Value(1.0)
        (out,) = neuron([x])
        out.backward()
        assert x.grad == pytest.approx(neuron.weights[0].data)

    def test_repr(self, rng):
        """repr names width and activation."""
        assert repr(Neuron(3, rng=rng)) == "Neuron(3, relu)"
        assert repr(Neuron(3, nonlin=False, rng=rng)) == "Neuron(3, linear)"


class TestLayer:
    """Tests for Layer."""

    def test_output_width(self, rng):
        """A layer returns one value per neuron."""
        layer = Layer(3, 5, rng=rng)
        outputs = layer([1.0, 2.0, 3.0])
        assert len(outputs) == 5
        assert len(layer.neurons) == 5
        assert layer.num_parameters() == 5 * (3 + 1)

    def test_neurons_draw_independently(self, rng):
        """Neurons get different weights from the shared generator."""
        layer = Layer(4, 2, rng=rng)
        first = [w.data for w in layer.neurons[0].weights]
        second = [w.data for w in layer.neurons[1].weights]
        assert first != second

    def test_width_mismatch(self, rng):
        """Layer checks its input width."""
        layer = Layer(2, 3, rng=rng)
        with pytest.raises(ValueError, match="expects 2 inputs, got 3"):
            layer([1.0, 2.0, 3.0])


class TestMLP:
    """Tests for MLP."""

    def test_shape_and_parameter_count(self, small_mlp):
        """MLP(3, [4, 4, 1]) maps 3 inputs to 1 output with 41 parameters."""
        out = small_mlp([1.0, -2.0, 0.5])
        assert len(out) == 1
        assert small_mlp.num_parameters() == (3 * 4 + 4) + (4 * 4 + 4) + (4 * 1 + 1)
        assert small_mlp.num_parameters() == 41

    def test_layer_structure(self, small_mlp):
        """Hidden layers are nonlinear, the output layer is linear."""
        layers = small_mlp.layers
        assert [layer.out_features for layer in layers] == [4, 4, 1]
        assert layers[0].nonlin and layers[1].nonlin
        assert not layers[2].nonlin
        assert small_mlp.out_features == 1

    def test_output_activation(self, rng):
        """output_activation makes the last layer nonlinear."""
        model = MLP(2, [3, 1], output_activation="sigmoid", rng=rng)
        (out,) = model([10.0, -10.0])
        assert model.layers[-1].nonlin
        assert out.op == "sigmoid"
        assert 0.0 < out.data < 1.0

    def test_same_seed_same_weights(self):
        """Models built from equal seeds are identical."""
        a = MLP(2, [3, 1], rng=np.random.default_rng(7))
        b = MLP(2, [3, 1], rng=np.random.default_rng(7))
        assert a.state_dict() == b.state_dict()

    def test_numpy_input(self, small_mlp):
        """1-D numpy arrays are accepted as inputs."""
        a = small_mlp(np.array([1.0, -2.0, 0.5]))[0].data
        b = small_mlp([1.0, -2.0, 0.5])[0].data
        assert a == b

    def test_width_mismatch(self, small_mlp):
        """The first layer rejects wrong input widths."""
        with pytest.raises(ValueError, match="expects 3 inputs"):
            small_mlp([1.0, 2.0])

    @pytest.mark.parametrize("sizes", [[], [4, 0, 1]])
    def test_invalid_sizes(self, sizes):
        """Empty or non-positive layer sizes are rejected."""
        with pytest.raises(ValueError):
            MLP(3, sizes)

    def test_zero_grad_idempotent(self, small_mlp):
        """zero_grad clears every gradient and can be repeated."""
        small_mlp([1.0, 2.0, 3.0])[0].backward()
        small_mlp.zero_grad()
        small_mlp.zero_grad()
        assert all(p.grad == 0.0 for p in small_mlp.parameters())

    def test_parameters_stable_order(self, small_mlp):
        """parameters() returns the same objects in the same order."""
        first = small_mlp.parameters()
        second = small_mlp.parameters()
        assert all(a is b for a, b in zip(first, second))

    def test_named_parameters(self, small_mlp):
        """Names are dotted layer.neuron.param paths."""
        names = [name for name, _ in small_mlp.named_parameters()]
        assert names[0] == "0.0.w0"
        assert names[3] == "0.0.b"
        assert names[-1] == "2.0.b"
        assert len(names) == 41

    def test_state_dict_roundtrip(self, rng):
        """load_state_dict restores values saved by state_dict."""
        model = MLP(2, [2, 1], rng=rng)
        saved = model.state_dict()
        for p in model.parameters():
            p.data += 1.0
        model.load_state_dict(saved)
        assert model.state_dict() == saved

    def test_load_state_dict_missing(self, rng):
        """Missing entries raise KeyError."""
        model = MLP(2, [2, 1], rng=rng)
        state = model.state_dict()
        state.pop("0.1.b")
        with pytest.raises(KeyError, match="0.1.b"):
            model.load_state_dict(state)

    def test_repr(self, rng):
        """repr lists the layers."""
        model = MLP(2, [3, 1], rng=rng)
        assert repr(model) == "MLP([Layer(2 -> 3, relu), Layer(3 -> 1, linear)])"


class TestModule:
    """Tests for the Module base class."""

    def test_forward_not_implemented(self):
        """Module.forward must be overridden."""
        with pytest.raises(NotImplementedError):
            Module()(1.0)

    def test_register_parameter(self):
        """Numbers are wrapped in Parameter, None removes the entry."""
        module = Module()
        module.register_parameter("scale", 2.0)
        assert isinstance(module.parameters()[0], Parameter)
        assert module.parameters()[0].data == 2.0
        module.register_parameter("scale", None)
        assert module.parameters() == []

    def test_children(self, small_mlp):
        """children() yields the direct submodules."""
        assert list(small_mlp.children()) == small_mlp.layers
