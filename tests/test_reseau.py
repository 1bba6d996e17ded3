import copy
import math

import pytest

from perceptron.cycle import Phase
from perceptron.erreurs import (
	InputWidthMismatch,
	IntermediateStateIncomplete,
	NetworkError,
	TopologyConfigurationInvalid,
)
from perceptron.fct_activation import IDENTITY, RELU
from perceptron.fct_erreur import squared_loss_prime
from perceptron.reseau import Network, NetworkType, build_layer_sizes


# ==================== topologie ====================
def test_single_neuron_topology():
	net = Network(1, None, 3, 0.1, IDENTITY, seed=0)
	assert net.network_type is NetworkType.SINGLE_NEURON
	assert len(net.layers) == 2
	assert net.input_layer.width == 0
	assert net.common_layers == []
	assert net.output_layer.width == 1
	assert net.output_layer.input_width == 3
	assert net.active_layers == [net.output_layer]


def test_two_layer_topology():
	net = Network(2, 4, 3, 0.1, IDENTITY, seed=0)
	assert net.network_type is NetworkType.TWO_LAYER_PERCEPTRON
	assert [(layer.width, layer.input_width) for layer in net.layers] == [(4, 3), (1, 4)]


def test_multi_layer_topology_ignores_extra_widths():
	net = Network(5, [4, 3, 2, 2, 9], 2, 0.1, IDENTITY, seed=0)
	assert net.network_type is NetworkType.MULTI_LAYER_PERCEPTRON
	assert [layer.width for layer in net.layers] == [4, 3, 2, 2, 1]
	assert [layer.input_width for layer in net.layers] == [2, 4, 3, 2, 2]
	assert len(net.common_layers) == 3
	assert net.network_width == [4, 3, 2, 2]


def test_uniform_width():
	net = Network(3, 5, 2, 0.1, IDENTITY, seed=0)
	assert net.network_width == [5, 5]


def test_build_layer_sizes():
	assert build_layer_sizes(NetworkType.SINGLE_NEURON, [], 3) == [(0, 3), (1, 3)]
	assert build_layer_sizes(NetworkType.MULTI_LAYER_PERCEPTRON, [4, 2], 3) == [(4, 3), (2, 4), (1, 2)]


@pytest.mark.parametrize(
	"depth, width, n_in",
	[(0, 3, 2), (3, None, 2), (4, [3, 2], 2), (3, [3, 0], 2), (2, 3, 0)],
)
def test_invalid_topologies(depth, width, n_in):
	with pytest.raises(TopologyConfigurationInvalid):
		Network(depth, width, n_in, 0.1, IDENTITY)


def test_seed_is_repeatable():
	a = Network(3, [3, 2], 2, 0.1, IDENTITY, seed=42)
	b = Network(3, [3, 2], 2, 0.1, IDENTITY, seed=42)
	assert a.get_parameters() == b.get_parameters()


# ==================== propagation avant ====================
@pytest.mark.parametrize("depth, width, attendu", [(1, None, 1), (2, 3, 2), (3, [3, 2], 3), (5, 2, 5)])
def test_cache_has_one_entry_per_traversed_layer(depth, width, attendu):
	net = Network(depth, width, 2, 0.1, IDENTITY, seed=0)
	net.feedforward_compute([0.5, -0.5])
	assert net.phase is Phase.FORWARD_COMPLETE
	values = net.intermediate_values
	assert len(values) == attendu
	assert values[0] == [0.5, -0.5]
	assert [len(v) for v in values] == [layer.input_width for layer in net.active_layers]


def test_zero_network_outputs_zero():
	net = Network(4, [3, 3, 2], 3, 0.1, IDENTITY, seed=0)
	weights, biases = net.get_parameters()
	net.set_parameters(
		[[[0.0] * len(row) for row in layer] for layer in weights],
		[[0.0] * len(layer) for layer in biases],
	)
	assert net.predict([0.0, 0.0, 0.0]) == 0.0


def test_output_is_raw_unless_activated():
	raw = Network(1, None, 1, 0.1, RELU, seed=0)
	raw.set_parameters([[[-1.0]]], [[0.0]])
	assert raw.predict([1.0]) == -1.0

	act = Network(1, None, 1, 0.1, RELU, seed=0, activated_output=True)
	act.set_parameters([[[-1.0]]], [[0.0]])
	assert act.predict([1.0]) == 0.0


def test_input_width_mismatch():
	net = Network(2, 2, 2, 0.1, IDENTITY, seed=0)
	with pytest.raises(InputWidthMismatch):
		net.feedforward_compute([1.0])
	assert net.phase is Phase.IDLE
	with pytest.raises(InputWidthMismatch):
		net.predict([1.0, 2.0, 3.0])


def test_predict_does_not_touch_cache():
	net = Network(3, 2, 1, 0.1, IDENTITY, seed=0)
	net.predict([1.0])
	assert net.intermediate_values == []
	assert net.phase is Phase.IDLE


# ==================== ordre des phases ====================
def test_phase_order_is_enforced():
	net = Network(3, 2, 1, 0.1, IDENTITY, seed=0)
	with pytest.raises(IntermediateStateIncomplete):
		net.backpropagate_error(1.0)
	with pytest.raises(IntermediateStateIncomplete):
		net.step_gradient([1.0])

	net.feedforward_compute([1.0])
	with pytest.raises(IntermediateStateIncomplete):
		net.feedforward_compute([1.0])
	with pytest.raises(IntermediateStateIncomplete):
		net.step_gradient([1.0])

	net.backpropagate_error(1.0)
	assert net.phase is Phase.BACKWARD_COMPLETE
	net.step_gradient([1.0])
	assert net.phase is Phase.IDLE
	assert net.intermediate_values == []
	with pytest.raises(IntermediateStateIncomplete):
		net.backpropagate_error(1.0)


def test_reset_abandons_cycle():
	net = Network(2, 2, 1, 0.1, IDENTITY, seed=0)
	net.feedforward_compute([1.0])
	net.reset()
	assert net.phase is Phase.IDLE
	assert net.intermediate_values == []
	net.feedforward_compute([1.0])


# ==================== rétropropagation ====================
def test_two_layer_hidden_errors_use_output_weights():
	net = Network(2, 2, 1, 0.1, IDENTITY, seed=0)
	net.set_parameters([[[1.0], [2.0]], [[3.0, 4.0]]], [[0.0, 0.0], [0.0]])
	assert net.feedforward_compute([1.0]) == pytest.approx(11.0)
	layer_errors = net.backpropagate_error(1.0)
	assert layer_errors[0] == pytest.approx([3.0, 4.0])
	assert layer_errors[1] == pytest.approx([1.0])


def test_hand_computed_three_layer_step():
	net = Network(3, [1, 1], 1, 0.01, IDENTITY, squared_loss_prime, seed=0)
	net.set_parameters([[[1.0]], [[2.0]], [[3.0]]], [[0.0], [0.0], [0.0]])

	prediction = net.train_iteration([1.0], 10.0)

	assert prediction == pytest.approx(6.0)
	weights, biases = net.get_parameters()
	assert weights[0][0][0] == pytest.approx(1.48)
	assert weights[1][0][0] == pytest.approx(2.24)
	assert weights[2][0][0] == pytest.approx(3.16)
	assert biases == [[pytest.approx(0.48)], [pytest.approx(0.24)], [pytest.approx(0.08)]]


def test_gradient_matches_finite_differences():
	lr = 1e-3
	x, d = [0.4, -0.7], 0.3
	net = Network(4, [3, 2, 2], 2, lr, "tanh", seed=3)
	weights, biases = net.get_parameters()

	def loss(w, b):
		probe = Network(4, [3, 2, 2], 2, lr, "tanh", seed=3)
		probe.set_parameters(w, b)
		return (d - probe.predict(x)) ** 2

	h = 1e-6
	numeric_w = copy.deepcopy(weights)
	for c, layer in enumerate(weights):
		for j, row in enumerate(layer):
			for k in range(len(row)):
				plus, minus = copy.deepcopy(weights), copy.deepcopy(weights)
				plus[c][j][k] += h
				minus[c][j][k] -= h
				numeric_w[c][j][k] = (loss(plus, biases) - loss(minus, biases)) / (2 * h)
	numeric_b = copy.deepcopy(biases)
	for c, layer in enumerate(biases):
		for j in range(len(layer)):
			plus, minus = copy.deepcopy(biases), copy.deepcopy(biases)
			plus[c][j] += h
			minus[c][j] -= h
			numeric_b[c][j] = (loss(weights, plus) - loss(weights, minus)) / (2 * h)

	net.train_iteration(x, d)
	new_w, new_b = net.get_parameters()
	for c in range(len(weights)):
		for j in range(len(weights[c])):
			for k in range(len(weights[c][j])):
				analytic = (weights[c][j][k] - new_w[c][j][k]) / lr
				assert analytic == pytest.approx(numeric_w[c][j][k], rel=1e-4, abs=1e-6)
			analytic_b = (biases[c][j] - new_b[c][j]) / lr
			assert analytic_b == pytest.approx(numeric_b[c][j], rel=1e-4, abs=1e-6)


def test_errors_persist_after_step():
	net = Network(2, 2, 1, 0.1, IDENTITY, seed=0)
	net.train_iteration([1.0], 2.0)
	assert all(e is not None for layer in net.active_layers for e in layer.get_errors())


# ==================== apprentissage ====================
def test_single_neuron_learns_five_x():
	X = [[1.0], [2.0], [3.0], [4.0]]
	D = [5.0, 10.0, 15.0, 20.0]
	net = Network(1, None, 1, 0.01, IDENTITY, squared_loss_prime, seed=11)
	initial = net.evaluate(X, D)
	for _ in range(100):
		net.iterations_train(X, D)
	assert net.evaluate(X, D) < initial
	assert 24.0 < net.predict([5.0]) < 26.0


def test_iterations_train_returns_predictions():
	net = Network(1, None, 1, 0.01, IDENTITY, seed=0)
	predictions = net.iterations_train([[1.0], [2.0]], [5.0, 10.0])
	assert len(predictions) == 2
	with pytest.raises(InputWidthMismatch):
		net.iterations_train([[1.0], [2.0]], [5.0])


def test_batch_of_one_equals_single_iteration():
	a = Network(3, [3, 2], 2, 0.05, "tanh", seed=9)
	b = Network(3, [3, 2], 2, 0.05, "tanh", seed=9)
	a.train_iteration([0.2, 0.9], 1.5)
	b.batch_train([[0.2, 0.9]], [1.5])
	for wa, wb in zip(a.get_parameters()[0], b.get_parameters()[0]):
		for ra, rb in zip(wa, wb):
			assert ra == pytest.approx(rb)
	assert b.phase is Phase.IDLE


def test_batch_averages_inputs_and_error():
	net = Network(1, None, 1, 0.1, IDENTITY, seed=0)
	net.set_parameters([[[1.0]]], [[0.0]])
	average_error = net.batch_train([[1.0], [3.0]], [2.0, 4.0])
	assert average_error == pytest.approx(-2.0)
	weights, biases = net.get_parameters()
	assert weights[0][0][0] == pytest.approx(1.4)
	assert biases[0][0] == pytest.approx(0.2)


def test_batch_rejects_bad_sets():
	net = Network(2, 2, 1, 0.1, IDENTITY, seed=0)
	with pytest.raises(NetworkError):
		net.batch_train([], [])
	with pytest.raises(InputWidthMismatch):
		net.batch_train([[1.0]], [1.0, 2.0])
	with pytest.raises(InputWidthMismatch):
		net.batch_train([[1.0, 2.0]], [1.0])
	net.feedforward_compute([1.0])
	with pytest.raises(IntermediateStateIncomplete):
		net.batch_train([[1.0]], [1.0])


def test_batch_training_reduces_loss():
	X = [[0.0, 1.0], [1.0, 0.0], [1.0, 1.0], [0.5, 0.5]]
	D = [10.0, 11.0, 12.0, 10.5]
	net = Network(2, 3, 2, 0.02, IDENTITY, seed=4)
	initial = net.evaluate(X, D)
	for _ in range(50):
		net.batch_train(X, D)
	assert net.evaluate(X, D) < initial


# ==================== paramètres / affichage ====================
def test_set_parameters_validates_shapes():
	net = Network(3, [2, 2], 1, 0.1, IDENTITY, seed=0)
	weights, biases = net.get_parameters()
	with pytest.raises(TopologyConfigurationInvalid):
		net.set_parameters(weights[:2], biases[:2])
	bad = copy.deepcopy(weights)
	bad[1][0] = [1.0]
	with pytest.raises(TopologyConfigurationInvalid):
		net.set_parameters(bad, biases)
	bad_biases = copy.deepcopy(biases)
	bad_biases[0] = [0.0]
	with pytest.raises(TopologyConfigurationInvalid):
		net.set_parameters(weights, bad_biases)


def test_str_shows_layers():
	net = Network(2, 2, 1, 0.1, IDENTITY, seed=0)
	text = str(net)
	assert text.startswith("--- Réseau TwoLayerPerceptron")
	assert "# couche 1 (cachée, 2 neurone(s))" in text
	assert "# couche 2 (sortie, 1 neurone(s))" in text


def test_diverging_training_propagates_non_finite_values():
	X = [[1.0], [2.0], [3.0], [4.0]]
	D = [5.0, 10.0, 15.0, 20.0]
	net = Network(1, None, 1, 1.0, IDENTITY, seed=0)
	for _ in range(500):
		net.iterations_train(X, D)
	assert not math.isfinite(net.evaluate(X, D))

	net.set_parameters([[[1e200]]], [[0.0]])
	assert net.evaluate([[1.0e200]], [0.0]) == math.inf
