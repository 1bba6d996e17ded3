import pytest

from perceptron.cycle import Phase, TrainingCycle
from perceptron.erreurs import IntermediateStateIncomplete
from perceptron.fct_activation import IDENTITY
from perceptron.reseau import Network


@pytest.fixture
def net():
	network = Network(2, 2, 1, 0.1, IDENTITY, seed=0)
	network.set_parameters([[[1.0], [2.0]], [[3.0, 4.0]]], [[0.0, 0.0], [0.0]])
	return network


def test_full_cycle(net):
	cycle = TrainingCycle(net)
	assert cycle.forward([1.0]) == pytest.approx(11.0)
	assert net.phase is Phase.FORWARD_COMPLETE
	layer_errors = cycle.backward_target(10.0)
	assert cycle.final_error == pytest.approx(2.0)
	assert layer_errors[-1] == pytest.approx([2.0])
	assert net.phase is Phase.BACKWARD_COMPLETE
	cycle.apply_gradient()
	assert cycle.termine
	assert net.phase is Phase.IDLE
	assert net.predict([1.0]) < 11.0


def test_out_of_order_calls(net):
	cycle = TrainingCycle(net)
	with pytest.raises(IntermediateStateIncomplete):
		cycle.backward(1.0)
	with pytest.raises(IntermediateStateIncomplete):
		cycle.apply_gradient()
	cycle.forward([1.0])
	with pytest.raises(IntermediateStateIncomplete):
		cycle.forward([1.0])
	with pytest.raises(IntermediateStateIncomplete):
		cycle.apply_gradient()


def test_cycle_is_single_use(net):
	cycle = TrainingCycle(net)
	cycle.forward([1.0])
	cycle.backward(1.0)
	cycle.apply_gradient()
	with pytest.raises(IntermediateStateIncomplete):
		cycle.forward([1.0])


def test_busy_network_refuses_new_cycle(net):
	net.feedforward_compute([1.0])
	with pytest.raises(IntermediateStateIncomplete):
		TrainingCycle(net)


def test_with_block_abandons_on_error(net):
	with pytest.raises(RuntimeError):
		with TrainingCycle(net) as cycle:
			cycle.forward([1.0])
			raise RuntimeError("interrompu")
	assert net.phase is Phase.IDLE
	assert net.intermediate_values == []
	assert cycle.termine


def test_abandon_after_bad_input_leaves_network_usable(net):
	with pytest.raises(ValueError):
		with TrainingCycle(net) as cycle:
			cycle.forward([1.0, 2.0])
	assert net.phase is Phase.IDLE
	net.train_iteration([1.0], 10.0)
