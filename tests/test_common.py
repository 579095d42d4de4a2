from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from neatnet.common import (
    NODE_ACTIVATORS,
    ExceededMaxActivationAttemptsError,
    MaximalNetDepthExceededError,
    NetworkError,
    NodeActivationType,
    NodeActivators,
    NodeNeuronType,
    NodeType,
    Solver,
    UnsupportedSensorsArraySizeError,
    ZeroActivationStepsError,
    activate_module,
    activate_node,
    neuron_type_by_name,
    neuron_type_name,
    node_type_name,
)
from neatnet.nnode import NNode


@dataclass
class _Node:
    activation_type: int = NodeActivationType.SIGMOID_STEEPENED
    activation_sum: float = 0.0
    activation: float = 0.0
    activations_count: int = 0
    params: list = field(default_factory=list)
    is_active: bool = False
    incoming: list = field(default_factory=list)
    outgoing: list = field(default_factory=list)

    def set_activation(self, value):
        self.activation = value
        self.activations_count += 1

    def active_out(self):
        return self.activation if self.activations_count > 0 else 0.0


@dataclass
class _Link:
    in_node: _Node
    out_node: _Node


def test_node_type_name():
    assert node_type_name(NodeType.NEURON) == "NEURON"
    assert node_type_name(NodeType.SENSOR) == "SENSOR"
    assert node_type_name(NodeType.SENSOR + 1) == "UNKNOWN NODE TYPE"


def test_neuron_type_name():
    assert neuron_type_name(NodeNeuronType.HIDDEN) == "HIDN"
    assert neuron_type_name(NodeNeuronType.INPUT) == "INPT"
    assert neuron_type_name(NodeNeuronType.OUTPUT) == "OUTP"
    assert neuron_type_name(NodeNeuronType.BIAS) == "BIAS"
    assert neuron_type_name(NodeNeuronType.BIAS + 1) == "UNKNOWN NEURON TYPE"


@pytest.mark.parametrize(
    "name, expected",
    [
        ("HIDN", NodeNeuronType.HIDDEN),
        ("INPT", NodeNeuronType.INPUT),
        ("OUTP", NodeNeuronType.OUTPUT),
        ("BIAS", NodeNeuronType.BIAS),
    ],
)
def test_neuron_type_by_name(name, expected):
    assert neuron_type_by_name(name) == expected


def test_neuron_type_by_name_unknown():
    with pytest.raises(ValueError) as info:
        neuron_type_by_name("UNKNOWN NEURON TYPE")
    assert str(info.value) == "Unknown neuron type name: UNKNOWN NEURON TYPE"


def test_activate_node():
    node = _Node(activation_sum=0.0)
    activate_node(node, NODE_ACTIVATORS)
    assert node.activation == 0.5
    assert node.activations_count == 1


def test_activate_node_unknown_type():
    node = _Node()
    node.activation_type = int(NodeActivationType.MIN_MODULE) + 1
    with pytest.raises(ValueError) as info:
        activate_node(node, NODE_ACTIVATORS)
    assert str(info.value) == f"unknown neuron activation type: {node.activation_type}"
    assert node.activations_count == 0


def test_activate_module():
    module = NNode(1, NodeNeuronType.HIDDEN)
    module.activation_type = NodeActivationType.MULTIPLY_MODULE
    in_a = NNode(2, NodeNeuronType.HIDDEN)
    in_a.set_activation(2.0)
    in_b = NNode(3, NodeNeuronType.HIDDEN)
    in_b.set_activation(3.5)
    out = NNode(4, NodeNeuronType.HIDDEN)
    module.add_incoming(in_a, 1.0)
    module.add_incoming(in_b, 1.0)
    module.add_outgoing(out, 1.0)

    activate_module(module, NODE_ACTIVATORS)
    assert out.active_out() == 7.0
    assert out.activations_count == 1


def test_activate_module_unknown_type():
    module = _Node(activation_type=int(NodeActivationType.MIN_MODULE) + 1)
    module.incoming = [_Link(_Node(), module)]
    module.outgoing = [_Link(module, _Node())]
    with pytest.raises(ValueError) as info:
        activate_module(module, NODE_ACTIVATORS)
    assert str(info.value) == f"unknown module activation type: {module.activation_type}"


def test_activate_module_output_count_mismatch():
    module = _Node(activation_type=NodeActivationType.MULTIPLY_MODULE)
    module.incoming = [_Link(_Node(), module), _Link(_Node(), module)]
    module.outgoing = [_Link(module, _Node()), _Link(module, _Node())]
    with pytest.raises(NetworkError) as info:
        activate_module(module, NODE_ACTIVATORS)
    assert str(info.value) == (
        "number of output parameters [1] returned by module activator doesn't match "
        "the number of output neurons of the module [2]"
    )


@pytest.mark.parametrize(
    "activation_type, value, expected",
    [
        (NodeActivationType.LINEAR, 3.5, 3.5),
        (NodeActivationType.NULL, 3.5, 0.0),
        (NodeActivationType.LINEAR_ABS, -2.0, 2.0),
        (NodeActivationType.LINEAR_CLIPPED, 5.0, 1.0),
        (NodeActivationType.LINEAR_CLIPPED, -5.0, -1.0),
        (NodeActivationType.SIGMOID_STEEPENED, 0.0, 0.5),
        (NodeActivationType.SIGMOID_PLAIN, 0.0, 0.5),
        (NodeActivationType.TANH, 0.0, 0.0),
        (NodeActivationType.STEP, 0.0, 0.0),
        (NodeActivationType.STEP, 0.1, 1.0),
        (NodeActivationType.SIGN, -3.0, -1.0),
        (NodeActivationType.SIGMOID_APPROXIMATION, -5.0, 0.0),
        (NodeActivationType.SIGMOID_APPROXIMATION, 5.0, 1.0),
        (NodeActivationType.GAUSSIAN_BIPOLAR, 0.0, 1.0),
        (NodeActivationType.SIGMOID_INVERSE_ABSOLUTE, 0.0, 0.5),
    ],
)
def test_activate_by_type_values(activation_type, value, expected):
    assert NodeActivators().activate_by_type(value, None, activation_type) == pytest.approx(expected)


def test_sigmoid_saturates_without_overflow():
    activators = NodeActivators()
    assert activators.activate_by_type(-1e6, None, NodeActivationType.SIGMOID_STEEPENED) == 0.0
    assert activators.activate_by_type(1e6, None, NodeActivationType.SIGMOID_STEEPENED) == 1.0


def test_module_type_is_not_neuron_activation():
    with pytest.raises(ValueError, match="unknown neuron activation type"):
        NODE_ACTIVATORS.activate_by_type(1.0, None, NodeActivationType.MULTIPLY_MODULE)


@pytest.mark.parametrize(
    "activation_type, expected",
    [
        (NodeActivationType.MULTIPLY_MODULE, [24.0]),
        (NodeActivationType.MAX_MODULE, [4.0]),
        (NodeActivationType.MIN_MODULE, [2.0]),
    ],
)
def test_activate_module_by_type(activation_type, expected):
    assert NODE_ACTIVATORS.activate_module_by_type([2.0, 3.0, 4.0], None, activation_type) == expected


def test_activation_name_round_trip():
    for kind in NodeActivationType:
        assert NodeActivationType.from_activation_name(kind.activation_name) is kind
    assert NodeActivationType.SIGMOID_STEEPENED.activation_name == "SigmoidSteepenedActivation"


def test_activation_from_unknown_name():
    with pytest.raises(ValueError):
        NodeActivationType.from_activation_name("NoSuchActivation")


def test_error_messages():
    assert str(ExceededMaxActivationAttemptsError()) == "maximal network activation attempts exceeded"
    assert str(UnsupportedSensorsArraySizeError()) == (
        "the sensors array size is unsupported by network solver"
    )
    assert str(ZeroActivationStepsError()) == "zero activation steps requested"
    err = MaximalNetDepthExceededError(depth=2)
    assert str(err) == "depth of the network exceeds maximum allowed, fallback to maximal"
    assert err.depth == 2
    assert isinstance(err, NetworkError)


def test_solver_is_abstract():
    with pytest.raises(TypeError):
        Solver()