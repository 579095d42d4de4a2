import io
import json

import pytest

from neatnet.common import NodeActivationType, NodeNeuronType
from neatnet.fast_network import fast_network_solver
from neatnet.model_io import read_model, write_model
from neatnet.network import Network
from neatnet.nnode import NNode

JSON_FMN = '{"id":123456,"name":"test network","input_neuron_count":2,"sensor_neuron_count":3,"output_neuron_count":2,"bias_neuron_count":1,"total_neuron_count":8,"activation_functions":["SigmoidSteepenedActivation","SigmoidSteepenedActivation","SigmoidSteepenedActivation","SigmoidSteepenedActivation","SigmoidSteepenedActivation","SigmoidSteepenedActivation","SigmoidSteepenedActivation","SigmoidSteepenedActivation"],"bias_list":[0,0,0,0,0,0,1,0],"connections":[{"source_index":1,"target_index":5,"weight":15,"signal":0},{"source_index":2,"target_index":5,"weight":10,"signal":0},{"source_index":2,"target_index":6,"weight":5,"signal":0},{"source_index":6,"target_index":7,"weight":17,"signal":0},{"source_index":5,"target_index":3,"weight":7,"signal":0},{"source_index":7,"target_index":3,"weight":4.5,"signal":0},{"source_index":7,"target_index":4,"weight":13,"signal":0}]}'
JSON_FMN_MODULE = '{"id":123456,"name":"test network","input_neuron_count":2,"sensor_neuron_count":3,"output_neuron_count":2,"bias_neuron_count":1,"total_neuron_count":8,"activation_functions":["SigmoidSteepenedActivation","SigmoidSteepenedActivation","SigmoidSteepenedActivation","LinearActivation","LinearActivation","LinearActivation","LinearActivation","NullActivation"],"bias_list":[0,0,0,0,0,10,1,0],"connections":[{"source_index":1,"target_index":5,"weight":15,"signal":0},{"source_index":2,"target_index":6,"weight":5,"signal":0},{"source_index":7,"target_index":3,"weight":4.5,"signal":0},{"source_index":7,"target_index":4,"weight":13,"signal":0}],"modules":[{"activation_type":"MultiplyModuleActivation","input_indexes":[5,6],"output_indexes":[7]}]}'

NETWORK_NAME = "test network"
NETWORK_ID = 123456

H, I, O, B = (
    NodeNeuronType.HIDDEN,
    NodeNeuronType.INPUT,
    NodeNeuronType.OUTPUT,
    NodeNeuronType.BIAS,
)


def build_network():
    nodes = [NNode(1, I), NNode(2, I), NNode(3, B), NNode(4, H),
             NNode(5, H), NNode(6, H), NNode(7, O), NNode(8, O)]
    nodes[3].connect_from(nodes[0], 15.0)
    nodes[3].connect_from(nodes[1], 10.0)
    nodes[4].connect_from(nodes[1], 5.0)
    nodes[4].connect_from(nodes[2], 1.0)
    nodes[5].connect_from(nodes[4], 17.0)
    nodes[6].connect_from(nodes[3], 7.0)
    nodes[6].connect_from(nodes[5], 4.5)
    nodes[7].connect_from(nodes[5], 13.0)
    return Network(nodes[0:3], nodes[6:8], nodes, 0)


def build_modular_network():
    nodes = [NNode(1, I), NNode(2, I), NNode(3, B), NNode(4, H),
             NNode(5, H), NNode(7, H), NNode(8, O), NNode(9, O)]
    control = NNode(6, H)
    control.activation_type = NodeActivationType.MULTIPLY_MODULE
    control.add_incoming(nodes[3], 1.0)
    control.add_incoming(nodes[4], 1.0)
    control.add_outgoing(nodes[5], 1.0)

    nodes[3].activation_type = NodeActivationType.LINEAR
    nodes[3].connect_from(nodes[0], 15.0)
    nodes[3].connect_from(nodes[2], 10.0)
    nodes[4].activation_type = NodeActivationType.LINEAR
    nodes[4].connect_from(nodes[1], 5.0)
    nodes[4].connect_from(nodes[2], 1.0)
    nodes[5].activation_type = NodeActivationType.NULL
    nodes[6].connect_from(nodes[5], 4.5)
    nodes[6].activation_type = NodeActivationType.LINEAR
    nodes[7].connect_from(nodes[5], 13.0)
    nodes[7].activation_type = NodeActivationType.LINEAR
    return Network(nodes[0:3], nodes[6:8], nodes, 0, control_nodes=[control])


def _named(net):
    net.name = NETWORK_NAME
    net.id = NETWORK_ID
    return net


def test_write_model_no_module():
    solver = fast_network_solver(_named(build_network()))
    out = io.StringIO()
    write_model(solver, out)
    assert json.loads(out.getvalue()) == json.loads(JSON_FMN)


def test_write_model_with_module():
    solver = fast_network_solver(_named(build_modular_network()))
    out = io.StringIO()
    write_model(solver, out)
    assert json.loads(out.getvalue()) == json.loads(JSON_FMN_MODULE)


def test_read_model_no_module():
    fmm = read_model(io.StringIO(JSON_FMN))
    assert fmm.name == NETWORK_NAME
    assert fmm.id == NETWORK_ID

    data = [1.5, 2.0]
    fmm.load_sensors(data)

    net = build_network()
    depth = net.max_activation_depth()
    net.load_sensors(data + [1.0])
    assert net.forward_steps(depth) is True

    assert fmm.relax(depth, 0.1) is True
    outputs = fmm.read_outputs()
    assert len(outputs) == len(net.outputs)
    for node, out in zip(net.outputs, outputs):
        assert out == pytest.approx(node.activation)


def test_read_model_modular():
    fmm = read_model(io.StringIO(JSON_FMN_MODULE))
    assert fmm.name == NETWORK_NAME
    assert fmm.id == NETWORK_ID

    data = [1.0, 2.0]
    fmm.load_sensors(data)

    net = build_modular_network()
    depth = net.max_activation_depth()
    net.load_sensors(data + [1.0])
    assert net.forward_steps(depth) is True

    assert fmm.relax(depth, 1) is True
    outputs = fmm.read_outputs()
    assert len(outputs) == len(net.outputs)
    for node, out in zip(net.outputs, outputs):
        assert out == pytest.approx(node.activation)


def test_round_trip_keeps_structure():
    solver = fast_network_solver(_named(build_modular_network()))
    buffer = io.StringIO()
    write_model(solver, buffer)
    buffer.seek(0)
    restored = read_model(buffer)

    assert restored.node_count() == solver.node_count()
    assert restored.link_count() == solver.link_count()
    assert restored.bias_list == solver.bias_list
    assert restored.connections == solver.connections
    assert restored.modules == solver.modules
    assert restored.activation_functions == solver.activation_functions


def test_read_model_unknown_activation():
    model = json.loads(JSON_FMN)
    model["activation_functions"][0] = "NoSuchActivation"
    with pytest.raises(ValueError):
        read_model(io.StringIO(json.dumps(model)))


def test_read_model_invalid_json():
    with pytest.raises(ValueError):
        read_model(io.StringIO("{not json"))