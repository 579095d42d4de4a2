# neatnet

The neural-network side of NEAT (NeuroEvolution of Augmenting Topologies).
It provides network nodes and links, evolvable traits, step-by-step network
activation, a fast list-based solver for large networks, JSON models of that
solver, and export of network graphs to Cytoscape JSON and GraphViz DOT.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Building and activating a network

```python
from neatnet.common import NodeNeuronType
from neatnet.nnode import NNode
from neatnet.network import Network

inp1 = NNode(1, NodeNeuronType.INPUT)
inp2 = NNode(2, NodeNeuronType.INPUT)
bias = NNode(3, NodeNeuronType.BIAS)
hidden = NNode(4, NodeNeuronType.HIDDEN)
out = NNode(5, NodeNeuronType.OUTPUT)

hidden.connect_from(inp1, 1.5)
hidden.connect_from(inp2, -0.7)
hidden.connect_from(bias, 0.2)
out.connect_from(hidden, 2.0)

net = Network([inp1, inp2, bias], [out], [inp1, inp2, bias, hidden, out], 1)

net.load_sensors([0.5, 1.0, 1.0])
depth = net.max_activation_depth()
net.forward_steps(depth)
print(net.read_outputs())
```

Nodes use `NodeActivationType.SIGMOID_STEEPENED` unless another
`neatnet.common.NodeActivationType` is given. `neatnet.nnode.new_sensor_node`
creates input or bias sensors. If `load_sensors` receives one value fewer
than there are inputs, each bias node is loaded with 1.0.

`Network` and `FastModularNetworkSolver` both implement the
`neatnet.common.Solver` interface: `forward_steps`, `recursive_steps`,
`relax`, `flush`, `load_sensors`, `read_outputs`, `node_count` and
`link_count`. Errors raise exceptions derived from
`neatnet.common.NetworkError`:

- `ZeroActivationStepsError` when zero steps are requested,
- `ExceededMaxActivationAttemptsError` when the outputs never become active,
- `MaximalNetDepthExceededError` from `max_activation_depth_with_cap` when a
  positive cap is passed; its `depth` attribute holds the cap,
- `UnsupportedSensorsArraySizeError` when the fast solver is given the wrong
  number of inputs.

`Network.relax` is not supported and always raises `NetworkError`.
`Network.is_recurrent(in_node, out_node, thresh)` returns a pair: the verdict
and the number of nodes visited.

A `Network` can also be queried as a graph with `node`, `nodes`,
`successors`, `predecessors`, `edge`, `weighted_edge`, `weight`,
`has_edge_from_to` and `has_edge_between`.

## Traits

`neatnet.trait.Trait` holds an ID and a list of parameters (eight zeros by
default). `copy()` duplicates it, `averaged(other)` returns the mean of two
traits and raises `TraitParametersMismatchError` if their lengths differ, and
`mutate(power, prob)` perturbs the parameters at random without letting them
drop below zero. A `Link` created with a trait copies the trait's parameters.

## Modular networks

A control node applies a multi-input, multi-output module function
(`MULTIPLY_MODULE`, `MAX_MODULE` or `MIN_MODULE`) between parts of the
network. Wire it with `add_incoming` and `add_outgoing`, then pass it in
`control_nodes`:

```python
net = Network(inputs, outputs, all_nodes, 0, control_nodes=[control])
```

For such networks `max_activation_depth` uses networkx to find the weighted
shortest paths from each input to each output and returns the length of the
longest of them. `max_activation_depth_with_cap` and `recursive_steps` are
not supported for modular networks.

## Fast solver

`neatnet.fast_network.fast_network_solver(network)` turns a network into a
`FastModularNetworkSolver`. The solver keeps signals in flat lists ordered
bias, input, output, hidden. Bias inputs are built in, so `load_sensors`
takes only the input values. A solver can be saved and loaded as JSON:

```python
from neatnet.fast_network import fast_network_solver
from neatnet.model_io import read_model, write_model

solver = fast_network_solver(net)
with open("model.json", "w") as fh:
    write_model(solver, fh)
with open("model.json") as fh:
    solver = read_model(fh)
```

## Graph export

```python
from neatnet.formats.cytoscape import write_cytoscape_json
from neatnet.formats.dot import write_dot

with open("net.cyjs", "w") as fh:
    write_cytoscape_json(fh, net)
with open("net.dot", "w") as fh:
    write_dot(fh, net)
```

`write_cytoscape_json` applies a default node style, edge style and circle
layout. To supply your own, use `write_cytoscape_json_with_style` with a
`CytoscapeStyleOptions` that holds `ElementStyle` entries and a layout.
`write_dot` writes a strict digraph named after the network.

`neatnet.paths.print_all_activation_depth_paths(net, writer)` writes every
input-to-output path that the depth calculation examines.
`neatnet.paths.print_path(writer, paths)` writes lists of node IDs in the
form `1 -> 4 -> 7`.

## What this package does not do

This package covers networks only. It has no genomes, populations, species
or evolutionary loop, and it runs no experiments. It has no command-line
tool. Networks are built in code, and only the fast solver can be saved and
loaded.