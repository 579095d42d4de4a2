"""A flat, index-based network solver for fast simulation of large networks."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .common import (
    NODE_ACTIVATORS,
    NetworkError,
    NodeActivators,
    NodeNeuronType,
    Solver,
    UnsupportedSensorsArraySizeError,
)

if TYPE_CHECKING:
    from .network import Network
    from .nnode import NNode


@dataclass
class FastNetworkLink:
    """A connection between two neurons addressed by their indexes."""

    source_index: int
    target_index: int
    weight: float
    signal: float = 0.0


@dataclass
class FastControlNode:
    """A module relay between network parts, addressed by neuron indexes."""

    activation_type: int
    input_indexes: list[int] = field(default_factory=list)
    output_indexes: list[int] = field(default_factory=list)


class FastModularNetworkSolver(Solver):
    """Solver working on flat arrays of neuron signals.

    Neurons are laid out in the order: bias, input, output, hidden.
    """

    def __init__(
        self,
        bias_neuron_count: int,
        input_neuron_count: int,
        output_neuron_count: int,
        total_neuron_count: int,
        activation_functions: Sequence[int],
        connections: Iterable[FastNetworkLink],
        bias_list: Sequence[float],
        modules: Iterable[FastControlNode] | None = None,
        activators: NodeActivators = NODE_ACTIVATORS,
    ) -> None:
        self.id = 0
        self.name = ""
        self.bias_neuron_count = bias_neuron_count
        self.input_neuron_count = input_neuron_count
        self.sensor_neuron_count = bias_neuron_count + input_neuron_count
        self.output_neuron_count = output_neuron_count
        self.total_neuron_count = total_neuron_count
        self.activation_functions = list(activation_functions)
        self.connections = list(connections)
        self.bias_list = list(bias_list)
        self.modules = list(modules or [])
        self._activators = activators

        # only bias neurons start with a non-zero signal
        self.neuron_signals = [
            1.0 if i < bias_neuron_count else 0.0 for i in range(total_neuron_count)
        ]
        self._signals_being_processed = [0.0] * total_neuron_count

        self._activated = [False] * total_neuron_count
        self._in_activation = [False] * total_neuron_count
        self._last_activation = [0.0] * total_neuron_count

        self._reverse_adjacency: list[list[int]] = [[] for _ in range(total_neuron_count)]
        self._adjacency: list[dict[int, float]] = [{} for _ in range(total_neuron_count)]
        for conn in self.connections:
            self._reverse_adjacency[conn.target_index].append(conn.source_index)
            self._adjacency[conn.source_index][conn.target_index] = conn.weight

    def _activate(self, value: float, activation_type: int) -> float:
        return self._activators.activate_by_type(value, None, activation_type)

    def forward_steps(self, steps: int) -> bool:
        result = False
        for _ in range(steps):
            result = self._forward_step(0.0)
        return result

    def recursive_steps(self) -> bool:
        if self.modules:
            raise NetworkError(
                "recursive activation can not be used for network with defined modules"
            )
        for i in range(self.total_neuron_count):
            self._activated[i] = i < self.sensor_neuron_count
            self._in_activation[i] = False
            if i >= self.sensor_neuron_count:
                self._last_activation[i] = self.neuron_signals[i]

        result = False
        for index in range(self.sensor_neuron_count, self.sensor_neuron_count + self.output_neuron_count):
            self._recursive_activate_node(index)
            result = True
        return result

    def _recursive_activate_node(self, current: int) -> None:
        if self._activated[current]:
            self._in_activation[current] = False
            return
        self._in_activation[current] = True
        self._signals_being_processed[current] = 0.0

        for adjacent in self._reverse_adjacency[current]:
            weight = self._adjacency[adjacent].get(current, 0.0)
            if self._in_activation[adjacent]:
                # a cycle: use the previous activation of the recurrent connection
                self._signals_being_processed[current] += self._last_activation[adjacent] * weight
            else:
                if not self._activated[adjacent]:
                    self._recursive_activate_node(adjacent)
                self._signals_being_processed[current] += self.neuron_signals[adjacent] * weight

        self._activated[current] = True
        self._in_activation[current] = False
        self.neuron_signals[current] = self._activate(
            self._signals_being_processed[current], self.activation_functions[current]
        )

    def relax(self, max_steps: int, max_allowed_signal_delta: float) -> bool:
        relaxed = False
        for _ in range(max_steps):
            relaxed = self._forward_step(max_allowed_signal_delta)
            if relaxed:
                break
        return relaxed

    def _forward_step(self, max_allowed_signal_delta: float) -> bool:
        processed = self._signals_being_processed
        signals = self.neuron_signals

        for conn in self.connections:
            processed[conn.target_index] += signals[conn.source_index] * conn.weight

        for i in range(self.sensor_neuron_count, self.total_neuron_count):
            signal = processed[i]
            if self.bias_neuron_count > 0:
                signal += self.bias_list[i]
            processed[i] = self._activate(signal, self.activation_functions[i])

        for module in self.modules:
            inputs = [processed[index] for index in module.input_indexes]
            outputs = self._activators.activate_module_by_type(
                inputs, None, module.activation_type
            )
            if len(outputs) != len(module.output_indexes):
                raise NetworkError(
                    f"number of output parameters [{len(outputs)}] returned by module activator "
                    f"doesn't match the number of output neurons of the module "
                    f"[{len(module.output_indexes)}]"
                )
            for index, out in zip(module.output_indexes, outputs):
                processed[index] = out

        relaxed = True
        for i in range(self.sensor_neuron_count, self.total_neuron_count):
            if max_allowed_signal_delta > 0 and abs(signals[i] - processed[i]) > max_allowed_signal_delta:
                relaxed = False
            signals[i] = processed[i]
            processed[i] = 0.0
        return relaxed

    def flush(self) -> bool:
        for i in range(self.bias_neuron_count, self.total_neuron_count):
            self.neuron_signals[i] = 0.0
            self._signals_being_processed[i] = 0.0
        return True

    def load_sensors(self, inputs: Sequence[float]) -> None:
        if len(inputs) != self.input_neuron_count:
            raise UnsupportedSensorsArraySizeError()
        start = self.bias_neuron_count
        self.neuron_signals[start:start + self.input_neuron_count] = list(inputs)

    def read_outputs(self) -> list[float]:
        start = self.sensor_neuron_count
        return self.neuron_signals[start:start + self.output_neuron_count]

    def node_count(self) -> int:
        return self.total_neuron_count + len(self.modules)

    def link_count(self) -> int:
        count = len(self.connections)
        if self.bias_neuron_count > 0:
            count += sum(1 for b in self.bias_list if b != 0)
        count += sum(len(m.input_indexes) + len(m.output_indexes) for m in self.modules)
        return count

    def __str__(self) -> str:
        hidden = self.total_neuron_count - self.sensor_neuron_count - self.output_neuron_count
        return (
            f"FastModularNetwork, id: {self.id}, name: [{self.name}], "
            f"neurons: {self.total_neuron_count},\n\tinputs: {self.input_neuron_count},"
            f"\tbias: {self.bias_neuron_count},\toutputs:{self.output_neuron_count},"
            f"\t hidden: {hidden}"
        )


def _index_nodes(nodes: Iterable[NNode], start: int, activations: list[int], lookup: dict[int, int]) -> int:
    for node in nodes:
        activations[start] = node.activation_type
        lookup[node.id] = start
        start += 1
    return start


def _incoming_connections(
    nodes: Iterable[NNode], biases: list[float], lookup: dict[int, int]
) -> list[FastNetworkLink]:
    connections = []
    for node in nodes:
        target = lookup.get(node.id)
        if target is None:
            raise NetworkError(f"failed to lookup for target neuron with id: {node.id}")
        for link in node.incoming:
            source = lookup.get(link.in_node.id)
            if source is None:
                raise NetworkError(f"failed to lookup for source neuron with id: {link.in_node.id}")
            if link.in_node.neuron_type == NodeNeuronType.BIAS:
                biases[target] += link.connection_weight
            else:
                connections.append(FastNetworkLink(source, target, link.connection_weight))
    return connections


def fast_network_solver(
    network: Network, activators: NodeActivators = NODE_ACTIVATORS
) -> FastModularNetworkSolver:
    """Build a fast solver with the same architecture as ``network``."""
    base = network.base_nodes()
    bias_nodes = [n for n in base if n.neuron_type == NodeNeuronType.BIAS]
    input_nodes = [n for n in base if n.neuron_type == NodeNeuronType.INPUT]
    hidden_nodes = [n for n in base if n.neuron_type == NodeNeuronType.HIDDEN]
    total = len(base)

    activations: list[int] = [0] * total
    lookup: dict[int, int] = {}
    index = _index_nodes(bias_nodes, 0, activations, lookup)
    index = _index_nodes(input_nodes, index, activations, lookup)
    index = _index_nodes(network.outputs, index, activations, lookup)
    _index_nodes(hidden_nodes, index, activations, lookup)

    biases = [0.0] * total
    connections = _incoming_connections(input_nodes, biases, lookup)
    connections += _incoming_connections(hidden_nodes, biases, lookup)
    connections += _incoming_connections(network.outputs, biases, lookup)

    modules = []
    for control in network.control_nodes():
        inputs = []
        for link in control.incoming:
            if link.in_node.id not in lookup:
                raise NetworkError(
                    f"failed to lookup for input neuron with id: {link.in_node.id} "
                    f"at control neuron: {control.id}"
                )
            inputs.append(lookup[link.in_node.id])
        outputs = []
        for link in control.outgoing:
            if link.out_node.id not in lookup:
                raise NetworkError(
                    f"failed to lookup for output neuron with id: {link.out_node.id} "
                    f"at control neuron: {control.id}"
                )
            outputs.append(lookup[link.out_node.id])
        modules.append(FastControlNode(control.activation_type, inputs, outputs))

    solver = FastModularNetworkSolver(
        len(bias_nodes),
        len(input_nodes),
        len(network.outputs),
        total,
        activations,
        connections,
        biases,
        modules,
        activators,
    )
    solver.id = network.id
    solver.name = network.name
    return solver