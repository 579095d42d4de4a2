"""Network nodes: sensors and neurons."""

from __future__ import annotations

from typing import IO

from .common import (
    MaximalNetDepthExceededError,
    NetworkError,
    NodeActivationType,
    NodeNeuronType,
    NodeType,
    neuron_type_name,
    node_type_name,
)
from .link import Link, _format_bool, _format_values
from .trait import Trait


def _activation_name(activation_type: int) -> str:
    try:
        return NodeActivationType(activation_type).activation_name
    except ValueError:
        return ""


def _format_floats(values: list[float], spec: str) -> str:
    return "[" + " ".join(format(v, spec) for v in values) + "]"


class NNode:
    """A neuron or a sensor within a network.

    Sensors can be loaded with a value; neurons sum the signals of their incoming links.
    """

    def __init__(
        self,
        node_id: int = 0,
        neuron_type: NodeNeuronType = NodeNeuronType.HIDDEN,
        activation_type: NodeActivationType = NodeActivationType.SIGMOID_STEEPENED,
    ) -> None:
        self.id = node_id
        self.neuron_type = neuron_type
        self.activation_type = activation_type
        self.activation = 0.0
        self.activations_count = 0
        self.activation_sum = 0.0
        self.incoming: list[Link] = []
        self.outgoing: list[Link] = []
        self.trait: Trait | None = None
        self.phenotype_analogue: NNode | None = None
        self.params: list[float] = []
        # activations at t-1 and t-2, kept for time delayed and recurrent links
        self.last_activation = 0.0
        self.last_activation2 = 0.0
        self.is_active = False
        self._visited = False

    def copy_with_trait(self, trait: Trait | None) -> NNode:
        """Return an unconnected node with this node's ID and types, pointing to ``trait``."""
        node = NNode(self.id, self.neuron_type, self.activation_type)
        node.trait = trait
        return node

    def _save_activations(self) -> None:
        self.last_activation2 = self.last_activation
        self.last_activation = self.activation

    def set_activation(self, value: float) -> None:
        """Store a new activation value, remembering the previous ones."""
        self._save_activations()
        self.activation = value
        self.activations_count += 1

    def active_out(self) -> float:
        """The activation for the current step, or zero if never activated."""
        return self.activation if self.activations_count > 0 else 0.0

    def active_out_td(self) -> float:
        """The activation from the previous time step, or zero if not available."""
        return self.last_activation if self.activations_count > 1 else 0.0

    def is_sensor(self) -> bool:
        """Whether this node is an input or a bias."""
        return self.neuron_type in (NodeNeuronType.INPUT, NodeNeuronType.BIAS)

    def is_neuron(self) -> bool:
        """Whether this node is a hidden or an output neuron."""
        return self.neuron_type in (NodeNeuronType.HIDDEN, NodeNeuronType.OUTPUT)

    def sensor_load(self, load: float) -> bool:
        """Load a value into a sensor; returns False if this node is not a sensor."""
        if not self.is_sensor():
            return False
        self._save_activations()
        self.activations_count += 1
        self.activation = load
        return True

    def add_outgoing(self, out_node: NNode, weight: float) -> Link:
        """Add a one-sided outgoing link; meant for wiring control nodes."""
        link = Link(weight, self, out_node, False)
        self.outgoing.append(link)
        return link

    def add_incoming(self, in_node: NNode, weight: float) -> Link:
        """Add a one-sided incoming link; meant for wiring control nodes."""
        link = Link(weight, in_node, self, False)
        self.incoming.append(link)
        return link

    def connect_from(self, in_node: NNode, weight: float) -> Link:
        """Link ``in_node`` to this node, registering the link on both sides."""
        link = Link(weight, in_node, self, False)
        self.incoming.append(link)
        in_node.outgoing.append(link)
        return link

    def flushback(self) -> None:
        """Clear all activation state of this node."""
        self.activations_count = 0
        self.activation = 0.0
        self.last_activation = 0.0
        self.last_activation2 = 0.0
        self.is_active = False
        self._visited = False

    def flushback_check(self) -> None:
        """Raise NetworkError if any activation state survived a flush."""
        if self.activations_count > 0:
            raise NetworkError(f"NNODE: {self} has activation count {self.activations_count}")
        if self.activation > 0:
            raise NetworkError(f"NNODE: {self} has activation {self.activation:f}")
        if self.last_activation > 0:
            raise NetworkError(f"NNODE: {self} has last_activation {self.last_activation:f}")
        if self.last_activation2 > 0:
            raise NetworkError(f"NNODE: {self} has last_activation2 {self.last_activation2:f}")

    def depth(self, d: int, max_depth_cap: int) -> int:
        """Return the greatest depth reachable backwards from this node, starting at ``d``.

        With ``max_depth_cap`` above zero, MaximalNetDepthExceededError is raised once the
        depth passes the cap; its ``depth`` attribute holds the cap.
        """
        if max_depth_cap > 0 and d > max_depth_cap:
            raise MaximalNetDepthExceededError(depth=max_depth_cap)
        if self.is_sensor():
            return d

        self._visited = True
        try:
            deepest = d
            for link in self.incoming:
                parent = link.in_node
                if parent._visited:
                    continue  # loop detected
                deepest = max(deepest, parent.depth(d + 1, max_depth_cap))
            return deepest
        finally:
            self._visited = False

    def print_depth_paths(self, writer: IO[str]) -> None:
        """Write every path from a sensor to this node, one per line."""
        self._print_depth_paths([], writer)

    def _print_depth_paths(self, path: list[int], writer: IO[str]) -> None:
        self._visited = True
        path.append(self.id)
        try:
            if self.is_sensor():
                writer.write(" -> ".join(str(i) for i in reversed(path)) + "\n")
            else:
                for link in self.incoming:
                    if not link.in_node._visited:
                        link.in_node._print_depth_paths(path, writer)
        finally:
            path.pop()
            self._visited = False

    def node_type(self) -> NodeType:
        """Whether this node is a sensor or a neuron."""
        return NodeType.SENSOR if self.is_sensor() else NodeType.NEURON

    def attributes(self) -> list[tuple[str, str]]:
        """Key/value attributes describing this node as a graph vertex."""
        attrs = [("neuron_type", neuron_type_name(self.neuron_type))]
        activation = _activation_name(self.activation_type)
        if activation:
            attrs.append(("activation_type", activation))
        if self.params:
            attrs.append(("parameters", _format_values(self.params)))
        return attrs

    def print_debug(self) -> str:
        """Return a multi-line dump of every field of this node."""
        trait = str(self.trait) if self.trait is not None else "<nil>"
        analogue = str(self.phenotype_analogue) if self.phenotype_analogue is not None else "<nil>"
        lines = [
            "NNode fields",
            f"\tId: {self.id}",
            f"\tIsActive: {_format_bool(self.is_active)}",
            f"\tActivation: {self.activation:f}",
            f"\tActivation Type: {_activation_name(self.activation_type)}",
            f"\tNeuronType: {int(self.neuron_type)}",
            f"\tActivationsCount: {self.activations_count}",
            f"\tActivationSum: {self.activation_sum:f}",
            "\tIncoming: [" + " ".join(str(link) for link in self.incoming) + "]",
            "\tOutgoing: [" + " ".join(str(link) for link in self.outgoing) + "]",
            f"\tTrait: {trait}",
            f"\tPhenotypeAnalogue: {analogue}",
            f"\tParams: {_format_floats(self.params, 'f')}",
            f"\tlastActivation: {self.last_activation:f}",
            f"\tlastActivation2: {self.last_activation2:f}",
        ]
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        active = "active" if self.is_active else "inactive"
        return (
            f"({node_type_name(self.node_type())} id:{self.id:03d}, "
            f"{neuron_type_name(self.neuron_type)}, {_activation_name(self.activation_type)},"
            f"\t{active} -> step: {self.activations_count} = {self.activation:.3f} "
            f"{_format_floats(self.params, '.3f')})"
        )


def new_sensor_node(node_id: int, bias: bool) -> NNode:
    """Create an input sensor, or a bias sensor when ``bias`` is true."""
    neuron_type = NodeNeuronType.BIAS if bias else NodeNeuronType.INPUT
    return NNode(node_id, neuron_type, NodeActivationType.NULL)