"""Neural network phenotype: a graph of nodes and links that can be activated."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import IO

import networkx as nx

from .common import (
    NODE_ACTIVATORS,
    ExceededMaxActivationAttemptsError,
    NetworkError,
    NodeActivators,
    NodeNeuronType,
    Solver,
    ZeroActivationStepsError,
    activate_module,
    activate_node,
)
from .link import Link
from .nnode import NNode
from .paths import print_path

_PATHS_SEPARATOR = "---------------"


class Network(Solver):
    """All nodes of an organism's phenotype, defining the topology of a neural network.

    ``control_nodes`` are MIMO nodes relaying signals between network modules; a network
    built with them is a modular network.
    """

    def __init__(
        self,
        inputs: Iterable[NNode],
        outputs: Iterable[NNode],
        all_nodes: Iterable[NNode],
        net_id: int = 0,
        control_nodes: Iterable[NNode] | None = None,
        name: str = "",
        activators: NodeActivators = NODE_ACTIVATORS,
    ) -> None:
        self.id = net_id
        self.name = name
        self.inputs: list[NNode] = list(inputs)
        self.outputs: list[NNode] = list(outputs)
        self._all_nodes: list[NNode] = list(all_nodes)
        self._control_nodes: list[NNode] = list(control_nodes or [])
        self._all_nodes_mimo: list[NNode] = self._all_nodes + self._control_nodes
        self._activators = activators

    # ------------------------------------------------------------------ node lists

    def all_nodes(self) -> list[NNode]:
        """All nodes including the MIMO control nodes."""
        return self._all_nodes_mimo

    def control_nodes(self) -> list[NNode]:
        """The control nodes of this network."""
        return self._control_nodes

    def base_nodes(self) -> list[NNode]:
        """All nodes excluding the MIMO control nodes."""
        return self._all_nodes

    def is_control_node(self, nid: int) -> bool:
        """Whether the node with the given ID is a control node."""
        return any(cn.id == nid for cn in self._control_nodes)

    # ------------------------------------------------------------------ activation

    def flush(self) -> bool:
        """Clear activations of all nodes; raises NetworkError if some state survives."""
        for node in self._all_nodes:
            node.flushback()
            node.flushback_check()
        return True

    def print_activation(self) -> str:
        """Describe the values of the network outputs."""
        body = "".join(f"[Output #{i}: {node}] " for i, node in enumerate(self.outputs))
        return f"Network {self.name} with id {self.id} outputs: ({body})"

    def print_input(self) -> str:
        """Describe the values of the network inputs."""
        body = "".join(f"[Input #{i}: {node}] " for i, node in enumerate(self.inputs))
        return f"Network {self.name} with id {self.id} inputs: ({body})"

    def output_is_off(self) -> bool:
        """Whether at least one output has never been activated."""
        return any(node.activations_count == 0 for node in self.outputs)

    def activate_steps(self, max_steps: int) -> bool:
        """Activate the network until all outputs are active, trying at most ``max_steps`` times."""
        if max_steps == 0:
            raise ZeroActivationStepsError()
        one_time = False
        abort_count = 0
        while self.output_is_off() or not one_time:
            if abort_count >= max_steps:
                raise ExceededMaxActivationAttemptsError()

            for node in self._all_nodes:
                if not node.is_neuron():
                    continue
                node.activation_sum = 0.0
                for link in node.incoming:
                    source = link.in_node
                    if not link.is_time_delayed:
                        amount = link.connection_weight * source.active_out()
                        if source.is_active or source.is_sensor():
                            node.is_active = True
                    else:
                        amount = link.connection_weight * source.active_out_td()
                    node.activation_sum += amount

            for node in self._all_nodes:
                if node.is_neuron() and node.is_active:
                    activate_node(node, self._activators)

            for control in self._control_nodes:
                control.is_active = False
                activate_module(control, self._activators)
                control.is_active = True

            one_time = True
            abort_count += 1
        return True

    def activate(self) -> bool:
        """Activate the network so that all outputs become active."""
        return self.activate_steps(20)

    def forward_steps(self, steps: int) -> bool:
        if steps == 0:
            raise ZeroActivationStepsError()
        result = False
        for _ in range(steps):
            result = self.activate_steps(steps)
        return result

    def recursive_steps(self) -> bool:
        return self.forward_steps(self.max_activation_depth_with_cap(0))

    def relax(self, max_steps: int, max_allowed_signal_delta: float) -> bool:
        raise NetworkError("relax is not supported by this network")

    def load_sensors(self, sensors: Sequence[float]) -> None:
        """Load sensor values; without a bias value in ``sensors`` bias nodes get 1.0."""
        values = iter(sensors)
        if len(sensors) == len(self.inputs):
            for node in self.inputs:
                if node.is_sensor():
                    node.sensor_load(next(values))
        else:
            for node in self.inputs:
                if node.neuron_type == NodeNeuronType.INPUT:
                    node.sensor_load(next(values))
                else:
                    node.sensor_load(1.0)

    def read_outputs(self) -> list[float]:
        return [node.activation for node in self.outputs]

    def node_count(self) -> int:
        return len(self._all_nodes) + len(self._control_nodes)

    def link_count(self) -> int:
        count = sum(len(node.incoming) for node in self._all_nodes)
        count += sum(len(cn.incoming) + len(cn.outgoing) for cn in self._control_nodes)
        return count

    def complexity(self) -> int:
        """The sum of node count and link count."""
        return self.node_count() + self.link_count()

    def is_recurrent(self, in_node: NNode, out_node: NNode, thresh: int) -> tuple[bool, int]:
        """Check whether a potential link from ``in_node`` to ``out_node`` must be recurrent.

        Returns the verdict and the number of nodes visited; the search gives up (not
        recurrent) once more than ``thresh`` nodes were visited.
        """
        visited = 0

        def search(node: NNode) -> bool:
            nonlocal visited
            visited += 1
            if visited > thresh:
                return False
            if node is out_node:
                return True
            return any(
                not link.is_recurrent and search(link.in_node) for link in node.incoming
            )

        recurrent = search(in_node)
        return recurrent, visited

    # ------------------------------------------------------------------ depth

    def max_activation_depth(self) -> int:
        """The maximal number of layers activated between inputs and outputs."""
        if not self._control_nodes:
            return self.max_activation_depth_with_cap(0)
        return self.max_activation_depth_modular(None)

    def max_activation_depth_with_cap(self, max_depth_cap: int) -> int:
        """The maximal activation depth, raising MaximalNetDepthExceededError past a positive cap.

        Not supported for modular networks.
        """
        if self._control_nodes:
            raise NetworkError("unsupported for modular networks")
        if len(self._all_nodes) == len(self.inputs) + len(self.outputs):
            return 1
        return max((node.depth(0, max_depth_cap) for node in self.outputs), default=0)

    def max_activation_depth_modular(self, writer: IO[str] | None) -> int:
        """The maximal activation depth found through shortest paths; writes the paths if given a writer."""
        graph = self._to_digraph()
        max_depth = 0
        for source in self.inputs:
            for target in self.outputs:
                paths = self._shortest_paths(graph, source.id, target.id)
                if paths is None:
                    continue
                if writer is not None:
                    print_path(writer, paths)
                for path in paths:
                    max_depth = max(max_depth, len(path) - 1)
            if writer is not None:
                writer.write(_PATHS_SEPARATOR + "\n")
        return max_depth

    def _to_digraph(self) -> nx.DiGraph:
        graph = nx.DiGraph()
        graph.add_nodes_from(node.id for node in self._all_nodes_mimo)
        for node in self._all_nodes_mimo:
            for successor in self.successors(node.id):
                weight = self.weight(node.id, successor.id)
                if weight is not None:
                    graph.add_edge(node.id, successor.id, weight=weight)
        return graph

    @staticmethod
    def _shortest_paths(graph: nx.DiGraph, source: int, target: int) -> list[list[int]] | None:
        has_negative = any(w < 0 for _, _, w in graph.edges(data="weight"))
        method = "bellman-ford" if has_negative else "dijkstra"
        try:
            try:
                return list(
                    nx.all_shortest_paths(graph, source, target, weight="weight", method=method)
                )
            except nx.NetworkXUnbounded:
                return list(nx.all_shortest_paths(graph, source, target))
        except (nx.NetworkXNoPath, nx.NodeNotFound):
            return None

    # ------------------------------------------------------------------ graph view

    def node(self, node_id: int) -> NNode | None:
        """The node with the given ID, or None."""
        return next((n for n in self._all_nodes_mimo if n.id == node_id), None)

    def nodes(self) -> list[NNode]:
        """All nodes of the graph, control nodes included."""
        return list(self._all_nodes_mimo)

    def successors(self, node_id: int) -> list[NNode]:
        """Nodes reachable directly from the node with the given ID."""
        node = self.node(node_id)
        if node is None:
            return []
        result = [link.out_node for link in node.outgoing]
        # control nodes are not registered among the outgoing links of ordinary nodes
        result.extend(
            cn
            for cn in self._control_nodes
            if any(link.in_node.id == node_id for link in cn.incoming)
        )
        return result

    def predecessors(self, node_id: int) -> list[NNode]:
        """Nodes that reach directly the node with the given ID."""
        node = self.node(node_id)
        if node is None:
            return []
        result = [link.in_node for link in node.incoming]
        result.extend(
            cn
            for cn in self._control_nodes
            if any(link.out_node.id == node_id for link in cn.outgoing)
        )
        return result

    def has_edge_between(self, xid: int, yid: int) -> bool:
        """Whether an edge joins the two nodes in either direction."""
        return self._edge_between(xid, yid, directed=False) is not None

    def edge(self, uid: int, vid: int) -> Link | None:
        """The edge from ``uid`` to ``vid``, or None."""
        return self._edge_between(uid, vid, directed=True)

    def weighted_edge(self, uid: int, vid: int) -> Link | None:
        """The weighted edge from ``uid`` to ``vid``, or None."""
        return self._edge_between(uid, vid, directed=True)

    def weight(self, xid: int, yid: int) -> float | None:
        """The weight of the edge from ``xid`` to ``yid``, or None if there is no edge."""
        edge = self._edge_between(xid, yid, directed=True)
        return None if edge is None else edge.weight()

    def has_edge_from_to(self, uid: int, vid: int) -> bool:
        """Whether an edge leads from ``uid`` to ``vid``."""
        return self._edge_between(uid, vid, directed=True) is not None

    def _edge_between(self, uid: int, vid: int, directed: bool) -> Link | None:
        u_node: NNode | None = None
        v_node: NNode | None = None
        for node in self._all_nodes:
            if node.id == uid:
                u_node = node
            if node.id == vid:
                v_node = node
            if u_node is not None and v_node is not None:
                break

        if u_node is None and v_node is None:
            return None

        if u_node is None or v_node is None:
            # a control node may sit on the missing side; it is not double linked
            control_id, other_id = (uid, vid) if u_node is None else (vid, uid)
            for control in self._control_nodes:
                if control.id != control_id:
                    continue
                for link in control.incoming:
                    if link.in_node.id == other_id:
                        return link if not directed or u_node is not None else None
                for link in control.outgoing:
                    if link.out_node.id == other_id:
                        return link if not directed or v_node is not None else None
            return None

        if not directed:
            for link in u_node.incoming:
                if link.in_node.id == vid:
                    return link
        else:
            for link in v_node.incoming:
                if link.in_node.id == uid:
                    return link
        for link in u_node.outgoing:
            if link.out_node.id == vid:
                return link
        return None