"""Cytoscape JSON encoding of network graphs."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import IO, Any

from ..common import NodeActivationType, NodeNeuronType, neuron_type_name, node_type_name
from ..link import Link
from ..network import Network
from ..nnode import NNode


@dataclass
class ElementStyle:
    """The style of one kind of graph element, picked by ``selector`` ("node" or "edge")."""

    selector: str
    style: dict[str, Any] = field(default_factory=dict)


@dataclass
class CytoscapeStyleOptions:
    """Styles and layout appended to the graph definition."""

    style: list[ElementStyle] = field(default_factory=list)
    layout: Any = None


_COLOR_CONTROL = "#EA1E53"
_COLORS = {
    NodeNeuronType.INPUT: "#339FDC",
    NodeNeuronType.OUTPUT: "#E7298A",
    NodeNeuronType.HIDDEN: "#009999",
    NodeNeuronType.BIAS: "#FFCC33",
}
_COLOR_DEFAULT = "#555"

_SHAPE_CONTROL = "octagon"
_SHAPES = {
    NodeNeuronType.INPUT: "diamond",
    NodeNeuronType.OUTPUT: "round-rectangle",
    NodeNeuronType.HIDDEN: "hexagon",
    NodeNeuronType.BIAS: "pentagon",
}
_SHAPE_DEFAULT = "ellipse"

_BORDER_COLOR_CONTROL = "#AAAAAA"
_BORDER_COLOR_OTHER = "#CCCCCC"


def _default_node_style() -> ElementStyle:
    return ElementStyle(
        selector="node",
        style={
            "shape": "data(shape)",
            "background-color": "data(background-color)",
            "border-color": "data(border-color)",
            "border-width": 3.0,
            "label": "data(id)",
        },
    )


def _default_edge_style() -> ElementStyle:
    line_color = "#CCCCCC"
    return ElementStyle(
        selector="edge",
        style={
            "width": 5.0,
            "curve-style": "bezier",
            "line-color": line_color,
            "target-arrow-shape": "triangle-backcurve",
            "target-arrow-color": line_color,
        },
    )


def _activation_name(activation_type: int) -> str:
    try:
        return NodeActivationType(activation_type).activation_name
    except ValueError:
        return "unknown"


def _node_element(node: NNode, control: bool) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": str(node.id),
        "activation_value": node.activation,
        "activation_function": _activation_name(node.activation_type),
        "neuron_type": neuron_type_name(node.neuron_type),
        "node_type": node_type_name(node.node_type()),
        "in_connections_count": len(node.incoming),
        "out_connections_count": len(node.outgoing),
        "control_node": control,
        "background-color": _COLOR_CONTROL if control else _COLORS.get(node.neuron_type, _COLOR_DEFAULT),
        "border-color": _BORDER_COLOR_CONTROL if control else _BORDER_COLOR_OTHER,
        "shape": _SHAPE_CONTROL if control else _SHAPES.get(node.neuron_type, _SHAPE_DEFAULT),
    }
    if node.trait is not None:
        data["trait"] = str(node.trait)
    return {"data": data, "selectable": True}


def _edge_element(link: Link) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": link.id_string(),
        "source": str(link.in_node.id),
        "target": str(link.out_node.id),
        "weight": link.connection_weight,
        "recurrent": link.is_recurrent,
        "time_delayed": link.is_time_delayed,
    }
    if link.trait is not None:
        data["trait"] = str(link.trait)
    return {"data": data, "selectable": True}


def write_cytoscape_json(writer: IO[str], network: Network) -> None:
    """Write the network graph as Cytoscape JSON using the default style and layout."""
    style = CytoscapeStyleOptions(
        style=[_default_node_style(), _default_edge_style()],
        layout={"name": "circle"},
    )
    write_cytoscape_json_with_style(writer, network, style)


def write_cytoscape_json_with_style(
    writer: IO[str], network: Network, style: CytoscapeStyleOptions | None
) -> None:
    """Write the network graph as Cytoscape JSON with the given style options, if any."""
    nodes: list[dict[str, Any]] = []
    edges: list[dict[str, Any]] = []

    for node in network.base_nodes():
        nodes.append(_node_element(node, False))
        edges.extend(_edge_element(link) for link in node.incoming)

    for node in network.control_nodes():
        nodes.append(_node_element(node, True))
        edges.extend(_edge_element(link) for link in node.incoming)
        edges.extend(_edge_element(link) for link in node.outgoing)

    graph: dict[str, Any] = {"elements": {"nodes": nodes, "edges": edges}}
    if style is not None:
        if style.layout is not None:
            graph["layout"] = style.layout
        if style.style:
            graph["style"] = [{"selector": s.selector, "style": s.style} for s in style.style]

    writer.write(json.dumps(graph, separators=(",", ":")))