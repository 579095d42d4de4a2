"""GraphViz DOT encoding of network graphs."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import IO

from ..network import Network

_IDENTIFIER = re.compile(r"[A-Za-z_\u0080-\u00ff][A-Za-z_0-9\u0080-\u00ff]*")
_NUMERAL = re.compile(r"-?(\.[0-9]+|[0-9]+(\.[0-9]*)?)")
_KEYWORDS = {"node", "edge", "graph", "digraph", "subgraph", "strict"}


def _quote_id(value: str) -> str:
    if _IDENTIFIER.fullmatch(value) and value.lower() not in _KEYWORDS:
        return value
    if _NUMERAL.fullmatch(value):
        return value
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value
    return '"' + value.replace('"', '\\"') + '"'


def _attribute_list(attributes: Iterable[tuple[str, str]]) -> str:
    attrs = [f"{_quote_id(key)}={_quote_id(value)}" for key, value in attributes]
    if not attrs:
        return ""
    if len(attrs) == 1:
        return f" [{attrs[0]}]"
    return " [\n" + "\n".join(attrs) + "\n]"


def _encode(network: Network) -> str:
    header = "strict digraph"
    if network.name:
        header += " " + _quote_id(network.name)
    lines = [header + " {"]

    nodes = sorted(network.nodes(), key=lambda n: n.id)
    if nodes:
        lines.append("// Node definitions.")
        for node in nodes:
            lines.append(f"{node.id}{_attribute_list(node.attributes())};")

    edge_lines = []
    for node in nodes:
        for target in sorted(network.successors(node.id), key=lambda n: n.id):
            link = network.edge(node.id, target.id)
            attrs = _attribute_list(link.attributes()) if link is not None else ""
            edge_lines.append(f"{node.id} -> {target.id}{attrs};")
    if edge_lines:
        lines.append("")
        lines.append("// Edge definitions.")
        lines.extend(edge_lines)

    lines.append("}")
    return "\n".join(lines)


def write_dot(writer: IO[str], network: Network) -> None:
    """Write the network graph to ``writer`` in the GraphViz DOT language."""
    writer.write(_encode(network))