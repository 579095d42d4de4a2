"""Printing of activation paths through a network."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import IO, Any


def print_path(writer: IO[str], paths: Iterable[Sequence[int]] | None) -> None:
    """Write each path of node IDs as ``a -> b -> c`` on its own line."""
    if paths is None:
        raise ValueError("the paths are empty")
    for path in paths:
        if path:
            writer.write(" -> ".join(str(node_id) for node_id in path) + "\n")


def print_all_activation_depth_paths(network: Any, writer: IO[str]) -> None:
    """Write every path examined when finding the maximal activation depth of ``network``."""
    if network.control_nodes():
        network.max_activation_depth_modular(writer)
        return
    for node in network.outputs:
        node.print_depth_paths(writer)