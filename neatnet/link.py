"""Weighted connections between network nodes."""

from __future__ import annotations

import math
from decimal import Decimal
from typing import TYPE_CHECKING

from .trait import Trait

if TYPE_CHECKING:
    from .nnode import NNode


def _go_float(value: float) -> str:
    """Format a float the shortest way, switching to exponent form for large or tiny values."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    sign, digits, exponent = Decimal(repr(float(value))).normalize().as_tuple()
    ds = "".join(str(d) for d in digits)
    point = len(ds) + exponent - 1
    prefix = "-" if sign else ""
    if point < -4 or point >= 6:
        mantissa = ds[0] + ("." + ds[1:] if len(ds) > 1 else "")
        exp_sign = "+" if point >= 0 else "-"
        return f"{prefix}{mantissa}e{exp_sign}{abs(point):02d}"
    if point >= 0:
        if len(ds) <= point + 1:
            return prefix + ds + "0" * (point + 1 - len(ds))
        return f"{prefix}{ds[:point + 1]}.{ds[point + 1:]}"
    return f"{prefix}0.{'0' * (-point - 1)}{ds}"


def _format_values(values: list[float]) -> str:
    """Format a list of floats as a bracketed, space separated sequence."""
    return "[" + " ".join(_go_float(v) for v in values) + "]"


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


class Link:
    """A weighted connection from one node to another, optionally recurrent."""

    def __init__(
        self,
        weight: float,
        in_node: NNode,
        out_node: NNode,
        recurrent: bool = False,
        trait: Trait | None = None,
    ) -> None:
        self.connection_weight = weight
        self.in_node = in_node
        self.out_node = out_node
        self.is_recurrent = recurrent
        self.is_time_delayed = False
        self.trait = trait
        self.params: list[float] = list(trait.params) if trait is not None else []

    def copy_between(self, in_node: NNode, out_node: NNode) -> Link:
        """Return a link with this link's weight, trait and recurrence connecting the given nodes."""
        return Link(self.connection_weight, in_node, out_node, self.is_recurrent, self.trait)

    def is_equal_genetically(self, other: Link) -> bool:
        """Whether both links connect nodes with the same IDs and share the recurrent flag."""
        return (
            self.in_node.id == other.in_node.id
            and self.out_node.id == other.out_node.id
            and self.is_recurrent == other.is_recurrent
        )

    def id_string(self) -> str:
        """A synthetic ID built from the IDs of the connected nodes."""
        return f"{self.in_node.id}-{self.out_node.id}"

    def source(self) -> NNode:
        """The node this link leaves."""
        return self.in_node

    def target(self) -> NNode:
        """The node this link enters."""
        return self.out_node

    def weight(self) -> float:
        """The connection weight."""
        return self.connection_weight

    def reversed_edge(self) -> Link:
        """Reversal is not meaningful for links, so the link itself is returned."""
        return self

    def attributes(self) -> list[tuple[str, str]]:
        """Key/value attributes describing this link as a graph edge."""
        attrs = [
            ("weight", f"{self.connection_weight:f}"),
            ("recurrent", _format_bool(self.is_recurrent)),
        ]
        if self.params:
            attrs.append(("parameters", _format_values(self.params)))
        return attrs

    def __str__(self) -> str:
        return (
            f"[Link: ({self.in_node} <-> {self.out_node}), weight: {self.connection_weight:.3f}, "
            f"recurrent: {_format_bool(self.is_recurrent)}, "
            f"time delayed: {_format_bool(self.is_time_delayed)}]"
        )