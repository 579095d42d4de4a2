"""Saving and loading fast network solvers as JSON models."""

from __future__ import annotations

import json
from typing import IO, Any

from .common import NODE_ACTIVATORS, NodeActivationType, NodeActivators
from .fast_network import FastControlNode, FastModularNetworkSolver, FastNetworkLink


def _activation_name(activation_type: int) -> str:
    try:
        return NodeActivationType(activation_type).activation_name
    except ValueError:
        raise ValueError(f"unsupported activation type: {activation_type}") from None


def _solver_to_dict(solver: FastModularNetworkSolver) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": solver.id,
        "name": solver.name,
        "input_neuron_count": solver.input_neuron_count,
        "sensor_neuron_count": solver.sensor_neuron_count,
        "output_neuron_count": solver.output_neuron_count,
        "bias_neuron_count": solver.bias_neuron_count,
        "total_neuron_count": solver.total_neuron_count,
        "activation_functions": [_activation_name(t) for t in solver.activation_functions],
        "bias_list": list(solver.bias_list),
        "connections": [
            {
                "source_index": conn.source_index,
                "target_index": conn.target_index,
                "weight": conn.weight,
                "signal": conn.signal,
            }
            for conn in solver.connections
        ],
    }
    if solver.modules:
        data["modules"] = [
            {
                "activation_type": _activation_name(module.activation_type),
                "input_indexes": list(module.input_indexes),
                "output_indexes": list(module.output_indexes),
            }
            for module in solver.modules
        ]
    return data


def write_model(solver: FastModularNetworkSolver, writer: IO[str]) -> None:
    """Write ``solver`` as a JSON model to ``writer``."""
    data = _solver_to_dict(solver)
    writer.write(json.dumps(data, separators=(",", ":")) + "\n")


def read_model(
    reader: IO[str], activators: NodeActivators = NODE_ACTIVATORS
) -> FastModularNetworkSolver:
    """Load a fast network solver from the JSON model read from ``reader``."""
    data = json.load(reader)
    if not isinstance(data, dict):
        raise ValueError("the model must be a JSON object")

    activations = [
        NodeActivationType.from_activation_name(name)
        for name in data.get("activation_functions") or []
    ]
    connections = [
        FastNetworkLink(
            source_index=int(conn.get("source_index", 0)),
            target_index=int(conn.get("target_index", 0)),
            weight=float(conn.get("weight", 0.0)),
            signal=float(conn.get("signal", 0.0)),
        )
        for conn in data.get("connections") or []
    ]
    modules = [
        FastControlNode(
            activation_type=NodeActivationType.from_activation_name(module.get("activation_type", "")),
            input_indexes=[int(i) for i in module.get("input_indexes") or []],
            output_indexes=[int(i) for i in module.get("output_indexes") or []],
        )
        for module in data.get("modules") or []
    ]
    solver = FastModularNetworkSolver(
        int(data.get("bias_neuron_count", 0)),
        int(data.get("input_neuron_count", 0)),
        int(data.get("output_neuron_count", 0)),
        int(data.get("total_neuron_count", 0)),
        activations,
        connections,
        [float(b) for b in data.get("bias_list") or []],
        modules,
        activators,
    )
    solver.name = data.get("name", "")
    solver.id = int(data.get("id", 0))
    return solver