"""Node kinds, activation functions, network errors and the solver interface."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from enum import IntEnum
from typing import Any


class NetworkError(Exception):
    """Base error for network operations."""

    default_message = "network error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class ExceededMaxActivationAttemptsError(NetworkError):
    """The maximal number of network activation attempts was exceeded."""

    default_message = "maximal network activation attempts exceeded"


class UnsupportedSensorsArraySizeError(NetworkError):
    """The size of the sensor data does not fit the network solver."""

    default_message = "the sensors array size is unsupported by network solver"


class MaximalNetDepthExceededError(NetworkError):
    """The depth of the network exceeds the allowed maximum.

    ``depth`` holds the capped depth value reached when the search stopped.
    """

    default_message = "depth of the network exceeds maximum allowed, fallback to maximal"

    def __init__(self, message: str | None = None, depth: int | None = None) -> None:
        super().__init__(message)
        self.depth = depth


class ZeroActivationStepsError(NetworkError):
    """Zero activation steps were requested."""

    default_message = "zero activation steps requested"


class NodeType(IntEnum):
    """Whether a node is a neuron or a sensor."""

    NEURON = 0
    SENSOR = 1


class NodeNeuronType(IntEnum):
    """The layer a node belongs to."""

    HIDDEN = 0
    INPUT = 1
    OUTPUT = 2
    BIAS = 3


_NODE_TYPE_NAMES = {NodeType.NEURON: "NEURON", NodeType.SENSOR: "SENSOR"}

_NEURON_TYPE_NAMES = {
    NodeNeuronType.HIDDEN: "HIDN",
    NodeNeuronType.INPUT: "INPT",
    NodeNeuronType.OUTPUT: "OUTP",
    NodeNeuronType.BIAS: "BIAS",
}
_NEURON_TYPES_BY_NAME = {name: kind for kind, name in _NEURON_TYPE_NAMES.items()}


def node_type_name(node_type: int) -> str:
    """Return the human-readable name of a node type."""
    return _NODE_TYPE_NAMES.get(node_type, "UNKNOWN NODE TYPE")


def neuron_type_name(neuron_type: int) -> str:
    """Return the short name of a neuron type."""
    return _NEURON_TYPE_NAMES.get(neuron_type, "UNKNOWN NEURON TYPE")


def neuron_type_by_name(name: str) -> NodeNeuronType:
    """Return the neuron type with the given short name."""
    try:
        return _NEURON_TYPES_BY_NAME[name]
    except KeyError:
        raise ValueError("Unknown neuron type name: " + name) from None


class NodeActivationType(IntEnum):
    """The activation functions a node or a module can use."""

    SIGMOID_PLAIN = 0
    SIGMOID_REDUCED = 1
    SIGMOID_BIPOLAR = 2
    SIGMOID_STEEPENED = 3
    SIGMOID_APPROXIMATION = 4
    SIGMOID_STEEPENED_APPROXIMATION = 5
    SIGMOID_INVERSE_ABSOLUTE = 6
    SIGMOID_LEFT_SHIFTED = 7
    SIGMOID_LEFT_SHIFTED_STEEPENED = 8
    SIGMOID_RIGHT_SHIFTED_STEEPENED = 9
    TANH = 10
    GAUSSIAN_BIPOLAR = 11
    LINEAR = 12
    LINEAR_ABS = 13
    LINEAR_CLIPPED = 14
    NULL = 15
    SIGN = 16
    SINE = 17
    STEP = 18
    MULTIPLY_MODULE = 19
    MAX_MODULE = 20
    MIN_MODULE = 21

    @property
    def activation_name(self) -> str:
        """The name used for this activation in serialized models."""
        return _ACTIVATION_NAMES[self]

    @classmethod
    def from_activation_name(cls, name: str) -> NodeActivationType:
        """Return the activation type with the given serialized name."""
        try:
            return _ACTIVATIONS_BY_NAME[name]
        except KeyError:
            raise ValueError(f"unsupported activation type name: {name}") from None


_ACTIVATION_NAMES = {
    NodeActivationType.SIGMOID_PLAIN: "SigmoidPlainActivation",
    NodeActivationType.SIGMOID_REDUCED: "SigmoidReducedActivation",
    NodeActivationType.SIGMOID_BIPOLAR: "SigmoidBipolarActivation",
    NodeActivationType.SIGMOID_STEEPENED: "SigmoidSteepenedActivation",
    NodeActivationType.SIGMOID_APPROXIMATION: "SigmoidApproximationActivation",
    NodeActivationType.SIGMOID_STEEPENED_APPROXIMATION: "SigmoidSteepenedApproximationActivation",
    NodeActivationType.SIGMOID_INVERSE_ABSOLUTE: "SigmoidInverseAbsoluteActivation",
    NodeActivationType.SIGMOID_LEFT_SHIFTED: "SigmoidLeftShiftedActivation",
    NodeActivationType.SIGMOID_LEFT_SHIFTED_STEEPENED: "SigmoidLeftShiftedSteepenedActivation",
    NodeActivationType.SIGMOID_RIGHT_SHIFTED_STEEPENED: "SigmoidRightShiftedSteepenedActivation",
    NodeActivationType.TANH: "TanhActivation",
    NodeActivationType.GAUSSIAN_BIPOLAR: "GaussianBipolarActivation",
    NodeActivationType.LINEAR: "LinearActivation",
    NodeActivationType.LINEAR_ABS: "LinearAbsActivation",
    NodeActivationType.LINEAR_CLIPPED: "LinearClippedActivation",
    NodeActivationType.NULL: "NullActivation",
    NodeActivationType.SIGN: "SignActivation",
    NodeActivationType.SINE: "SineActivation",
    NodeActivationType.STEP: "StepActivation",
    NodeActivationType.MULTIPLY_MODULE: "MultiplyModuleActivation",
    NodeActivationType.MAX_MODULE: "MaxModuleActivation",
    NodeActivationType.MIN_MODULE: "MinModuleActivation",
}
_ACTIVATIONS_BY_NAME = {name: kind for kind, name in _ACTIVATION_NAMES.items()}


def _logistic(x: float) -> float:
    try:
        return 1.0 / (1.0 + math.exp(-x))
    except OverflowError:
        return 0.0


def _sigmoid_approximation(x: float) -> float:
    if x < -4.0:
        return 0.0
    if x < 0.0:
        return (x + 4.0) * (x + 4.0) / 32.0
    if x < 4.0:
        return 1.0 - (x - 4.0) * (x - 4.0) / 32.0
    return 1.0


def _sigmoid_steepened_approximation(x: float) -> float:
    if x < -1.0:
        return 0.0
    if x < 0.0:
        return (x + 1.0) * (x + 1.0) * 0.5
    if x < 1.0:
        return 1.0 - (x - 1.0) * (x - 1.0) * 0.5
    return 1.0


def _sign(x: float) -> float:
    if x > 0:
        return 1.0
    if x < 0:
        return -1.0
    return 0.0


_STEEP = 4.924273
_SHIFT = 2.4621365

_NEURON_FUNCTIONS: dict[NodeActivationType, Callable[[float], float]] = {
    NodeActivationType.SIGMOID_PLAIN: _logistic,
    NodeActivationType.SIGMOID_REDUCED: lambda x: _logistic(0.5 * x),
    NodeActivationType.SIGMOID_BIPOLAR: lambda x: 2.0 * _logistic(_STEEP * x) - 1.0,
    NodeActivationType.SIGMOID_STEEPENED: lambda x: _logistic(_STEEP * x),
    NodeActivationType.SIGMOID_APPROXIMATION: _sigmoid_approximation,
    NodeActivationType.SIGMOID_STEEPENED_APPROXIMATION: _sigmoid_steepened_approximation,
    NodeActivationType.SIGMOID_INVERSE_ABSOLUTE: lambda x: 0.5 + (x / (1.0 + abs(x))) * 0.5,
    NodeActivationType.SIGMOID_LEFT_SHIFTED: lambda x: _logistic(x + _SHIFT),
    NodeActivationType.SIGMOID_LEFT_SHIFTED_STEEPENED: lambda x: _logistic(_STEEP * x + _SHIFT),
    NodeActivationType.SIGMOID_RIGHT_SHIFTED_STEEPENED: lambda x: _logistic(_STEEP * x - _SHIFT),
    NodeActivationType.TANH: lambda x: math.tanh(0.9 * x),
    NodeActivationType.GAUSSIAN_BIPOLAR: lambda x: 2.0 * math.exp(-((x * 2.5) ** 2)) - 1.0,
    NodeActivationType.LINEAR: lambda x: x,
    NodeActivationType.LINEAR_ABS: abs,
    NodeActivationType.LINEAR_CLIPPED: lambda x: min(1.0, max(-1.0, x)),
    NodeActivationType.NULL: lambda x: 0.0,
    NodeActivationType.SIGN: _sign,
    NodeActivationType.SINE: lambda x: math.sin(2.0 * x),
    NodeActivationType.STEP: lambda x: 0.0 if x <= 0.0 else 1.0,
}

_MODULE_FUNCTIONS: dict[NodeActivationType, Callable[[Sequence[float]], list[float]]] = {
    NodeActivationType.MULTIPLY_MODULE: lambda xs: [math.prod(xs)],
    NodeActivationType.MAX_MODULE: lambda xs: [max(xs)],
    NodeActivationType.MIN_MODULE: lambda xs: [min(xs)],
}


class NodeActivators:
    """Applies single-valued neuron activations and multi-valued module activations."""

    def activate_by_type(
        self, value: float, params: Sequence[float] | None, activation_type: int
    ) -> float:
        """Apply the neuron activation function of the given type to ``value``."""
        function = _NEURON_FUNCTIONS.get(activation_type)
        if function is None:
            raise ValueError(f"unknown neuron activation type: {int(activation_type)}")
        return float(function(value))

    def activate_module_by_type(
        self, inputs: Sequence[float], params: Sequence[float] | None, activation_type: int
    ) -> list[float]:
        """Apply the module activation function of the given type to ``inputs``."""
        function = _MODULE_FUNCTIONS.get(activation_type)
        if function is None:
            raise ValueError(f"unknown module activation type: {int(activation_type)}")
        return function(list(inputs))


NODE_ACTIVATORS = NodeActivators()
"""The shared default activators."""


def activate_node(node: Any, activators: NodeActivators) -> None:
    """Run the node's activation sum through its activation function and store the result."""
    out = activators.activate_by_type(node.activation_sum, node.params, node.activation_type)
    node.set_activation(out)


def activate_module(module: Any, activators: NodeActivators) -> None:
    """Activate a control module, setting the activations of its output nodes."""
    inputs = [link.in_node.active_out() for link in module.incoming]
    outputs = activators.activate_module_by_type(inputs, module.params, module.activation_type)
    if len(outputs) != len(module.outgoing):
        raise NetworkError(
            f"number of output parameters [{len(outputs)}] returned by module activator "
            f"doesn't match the number of output neurons of the module [{len(module.outgoing)}]"
        )
    for link, out in zip(module.outgoing, outputs):
        link.out_node.set_activation(out)
        link.out_node.is_active = True


class Solver(ABC):
    """Propagates activation waves through a network graph."""

    @abstractmethod
    def forward_steps(self, steps: int) -> bool:
        """Propagate activation forward the given number of steps."""

    @abstractmethod
    def recursive_steps(self) -> bool:
        """Propagate activation by recursion from the output nodes."""

    @abstractmethod
    def relax(self, max_steps: int, max_allowed_signal_delta: float) -> bool:
        """Propagate activation until the network settles or ``max_steps`` is reached."""

    @abstractmethod
    def flush(self) -> bool:
        """Remove all current activations."""

    @abstractmethod
    def load_sensors(self, inputs: Sequence[float]) -> None:
        """Set the values of the input nodes."""

    @abstractmethod
    def read_outputs(self) -> list[float]:
        """Return the values of the output nodes."""

    @abstractmethod
    def node_count(self) -> int:
        """Return the total number of neural units."""

    @abstractmethod
    def link_count(self) -> int:
        """Return the total number of links between units."""