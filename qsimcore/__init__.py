"""qsimcore - a PyTorch state-vector simulator with a peephole circuit optimizer."""

__version__ = "0.1.0"

# Circuit IR
from .circuit import Gate, GateKind, QuantumCircuit, circuit_depth, gate_kind
from .core import Device, default_device, device

# Diagnostics
from .diagnostics import debug_context, is_debug_enabled, set_debug_enabled

# Errors
from .exceptions import InvalidArgumentError, NotFoundError, UnsupportedOperationError

# Gate matrices
from .gates import gate_matrix

# Export
from .io import export_circuit_to_qasm

# Logging
from .logging import configure_logging, get_logger, set_log_level

# Noise
from .noise import NoiseChannel, NoiseKind, apply_channel_to_density_matrix

# Engine
from .simulator import MAX_QUBITS, StateVectorSimulator

# Optimizer
from .transpile import OptimizationSummary, optimize, optimize_until_stable

__all__ = [
    "__version__",
    "Gate",
    "GateKind",
    "gate_kind",
    "QuantumCircuit",
    "circuit_depth",
    "Device",
    "device",
    "default_device",
    "debug_context",
    "is_debug_enabled",
    "set_debug_enabled",
    "InvalidArgumentError",
    "NotFoundError",
    "UnsupportedOperationError",
    "gate_matrix",
    "export_circuit_to_qasm",
    "configure_logging",
    "get_logger",
    "set_log_level",
    "NoiseChannel",
    "NoiseKind",
    "apply_channel_to_density_matrix",
    "MAX_QUBITS",
    "StateVectorSimulator",
    "OptimizationSummary",
    "optimize",
    "optimize_until_stable",
]
