"""Circuit IR: gate records and the circuit container."""

from .core import QuantumCircuit
from .gate import Gate, GateKind, gate_kind
from .layers import assign_layers, circuit_depth, group_into_layers

__all__ = [
    "Gate",
    "GateKind",
    "gate_kind",
    "QuantumCircuit",
    "assign_layers",
    "group_into_layers",
    "circuit_depth",
]
