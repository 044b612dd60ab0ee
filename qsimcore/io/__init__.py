"""Text export for circuits."""

from .qasm2 import export_circuit_to_qasm, gate_to_qasm

__all__ = ["export_circuit_to_qasm", "gate_to_qasm"]
