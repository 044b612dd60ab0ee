"""State-vector simulation engine."""

from .engine import MAX_QUBITS, StateVectorSimulator

__all__ = ["StateVectorSimulator", "MAX_QUBITS"]
