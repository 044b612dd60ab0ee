"""Circuit optimization passes."""

from .optimizer import (
    OptimizationSummary,
    cancel_gates,
    commute_gates,
    merge_gates,
    optimize,
    optimize_depth,
    optimize_gate_count,
    optimize_qubit_mapping,
    optimize_until_stable,
    relabel_qubits,
    reorder_by_layers,
)
from .rules import CANCELLATION_PAIRS, COMMUTATION_RULES, MERGING_RULES

__all__ = [
    "CANCELLATION_PAIRS",
    "MERGING_RULES",
    "COMMUTATION_RULES",
    "OptimizationSummary",
    "cancel_gates",
    "merge_gates",
    "commute_gates",
    "reorder_by_layers",
    "relabel_qubits",
    "optimize",
    "optimize_until_stable",
    "optimize_gate_count",
    "optimize_depth",
    "optimize_qubit_mapping",
]
