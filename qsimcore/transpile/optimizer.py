"""Peephole optimizer for QuantumCircuit.

``optimize`` runs five passes in order, rewriting the circuit in place:

1. cancellation of inverse pairs,
2. merging of consecutive rotations,
3. commutation bubbling,
4. ASAP layer reordering,
5. qubit relabeling by usage.

Passes 1 to 4 preserve the circuit unitary. Pass 5 preserves it up to the
returned relabeling. Two gates are only ever combined when no gate between
them touches any of their qubits.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from qsimcore.circuit import Gate, QuantumCircuit, group_into_layers
from qsimcore.logging import get_logger

from .rules import CANCELLATION_PAIRS, COMMUTATION_RULES, MERGING_RULES

logger = get_logger(__name__)


@dataclass(frozen=True)
class OptimizationSummary:
    """
    What an optimizer run changed.

    Attributes
    ----------
    gates_before, gates_after:
        Gate counts before and after.
    depth_before, depth_after:
        Circuit depth before and after.
    cancelled:
        Number of gate pairs removed.
    merged:
        Number of gate pairs fused into one.
    swapped:
        Number of adjacent swaps made by commutation bubbling.
    qubit_mapping:
        Relabeling applied, old index -> new index (identity if none).
    """

    gates_before: int
    gates_after: int
    depth_before: int
    depth_after: int
    cancelled: int = 0
    merged: int = 0
    swapped: int = 0
    qubit_mapping: Dict[int, int] = field(default_factory=dict)

    @property
    def gates_removed(self) -> int:
        return self.gates_before - self.gates_after


def _next_overlapping(gates: Sequence[Gate], i: int) -> Optional[int]:
    """Index of the first gate after ``i`` sharing any qubit with it."""
    qubits = set(gates[i].qubits)
    for j in range(i + 1, len(gates)):
        if qubits.intersection(gates[j].qubits):
            return j
    return None


def cancel_gates(circuit: QuantumCircuit) -> int:
    """
    Remove pairs of mutually inverse gates.

    Gate ``i`` is paired with the next gate that touches any of its qubits;
    the pair is removed when both act on the same ordered qubits and the
    second is the inverse of the first. Returns the number of pairs removed.
    """
    gates: List[Gate] = list(circuit.gates)
    cancelled = 0
    i = 0
    while i < len(gates):
        j = _next_overlapping(gates, i)
        if (
            j is not None
            and gates[i].qubits == gates[j].qubits
            and CANCELLATION_PAIRS.get(gates[i].kind) is gates[j].kind
        ):
            del gates[j]
            del gates[i]
            cancelled += 1
            i = max(i - 1, 0)
            continue
        i += 1

    if cancelled:
        circuit.replace_gates(gates)
    logger.debug("cancel_gates: removed %d pair(s), %d gates left", cancelled, len(gates))
    return cancelled


def merge_gates(circuit: QuantumCircuit) -> int:
    """
    Fuse consecutive same-axis rotations on the same qubits into one gate
    whose angle is the sum. Returns the number of merges.
    """
    gates: List[Gate] = list(circuit.gates)
    merged = 0
    i = 0
    while i < len(gates):
        j = _next_overlapping(gates, i)
        if j is not None and gates[i].qubits == gates[j].qubits:
            result = MERGING_RULES.get((gates[i].kind, gates[j].kind))
            if result is not None:
                angle = gates[i].params[0] + gates[j].params[0]
                gates[i] = Gate(result, gates[i].qubits, (angle,))
                del gates[j]
                merged += 1
                continue
        i += 1

    if merged:
        circuit.replace_gates(gates)
    logger.debug("merge_gates: %d merge(s), %d gates left", merged, len(gates))
    return merged


def commute_gates(circuit: QuantumCircuit) -> int:
    """
    One left-to-right pass swapping adjacent gates on disjoint qubits when
    the commutation table allows it. Returns the number of swaps.
    """
    gates: List[Gate] = list(circuit.gates)
    swapped = 0
    for i in range(len(gates) - 1):
        first, second = gates[i], gates[i + 1]
        if set(first.qubits).isdisjoint(second.qubits) and second.kind in COMMUTATION_RULES.get(
            first.kind, frozenset()
        ):
            gates[i], gates[i + 1] = second, first
            swapped += 1

    if swapped:
        circuit.replace_gates(gates)
    logger.debug("commute_gates: %d swap(s)", swapped)
    return swapped


def reorder_by_layers(circuit: QuantumCircuit) -> int:
    """
    Emit the gates layer by layer (ASAP), keeping program order inside a
    layer. Gate count is unchanged. Returns the resulting depth.
    """
    layers = group_into_layers(circuit.gates, circuit.n_qubits)
    circuit.replace_gates([gate for layer in layers for gate in layer])
    logger.debug("reorder_by_layers: %d layer(s)", len(layers))
    return len(layers)


def relabel_qubits(circuit: QuantumCircuit) -> Dict[int, int]:
    """
    Rename qubits so the most used qubit becomes 0, the next 1, and so on.

    Ties keep their original order. Gates and the measurement map are both
    rewritten. Returns the mapping old index -> new index.
    """
    usage = [0] * circuit.n_qubits
    for gate in circuit.gates:
        for q in gate.qubits:
            usage[q] += 1

    order = sorted(range(circuit.n_qubits), key=lambda q: -usage[q])
    mapping = {old: new for new, old in enumerate(order)}
    circuit.relabel_qubits(mapping)
    logger.debug("relabel_qubits: mapping %s", mapping)
    return mapping


def optimize(circuit: QuantumCircuit) -> OptimizationSummary:
    """
    Run all five passes once, in order, on ``circuit`` (in place).

    Parameters
    ----------
    circuit:
        Circuit to rewrite.

    Returns
    -------
    OptimizationSummary
        Counts before and after plus the qubit relabeling applied.
    """
    gates_before = circuit.num_gates()
    depth_before = circuit.depth()

    cancelled = cancel_gates(circuit)
    merged = merge_gates(circuit)
    swapped = commute_gates(circuit)
    reorder_by_layers(circuit)
    mapping = relabel_qubits(circuit)

    summary = OptimizationSummary(
        gates_before=gates_before,
        gates_after=circuit.num_gates(),
        depth_before=depth_before,
        depth_after=circuit.depth(),
        cancelled=cancelled,
        merged=merged,
        swapped=swapped,
        qubit_mapping=mapping,
    )
    logger.info(
        "optimize: gates %d -> %d, depth %d -> %d",
        summary.gates_before,
        summary.gates_after,
        summary.depth_before,
        summary.depth_after,
    )
    return summary


def optimize_until_stable(
    circuit: QuantumCircuit, max_rounds: int = 10
) -> OptimizationSummary:
    """
    Repeat passes 1 to 4 until the gate list stops changing (at most
    ``max_rounds`` rounds), then relabel qubits once.
    """
    gates_before = circuit.num_gates()
    depth_before = circuit.depth()
    cancelled = merged = swapped = 0

    for round_index in range(max_rounds):
        previous = circuit.gates
        cancelled += cancel_gates(circuit)
        merged += merge_gates(circuit)
        swapped += commute_gates(circuit)
        reorder_by_layers(circuit)
        if circuit.gates == previous:
            logger.debug("optimize_until_stable: stable after %d round(s)", round_index + 1)
            break

    mapping = relabel_qubits(circuit)
    summary = OptimizationSummary(
        gates_before=gates_before,
        gates_after=circuit.num_gates(),
        depth_before=depth_before,
        depth_after=circuit.depth(),
        cancelled=cancelled,
        merged=merged,
        swapped=swapped,
        qubit_mapping=mapping,
    )
    logger.info(
        "optimize_until_stable: gates %d -> %d, depth %d -> %d",
        summary.gates_before,
        summary.gates_after,
        summary.depth_before,
        summary.depth_after,
    )
    return summary


def optimize_gate_count(circuit: QuantumCircuit) -> int:
    """Cancellation followed by merging. Returns the number of gates removed."""
    before = circuit.num_gates()
    cancel_gates(circuit)
    merge_gates(circuit)
    return before - circuit.num_gates()


def optimize_depth(circuit: QuantumCircuit) -> int:
    """Layer reordering only. Returns the resulting depth."""
    return reorder_by_layers(circuit)


def optimize_qubit_mapping(circuit: QuantumCircuit) -> Dict[int, int]:
    """Qubit relabeling only. Returns the mapping old -> new."""
    return relabel_qubits(circuit)


__all__ = [
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
