"""ASAP layering of a gate sequence."""

from __future__ import annotations

from typing import List, Sequence

from .gate import Gate


def assign_layers(gates: Sequence[Gate], n_qubits: int) -> List[int]:
    """
    Assign every gate the earliest layer allowed by its qubit predecessors.

    A gate's layer is one more than the latest layer already occupied on any
    of its qubits (layers are numbered from 0). This is standard list
    scheduling: every gate lands strictly after all earlier gates that share
    a qubit with it, so dependencies hold transitively across any number of
    layers, and no two gates in one layer share a qubit.
    """
    frontier = [-1] * n_qubits
    layers: List[int] = []
    for gate in gates:
        layer = 1 + max(frontier[q] for q in gate.qubits)
        for q in gate.qubits:
            frontier[q] = layer
        layers.append(layer)
    return layers


def group_into_layers(gates: Sequence[Gate], n_qubits: int) -> List[List[Gate]]:
    """Return the gates bucketed by layer, keeping program order inside a layer."""
    layers = assign_layers(gates, n_qubits)
    buckets: List[List[Gate]] = [[] for _ in range(max(layers, default=-1) + 1)]
    for gate, layer in zip(gates, layers):
        buckets[layer].append(gate)
    return buckets


def circuit_depth(gates: Sequence[Gate], n_qubits: int) -> int:
    """Number of layers; 0 for an empty sequence."""
    return max(assign_layers(gates, n_qubits), default=-1) + 1
