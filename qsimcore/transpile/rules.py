"""Rewrite tables used by the peephole optimizer.

All tables are read-only.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import FrozenSet, Mapping, Tuple

from qsimcore.circuit.gate import GateKind

# kind -> the kind that undoes it on the same ordered qubits.
CANCELLATION_PAIRS: Mapping[GateKind, GateKind] = MappingProxyType(
    {
        GateKind.I: GateKind.I,
        GateKind.X: GateKind.X,
        GateKind.Y: GateKind.Y,
        GateKind.Z: GateKind.Z,
        GateKind.H: GateKind.H,
        GateKind.S: GateKind.SDG,
        GateKind.SDG: GateKind.S,
        GateKind.T: GateKind.TDG,
        GateKind.TDG: GateKind.T,
        GateKind.CX: GateKind.CX,
        GateKind.CY: GateKind.CY,
        GateKind.CZ: GateKind.CZ,
        GateKind.SWAP: GateKind.SWAP,
        GateKind.CCX: GateKind.CCX,
        GateKind.CCZ: GateKind.CCZ,
        GateKind.CSWAP: GateKind.CSWAP,
    }
)

# (first, second) -> merged kind; the merged angle is the sum of both angles.
MERGING_RULES: Mapping[Tuple[GateKind, GateKind], GateKind] = MappingProxyType(
    {
        (kind, kind): kind
        for kind in (
            GateKind.RX,
            GateKind.RY,
            GateKind.RZ,
            GateKind.P,
            GateKind.U1,
            GateKind.CP,
            GateKind.CRX,
            GateKind.CRY,
            GateKind.CRZ,
            GateKind.CU1,
        )
    }
)

# kind -> kinds it may be swapped past when the two act on disjoint qubits.
COMMUTATION_RULES: Mapping[GateKind, FrozenSet[GateKind]] = MappingProxyType(
    {
        GateKind.X: frozenset({GateKind.Z}),
        GateKind.Z: frozenset({GateKind.X}),
        GateKind.H: frozenset({GateKind.X, GateKind.Z}),
        GateKind.S: frozenset({GateKind.X}),
        GateKind.T: frozenset({GateKind.X}),
    }
)


__all__ = ["CANCELLATION_PAIRS", "MERGING_RULES", "COMMUTATION_RULES"]
