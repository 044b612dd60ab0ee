"""Gate model: a closed set of gate kinds and the immutable Gate record."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple, Union

import torch

from qsimcore.exceptions import InvalidArgumentError, UnsupportedOperationError


class GateKind(enum.Enum):
    """
    Every gate kind the circuit model knows about.

    The enum value is the canonical lowercase OpenQASM name.
    """

    # one-qubit
    I = "id"
    X = "x"
    Y = "y"
    Z = "z"
    H = "h"
    S = "s"
    SDG = "sdg"
    T = "t"
    TDG = "tdg"
    SX = "sx"
    # one-qubit, parameterized
    RX = "rx"
    RY = "ry"
    RZ = "rz"
    P = "p"
    U1 = "u1"
    U2 = "u2"
    U3 = "u3"
    # two-qubit
    CX = "cx"
    CY = "cy"
    CZ = "cz"
    SWAP = "swap"
    ISWAP = "iswap"
    SQISWAP = "sqiswap"
    # two-qubit, parameterized
    CP = "cp"
    CRX = "crx"
    CRY = "cry"
    CRZ = "crz"
    CU1 = "cu1"
    CU3 = "cu3"
    # three-qubit
    CCX = "ccx"
    CCZ = "ccz"
    CSWAP = "cswap"
    # explicit matrix
    CUSTOM = "custom"

    @property
    def qasm_name(self) -> str:
        return self.value

    @property
    def num_qubits(self) -> Optional[int]:
        """Fixed arity of this kind, or None for custom gates."""
        return _ARITY.get(self)

    @property
    def num_params(self) -> int:
        return _NUM_PARAMS.get(self, 0)

    @property
    def is_parameterized(self) -> bool:
        return self.num_params > 0


_ONE_QUBIT = (
    GateKind.I, GateKind.X, GateKind.Y, GateKind.Z, GateKind.H, GateKind.S,
    GateKind.SDG, GateKind.T, GateKind.TDG, GateKind.SX, GateKind.RX,
    GateKind.RY, GateKind.RZ, GateKind.P, GateKind.U1, GateKind.U2, GateKind.U3,
)
_TWO_QUBIT = (
    GateKind.CX, GateKind.CY, GateKind.CZ, GateKind.SWAP, GateKind.ISWAP,
    GateKind.SQISWAP, GateKind.CP, GateKind.CRX, GateKind.CRY, GateKind.CRZ,
    GateKind.CU1, GateKind.CU3,
)
_THREE_QUBIT = (GateKind.CCX, GateKind.CCZ, GateKind.CSWAP)

_ARITY: Mapping[GateKind, int] = MappingProxyType(
    {
        **{k: 1 for k in _ONE_QUBIT},
        **{k: 2 for k in _TWO_QUBIT},
        **{k: 3 for k in _THREE_QUBIT},
    }
)

_NUM_PARAMS: Mapping[GateKind, int] = MappingProxyType(
    {
        GateKind.RX: 1,
        GateKind.RY: 1,
        GateKind.RZ: 1,
        GateKind.P: 1,
        GateKind.U1: 1,
        GateKind.U2: 2,
        GateKind.U3: 3,
        GateKind.CP: 1,
        GateKind.CRX: 1,
        GateKind.CRY: 1,
        GateKind.CRZ: 1,
        GateKind.CU1: 1,
        GateKind.CU3: 3,
    }
)

# Alternative spellings accepted by gate_kind().
_ALIASES: Mapping[str, GateKind] = MappingProxyType(
    {
        "i": GateKind.I,
        "cnot": GateKind.CX,
        "toffoli": GateKind.CCX,
        "ccnot": GateKind.CCX,
        "fredkin": GateKind.CSWAP,
        "s_dag": GateKind.SDG,
        "sdag": GateKind.SDG,
        "t_dag": GateKind.TDG,
        "tdag": GateKind.TDG,
        "phase": GateKind.P,
        "cphase": GateKind.CP,
    }
)


def gate_kind(kind: Union[GateKind, str]) -> GateKind:
    """
    Resolve a GateKind from an enum member or a (case-insensitive) name.

    Raises
    ------
    UnsupportedOperationError
        If the name does not correspond to any known gate kind.
    """
    if isinstance(kind, GateKind):
        return kind
    key = str(kind).strip().lower()
    if key in _ALIASES:
        return _ALIASES[key]
    try:
        resolved = GateKind(key)
    except ValueError:
        raise UnsupportedOperationError(f"Unsupported gate kind {kind!r}.") from None
    if resolved is GateKind.CUSTOM:
        raise UnsupportedOperationError(
            "Custom gates need a matrix; use add_custom_gate()."
        )
    return resolved


@dataclass(frozen=True)
class Gate:
    """
    A single gate application.

    Attributes
    ----------
    kind:
        The gate kind.
    qubits:
        Target qubit indices, in the order the gate matrix expects them
        (controls first for controlled gates).
    params:
        Real parameters such as rotation angles; empty for fixed gates.
    matrix:
        Unitary of shape (2**k, 2**k) for custom gates, None otherwise.
    name:
        Canonical lowercase name; the user-supplied name for custom gates.
    """

    kind: GateKind
    qubits: Tuple[int, ...]
    params: Tuple[float, ...] = ()
    matrix: Optional[torch.Tensor] = field(default=None, compare=False)
    name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "qubits", tuple(int(q) for q in self.qubits))
        object.__setattr__(self, "params", tuple(float(p) for p in self.params))
        if not self.name:
            object.__setattr__(self, "name", self.kind.qasm_name)

        if not self.qubits:
            raise InvalidArgumentError("A gate must act on at least one qubit.")
        if len(set(self.qubits)) != len(self.qubits):
            raise InvalidArgumentError(
                f"Gate {self.name!r} has repeated qubits {self.qubits}."
            )

        if self.kind is GateKind.CUSTOM:
            if self.matrix is None:
                raise InvalidArgumentError(f"Custom gate {self.name!r} needs a matrix.")
            dim = 1 << len(self.qubits)
            if tuple(self.matrix.shape) != (dim, dim):
                raise InvalidArgumentError(
                    f"Custom gate {self.name!r} on {len(self.qubits)} qubit(s) needs a "
                    f"({dim}, {dim}) matrix, got {tuple(self.matrix.shape)}."
                )
            return

        if self.matrix is not None:
            raise InvalidArgumentError(
                f"Only custom gates carry a matrix; got one for {self.name!r}."
            )
        if len(self.qubits) != self.kind.num_qubits:
            raise InvalidArgumentError(
                f"Gate {self.name!r} acts on {self.kind.num_qubits} qubit(s), "
                f"got {len(self.qubits)}."
            )
        if len(self.params) != self.kind.num_params:
            raise InvalidArgumentError(
                f"Gate {self.name!r} takes {self.kind.num_params} parameter(s), "
                f"got {len(self.params)}."
            )

    @property
    def num_qubits(self) -> int:
        return len(self.qubits)

    def with_qubits(self, qubits: Sequence[int]) -> "Gate":
        """Return a copy of this gate acting on different qubits."""
        return Gate(self.kind, tuple(qubits), self.params, self.matrix, self.name)

    def with_params(self, params: Sequence[float]) -> "Gate":
        """Return a copy of this gate with different parameters."""
        return Gate(self.kind, self.qubits, tuple(params), self.matrix, self.name)

    def __repr__(self) -> str:
        args = f"({', '.join(f'{p:g}' for p in self.params)})" if self.params else ""
        return f"Gate({self.name}{args} on {list(self.qubits)})"
