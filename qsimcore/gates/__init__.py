"""Gate matrices and gate-to-matrix resolution."""

from .resolve import gate_matrix, supported_kinds
from .standard import (
    CCX,
    CCZ,
    CSWAP,
    CX,
    CY,
    CZ,
    ISWAP,
    P,
    RX,
    RY,
    RZ,
    SQISWAP,
    SWAP,
    SX,
    U2,
    U3,
    H,
    I,
    S,
    Sdg,
    T,
    Tdg,
    X,
    Y,
    Z,
    controlled,
)

__all__ = [
    "I",
    "X",
    "Y",
    "Z",
    "H",
    "S",
    "Sdg",
    "T",
    "Tdg",
    "SX",
    "RX",
    "RY",
    "RZ",
    "P",
    "U2",
    "U3",
    "CX",
    "CY",
    "CZ",
    "SWAP",
    "ISWAP",
    "SQISWAP",
    "CCX",
    "CCZ",
    "CSWAP",
    "controlled",
    "gate_matrix",
    "supported_kinds",
]
