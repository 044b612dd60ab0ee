"""Map Gate records to their unitary matrices."""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Mapping

import torch

from qsimcore.circuit.gate import Gate, GateKind
from qsimcore.exceptions import UnsupportedOperationError

from . import standard as std

_MatrixFn = Callable[..., torch.Tensor]

# Kind -> factory(*params, dtype=..., device=...).
_FACTORIES: Mapping[GateKind, _MatrixFn] = MappingProxyType(
    {
        GateKind.I: std.I,
        GateKind.X: std.X,
        GateKind.Y: std.Y,
        GateKind.Z: std.Z,
        GateKind.H: std.H,
        GateKind.S: std.S,
        GateKind.SDG: std.Sdg,
        GateKind.T: std.T,
        GateKind.TDG: std.Tdg,
        GateKind.SX: std.SX,
        GateKind.RX: std.RX,
        GateKind.RY: std.RY,
        GateKind.RZ: std.RZ,
        GateKind.P: std.P,
        GateKind.U1: std.P,
        GateKind.U2: std.U2,
        GateKind.U3: std.U3,
        GateKind.CX: std.CX,
        GateKind.CY: std.CY,
        GateKind.CZ: std.CZ,
        GateKind.SWAP: std.SWAP,
        GateKind.ISWAP: std.ISWAP,
        GateKind.SQISWAP: std.SQISWAP,
        GateKind.CP: lambda lam, **kw: std.controlled(std.P(lam, **kw)),
        GateKind.CRX: lambda theta, **kw: std.controlled(std.RX(theta, **kw)),
        GateKind.CRY: lambda theta, **kw: std.controlled(std.RY(theta, **kw)),
        GateKind.CRZ: lambda theta, **kw: std.controlled(std.RZ(theta, **kw)),
        GateKind.CU1: lambda lam, **kw: std.controlled(std.P(lam, **kw)),
        GateKind.CU3: lambda theta, phi, lam, **kw: std.controlled(
            std.U3(theta, phi, lam, **kw)
        ),
        GateKind.CCX: std.CCX,
        GateKind.CCZ: std.CCZ,
        GateKind.CSWAP: std.CSWAP,
    }
)


def supported_kinds() -> frozenset[GateKind]:
    """Return the gate kinds the simulator can apply (custom gates included)."""
    return frozenset(_FACTORIES) | {GateKind.CUSTOM}


def gate_matrix(
    gate: Gate,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """
    Return the (2**k, 2**k) unitary that ``gate`` applies to its k qubits.

    Parameters
    ----------
    gate:
        Gate record. Custom gates return their own matrix cast to ``dtype``.
    dtype:
        Complex dtype of the result. Defaults to torch.complex128.
    device:
        Device of the result. Defaults to CPU.

    Raises
    ------
    UnsupportedOperationError
        If the gate kind has no matrix definition.
    """
    if dtype is None:
        dtype = torch.complex128
    if device is None:
        device = torch.device("cpu")

    if gate.kind is GateKind.CUSTOM:
        return gate.matrix.to(dtype=dtype, device=device)

    factory = _FACTORIES.get(gate.kind)
    if factory is None:
        raise UnsupportedOperationError(
            f"Gate kind {gate.kind.name} is not supported by the simulator."
        )
    return factory(*gate.params, dtype=dtype, device=device)
