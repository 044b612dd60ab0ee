"""Standard gate matrices.

Every function returns a complex tensor on the requested device. Multi-qubit
matrices index their basis with the *first* gate qubit as the most
significant bit, so ``CX()`` is the textbook matrix with the control first.
"""

from __future__ import annotations

import cmath
import math
from typing import Sequence

import torch

_SQRT1_2 = 1.0 / math.sqrt(2.0)


def _tensor(
    data: Sequence[Sequence[complex]],
    dtype: torch.dtype | None,
    device: torch.device | None,
) -> torch.Tensor:
    if dtype is None:
        dtype = torch.complex128
    if device is None:
        device = torch.device("cpu")
    return torch.tensor(data, dtype=dtype, device=device)


def I(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Identity gate (single-qubit)."""
    return _tensor([[1.0, 0.0], [0.0, 1.0]], dtype, device)


def X(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Pauli-X gate (bit-flip, NOT gate)."""
    return _tensor([[0.0, 1.0], [1.0, 0.0]], dtype, device)


def Y(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Pauli-Y gate."""
    return _tensor([[0.0, -1.0j], [1.0j, 0.0]], dtype, device)


def Z(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Pauli-Z gate (phase-flip)."""
    return _tensor([[1.0, 0.0], [0.0, -1.0]], dtype, device)


def H(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Hadamard gate."""
    return _tensor([[_SQRT1_2, _SQRT1_2], [_SQRT1_2, -_SQRT1_2]], dtype, device)


def S(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """S gate (phase gate, √Z)."""
    return _tensor([[1.0, 0.0], [0.0, 1.0j]], dtype, device)


def Sdg(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """S† gate, the inverse of S."""
    return _tensor([[1.0, 0.0], [0.0, -1.0j]], dtype, device)


def T(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """T gate (π/8 gate, √S)."""
    return _tensor([[1.0, 0.0], [0.0, cmath.exp(1.0j * math.pi / 4.0)]], dtype, device)


def Tdg(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """T† gate, the inverse of T."""
    return _tensor([[1.0, 0.0], [0.0, cmath.exp(-1.0j * math.pi / 4.0)]], dtype, device)


def SX(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """√X gate."""
    return _tensor(
        [[0.5 + 0.5j, 0.5 - 0.5j], [0.5 - 0.5j, 0.5 + 0.5j]], dtype, device
    )


def RX(
    theta: float, dtype: torch.dtype | None = None, device: torch.device | None = None
) -> torch.Tensor:
    """
    Rotation about the X axis: RX(θ) = exp(-i θ X / 2).

        [[cos(θ/2), -i sin(θ/2)],
         [-i sin(θ/2), cos(θ/2)]]
    """
    c = math.cos(theta / 2.0)
    s = math.sin(theta / 2.0)
    return _tensor([[c, -1.0j * s], [-1.0j * s, c]], dtype, device)


def RY(
    theta: float, dtype: torch.dtype | None = None, device: torch.device | None = None
) -> torch.Tensor:
    """
    Rotation about the Y axis: RY(θ) = exp(-i θ Y / 2).

        [[cos(θ/2), -sin(θ/2)],
         [sin(θ/2),  cos(θ/2)]]
    """
    c = math.cos(theta / 2.0)
    s = math.sin(theta / 2.0)
    return _tensor([[c, -s], [s, c]], dtype, device)


def RZ(
    theta: float, dtype: torch.dtype | None = None, device: torch.device | None = None
) -> torch.Tensor:
    """Rotation about the Z axis: diag(e^{-iθ/2}, e^{iθ/2})."""
    return _tensor(
        [[cmath.exp(-0.5j * theta), 0.0], [0.0, cmath.exp(0.5j * theta)]],
        dtype,
        device,
    )


def P(
    lam: float, dtype: torch.dtype | None = None, device: torch.device | None = None
) -> torch.Tensor:
    """Phase gate diag(1, e^{iλ}); identical to U1(λ)."""
    return _tensor([[1.0, 0.0], [0.0, cmath.exp(1.0j * lam)]], dtype, device)


def U2(
    phi: float,
    lam: float,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """qelib1 U2(φ, λ) = U3(π/2, φ, λ)."""
    return U3(math.pi / 2.0, phi, lam, dtype=dtype, device=device)


def U3(
    theta: float,
    phi: float,
    lam: float,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """
    General single-qubit unitary (qelib1 convention):

        [[cos(θ/2),          -e^{iλ} sin(θ/2)],
         [e^{iφ} sin(θ/2),  e^{i(φ+λ)} cos(θ/2)]]
    """
    c = math.cos(theta / 2.0)
    s = math.sin(theta / 2.0)
    return _tensor(
        [
            [c, -cmath.exp(1.0j * lam) * s],
            [cmath.exp(1.0j * phi) * s, cmath.exp(1.0j * (phi + lam)) * c],
        ],
        dtype,
        device,
    )


def controlled(u: torch.Tensor) -> torch.Tensor:
    """
    Add one control qubit (the new most significant bit) to ``u``.

    Returns the block-diagonal matrix diag(I, U).
    """
    dim = u.shape[-1]
    out = torch.eye(2 * dim, dtype=u.dtype, device=u.device)
    out[dim:, dim:] = u
    return out


def CX(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """CNOT with control on the first qubit."""
    return controlled(X(dtype, device))


def CY(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Controlled-Y."""
    return controlled(Y(dtype, device))


def CZ(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Controlled-Z."""
    return controlled(Z(dtype, device))


def SWAP(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Exchange the two qubits."""
    return _tensor(
        [[1, 0, 0, 0], [0, 0, 1, 0], [0, 1, 0, 0], [0, 0, 0, 1]], dtype, device
    )


def ISWAP(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """iSWAP: swap with an i phase on the exchanged states."""
    return _tensor(
        [[1, 0, 0, 0], [0, 0, 1.0j, 0], [0, 1.0j, 0, 0], [0, 0, 0, 1]], dtype, device
    )


def SQISWAP(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """√iSWAP."""
    return _tensor(
        [
            [1, 0, 0, 0],
            [0, _SQRT1_2, 1.0j * _SQRT1_2, 0],
            [0, 1.0j * _SQRT1_2, _SQRT1_2, 0],
            [0, 0, 0, 1],
        ],
        dtype,
        device,
    )


def CCX(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Toffoli: X on the third qubit when the first two are |1⟩."""
    return controlled(CX(dtype, device))


def CCZ(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Doubly-controlled Z."""
    return controlled(CZ(dtype, device))


def CSWAP(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Fredkin: swap the last two qubits when the first is |1⟩."""
    return controlled(SWAP(dtype, device))
