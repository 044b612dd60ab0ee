"""Density-matrix helpers for exact channel evolution.

Full density matrices cost O(4**n) memory, so these helpers are meant for
small registers, e.g. to compare the stochastic noise model of the engine
against the exact channel.
"""

from __future__ import annotations

from typing import Optional, Sequence

import torch

from ..diagnostics import is_debug_enabled, is_hermitian
from .statevector import density_matrix, num_qubits_of


def dm_from_statevector(state: torch.Tensor) -> torch.Tensor:
    """Return ρ = |ψ⟩⟨ψ| for a 1-D state vector."""
    num_qubits_of(state)
    return density_matrix(state)


def embed_single_qubit_operator(
    op: torch.Tensor,
    qubit: int,
    n_qubits: int,
) -> torch.Tensor:
    """
    Lift a 2x2 operator on ``qubit`` to the full 2**n register.

    Builds P_{n-1} ⊗ ... ⊗ P_0 with P_qubit = op and identity elsewhere, which
    matches the little-endian basis index (qubit 0 is the rightmost factor).
    """
    identity = torch.eye(2, dtype=op.dtype, device=op.device)
    full = op if (n_qubits - 1) == qubit else identity
    for q in range(n_qubits - 2, -1, -1):
        full = torch.kron(full, op if q == qubit else identity)
    return full


def apply_kraus_single_qubit(
    rho: torch.Tensor,
    kraus_ops: Sequence[torch.Tensor],
    qubit: int,
    n_qubits: Optional[int] = None,
) -> torch.Tensor:
    """
    Apply a single-qubit channel ρ -> Σ_k F_k ρ F_k† to ``qubit``.

    Args:
        rho: Density matrix of shape (dim, dim), dim = 2**n_qubits.
        kraus_ops: 2x2 complex Kraus operators.
        qubit: Target qubit (0 = least significant bit).
        n_qubits: Number of qubits. If None, inferred from rho.

    Returns:
        A new density matrix.

    Raises:
        ValueError: On shape mismatches or an empty operator list.
        IndexError: If ``qubit`` is out of range.
    """
    if rho.dim() != 2 or rho.shape[0] != rho.shape[1]:
        raise ValueError(f"rho must be a square matrix, got shape {tuple(rho.shape)}")

    dim = rho.shape[-1]
    if n_qubits is None:
        n_qubits = dim.bit_length() - 1
    if 1 << n_qubits != dim:
        raise ValueError(f"rho dimension {dim} does not match 2**n_qubits")
    if qubit < 0 or qubit >= n_qubits:
        raise IndexError(f"qubit index {qubit} out of range [0, {n_qubits})")
    if len(kraus_ops) == 0:
        raise ValueError("kraus_ops must contain at least one operator")

    new_rho = torch.zeros_like(rho)
    for i, E in enumerate(kraus_ops):
        if tuple(E.shape) != (2, 2):
            raise ValueError(
                f"Kraus operator {i} must have shape (2, 2), got {tuple(E.shape)}"
            )
        F = embed_single_qubit_operator(
            E.to(dtype=rho.dtype, device=rho.device), qubit, n_qubits
        )
        new_rho = new_rho + F @ rho @ F.conj().transpose(-2, -1)

    if is_debug_enabled() and not is_hermitian(new_rho, atol=1e-6):
        raise ValueError("Channel output is not Hermitian.")

    return new_rho


__all__ = [
    "dm_from_statevector",
    "embed_single_qubit_operator",
    "apply_kraus_single_qubit",
]
