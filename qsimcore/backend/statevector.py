"""State-vector kernels for pure quantum states.

The amplitude buffer is a 1-D complex tensor of length 2**n_qubits, with
qubit 0 as the least significant bit of the basis index.

Gate application is in place. Every kernel gathers the amplitudes of all
index groups first (the gather produces a copy) and only then scatters the
updated values back, so no slot is overwritten before every group that
reads it has been read. Groups are disjoint, so the update is one vectorised
matrix product over all of them.
"""

from __future__ import annotations

import math

import torch

from ..core.device import Device, resolve_device
from ..diagnostics import assert_normalized, is_debug_enabled
from .indexing import group_indices, subspace_mask

# Largest register the engine will allocate: 2**30 complex128 amplitudes
# already take 16 GiB.
MAX_QUBITS = 30


def zero_state(
    n_qubits: int,
    device: Device | torch.device | str | None = None,
    dtype: torch.dtype | None = None,
) -> torch.Tensor:
    """
    Create the all-zero basis state |0...0⟩.

    Args:
        n_qubits: Number of qubits. Must be >= 1.
        device: Device specification (Device, name, torch.device or None).
        dtype: Complex dtype. Defaults to the device's complex dtype.

    Returns:
        A complex tensor of shape (2**n_qubits,) with amplitude 1 at index 0.

    Raises:
        ValueError: If n_qubits < 1.
    """
    if n_qubits < 1:
        raise ValueError(f"n_qubits must be >= 1, got {n_qubits}")

    qdevice = resolve_device(device)
    if dtype is None:
        dtype = qdevice.complex_dtype

    state = torch.zeros(1 << n_qubits, dtype=dtype, device=qdevice.as_torch_device())
    state[0] = 1.0 + 0.0j
    return state


def num_qubits_of(state: torch.Tensor) -> int:
    """
    Infer n from a state vector of length 2**n.

    Raises ValueError if the state is not 1-D or its length is not a power of 2.
    """
    if state.ndim != 1:
        raise ValueError("Statevector must be a 1D tensor.")
    dim = state.shape[0]
    if dim <= 0 or dim & (dim - 1) != 0:
        raise ValueError(f"Statevector length must be a power of 2, got {dim}.")
    return dim.bit_length() - 1


def apply_matrix(
    state: torch.Tensor,
    matrix: torch.Tensor,
    qubits: tuple[int, ...] | list[int],
    n_qubits: int | None = None,
) -> torch.Tensor:
    """
    Apply a k-qubit unitary to ``qubits`` of ``state`` in place.

    The first entry of ``qubits`` is the most significant bit of the matrix's
    row/column index. Amplitudes outside the selected qubits' groups are not
    touched.

    Args:
        state: Complex state vector of shape (2**n_qubits,). Mutated.
        matrix: Complex matrix of shape (2**k, 2**k).
        qubits: The k distinct target qubits.
        n_qubits: Number of qubits. If None, inferred from the state length.

    Returns:
        ``state`` (the same tensor), for chaining.

    Raises:
        IndexError: If a qubit is out of range.
        ValueError: If shapes do not match.
    """
    if not torch.is_complex(state):
        raise ValueError(f"state must be complex dtype, got {state.dtype}")
    if n_qubits is None:
        n_qubits = num_qubits_of(state)
    elif state.shape[-1] != 1 << n_qubits:
        raise ValueError(
            f"state dimension {state.shape[-1]} does not match 2**n_qubits = {1 << n_qubits}"
        )

    k = len(qubits)
    dim = 1 << k
    if tuple(matrix.shape) != (dim, dim):
        raise ValueError(
            f"gate on {k} qubit(s) must have shape ({dim}, {dim}), got {tuple(matrix.shape)}"
        )

    groups = group_indices(n_qubits, qubits, device=state.device)
    # Gather copies every group before any write.
    old = state[groups]
    new = old @ matrix.to(dtype=state.dtype, device=state.device).transpose(0, 1)
    state[groups] = new

    if is_debug_enabled():
        assert_normalized(state, atol=1e-6)

    return state


def apply_gate(
    state: torch.Tensor,
    gate: torch.Tensor,
    qubit: int,
    n_qubits: int | None = None,
) -> torch.Tensor:
    """
    Apply a single-qubit gate in place.

    For every index i with bit ``qubit`` clear and j = i | (1 << qubit), the
    pair (state[i], state[j]) is replaced by gate @ (state[i], state[j]).
    """
    if gate.shape != (2, 2):
        raise ValueError(f"gate must have shape (2, 2), got {tuple(gate.shape)}")
    return apply_matrix(state, gate, (qubit,), n_qubits)


def apply_two_qubit_gate(
    state: torch.Tensor,
    gate: torch.Tensor,
    qubit1: int,
    qubit2: int,
    n_qubits: int | None = None,
) -> torch.Tensor:
    """
    Apply a two-qubit gate in place. ``qubit1`` is the high bit of the gate's
    4x4 index, so for controlled gates it is the control.
    """
    if gate.shape != (4, 4):
        raise ValueError(f"gate must have shape (4, 4), got {tuple(gate.shape)}")
    return apply_matrix(state, gate, (qubit1, qubit2), n_qubits)


def apply_three_qubit_gate(
    state: torch.Tensor,
    gate: torch.Tensor,
    qubit1: int,
    qubit2: int,
    qubit3: int,
    n_qubits: int | None = None,
) -> torch.Tensor:
    """Apply a three-qubit gate in place (``qubit1`` is the high bit)."""
    if gate.shape != (8, 8):
        raise ValueError(f"gate must have shape (8, 8), got {tuple(gate.shape)}")
    return apply_matrix(state, gate, (qubit1, qubit2, qubit3), n_qubits)


def branch_weight(
    state: torch.Tensor,
    operator: torch.Tensor,
    qubit: int,
    n_qubits: int,
) -> float:
    """Return ||K ψ||² for a 2x2 operator K on ``qubit``, without touching ``state``."""
    groups = group_indices(n_qubits, (qubit,), device=state.device)
    new = state[groups] @ operator.to(dtype=state.dtype, device=state.device).transpose(0, 1)
    return float((new.abs() ** 2).sum().item())


def apply_branch_(
    state: torch.Tensor,
    operator: torch.Tensor,
    qubit: int,
    n_qubits: int,
) -> torch.Tensor:
    """
    Apply a 2x2 operator (not necessarily unitary) to ``qubit`` in place and
    renormalise, i.e. ψ -> K ψ / ||K ψ||.

    Raises:
        ValueError: If K annihilates the state.
    """
    groups = group_indices(n_qubits, (qubit,), device=state.device)
    new = state[groups] @ operator.to(dtype=state.dtype, device=state.device).transpose(0, 1)
    norm = torch.linalg.vector_norm(new)
    if norm.item() == 0.0:
        raise ValueError(f"operator on qubit {qubit} annihilates the state")
    state[groups] = new / norm
    return state


def measure_probs(state: torch.Tensor) -> torch.Tensor:
    """Born-rule probabilities |state[i]|² (not renormalised)."""
    return state.abs() ** 2


def probability_of_one(state: torch.Tensor, qubit: int, n_qubits: int) -> float:
    """Return Σ|state[i]|² over indices with bit ``qubit`` set."""
    if qubit < 0 or qubit >= n_qubits:
        raise IndexError(f"qubit index {qubit} out of range [0, {n_qubits})")
    mask = subspace_mask(n_qubits, qubit, 1, device=state.device)
    return float(measure_probs(state)[mask].sum().item())


def collapse(
    state: torch.Tensor,
    qubit: int,
    outcome: int,
    probability: float,
    n_qubits: int,
) -> torch.Tensor:
    """
    Project ``state`` in place onto ``qubit == outcome`` and renormalise.

    ``probability`` is P(outcome) before the projection.
    """
    if probability <= 0.0:
        raise ValueError(
            f"cannot collapse qubit {qubit} onto outcome {outcome} with probability 0"
        )
    keep = subspace_mask(n_qubits, qubit, outcome, device=state.device)
    state[~keep] = 0.0
    state[keep] = state[keep] / math.sqrt(probability)
    return state


def normalize_(state: torch.Tensor) -> torch.Tensor:
    """Rescale ``state`` in place to unit norm."""
    norm = torch.linalg.vector_norm(state)
    if norm.item() == 0.0:
        raise ValueError("cannot normalise a zero state vector")
    state.div_(norm)
    return state


def expectation_value(state: torch.Tensor, observable: torch.Tensor) -> float:
    """Return Re⟨ψ|O|ψ⟩."""
    value = torch.vdot(state, observable.to(dtype=state.dtype, device=state.device) @ state)
    return float(value.real.item())


def density_matrix(state: torch.Tensor) -> torch.Tensor:
    """Return the pure-state density matrix ρ = |ψ⟩⟨ψ|."""
    return torch.outer(state, state.conj())


__all__ = [
    "MAX_QUBITS",
    "zero_state",
    "num_qubits_of",
    "apply_matrix",
    "apply_gate",
    "apply_two_qubit_gate",
    "apply_three_qubit_gate",
    "branch_weight",
    "apply_branch_",
    "measure_probs",
    "probability_of_one",
    "collapse",
    "normalize_",
    "expectation_value",
    "density_matrix",
]
