"""Index arithmetic for in-place gate application.

These helpers decide *which* amplitude slots a gate mixes, independently of
*what* the gate does to them. Qubit ``q`` corresponds to bit ``q`` of a basis
index (qubit 0 is the least significant bit).

For a gate on qubits ``(q_0, ..., q_{k-1})`` the amplitude vector splits into
2**(n-k) disjoint groups of 2**k slots. Within a group, column ``c`` holds the
slot whose selected bits spell ``c`` with ``q_0`` as the most significant bit,
matching the row/column order of the gate matrix.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Sequence, Tuple

import torch


def bit_mask(qubits: Sequence[int]) -> int:
    """Return the integer with exactly the bits of ``qubits`` set."""
    mask = 0
    for q in qubits:
        mask |= 1 << q
    return mask


def basis_index(bits: Sequence[int]) -> int:
    """
    Convert a per-qubit bit sequence into a basis index.

    ``bits[k]`` is the value of qubit ``k``.
    """
    index = 0
    for q, b in enumerate(bits):
        if b:
            index |= 1 << q
    return index


def partner_index(index: int, qubit: int) -> int:
    """Return ``index`` with bit ``qubit`` flipped."""
    return index ^ (1 << qubit)


def insert_zero_bits(values: torch.Tensor, positions: Sequence[int]) -> torch.Tensor:
    """
    Spread integers apart by inserting a 0 bit at each of ``positions``.

    Enumerating ``values = arange(2**(n-k))`` yields, in increasing order, every
    n-bit index whose bits at ``positions`` are all clear.
    """
    out = values
    for pos in sorted(positions):
        low = out & ((1 << pos) - 1)
        high = out >> pos
        out = (high << (pos + 1)) | low
    return out


def local_offsets(qubits: Sequence[int]) -> torch.Tensor:
    """
    Offsets that select each of the 2**k slots of a group from its base index.

    ``offsets[c]`` sets bit ``qubits[p]`` whenever bit ``k-1-p`` of ``c`` is 1.
    """
    k = len(qubits)
    cols = torch.arange(1 << k, dtype=torch.long)
    offsets = torch.zeros(1 << k, dtype=torch.long)
    for p, q in enumerate(qubits):
        bit = (cols >> (k - 1 - p)) & 1
        offsets |= bit << q
    return offsets


# Tables for registers above this size are rebuilt on every call. A table
# holds 2**n int64 entries, so the cache never retains more than
# INDEX_CACHE_SIZE * 2**INDEX_CACHE_MAX_QUBITS * 8 bytes (8 MiB).
INDEX_CACHE_MAX_QUBITS = 12
INDEX_CACHE_SIZE = 256


def _build_group_indices(n_qubits: int, qubits: Tuple[int, ...]) -> torch.Tensor:
    k = len(qubits)
    bases = insert_zero_bits(torch.arange(1 << (n_qubits - k), dtype=torch.long), qubits)
    return bases.unsqueeze(1) | local_offsets(qubits).unsqueeze(0)


@lru_cache(maxsize=INDEX_CACHE_SIZE)
def _cached_group_indices(n_qubits: int, qubits: Tuple[int, ...]) -> torch.Tensor:
    return _build_group_indices(n_qubits, qubits)


def group_indices(
    n_qubits: int,
    qubits: Sequence[int],
    device: torch.device | None = None,
) -> torch.Tensor:
    """
    Return the (2**(n-k), 2**k) table of amplitude indices touched by a gate.

    Rows are disjoint, and together they cover every index exactly once, so
    rows can be updated independently of each other.

    Raises
    ------
    IndexError
        If a qubit is outside [0, n_qubits).
    ValueError
        If qubits repeat or there are more than n_qubits of them.
    """
    qubits = tuple(int(q) for q in qubits)
    for q in qubits:
        if q < 0 or q >= n_qubits:
            raise IndexError(f"qubit index {q} out of range [0, {n_qubits})")
    if len(set(qubits)) != len(qubits):
        raise ValueError(f"qubits must be distinct, got {qubits}")

    if n_qubits <= INDEX_CACHE_MAX_QUBITS:
        table = _cached_group_indices(n_qubits, qubits)
    else:
        table = _build_group_indices(n_qubits, qubits)
    if device is not None and table.device != device:
        table = table.to(device)
    return table


def pair_indices(
    n_qubits: int,
    target: int,
    device: torch.device | None = None,
) -> Tuple[torch.Tensor, torch.Tensor]:
    """
    Return ``(i, j)`` index tensors for a single-qubit gate on ``target``.

    ``i`` runs over every index with bit ``target`` clear and ``j = i | 1 << target``.
    """
    table = group_indices(n_qubits, (target,), device=device)
    return table[:, 0], table[:, 1]


def subspace_mask(
    n_qubits: int,
    qubit: int,
    value: int,
    device: torch.device | None = None,
) -> torch.Tensor:
    """Boolean mask over basis indices whose bit ``qubit`` equals ``value``."""
    idx = torch.arange(1 << n_qubits, dtype=torch.long, device=device)
    return ((idx >> qubit) & 1) == int(value)


def clear_index_caches() -> None:
    """Drop cached index tables (e.g. after simulating very large registers)."""
    _cached_group_indices.cache_clear()


def index_cache_entries() -> int:
    """Number of index tables currently held by the cache."""
    return _cached_group_indices.cache_info().currsize


__all__ = [
    "bit_mask",
    "basis_index",
    "partner_index",
    "insert_zero_bits",
    "local_offsets",
    "group_indices",
    "pair_indices",
    "subspace_mask",
    "clear_index_caches",
    "index_cache_entries",
    "INDEX_CACHE_MAX_QUBITS",
    "INDEX_CACHE_SIZE",
]
