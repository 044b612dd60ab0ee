"""Tests for the index arithmetic behind gate application."""

import itertools

import pytest
import torch

from qsimcore.backend.indexing import (
    INDEX_CACHE_MAX_QUBITS,
    INDEX_CACHE_SIZE,
    basis_index,
    bit_mask,
    clear_index_caches,
    group_indices,
    index_cache_entries,
    insert_zero_bits,
    local_offsets,
    pair_indices,
    partner_index,
    subspace_mask,
)


def test_bit_mask():
    assert bit_mask([0, 2]) == 0b101
    assert bit_mask([]) == 0


def test_basis_index_is_little_endian():
    """bits[k] is the value of qubit k."""
    assert basis_index([1, 0, 0]) == 1
    assert basis_index([0, 0, 1]) == 4
    assert basis_index([1, 1, 0]) == 3


def test_partner_index_flips_one_bit():
    assert partner_index(0b010, 0) == 0b011
    assert partner_index(0b011, 1) == 0b001


def test_insert_zero_bits_enumerates_indices_with_clear_bits():
    values = torch.arange(4, dtype=torch.long)
    out = insert_zero_bits(values, [1])
    assert out.tolist() == [0, 1, 4, 5]


def test_local_offsets_first_qubit_is_most_significant():
    # qubits (2, 0): column c = (bit of q2, bit of q0)
    assert local_offsets((2, 0)).tolist() == [0, 1, 4, 5]
    assert local_offsets((0, 2)).tolist() == [0, 4, 1, 5]


def test_pair_indices_single_qubit():
    i, j = pair_indices(3, 1)
    assert i.tolist() == [0, 1, 4, 5]
    assert j.tolist() == [2, 3, 6, 7]


class TestGroupIndices:
    """Tests for group_indices."""

    def test_shape(self):
        table = group_indices(4, (3, 1))
        assert table.shape == (4, 4)

    def test_rows_partition_all_indices(self):
        table = group_indices(5, (4, 0, 2))
        flat = sorted(table.flatten().tolist())
        assert flat == list(range(32))

    def test_columns_follow_selected_bits(self):
        table = group_indices(3, (0, 1))
        # Row with q2 = 0: columns enumerate (q0, q1) = 00, 01, 10, 11.
        assert table[0].tolist() == [0, 2, 1, 3]

    def test_out_of_range_qubit(self):
        with pytest.raises(IndexError, match="out of range"):
            group_indices(2, (2,))

    def test_repeated_qubit(self):
        with pytest.raises(ValueError, match="distinct"):
            group_indices(3, (1, 1))

    def test_cache_can_be_cleared(self):
        first = group_indices(3, (1,))
        clear_index_caches()
        second = group_indices(3, (1,))
        assert torch.equal(first, second)

    def test_large_registers_are_not_cached(self):
        clear_index_caches()
        n = INDEX_CACHE_MAX_QUBITS + 4
        for a in range(n):
            for b in range(n):
                if a != b:
                    group_indices(n, (a, b))
        assert index_cache_entries() == 0

    def test_simulation_keeps_cache_bounded(self):
        """A CX on every ordered pair of a 16-qubit register caches nothing."""
        from qsimcore.circuit import QuantumCircuit
        from qsimcore.simulator import StateVectorSimulator

        clear_index_caches()
        n = 16
        qc = QuantumCircuit(n)
        for a in range(n):
            for b in range(n):
                if a != b:
                    qc.add_gate("cx", [a, b])
        StateVectorSimulator(n, seed=0).simulate(qc)
        assert index_cache_entries() == 0

    def test_small_register_cache_stops_at_its_size(self):
        clear_index_caches()
        n = INDEX_CACHE_MAX_QUBITS
        count = 0
        for k in (1, 2, 3):
            for qubits in itertools.permutations(range(n), k):
                group_indices(n, qubits)
                count += 1
                if count > INDEX_CACHE_SIZE + 10:
                    break
        assert count > INDEX_CACHE_SIZE
        assert index_cache_entries() == INDEX_CACHE_SIZE
        clear_index_caches()


def test_subspace_mask():
    mask = subspace_mask(2, 1, 1)
    assert mask.tolist() == [False, False, True, True]
