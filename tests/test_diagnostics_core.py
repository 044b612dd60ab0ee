"""Tests for diagnostic checks."""

import math

import pytest
import torch

from qsimcore.diagnostics import (
    assert_normalized,
    fidelity,
    is_hermitian,
    is_unitary,
    state_norm,
)
from qsimcore.gates import CX, H, S, X, Y, Z


def test_state_norm_of_basis_state():
    state = torch.tensor([0.0, 1.0], dtype=torch.complex128)
    assert state_norm(state).item() == pytest.approx(1.0)


def test_assert_normalized_raises_for_unnormalized_state():
    state = torch.tensor([1.0, 1.0], dtype=torch.complex128)
    with pytest.raises(ValueError, match="not normalized"):
        assert_normalized(state)


def test_assert_normalized_passes_for_plus_state():
    amp = 1.0 / math.sqrt(2.0)
    assert_normalized(torch.tensor([amp, amp], dtype=torch.complex128))


@pytest.mark.parametrize("gate", [H, S, X, Y, Z, CX])
def test_standard_gates_are_unitary(gate):
    assert is_unitary(gate())


def test_is_unitary_rejects_non_square_and_scaled():
    assert not is_unitary(torch.ones(2, 3, dtype=torch.complex128))
    assert not is_unitary(2.0 * X())


def test_is_unitary_tolerance():
    rounded = torch.tensor([[0.707107, 0.707107], [0.707107, -0.707107]], dtype=torch.complex128)
    assert is_unitary(rounded)
    coarse = torch.tensor([[0.7071, 0.7071], [0.7071, -0.7071]], dtype=torch.complex128)
    assert not is_unitary(coarse)


def test_is_hermitian():
    assert is_hermitian(Y())
    assert not is_hermitian(S())


def test_fidelity_of_orthogonal_states_is_zero():
    a = torch.tensor([1.0, 0.0], dtype=torch.complex128)
    b = torch.tensor([0.0, 1.0], dtype=torch.complex128)
    assert fidelity(a, b).item() == pytest.approx(0.0)
    assert fidelity(a, a).item() == pytest.approx(1.0)
