"""Tests for statevector backend operations."""

import math

import pytest
import torch

from qsimcore.backend.statevector import (
    apply_gate,
    apply_matrix,
    apply_three_qubit_gate,
    apply_two_qubit_gate,
    collapse,
    density_matrix,
    expectation_value,
    measure_probs,
    normalize_,
    num_qubits_of,
    probability_of_one,
    zero_state,
)
from qsimcore.gates import CCX, CX, SWAP, H, X, Z

SQRT2_INV = 1.0 / math.sqrt(2.0)


def basis(n_qubits: int, index: int) -> torch.Tensor:
    state = torch.zeros(1 << n_qubits, dtype=torch.complex128)
    state[index] = 1.0
    return state


class TestZeroState:
    """Tests for zero_state function."""

    def test_zero_state_shape_and_dtype(self):
        state = zero_state(n_qubits=2)
        assert state.shape == (4,)
        assert state.dtype == torch.complex128

    def test_zero_state_amplitude(self):
        """Test zero_state has |0...0⟩ amplitude = 1."""
        state = zero_state(n_qubits=3)
        assert torch.equal(state, basis(3, 0))

    def test_zero_state_invalid_n_qubits(self):
        with pytest.raises(ValueError, match="n_qubits must be >= 1"):
            zero_state(n_qubits=0)

    def test_zero_state_device_parameter(self):
        state = zero_state(n_qubits=1, device="sv_cpu")
        assert state.device.type == "cpu"


def test_num_qubits_of():
    assert num_qubits_of(torch.zeros(8, dtype=torch.complex128)) == 3
    with pytest.raises(ValueError, match="power of 2"):
        num_qubits_of(torch.zeros(6, dtype=torch.complex128))


class TestApplyGate:
    """Tests for in-place gate application."""

    def test_apply_x_to_zero_yields_one(self):
        state = zero_state(1)
        apply_gate(state, X(), qubit=0)
        assert torch.allclose(state, basis(1, 1))

    def test_apply_is_in_place(self):
        state = zero_state(1)
        result = apply_gate(state, X(), qubit=0)
        assert result is state

    def test_qubit0_is_least_significant_bit(self):
        state = zero_state(3)
        apply_gate(state, X(), qubit=0)
        assert torch.allclose(state, basis(3, 1))
        state = zero_state(3)
        apply_gate(state, X(), qubit=2)
        assert torch.allclose(state, basis(3, 4))

    def test_apply_h_to_zero(self):
        state = zero_state(1)
        apply_gate(state, H(), qubit=0)
        expected = torch.tensor([SQRT2_INV, SQRT2_INV], dtype=torch.complex128)
        assert torch.allclose(state, expected)

    def test_h_is_self_inverse_on_random_state(self):
        generator = torch.Generator().manual_seed(3)
        state = torch.randn(8, dtype=torch.complex128, generator=generator)
        state = state / torch.linalg.vector_norm(state)
        original = state.clone()
        for q in range(3):
            apply_gate(state, H(), q)
            apply_gate(state, H(), q)
        assert torch.allclose(state, original, atol=1e-12)

    def test_untargeted_amplitudes_unchanged(self):
        """A Z on qubit 1 only flips signs where bit 1 is set."""
        state = torch.arange(1, 5).to(torch.complex128)
        apply_gate(state, Z(), qubit=1)
        expected = torch.tensor([1.0, 2.0, -3.0, -4.0], dtype=torch.complex128)
        assert torch.allclose(state, expected)

    def test_out_of_range_qubit(self):
        with pytest.raises(IndexError):
            apply_gate(zero_state(2), X(), qubit=2)

    def test_wrong_shape(self):
        with pytest.raises(ValueError, match="shape"):
            apply_gate(zero_state(2), CX(), qubit=0)


class TestMultiQubitGates:
    """Tests for two- and three-qubit gates."""

    def test_bell_state(self):
        state = zero_state(2)
        apply_gate(state, H(), 0)
        apply_two_qubit_gate(state, CX(), 0, 1)
        expected = torch.tensor([SQRT2_INV, 0.0, 0.0, SQRT2_INV], dtype=torch.complex128)
        assert torch.allclose(state, expected)

    def test_cx_first_qubit_is_control(self):
        # |q1 q0> = |01>: control q0 set, target q1 flips -> index 3.
        state = basis(2, 1)
        apply_two_qubit_gate(state, CX(), 0, 1)
        assert torch.allclose(state, basis(2, 3))

        # Reversed roles: control q1 clear -> no change.
        state = basis(2, 1)
        apply_two_qubit_gate(state, CX(), 1, 0)
        assert torch.allclose(state, basis(2, 1))

    def test_cx_on_non_adjacent_qubits(self):
        state = basis(3, 1)
        apply_two_qubit_gate(state, CX(), 0, 2)
        assert torch.allclose(state, basis(3, 5))

    def test_swap(self):
        state = basis(3, 1)
        apply_two_qubit_gate(state, SWAP(), 0, 2)
        assert torch.allclose(state, basis(3, 4))

    def test_toffoli(self):
        state = basis(3, 0b011)
        apply_three_qubit_gate(state, CCX(), 0, 1, 2)
        assert torch.allclose(state, basis(3, 0b111))

        state = basis(3, 0b001)
        apply_three_qubit_gate(state, CCX(), 0, 1, 2)
        assert torch.allclose(state, basis(3, 0b001))

    def test_apply_matrix_tensor_product_matches_kron(self):
        """Applying H⊗X on (1, 0) matches the dense kron product."""
        generator = torch.Generator().manual_seed(7)
        state = torch.randn(4, dtype=torch.complex128, generator=generator)
        dense = torch.kron(H(), X()) @ state
        apply_matrix(state, torch.kron(H(), X()), (1, 0))
        assert torch.allclose(state, dense)


class TestMeasurementHelpers:
    """Tests for probability and collapse helpers."""

    def test_measure_probs(self):
        state = torch.tensor([SQRT2_INV, 0.0, 0.0, SQRT2_INV], dtype=torch.complex128)
        probs = measure_probs(state)
        assert torch.allclose(probs, torch.tensor([0.5, 0.0, 0.0, 0.5], dtype=torch.float64))

    def test_probability_of_one(self):
        state = torch.tensor([0.0, 0.6, 0.0, 0.8], dtype=torch.complex128)
        assert probability_of_one(state, 0, 2) == pytest.approx(1.0)
        assert probability_of_one(state, 1, 2) == pytest.approx(0.64)

    def test_probability_of_one_out_of_range(self):
        with pytest.raises(IndexError):
            probability_of_one(zero_state(2), 5, 2)

    def test_collapse(self):
        state = torch.tensor([0.6, 0.0, 0.8, 0.0], dtype=torch.complex128)
        collapse(state, 1, 1, 0.64, 2)
        assert torch.allclose(state, basis(2, 2))

    def test_collapse_zero_probability(self):
        with pytest.raises(ValueError, match="probability 0"):
            collapse(zero_state(1), 0, 1, 0.0, 1)

    def test_normalize(self):
        state = torch.tensor([3.0, 4.0], dtype=torch.complex128)
        normalize_(state)
        assert torch.allclose(state, torch.tensor([0.6, 0.8], dtype=torch.complex128))

    def test_expectation_value_of_z(self):
        state = torch.tensor([0.6, 0.8], dtype=torch.complex128)
        assert expectation_value(state, Z()) == pytest.approx(0.36 - 0.64)

    def test_density_matrix(self):
        state = torch.tensor([SQRT2_INV, SQRT2_INV], dtype=torch.complex128)
        rho = density_matrix(state)
        assert torch.allclose(rho, torch.full((2, 2), 0.5, dtype=torch.complex128))
