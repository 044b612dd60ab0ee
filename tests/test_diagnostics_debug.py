"""Tests for debug mode functionality."""

import pytest
import torch

from qsimcore.backend.statevector import apply_matrix, zero_state
from qsimcore.diagnostics import (
    debug_context,
    is_debug_enabled,
    set_debug_enabled,
)
from qsimcore.gates import standard as stdgates


def test_debug_mode_toggle_and_context() -> None:
    """Test debug mode toggling and context manager."""
    original = is_debug_enabled()

    try:
        set_debug_enabled(False)
        assert not is_debug_enabled()

        with debug_context(True):
            assert is_debug_enabled()

        assert not is_debug_enabled()

        set_debug_enabled(True)
        with debug_context(False):
            assert not is_debug_enabled()
        assert is_debug_enabled()
    finally:
        set_debug_enabled(original)


def test_debug_context_restores_on_error() -> None:
    """The previous setting is restored even if the block raises."""
    original = is_debug_enabled()
    try:
        set_debug_enabled(False)
        with pytest.raises(RuntimeError):
            with debug_context(True):
                raise RuntimeError("boom")
        assert not is_debug_enabled()
    finally:
        set_debug_enabled(original)


def test_debug_mode_checks_normalization_after_gate() -> None:
    """A non-unitary matrix is caught by the kernel only in debug mode."""
    not_unitary = 2.0 * stdgates.I()

    state = zero_state(1)
    with debug_context(False):
        apply_matrix(state, not_unitary, (0,))
    assert torch.allclose(state[0], torch.tensor(2.0 + 0.0j, dtype=torch.complex128))

    state = zero_state(1)
    with debug_context(True):
        with pytest.raises(ValueError, match="not normalized"):
            apply_matrix(state, not_unitary, (0,))


def test_debug_mode_accepts_unitary_gates() -> None:
    state = zero_state(2)
    with debug_context(True):
        apply_matrix(state, stdgates.H(), (0,))
        apply_matrix(state, stdgates.CX(), (0, 1))
    assert torch.isclose(torch.linalg.vector_norm(state), torch.tensor(1.0, dtype=torch.float64))
