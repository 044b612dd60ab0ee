"""Pytest configuration and shared fixtures for qsimcore tests.

This module provides:
- Deterministic RNG fixtures for numpy and torch
- A seed for simulator engines
"""

import os

import numpy as np
import pytest
import torch


def _test_seed() -> int:
    return int(os.environ.get("TEST_RNG_SEED", "0"))


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    """
    return np.random.default_rng(_test_seed())


@pytest.fixture(scope="function")
def seed() -> int:
    """Seed passed to StateVectorSimulator in tests that sample."""
    return _test_seed()


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Auto-use fixture to set global random seeds for reproducibility."""
    np.random.seed(_test_seed())
    torch.manual_seed(_test_seed())
