"""Pytest configuration and shared fixtures."""
import numpy as np
import pytest


@pytest.fixture
def rng():
    """
    Provide a seeded random generator so weight initialization and
    training order are the same on every run.
    """
    return np.random.default_rng(42)
