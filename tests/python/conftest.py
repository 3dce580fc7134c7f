"""
pytest configuration and fixtures for inferopt tests.
"""

import pytest
import numpy as np


# ============================================================================
# Maximizers
# ============================================================================

def make_vertex_maximizer(vertices):
    """
    Brute-force maximizer over an explicit finite set 𝒴 (rows of vertices).

    Ties go to the first vertex, as in one_hot_argmax.
    """
    vertices = np.asarray(vertices, dtype=np.float64)

    def maximizer(theta, **kwargs):
        return vertices[np.argmax(vertices @ theta)].copy()

    return maximizer


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def theta():
    """
    Objective used in the worked example.

    one_hot_argmax(theta) = [1, 0, 0]
    soft_argmax(theta) ≈ [0.665, 0.090, 0.245]
    """
    return np.array([3.0, 1.0, 2.0])


@pytest.fixture
def y_true():
    """First vertex of the 3-simplex."""
    return np.array([1.0, 0.0, 0.0])


@pytest.fixture
def path_vertices():
    """
    Four 0/1 "paths" over 5 edges, a small non-simplex feasible set.
    """
    return np.array([
        [1.0, 1.0, 0.0, 0.0, 0.0],
        [0.0, 1.0, 1.0, 1.0, 0.0],
        [1.0, 0.0, 0.0, 1.0, 1.0],
        [0.0, 0.0, 1.0, 0.0, 1.0],
    ])


@pytest.fixture
def path_maximizer(path_vertices):
    """Maximizer over path_vertices."""
    return make_vertex_maximizer(path_vertices)


@pytest.fixture
def rng():
    """Seeded generator for test data."""
    return np.random.default_rng(42)


# ============================================================================
# Markers
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")
