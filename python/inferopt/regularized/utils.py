"""
Helpers for regularized prediction on the probability simplex.
"""

from __future__ import annotations

from typing import Union

import numpy as np
from scipy import special, stats

ArrayLike = Union[float, np.ndarray]


def shannon_entropy(p: np.ndarray) -> float:
    """
    Shannon entropy H(p) = -Σ pᵢ log pᵢ, with 0 log 0 = 0.

    Args:
        p: Probability vector

    Returns:
        Entropy in nats
    """
    return float(np.sum(special.entr(np.asarray(p, dtype=np.float64))))


def half_square_norm(x: np.ndarray) -> float:
    """Squared Euclidean norm of x divided by 2."""
    x = np.asarray(x, dtype=np.float64)
    return 0.5 * float(np.sum(x * x))


def positive_part(x: ArrayLike) -> ArrayLike:
    """Compute max(x, 0), elementwise for arrays."""
    if np.isscalar(x):
        return max(x, 0)
    return np.maximum(x, 0)


def isproba(x: ArrayLike) -> bool:
    """Check whether x ∈ [0, 1] (every entry, for arrays)."""
    x = np.asarray(x, dtype=np.float64)
    return bool(np.all((x >= 0) & (x <= 1)))


# Tolerance for loss targets, which may arrive at float32 precision.
TARGET_TOL = 1e-6


def isprobadist(p: np.ndarray, tol: float = 1e-9) -> bool:
    """
    Check whether the entries of p are nonnegative and sum to 1.

    Args:
        p: Candidate probability vector
        tol: Absolute tolerance on both conditions

    Returns:
        True if p is a probability distribution up to tol
    """
    p = np.asarray(p, dtype=np.float64)
    if p.size == 0:
        return False
    return bool(np.all(p >= -tol) and abs(np.sum(p) - 1.0) <= tol)


def ranking(theta: np.ndarray, rev: bool = False) -> np.ndarray:
    """
    Compute the vector r such that rᵢ is the rank of θᵢ in θ.

    Ranks are 1-based and the largest entry gets rank 1; with rev=True the
    smallest entry gets rank 1. Ties are broken by index order.

    Example:
        >>> ranking(np.array([3., 1., 2.]))
        array([1, 3, 2])
    """
    theta = np.asarray(theta, dtype=np.float64)
    keys = theta if rev else -theta
    return stats.rankdata(keys, method="ordinal").astype(np.int64)
