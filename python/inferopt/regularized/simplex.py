"""
Regularized Prediction on the Probability Simplex
=================================================

Closed-form solutions of

    ŷ(z) = argmax_{p ∈ Δ} { zᵀp - Ω(p) }

for three choices of the regularizer Ω:

- one_hot_argmax: Ω = 0 (plain argmax, a vertex of the simplex)
- soft_argmax: Ω(p) = -H(p), negative Shannon entropy (softmax)
- sparse_argmax: Ω(p) = ½‖p‖², Euclidean projection (sparsemax)

Reference: Blondel et al. (2020), "Learning with Fenchel-Young Losses".
"""

from __future__ import annotations

from typing import Tuple, Union

import numpy as np
from scipy import special

from ..exceptions import DimensionError, NumericalError


def _as_score_vector(z: np.ndarray) -> np.ndarray:
    z = np.asarray(z, dtype=np.float64)
    if z.ndim != 1:
        raise DimensionError(f"expected a 1-D score vector, got shape {z.shape}")
    if z.size == 0:
        raise DimensionError("score vector is empty")
    if not np.all(np.isfinite(z)):
        raise NumericalError("score vector contains non-finite values")
    return z


def one_hot_argmax(z: np.ndarray) -> np.ndarray:
    """
    One-hot encoding of the argmax function.

    Ties are broken in favor of the first maximal index.
    """
    z = _as_score_vector(z)
    e = np.zeros_like(z)
    e[np.argmax(z)] = 1.0
    return e


def soft_argmax(z: np.ndarray) -> np.ndarray:
    """
    Soft argmax activation s(z) = (exp(zᵢ) / Σⱼ exp(zⱼ))ᵢ.

    Corresponds to regularized prediction on the probability simplex with
    entropic penalty. The log-normalizer is computed with the max-shift
    trick, so large scores do not overflow.

    Raises:
        NumericalError: If z has NaN/inf entries
    """
    z = _as_score_vector(z)
    return np.exp(z - special.logsumexp(z))


def simplex_projection_and_support(z: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Euclidean projection p of z onto the probability simplex, and its support.

    Sort z in decreasing order, find the largest k such that
    z₍ₖ₎ - (Σ_{j≤k} z₍ⱼ₎ - 1) / k > 0, and threshold z at that level.

    Args:
        z: Score vector (d,)

    Returns:
        p: Projection (d,), nonnegative and summing to 1
        s: Boolean support mask (d,), True where p > 0

    Reference: Martins & Astudillo (2016), https://arxiv.org/abs/1602.02068
    """
    z = _as_score_vector(z)
    u = np.sort(z)[::-1]
    cssv = np.cumsum(u) - 1.0
    k = np.arange(1, z.size + 1)
    cond = u - cssv / k > 0
    # cond[0] is always true since u₁ - (u₁ - 1) = 1
    rho = np.flatnonzero(cond)[-1]
    tau = cssv[rho] / (rho + 1)
    p = np.maximum(z - tau, 0.0)
    return p, p > 0


def sparse_argmax(
    z: np.ndarray, return_support: bool = False
) -> Union[np.ndarray, Tuple[np.ndarray, np.ndarray]]:
    """
    Compute the Euclidean projection of the vector z onto the probability simplex.

    Corresponds to regularized prediction on the probability simplex with
    square norm penalty.

    Args:
        z: Score vector (d,)
        return_support: Also return the boolean support mask

    Returns:
        p, or (p, support) if return_support is True

    Raises:
        DimensionError: If z is empty
    """
    p, s = simplex_projection_and_support(z)
    if return_support:
        return p, s
    return p
