"""
Piecewise-linear interpolation of a black-box maximizer.

Reference: Vlastelica et al. (2020), "Differentiation of Blackbox
Combinatorial Solvers", https://arxiv.org/abs/1912.02175
"""

from __future__ import annotations

from typing import Any, Callable

import numpy as np

from .exceptions import DimensionError, InvalidConfigError
from .pullback import Differentiable, Pullback
from .utils.validation import as_array, as_cotangent


class Interpolation(Differentiable):
    """
    Black-box maximizer with an interpolated backward pass.

    The forward pass returns ŷ(θ) unchanged. The backward pass solves one
    extra problem with objective θ - λ dy and returns

        dθ = (ŷ(θ) - ŷ(θ - λ dy)) / λ,

    the gradient of a piecewise-linear interpolation of the downstream loss.

    Args:
        maximizer: Function θ -> argmax_{y ∈ 𝒴} θᵀy
        lambda_: Smoothing parameter (smaller = more faithful
            approximation, larger = more informative gradients)
    """

    def __init__(self, maximizer: Callable[..., np.ndarray], lambda_: float = 1.0) -> None:
        if not lambda_ > 0:
            raise InvalidConfigError(f"lambda_ must be positive, got {lambda_}")
        self.maximizer = maximizer
        self.lambda_ = float(lambda_)

    def _maximize(self, theta: np.ndarray, **kwargs: Any) -> np.ndarray:
        y = np.asarray(self.maximizer(theta, **kwargs), dtype=np.float64)
        if y.shape != theta.shape:
            raise DimensionError(
                f"maximizer returned shape {y.shape} for theta of shape {theta.shape}"
            )
        return y

    def forward(self, theta: np.ndarray, **kwargs: Any) -> Pullback:
        theta = as_array(theta)
        y = self._maximize(theta, **kwargs)

        def interpolation_pullback(dy):
            dy = as_cotangent(dy, y)
            y_lambda = self._maximize(theta - self.lambda_ * dy, **kwargs)
            return (y - y_lambda) / self.lambda_

        return Pullback(y, interpolation_pullback)

    def __repr__(self) -> str:
        return f"Interpolation(lambda_={self.lambda_})"
