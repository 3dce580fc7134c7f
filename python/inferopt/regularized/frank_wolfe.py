"""
Generic regularized prediction by Frank-Wolfe.

When 𝒴 is not the simplex, ŷ(θ) = argmax_{y ∈ conv(𝒴)} {θᵀy - Ω(y)} has no
closed form, but the maximizer itself is a linear minimization oracle over
conv(𝒴): each Frank-Wolfe step calls it on the gradient θ - ∇Ω(y).
"""

from __future__ import annotations

import logging
import warnings
from typing import Any, Callable

import numpy as np
from scipy.optimize import minimize_scalar

from ..exceptions import DimensionError, InvalidConfigError
from ..pullback import Pullback
from .predictors import RegularizedPredictor

logger = logging.getLogger(__name__)

NO_PULLBACK_MESSAGE = (
    "RegularizedFrankWolfe has no reverse-mode rule; wrap it in a FenchelYoungLoss instead"
)


class RegularizedFrankWolfe(RegularizedPredictor):
    """
    Regularized prediction over conv(𝒴) for an arbitrary convex Ω.

    Args:
        maximizer: Linear maximizer θ -> argmax_{y ∈ 𝒴} θᵀy
        omega: Convex regularizer y -> Ω(y)
        omega_grad: Gradient y -> ∇Ω(y)
        max_iteration: Maximum Frank-Wolfe iterations (default: 100)
        tol: Stop when the Frank-Wolfe duality gap falls below tol
        line_search: Exact line search on [0, 1] instead of the 2/(t+2) rule

    Only prediction is available: differentiating the Frank-Wolfe solution
    requires implicit differentiation, so forward() and pullback() raise
    InvalidConfigError. Use it inside a FenchelYoungLoss, whose gradient
    ŷ(θ) - y_true needs no Jacobian.

    Example:
        >>> fw = RegularizedFrankWolfe(
        ...     one_hot_argmax, half_square_norm, lambda y: y, max_iteration=500
        ... )
        >>> fw(np.array([0.5, 0.3, 0.1]))  # ≈ sparse_argmax
    """

    def __init__(
        self,
        maximizer: Callable[..., np.ndarray],
        omega: Callable[[np.ndarray], float],
        omega_grad: Callable[[np.ndarray], np.ndarray],
        max_iteration: int = 100,
        tol: float = 1e-6,
        line_search: bool = True,
    ) -> None:
        if max_iteration < 1:
            raise InvalidConfigError(f"max_iteration must be >= 1, got {max_iteration}")
        if not tol > 0:
            raise InvalidConfigError(f"tol must be positive, got {tol}")

        self.maximizer = maximizer
        self.omega = omega
        self.omega_grad = omega_grad
        self.max_iteration = max_iteration
        self.tol = tol
        self.line_search = line_search

    def _objective(self, theta: np.ndarray, y: np.ndarray) -> float:
        return float(np.vdot(theta, y)) - self.omega(y)

    def predict(self, theta: np.ndarray, **kwargs: Any) -> np.ndarray:
        y = np.asarray(self.maximizer(theta, **kwargs), dtype=np.float64)
        if y.shape != theta.shape:
            raise DimensionError(
                f"maximizer returned shape {y.shape} for theta of shape {theta.shape}"
            )

        gap = np.inf
        for t in range(self.max_iteration):
            direction = theta - self.omega_grad(y)
            v = np.asarray(self.maximizer(direction, **kwargs), dtype=np.float64)
            d = v - y
            gap = float(np.vdot(direction, d))
            if gap <= self.tol:
                logger.debug("Frank-Wolfe converged after %d iterations (gap=%.3e)", t, gap)
                return y

            if self.line_search:
                res = minimize_scalar(
                    lambda gamma: -self._objective(theta, y + gamma * d),
                    bounds=(0.0, 1.0),
                    method="bounded",
                )
                step = float(res.x)
            else:
                step = 2.0 / (t + 2.0)
            y = y + step * d

        warnings.warn(
            f"Frank-Wolfe stopped after {self.max_iteration} iterations with gap "
            f"{gap:.3e} > {self.tol:.1e}. The prediction may be inaccurate."
        )
        return y

    def compute_regularization(self, y: np.ndarray) -> float:
        return float(self.omega(np.asarray(y, dtype=np.float64)))

    def forward(self, theta: np.ndarray, **kwargs: Any) -> Pullback:
        raise InvalidConfigError(NO_PULLBACK_MESSAGE)

    def pullback(self, theta: np.ndarray, y: np.ndarray, **kwargs: Any):
        raise InvalidConfigError(NO_PULLBACK_MESSAGE)

    def __repr__(self) -> str:
        return (
            f"RegularizedFrankWolfe(max_iteration={self.max_iteration}, "
            f"tol={self.tol}, line_search={self.line_search})"
        )
