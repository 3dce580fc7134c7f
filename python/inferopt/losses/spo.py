"""
SPO+ loss.

Reference: Elmachtoub & Grigas (2022), "Smart 'Predict, then Optimize'",
https://arxiv.org/abs/1710.08005
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import numpy as np

from ..exceptions import DimensionError, InvalidConfigError, InvalidInputError
from ..pullback import Differentiable, Pullback
from ..utils.validation import as_array, check_pair


class SPOPlusLoss(Differentiable):
    """
    Convex surrogate of the Smart "Predict-then-Optimize" loss.

    With θ_α = αθ - θ_true and y_α = ŷ(θ_α):

        ℓ(θ, θ_true, y_true) = θ_αᵀy_α + θ_trueᵀy_true - αθᵀy_true

    The loss is convex in θ, nonnegative (y = y_true is feasible in the
    inner max), and has subgradient α(y_α - y_true). With the default
    α = 2 this is 2(ŷ(2θ - θ_true) - y_true).

    Args:
        maximizer: Linear maximizer θ -> argmax_{y ∈ 𝒴} θᵀy
        alpha: Convexification parameter (default: 2.0)
    """

    def __init__(self, maximizer: Callable[..., np.ndarray], alpha: float = 2.0) -> None:
        if not alpha > 0:
            raise InvalidConfigError(f"alpha must be positive, got {alpha}")
        self.maximizer = maximizer
        self.alpha = float(alpha)

    def _maximize(self, theta: np.ndarray, **kwargs: Any) -> np.ndarray:
        y = np.asarray(self.maximizer(theta, **kwargs), dtype=np.float64)
        if y.shape != theta.shape:
            raise DimensionError(
                f"maximizer returned shape {y.shape} for theta of shape {theta.shape}"
            )
        return y

    def forward(
        self,
        theta: np.ndarray,
        theta_true: Optional[np.ndarray] = None,
        y_true: Optional[np.ndarray] = None,
        **kwargs: Any,
    ) -> Pullback:
        """
        Loss value and pullback.

        Args:
            theta: Predicted objective
            theta_true: True objective (required)
            y_true: Optimal solution for theta_true; computed with the
                maximizer when omitted
        """
        if theta_true is None:
            raise InvalidInputError("SPO+ loss requires the true objective theta_true")
        theta = as_array(theta)
        theta_true = as_array(theta_true, name="theta_true")
        check_pair(theta, theta_true)

        if y_true is None:
            y_true = self._maximize(theta_true, **kwargs)
        else:
            y_true = as_array(y_true, name="y_true")
            check_pair(theta, y_true)

        theta_alpha = self.alpha * theta - theta_true
        y_alpha = self._maximize(theta_alpha, **kwargs)
        loss = (
            float(np.vdot(theta_alpha, y_alpha))
            + float(np.vdot(theta_true, y_true))
            - self.alpha * float(np.vdot(theta, y_true))
        )
        grad = self.alpha * (y_alpha - y_true)

        def spoplus_pullback(dl):
            return float(dl) * grad

        return Pullback(loss, spoplus_pullback)

    def __repr__(self) -> str:
        return f"SPOPlusLoss(alpha={self.alpha})"
