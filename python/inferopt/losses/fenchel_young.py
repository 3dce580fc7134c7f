"""
Fenchel-Young losses.

Reference: Blondel et al. (2020), "Learning with Fenchel-Young Losses",
https://arxiv.org/abs/1901.02324
"""

from __future__ import annotations

from typing import Any, Union

import numpy as np

from ..exceptions import InvalidConfigError, NumericalError
from ..perturbed.base import AbstractPerturbed
from ..pullback import Differentiable, Pullback
from ..regularized.predictors import OneHotArgmax, RegularizedPredictor
from ..utils.validation import as_array, check_pair

Predictor = Union[RegularizedPredictor, AbstractPerturbed]


class FenchelYoungLoss(Differentiable):
    """
    Fenchel-Young loss associated with a regularized prediction function.

        ℓ(θ, y_true) = Ω*(θ) + Ω(y_true) - θᵀy_true

    where Ω*(θ) = θᵀŷ(θ) - Ω(ŷ(θ)) is realized by the predictor. The loss is
    convex in θ, nonnegative, and its gradient is ŷ(θ) - y_true.

    For a perturbed maximizer, Ω* is F(θ) = 𝔼[max_y θ̃ᵀy], estimated by
    Monte-Carlo, and the gradient is ∇F(θ) - y_true.

    Args:
        predictor: RegularizedPredictor (other than OneHotArgmax) or
            AbstractPerturbed instance

    Example:
        >>> loss = FenchelYoungLoss(SoftArgmax())
        >>> loss(np.array([3., 1., 2.]), np.array([1., 0., 0.]))  # log(e³ + e + e²) - 3 ≈ 0.408
    """

    def __init__(self, predictor: Predictor) -> None:
        if isinstance(predictor, OneHotArgmax):
            raise InvalidConfigError(
                "one_hot_argmax has a zero gradient; use SoftArgmax, SparseArgmax "
                "or a perturbed maximizer"
            )
        if not isinstance(predictor, (RegularizedPredictor, AbstractPerturbed)):
            raise InvalidConfigError(
                "predictor must be a RegularizedPredictor or an AbstractPerturbed, "
                f"got {type(predictor).__name__}"
            )
        self.predictor = predictor

    def forward(self, theta: np.ndarray, y_true: np.ndarray, **kwargs: Any) -> Pullback:
        theta = as_array(theta)
        y_true = as_array(y_true, name="y_true")
        check_pair(theta, y_true)

        if isinstance(self.predictor, AbstractPerturbed):
            _, F, grad_F = self.predictor.compute_y_and_F(theta, **kwargs)
            loss = F - float(np.vdot(theta, y_true))
            grad = grad_F - y_true
        else:
            y_hat = self.predictor(theta, **kwargs)
            omega_y_hat = self.predictor.compute_regularization(y_hat)
            omega_y_true = self.predictor.compute_regularization(y_true)
            loss = (
                float(np.vdot(theta, y_hat)) - omega_y_hat
                + omega_y_true - float(np.vdot(theta, y_true))
            )
            grad = y_hat - y_true

        if not np.isfinite(loss):
            raise NumericalError(
                "Fenchel-Young loss is not finite; y_true may lie outside the "
                "domain of the regularizer"
            )

        def fenchel_young_pullback(dl):
            return float(dl) * grad

        return Pullback(loss, fenchel_young_pullback)

    def __repr__(self) -> str:
        return f"FenchelYoungLoss({self.predictor!r})"
