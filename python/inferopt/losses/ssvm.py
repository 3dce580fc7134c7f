"""
Structured Support Vector Machine loss.

Reference: Nowozin & Lampert (2011), "Structured Learning and Prediction in
Computer Vision", Chapter 6.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from ..exceptions import InvalidConfigError
from ..pullback import Differentiable, Pullback
from ..regularized.simplex import one_hot_argmax
from ..utils.validation import as_array, check_pair


class BaseLoss(ABC):
    """
    Interface for base losses δ(y, y_true) of a StructuredSVMLoss.

    Subclasses must implement:
        __call__(y, y_true): dissimilarity δ(y, y_true) >= 0
        compute_maximizer(theta, alpha, y_true):
            argmax_y {δ(y, y_true) + α θᵀ(y - y_true)}

    Available implementations:
        ZeroOneBaseLoss
    """

    @abstractmethod
    def __call__(self, y: np.ndarray, y_true: np.ndarray) -> float:
        pass

    @abstractmethod
    def compute_maximizer(
        self, theta: np.ndarray, alpha: float, y_true: np.ndarray, **kwargs: Any
    ) -> np.ndarray:
        pass


class ZeroOneBaseLoss(BaseLoss):
    """
    0-1 loss for multiclass classification: δ(y, y_true) = 0 if y = y_true, 1 otherwise.

    Solutions are one-hot vectors. For y = eⱼ the inner objective is
    α θⱼ + 1 - y_true[j] up to a constant, hence the loss-augmented argmax
    is one_hot_argmax(α θ + 1 - y_true).
    """

    def __call__(self, y: np.ndarray, y_true: np.ndarray) -> float:
        return 0.0 if np.array_equal(y, y_true) else 1.0

    def compute_maximizer(
        self, theta: np.ndarray, alpha: float, y_true: np.ndarray, **kwargs: Any
    ) -> np.ndarray:
        return one_hot_argmax(alpha * theta + 1.0 - y_true)

    def __repr__(self) -> str:
        return "ZeroOneBaseLoss()"


class StructuredSVMLoss(Differentiable):
    """
    Loss associated with the Structured Support Vector Machine.

        ℓ(θ, y_true) = max_y {δ(y, y_true) + α θᵀ(y - y_true)}

    The term y = y_true contributes δ(y_true, y_true) = 0, so ℓ >= 0. The
    subgradient is α(y* - y_true) with y* the loss-augmented maximizer.

    Args:
        base_loss: BaseLoss instance
        alpha: Scaling of the linear term (default: 1.0)
    """

    def __init__(self, base_loss: BaseLoss, alpha: float = 1.0) -> None:
        if not isinstance(base_loss, BaseLoss):
            raise InvalidConfigError(
                f"base_loss must implement BaseLoss, got {type(base_loss).__name__}"
            )
        if not alpha >= 0:
            raise InvalidConfigError(f"alpha must be nonnegative, got {alpha}")
        self.base_loss = base_loss
        self.alpha = float(alpha)

    def forward(self, theta: np.ndarray, y_true: np.ndarray, **kwargs: Any) -> Pullback:
        theta = as_array(theta)
        y_true = as_array(y_true, name="y_true")
        check_pair(theta, y_true)

        y_star = np.asarray(
            self.base_loss.compute_maximizer(theta, self.alpha, y_true, **kwargs),
            dtype=np.float64,
        )
        check_pair(theta, y_star)
        loss = self.base_loss(y_star, y_true) + self.alpha * float(np.vdot(theta, y_star - y_true))
        grad = self.alpha * (y_star - y_true)

        def ssvm_pullback(dl):
            return float(dl) * grad

        return Pullback(loss, ssvm_pullback)

    def __repr__(self) -> str:
        return f"StructuredSVMLoss({self.base_loss!r}, alpha={self.alpha})"
