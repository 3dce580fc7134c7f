"""
Regularized Predictors
======================

Objects implementing regularized prediction functions

    ŷ(θ) = argmax_{y ∈ conv(𝒴)} { θᵀy - Ω(y) }

together with the value of Ω (needed by the Fenchel-Young loss) and a
reverse-mode rule (needed to use ŷ as a layer).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any

import numpy as np

from ..pullback import Differentiable, Pullback
from ..utils.validation import as_cotangent
from .simplex import one_hot_argmax, simplex_projection_and_support, soft_argmax
from .utils import TARGET_TOL, half_square_norm, isprobadist, shannon_entropy


class RegularizedPredictor(Differentiable):
    """
    Interface for regularized prediction functions ŷ(θ) = argmax {θᵀy - Ω(y)}.

    Subclasses must implement:
        predict(theta): the prediction ŷ(θ)
        compute_regularization(y): the value Ω(y), +inf outside dom Ω
            (membership is checked up to TARGET_TOL)
        pullback(theta, y): the map dy -> dθ at θ, with y = ŷ(θ)

    Available implementations:
        OneHotArgmax, SoftArgmax, SparseArgmax, RegularizedFrankWolfe
    """

    @abstractmethod
    def predict(self, theta: np.ndarray, **kwargs: Any) -> np.ndarray:
        pass

    @abstractmethod
    def compute_regularization(self, y: np.ndarray) -> float:
        pass

    @abstractmethod
    def pullback(self, theta: np.ndarray, y: np.ndarray, **kwargs: Any):
        pass

    def forward(self, theta: np.ndarray, **kwargs: Any) -> Pullback:
        theta = np.asarray(theta, dtype=np.float64)
        y = self.predict(theta, **kwargs)
        return Pullback(y, self.pullback(theta, y, **kwargs))

    def __call__(self, theta: np.ndarray, **kwargs: Any) -> np.ndarray:
        return self.predict(np.asarray(theta, dtype=np.float64), **kwargs)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class OneHotArgmax(RegularizedPredictor):
    """
    Plain argmax over the simplex vertices (Ω = 0 on vertices).

    Its derivative is zero almost everywhere, so it is a deterministic
    baseline rather than a trainable layer. It cannot be used in a
    FenchelYoungLoss.
    """

    def predict(self, theta: np.ndarray, **kwargs: Any) -> np.ndarray:
        return one_hot_argmax(theta)

    def compute_regularization(self, y: np.ndarray) -> float:
        y = np.asarray(y, dtype=np.float64)
        is_vertex = isprobadist(y, TARGET_TOL) and np.count_nonzero(np.abs(y) > TARGET_TOL) == 1
        return 0.0 if is_vertex else np.inf

    def pullback(self, theta: np.ndarray, y: np.ndarray, **kwargs: Any):
        def one_hot_argmax_pullback(dy):
            as_cotangent(dy, y)
            return np.zeros_like(theta)

        return one_hot_argmax_pullback


class SoftArgmax(RegularizedPredictor):
    """
    Softmax prediction, Ω(y) = -H(y) on the probability simplex.

    The Jacobian is diag(s) - ssᵀ, so the pullback is s ⊙ (dy - ⟨s, dy⟩).
    """

    def predict(self, theta: np.ndarray, **kwargs: Any) -> np.ndarray:
        s = soft_argmax(theta)
        assert isprobadist(s), "soft_argmax left the probability simplex"
        return s

    def compute_regularization(self, y: np.ndarray) -> float:
        if not isprobadist(y, TARGET_TOL):
            return np.inf
        return -shannon_entropy(np.clip(y, 0.0, None))

    def pullback(self, theta: np.ndarray, y: np.ndarray, **kwargs: Any):
        def soft_argmax_pullback(dy):
            dy = as_cotangent(dy, y)
            return y * (dy - np.dot(y, dy))

        return soft_argmax_pullback


class SparseArgmax(RegularizedPredictor):
    """
    Sparsemax prediction, Ω(y) = ½‖y‖² on the probability simplex.

    On the support S of the projection the Jacobian is I - 1 1ᵀ / |S|, and
    zero elsewhere.
    """

    def predict(self, theta: np.ndarray, **kwargs: Any) -> np.ndarray:
        p, _ = simplex_projection_and_support(theta)
        assert isprobadist(p), "sparse_argmax left the probability simplex"
        return p

    def compute_regularization(self, y: np.ndarray) -> float:
        return half_square_norm(y) if isprobadist(y, TARGET_TOL) else np.inf

    def pullback(self, theta: np.ndarray, y: np.ndarray, **kwargs: Any):
        _, mask = simplex_projection_and_support(theta)
        support = mask.astype(np.float64)
        size = support.sum()

        def sparse_argmax_pullback(dy):
            dy = as_cotangent(dy, y)
            return support * (dy - np.dot(support, dy) / size)

        return sparse_argmax_pullback
