"""Multiplicative log-normal perturbation θ -> θ ⊙ exp(εZ - ε²/2)."""

from __future__ import annotations

import numpy as np

from .base import AbstractPerturbed


class PerturbedMultiplicative(AbstractPerturbed):
    """
    Differentiable log-normal perturbation of a black-box maximizer.

    The input undergoes θ -> θ ⊙ exp(εZ - ε²/2) with Z ~ N(0, I). The factor
    has mean 1 and is positive, so the sign pattern of θ is preserved
    (useful for strictly positive costs). Stein's lemma on log|θ| gives

        ∇θ 𝔼[f(ŷ(θ̃))] = 𝔼[f(ŷ(θ̃)) Z] / (ε θ),

    which requires every entry of θ to be nonzero.
    """

    def _factors(self, Z: np.ndarray) -> np.ndarray:
        eps = self.epsilon
        return np.exp(eps * Z - eps**2 / 2)

    def perturb(self, theta: np.ndarray, Z: np.ndarray) -> np.ndarray:
        return theta * self._factors(Z)

    def score_gradient(
        self, theta: np.ndarray, Z: np.ndarray, weights: np.ndarray
    ) -> np.ndarray:
        mean_score = np.tensordot(weights, Z, axes=1) / len(Z)
        with np.errstate(divide="ignore", invalid="ignore"):
            dtheta = mean_score / (self.epsilon * theta)
        return self._check_finite(dtheta)

    def grad_F(self, theta: np.ndarray, Z: np.ndarray, ys: np.ndarray) -> np.ndarray:
        # ∇θ max_y θ̃ᵀy = exp(εZ - ε²/2) ⊙ ŷ(θ̃)
        return np.mean(self._factors(Z) * ys, axis=0)
