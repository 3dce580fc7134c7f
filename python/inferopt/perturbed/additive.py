"""Additive Gaussian perturbation θ -> θ + εZ."""

from __future__ import annotations

import numpy as np

from .base import AbstractPerturbed


class PerturbedAdditive(AbstractPerturbed):
    """
    Differentiable normal perturbation of a black-box maximizer.

    The input undergoes θ -> θ + εZ with Z ~ N(0, I). By Stein's lemma,

        ∇θ 𝔼[f(ŷ(θ + εZ))] = 𝔼[f(ŷ(θ + εZ)) Z] / ε,

    estimated by averaging over the replicates.

    Example:
        >>> perturbed = PerturbedAdditive(one_hot_argmax, epsilon=0.5, nb_samples=100)
        >>> y = perturbed(np.array([3., 1., 2.]))  # ≈ point of the simplex
    """

    def perturb(self, theta: np.ndarray, Z: np.ndarray) -> np.ndarray:
        return theta + self.epsilon * Z

    def score_gradient(
        self, theta: np.ndarray, Z: np.ndarray, weights: np.ndarray
    ) -> np.ndarray:
        dtheta = np.tensordot(weights, Z, axes=1) / (len(Z) * self.epsilon)
        return self._check_finite(dtheta)

    def grad_F(self, theta: np.ndarray, Z: np.ndarray, ys: np.ndarray) -> np.ndarray:
        # Envelope theorem: ∇θ max_y (θ + εZ)ᵀy = ŷ(θ + εZ)
        return ys.mean(axis=0)
