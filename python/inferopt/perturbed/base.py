"""
Perturbed Maximizers
====================

A black-box maximizer ŷ(θ) = argmax_{y ∈ 𝒴} θᵀy is piecewise constant. Its
expectation under random perturbations of θ,

    ŷ_ε(θ) = 𝔼[ŷ(θ̃)],   θ̃ = perturbation of θ with noise scale ε,

is smooth, lies in conv(𝒴), and its Jacobian can be estimated from the same
Monte-Carlo replicates with a score-function (Stein) identity. The
maximizer is only ever evaluated, never differentiated.

Reference: Berthet et al. (2020), https://arxiv.org/abs/2002.08676
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional, Tuple

import numpy as np

from ..exceptions import DimensionError, NumericalError
from ..pullback import Differentiable, Pullback
from ..utils.validation import as_array, as_cotangent
from .config import PerturbedConfig

logger = logging.getLogger(__name__)


class AbstractPerturbed(Differentiable):
    """
    Differentiable perturbation of a black-box maximizer.

    Args:
        maximizer: Function θ -> argmax_{y ∈ 𝒴} θᵀy (extra keyword
            arguments of each call are forwarded to it)
        epsilon: Noise scale (default: 1.0)
        nb_samples: Number of Monte-Carlo replicates (default: 1)
        seed: If set, every call draws the same perturbations
        rng: NumPy Generator owned by this instance (default: a fresh
            np.random.default_rng())
        n_jobs: Threads used to evaluate the replicates (default: 1)

    Subclasses must implement:
        perturb(theta, Z): perturbed objectives, shape (K, *theta.shape)
        score_gradient(theta, Z, weights): estimate of ∇θ 𝔼[f(ŷ(θ̃))]
            from the values weights[k] = f(ŷ(θ̃ₖ))
        grad_F(theta, Z, ys): gradient of F(θ) = 𝔼[max_y θ̃ᵀy]

    Available implementations:
        PerturbedAdditive, PerturbedMultiplicative
    """

    def __init__(
        self,
        maximizer: Callable[..., np.ndarray],
        epsilon: float = 1.0,
        nb_samples: int = 1,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        n_jobs: int = 1,
    ) -> None:
        self.config = PerturbedConfig(
            epsilon=epsilon, nb_samples=nb_samples, seed=seed, n_jobs=n_jobs
        )
        self.maximizer = maximizer
        self.rng = rng if rng is not None else np.random.default_rng()

    @property
    def epsilon(self) -> float:
        return self.config.epsilon

    @property
    def nb_samples(self) -> int:
        return self.config.nb_samples

    @property
    def seed(self) -> Optional[int]:
        return self.config.seed

    # ------------------------------------------------------------------
    # Variant-specific rules
    # ------------------------------------------------------------------

    @abstractmethod
    def perturb(self, theta: np.ndarray, Z: np.ndarray) -> np.ndarray:
        pass

    @abstractmethod
    def score_gradient(
        self, theta: np.ndarray, Z: np.ndarray, weights: np.ndarray
    ) -> np.ndarray:
        pass

    @abstractmethod
    def grad_F(self, theta: np.ndarray, Z: np.ndarray, ys: np.ndarray) -> np.ndarray:
        pass

    # ------------------------------------------------------------------
    # Sampling and replicate evaluation
    # ------------------------------------------------------------------

    def sample_perturbations(self, theta: np.ndarray) -> np.ndarray:
        """
        Draw Z ~ N(0, I) with shape (nb_samples, *theta.shape).

        All replicates are drawn before any maximizer call, so replicate k
        sees the same noise whether the replicates run sequentially or on
        several threads.
        """
        if self.seed is not None:
            rng = np.random.default_rng(self.seed)
        else:
            rng = self.rng
        return rng.standard_normal((self.nb_samples,) + np.shape(theta))

    def _maximize(self, theta_k: np.ndarray, **kwargs: Any) -> np.ndarray:
        y = np.asarray(self.maximizer(theta_k, **kwargs), dtype=np.float64)
        if y.shape != theta_k.shape:
            raise DimensionError(
                f"maximizer returned shape {y.shape} for theta of shape {theta_k.shape}"
            )
        return y

    def solve_samples(self, thetas: np.ndarray, **kwargs: Any) -> np.ndarray:
        """
        Evaluate the maximizer on every perturbed objective.

        Results are returned in replicate order. Exceptions raised by the
        maximizer propagate unchanged.
        """
        n_jobs = min(self.config.n_jobs, len(thetas))
        logger.debug("Evaluating %d perturbed replicates on %d worker(s)", len(thetas), n_jobs)

        if n_jobs == 1:
            ys = [self._maximize(theta_k, **kwargs) for theta_k in thetas]
        else:
            with ThreadPoolExecutor(max_workers=n_jobs) as pool:
                ys = list(pool.map(lambda theta_k: self._maximize(theta_k, **kwargs), thetas))
        return np.stack(ys)

    def replicates(
        self, theta: Any, Z: Optional[np.ndarray] = None, **kwargs: Any
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """
        Draw (or check) the perturbations and solve every replicate.

        Returns:
            theta: Validated objective
            Z: Standard normal draws (K, *theta.shape)
            thetas: Perturbed objectives (K, *theta.shape)
            ys: Maximizer outputs (K, *theta.shape)
        """
        theta = as_array(theta)
        if Z is None:
            Z = self.sample_perturbations(theta)
        else:
            Z = np.asarray(Z, dtype=np.float64)
            if Z.shape[1:] != theta.shape:
                raise DimensionError(
                    f"perturbations have shape {Z.shape}, expected (K, *{theta.shape})"
                )
        thetas = self.perturb(theta, Z)
        return theta, Z, thetas, self.solve_samples(thetas, **kwargs)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def __call__(
        self, theta: np.ndarray, Z: Optional[np.ndarray] = None, **kwargs: Any
    ) -> np.ndarray:
        """Monte-Carlo estimate of 𝔼[ŷ(θ̃)], optionally on given perturbations Z."""
        _, _, _, ys = self.replicates(theta, Z, **kwargs)
        return ys.mean(axis=0)

    def forward(self, theta: np.ndarray, **kwargs: Any) -> Pullback:
        """
        Prediction and its pullback.

        The pullback maps dy to the score-function estimate
        ∇θ 𝔼[⟨dy, ŷ(θ̃)⟩], reusing the replicates of the forward pass.
        """
        theta, Z, _, ys = self.replicates(theta, **kwargs)

        def perturbed_pullback(dy):
            dy = as_cotangent(dy, theta)
            weights = np.tensordot(ys, dy, axes=dy.ndim)
            return self.score_gradient(theta, Z, weights)

        return Pullback(ys.mean(axis=0), perturbed_pullback)

    def compute_y_and_F(
        self, theta: np.ndarray, Z: Optional[np.ndarray] = None, **kwargs: Any
    ) -> Tuple[np.ndarray, float, np.ndarray]:
        """
        Quantities needed by the Fenchel-Young loss of a perturbed maximizer.

        Returns:
            y: Monte-Carlo prediction 𝔼[ŷ(θ̃)]
            F: Monte-Carlo estimate of F(θ) = 𝔼[max_y θ̃ᵀy]
            grad: Estimate of ∇F(θ)
        """
        theta, Z, thetas, ys = self.replicates(theta, Z, **kwargs)
        axes = tuple(range(1, ys.ndim))
        F = float(np.mean(np.sum(thetas * ys, axis=axes)))
        return ys.mean(axis=0), F, self.grad_F(theta, Z, ys)

    @staticmethod
    def _check_finite(dtheta: np.ndarray) -> np.ndarray:
        if not np.all(np.isfinite(dtheta)):
            raise NumericalError("score-function gradient is not finite")
        return dtheta

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(epsilon={self.epsilon}, "
            f"nb_samples={self.nb_samples}, seed={self.seed})"
        )
