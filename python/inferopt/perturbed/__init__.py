"""
Perturbed Maximizers
====================

Smooth a black-box maximizer by averaging it over random perturbations of
its objective, with Monte-Carlo (score-function) gradients.

Classes
-------
PerturbedAdditive
    θ -> θ + εZ, Z ~ N(0, I)
PerturbedMultiplicative
    θ -> θ ⊙ exp(εZ - ε²/2), Z ~ N(0, I)
PerturbedComposition
    g ∘ perturbed, for direct regret minimization
PerturbedConfig
    Validated hyperparameters (ε, number of samples, seed, threads)

Example
-------
>>> import numpy as np
>>> from inferopt.perturbed import PerturbedAdditive
>>> from inferopt.regularized import one_hot_argmax
>>>
>>> perturbed = PerturbedAdditive(one_hot_argmax, epsilon=1.0, nb_samples=1000, seed=0)
>>> y, pullback = perturbed.forward(np.array([3., 1., 2.]))
>>> dtheta = pullback(np.array([1., 0., 0.]))
"""

from .additive import PerturbedAdditive
from .base import AbstractPerturbed
from .composition import PerturbedComposition, compose
from .config import PerturbedConfig
from .multiplicative import PerturbedMultiplicative

__all__ = [
    "AbstractPerturbed",
    "PerturbedAdditive",
    "PerturbedMultiplicative",
    "PerturbedComposition",
    "PerturbedConfig",
    "compose",
]
