"""
Composition of a perturbed maximizer with a downstream function.

For a cost g, θ -> 𝔼[g(ŷ(θ̃))] is the expected cost of the decisions taken
with objective θ; minimizing it is direct regret minimization (learning by
experience, without target solutions).
"""

from __future__ import annotations

from typing import Any, Callable

import numpy as np

from ..exceptions import InvalidConfigError
from ..pullback import Differentiable, Pullback
from .base import AbstractPerturbed


class PerturbedComposition(Differentiable):
    """
    Composition g ∘ perturbed of a perturbed maximizer with a scalar function.

    The forward pass averages g over the replicates. The backward pass does
    not differentiate g: it applies the wrapped perturbation's own
    score-function rule to the values g(ŷ(θ̃ₖ)), so g may itself be a
    black box.

    Args:
        perturbed: PerturbedAdditive or PerturbedMultiplicative instance
        g: Function y -> float (keyword arguments of each call are
            forwarded to both g and the maximizer)
    """

    def __init__(self, perturbed: AbstractPerturbed, g: Callable[..., float]) -> None:
        if not isinstance(perturbed, AbstractPerturbed):
            raise InvalidConfigError(
                f"expected an AbstractPerturbed instance, got {type(perturbed).__name__}"
            )
        self.perturbed = perturbed
        self.g = g

    def forward(self, theta: np.ndarray, **kwargs: Any) -> Pullback:
        theta, Z, _, ys = self.perturbed.replicates(theta, **kwargs)
        values = np.array([float(self.g(y_k, **kwargs)) for y_k in ys])

        def composition_pullback(dl):
            return self.perturbed.score_gradient(theta, Z, float(dl) * values)

        return Pullback(float(values.mean()), composition_pullback)

    def __repr__(self) -> str:
        return f"PerturbedComposition({self.perturbed!r}, g={getattr(self.g, '__name__', self.g)})"


def compose(g: Callable[..., float], perturbed: AbstractPerturbed) -> PerturbedComposition:
    """Create the composition g ∘ perturbed."""
    return PerturbedComposition(perturbed, g)
