"""Configuration of perturbed maximizers."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Optional

from ..exceptions import InvalidConfigError


@dataclass(frozen=True)
class PerturbedConfig:
    """
    Hyperparameters of a perturbed maximizer.

    Attributes:
        epsilon: Noise scale ε > 0 (larger = smoother, more biased)
        nb_samples: Number of Monte-Carlo replicates K >= 1
        seed: If set, every call replays the same perturbations
        n_jobs: Worker threads used to evaluate the K replicates
    """

    epsilon: float = 1.0
    nb_samples: int = 1
    seed: Optional[int] = None
    n_jobs: int = 1

    def __post_init__(self) -> None:
        if not (isinstance(self.epsilon, numbers.Real) and math.isfinite(self.epsilon)):
            raise InvalidConfigError(f"epsilon must be a finite number, got {self.epsilon!r}")
        if self.epsilon <= 0:
            raise InvalidConfigError(f"epsilon must be positive, got {self.epsilon}")
        if not isinstance(self.nb_samples, numbers.Integral) or self.nb_samples < 1:
            raise InvalidConfigError(f"nb_samples must be an integer >= 1, got {self.nb_samples}")
        if not isinstance(self.n_jobs, numbers.Integral) or self.n_jobs < 1:
            raise InvalidConfigError(f"n_jobs must be an integer >= 1, got {self.n_jobs}")
