"""
Regularized Prediction
======================

Smoothed versions of the argmax over the probability simplex, and a generic
Frank-Wolfe solver for regularized prediction over any polytope.

Functions
---------
one_hot_argmax
    Indicator vector of the argmax (Ω = 0).
soft_argmax
    Softmax (Ω = negative entropy).
sparse_argmax
    Euclidean projection onto the simplex (Ω = half square norm).
simplex_projection_and_support
    Same as sparse_argmax, also returning the support mask.

Predictors
----------
OneHotArgmax, SoftArgmax, SparseArgmax
    RegularizedPredictor objects wrapping the functions above, with their
    regularizer values and reverse-mode rules.
RegularizedFrankWolfe
    argmax {θᵀy - Ω(y)} over conv(𝒴) for a user-supplied Ω.
"""

from .frank_wolfe import RegularizedFrankWolfe
from .predictors import OneHotArgmax, RegularizedPredictor, SoftArgmax, SparseArgmax
from .simplex import (
    one_hot_argmax,
    simplex_projection_and_support,
    soft_argmax,
    sparse_argmax,
)
from .utils import (
    half_square_norm,
    isproba,
    isprobadist,
    positive_part,
    ranking,
    shannon_entropy,
)

__all__ = [
    # Closed-form predictions
    "one_hot_argmax",
    "soft_argmax",
    "sparse_argmax",
    "simplex_projection_and_support",
    # Predictor objects
    "RegularizedPredictor",
    "OneHotArgmax",
    "SoftArgmax",
    "SparseArgmax",
    "RegularizedFrankWolfe",
    # Helpers
    "shannon_entropy",
    "half_square_norm",
    "positive_part",
    "isproba",
    "isprobadist",
    "ranking",
]
