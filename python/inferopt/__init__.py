"""
InferOpt: Combinatorial Optimization Layers for Machine Learning
================================================================

inferopt turns a black-box maximizer θ -> ŷ(θ) = argmax_{y ∈ 𝒴} θᵀy
(shortest path, matching, MILP, ...) into a layer that can be trained with
gradient methods, and provides structured losses aware of it.

Quick Start
-----------
>>> import numpy as np
>>> import inferopt
>>>
>>> theta = np.array([3., 1., 2.])
>>> y_true = np.array([1., 0., 0.])
>>>
>>> loss = inferopt.FenchelYoungLoss(inferopt.SoftArgmax())
>>> value, pullback = loss.forward(theta, y_true)
>>> grad = pullback(1.0)  # soft_argmax(theta) - y_true

Any maximizer can be smoothed by random perturbations:

>>> perturbed = inferopt.PerturbedAdditive(
...     inferopt.one_hot_argmax, epsilon=1.0, nb_samples=100, seed=0
... )
>>> loss = inferopt.FenchelYoungLoss(perturbed)
>>> value = loss(theta, y_true)

PyTorch layers live in ``inferopt.torch``.
"""

__version__ = "0.2.0"
__author__ = "InferOpt Contributors"

# Import public API
from .exceptions import (
    DimensionError,
    InferOptError,
    InvalidConfigError,
    InvalidInputError,
    NumericalError,
    OracleFailure,
)
from .interpolation import Interpolation
from .losses import (
    BaseLoss,
    FenchelYoungLoss,
    SPOPlusLoss,
    StructuredSVMLoss,
    ZeroOneBaseLoss,
)
from .perturbed import (
    AbstractPerturbed,
    PerturbedAdditive,
    PerturbedComposition,
    PerturbedConfig,
    PerturbedMultiplicative,
    compose,
)
from .pullback import Differentiable, Pullback, chain
from .regularized import (
    OneHotArgmax,
    RegularizedFrankWolfe,
    RegularizedPredictor,
    SoftArgmax,
    SparseArgmax,
    half_square_norm,
    isproba,
    isprobadist,
    one_hot_argmax,
    positive_part,
    ranking,
    shannon_entropy,
    simplex_projection_and_support,
    soft_argmax,
    sparse_argmax,
)

__all__ = [
    # Version
    "__version__",

    # Backward-pass protocol
    "Pullback",
    "Differentiable",
    "chain",

    # Regularized prediction
    "one_hot_argmax",
    "soft_argmax",
    "sparse_argmax",
    "simplex_projection_and_support",
    "RegularizedPredictor",
    "OneHotArgmax",
    "SoftArgmax",
    "SparseArgmax",
    "RegularizedFrankWolfe",
    "shannon_entropy",
    "half_square_norm",
    "positive_part",
    "isproba",
    "isprobadist",
    "ranking",

    # Perturbed maximizers
    "AbstractPerturbed",
    "PerturbedAdditive",
    "PerturbedMultiplicative",
    "PerturbedComposition",
    "PerturbedConfig",
    "compose",

    # Interpolation
    "Interpolation",

    # Losses
    "FenchelYoungLoss",
    "SPOPlusLoss",
    "StructuredSVMLoss",
    "BaseLoss",
    "ZeroOneBaseLoss",

    # Exceptions
    "InferOptError",
    "InvalidConfigError",
    "InvalidInputError",
    "DimensionError",
    "NumericalError",
    "OracleFailure",
]


def info() -> str:
    """Return information about the inferopt installation."""
    import platform

    import numpy
    import scipy

    lines = [
        f"inferopt version: {__version__}",
        f"Python version: {platform.python_version()}",
        f"Platform: {platform.platform()}",
        f"NumPy version: {numpy.__version__}",
        f"SciPy version: {scipy.__version__}",
    ]

    try:
        import torch
    except ImportError:
        lines.append("PyTorch: not installed")
    else:
        lines.append(f"PyTorch version: {torch.__version__}")

    return "\n".join(lines)
