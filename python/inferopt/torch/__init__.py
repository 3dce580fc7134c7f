"""
InferOpt PyTorch Integration
============================

Combinatorial optimization layers and structured losses for PyTorch.

Every inferopt component is registered with autograd as an opaque node
whose backward pass is the component's own reverse-mode rule: the wrapped
maximizer is called on detached NumPy arrays and never differentiated.

Quick Start
-----------
>>> import torch
>>> from inferopt import PerturbedAdditive, one_hot_argmax
>>> from inferopt.torch import PerturbedLayer, FenchelYoungLossLayer
>>>
>>> perturbed = PerturbedAdditive(one_hot_argmax, epsilon=1.0, nb_samples=50)
>>> criterion = FenchelYoungLossLayer(perturbed)
>>> model = torch.nn.Linear(10, 5)
>>> loss = criterion(model(x), y_true)  # x: (batch, 10), y_true: (batch, 5)
>>> loss.backward()

Layers
------
RegularizedLayer
    SoftArgmax / SparseArgmax prediction.
PerturbedLayer
    Perturbed maximizer, or its composition with a cost.
InterpolationLayer
    Black-box maximizer with interpolated gradients.
FenchelYoungLossLayer, SPOPlusLossLayer, StructuredSVMLossLayer
    Structured losses with batch reduction.

Functions
---------
predict
    Functional interface for prediction components.
structured_loss
    Functional interface for losses.
PullbackFunction
    The underlying torch.autograd.Function.
"""

from .utils import check_torch_available

check_torch_available()

from .functions import PullbackFunction, predict, structured_loss  # noqa: E402
from .layers import (  # noqa: E402
    FenchelYoungLossLayer,
    InterpolationLayer,
    PerturbedLayer,
    RegularizedLayer,
    SPOPlusLossLayer,
    StructuredSVMLossLayer,
)

__all__ = [
    # nn.Module layers
    "RegularizedLayer",
    "PerturbedLayer",
    "InterpolationLayer",
    "FenchelYoungLossLayer",
    "SPOPlusLossLayer",
    "StructuredSVMLossLayer",
    # Functional interface
    "predict",
    "structured_loss",
    # Advanced: autograd function
    "PullbackFunction",
]
