"""
Combinatorial Optimization Layers
=================================

PyTorch nn.Module wrappers around inferopt components.

Layers:
    RegularizedLayer: SoftArgmax / SparseArgmax predictions
    PerturbedLayer: Perturbed maximizers and their compositions
    InterpolationLayer: Black-box maximizer with interpolated gradients
    FenchelYoungLossLayer: Fenchel-Young loss (learning by imitation)
    SPOPlusLossLayer: SPO+ loss (learning with true objectives)
    StructuredSVMLossLayer: Structured hinge loss
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import numpy as np
import torch
import torch.nn as nn
from torch import Tensor

from ..exceptions import InvalidConfigError
from ..interpolation import Interpolation
from ..losses import BaseLoss, FenchelYoungLoss, SPOPlusLoss, StructuredSVMLoss
from ..perturbed import AbstractPerturbed, PerturbedComposition
from ..pullback import Differentiable
from ..regularized import RegularizedFrankWolfe, RegularizedPredictor
from .functions import predict, structured_loss

_REDUCTIONS = ("mean", "sum", "none")


def _reduce_loss(loss: Tensor, reduction: str) -> Tensor:
    if reduction == "mean":
        return torch.mean(loss)
    if reduction == "sum":
        return torch.sum(loss)
    return loss


class _PredictionLayer(nn.Module):
    """
    Shared logic of prediction layers.

    Args:
        component: inferopt Differentiable component
        instance_dim: Number of dimensions of a single θ (default: 1);
            inputs with one more dimension are treated as batches
    """

    def __init__(self, component: Differentiable, instance_dim: int = 1) -> None:
        super().__init__()
        if instance_dim < 1:
            raise InvalidConfigError(f"instance_dim must be >= 1, got {instance_dim}")
        self.component = component
        self.instance_dim = instance_dim

    def forward(self, theta: Tensor, **kwargs: Any) -> Tensor:
        """
        Args:
            theta: Objective with instance_dim dimensions, or a batch of them
            **kwargs: Forwarded to the maximizer

        Returns:
            Prediction(s), differentiable w.r.t. theta
        """
        batched = theta.dim() == self.instance_dim + 1
        return predict(self.component, theta, batched=batched, **kwargs)

    def extra_repr(self) -> str:
        return f"{self.component!r}, instance_dim={self.instance_dim}"


class RegularizedLayer(_PredictionLayer):
    """
    Regularized prediction ŷ(θ) = argmax {θᵀy - Ω(y)} as a layer.

    Example:
        >>> layer = RegularizedLayer(SparseArgmax())
        >>> theta = torch.randn(32, 10, requires_grad=True)
        >>> p = layer(theta)  # rows on the probability simplex
    """

    def __init__(self, predictor: RegularizedPredictor) -> None:
        if not isinstance(predictor, RegularizedPredictor):
            raise InvalidConfigError(
                f"expected a RegularizedPredictor, got {type(predictor).__name__}"
            )
        if isinstance(predictor, RegularizedFrankWolfe):
            raise InvalidConfigError(
                "RegularizedFrankWolfe has no backward pass; use it in FenchelYoungLossLayer"
            )
        super().__init__(predictor, instance_dim=1)


class PerturbedLayer(_PredictionLayer):
    """
    Perturbed maximizer (or g ∘ perturbed maximizer) as a layer.

    Args:
        perturbed: AbstractPerturbed or PerturbedComposition instance
        instance_dim: Dimensions of a single θ, e.g. 2 for grid costs

    Example:
        >>> layer = PerturbedLayer(PerturbedAdditive(shortest_path, epsilon=0.1,
        ...                                          nb_samples=10), instance_dim=2)
        >>> paths = layer(costs)  # costs: (batch, h, w)
    """

    def __init__(self, perturbed: Differentiable, instance_dim: int = 1) -> None:
        if not isinstance(perturbed, (AbstractPerturbed, PerturbedComposition)):
            raise InvalidConfigError(
                "expected an AbstractPerturbed or PerturbedComposition, "
                f"got {type(perturbed).__name__}"
            )
        super().__init__(perturbed, instance_dim=instance_dim)


class InterpolationLayer(_PredictionLayer):
    """
    Black-box maximizer with the interpolated backward pass.

    Args:
        maximizer: Function θ -> argmax_{y ∈ 𝒴} θᵀy
        lambda_: Interpolation parameter (default: 1.0)
        instance_dim: Dimensions of a single θ
    """

    def __init__(
        self,
        maximizer: Callable[..., np.ndarray],
        lambda_: float = 1.0,
        instance_dim: int = 1,
    ) -> None:
        super().__init__(Interpolation(maximizer, lambda_=lambda_), instance_dim=instance_dim)


class _StructuredLossLayer(nn.Module):
    """Shared logic of loss layers: batching and reduction."""

    def __init__(self, loss: Differentiable, reduction: str = "mean", instance_dim: int = 1) -> None:
        super().__init__()
        if reduction not in _REDUCTIONS:
            raise InvalidConfigError(f"reduction must be one of {_REDUCTIONS}, got {reduction!r}")
        if instance_dim < 1:
            raise InvalidConfigError(f"instance_dim must be >= 1, got {instance_dim}")
        self.loss = loss
        self.reduction = reduction
        self.instance_dim = instance_dim

    def _evaluate(self, theta: Tensor, *targets: Any, **kwargs: Any) -> Tensor:
        batched = theta.dim() == self.instance_dim + 1
        losses = structured_loss(self.loss, theta, *targets, batched=batched, **kwargs)
        if not batched:
            return losses
        return _reduce_loss(losses, self.reduction)

    def extra_repr(self) -> str:
        return f"{self.loss!r}, reduction={self.reduction!r}"


class FenchelYoungLossLayer(_StructuredLossLayer):
    """
    Fenchel-Young loss as an nn.Module.

    Args:
        predictor: RegularizedPredictor or AbstractPerturbed
        reduction: "mean", "sum" or "none" over the batch (default: "mean")
        instance_dim: Dimensions of a single θ

    Example:
        >>> model = nn.Linear(5, 3)
        >>> criterion = FenchelYoungLossLayer(SoftArgmax())
        >>> loss = criterion(model(x), y_true)  # x: (batch, 5), y_true: (batch, 3)
        >>> loss.backward()
    """

    def __init__(self, predictor: Any, reduction: str = "mean", instance_dim: int = 1) -> None:
        super().__init__(FenchelYoungLoss(predictor), reduction, instance_dim)

    def forward(self, theta: Tensor, y_true: Tensor, **kwargs: Any) -> Tensor:
        return self._evaluate(theta, y_true, **kwargs)


class SPOPlusLossLayer(_StructuredLossLayer):
    """
    SPO+ loss as an nn.Module.

    Args:
        maximizer: Function θ -> argmax_{y ∈ 𝒴} θᵀy
        alpha: Convexification parameter (default: 2.0)
        reduction: "mean", "sum" or "none" over the batch (default: "mean")
        instance_dim: Dimensions of a single θ
    """

    def __init__(
        self,
        maximizer: Callable[..., np.ndarray],
        alpha: float = 2.0,
        reduction: str = "mean",
        instance_dim: int = 1,
    ) -> None:
        super().__init__(SPOPlusLoss(maximizer, alpha=alpha), reduction, instance_dim)

    def forward(
        self,
        theta: Tensor,
        theta_true: Tensor,
        y_true: Optional[Tensor] = None,
        **kwargs: Any,
    ) -> Tensor:
        return self._evaluate(theta, theta_true, y_true, **kwargs)


class StructuredSVMLossLayer(_StructuredLossLayer):
    """
    Structured SVM loss as an nn.Module.

    Args:
        base_loss: BaseLoss instance, e.g. ZeroOneBaseLoss()
        alpha: Scaling of the linear term (default: 1.0)
        reduction: "mean", "sum" or "none" over the batch (default: "mean")
    """

    def __init__(self, base_loss: BaseLoss, alpha: float = 1.0, reduction: str = "mean") -> None:
        super().__init__(StructuredSVMLoss(base_loss, alpha=alpha), reduction, instance_dim=1)

    def forward(self, theta: Tensor, y_true: Tensor, **kwargs: Any) -> Tensor:
        return self._evaluate(theta, y_true, **kwargs)
