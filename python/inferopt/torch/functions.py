"""
Autograd Functions for Combinatorial Layers
===========================================

This module registers the reverse-mode rules of inferopt components with
PyTorch autograd.

Each component implements ``forward(theta, ...) -> Pullback``. The autograd
function runs that forward pass on a detached NumPy copy of θ, keeps the
pullback in ``ctx``, and calls it during the backward pass. Autograd never
traces through the maximizer: the node is opaque.

Batched input (batch, ...) is handled by evaluating each row separately,
so every row gets its own Monte-Carlo replicates.
"""

from __future__ import annotations

from typing import Any, Optional, Tuple

import numpy as np
import torch
from torch import Tensor
from torch.autograd import Function

from ..pullback import Differentiable
from .utils import select_row, targets_to_numpy, to_numpy, to_torch


class PullbackFunction(Function):
    """
    Autograd function wrapping any inferopt Differentiable component.

    Forward: Evaluates ``component.forward(theta, *targets, **kwargs)``
    Backward: Applies the stored pullback to the upstream gradient

    Only θ receives a gradient; targets (y_true, θ_true, ...) and keyword
    arguments are treated as constants.
    """

    @staticmethod
    def forward(
        ctx,
        component: Differentiable,
        theta: Tensor,
        targets: Tuple[Any, ...],
        kwargs: dict,
        batched: bool,
    ) -> Tensor:
        theta_np = to_numpy(theta)
        targets_np = targets_to_numpy(targets)

        if batched:
            pullbacks = [
                component.forward(theta_np[i], *select_row(targets_np, i), **kwargs)
                for i in range(theta_np.shape[0])
            ]
            output = np.stack([np.asarray(pb.output, dtype=np.float64) for pb in pullbacks])
        else:
            pullbacks = [component.forward(theta_np, *targets_np, **kwargs)]
            output = np.asarray(pullbacks[0].output, dtype=np.float64)

        ctx.pullbacks = pullbacks
        ctx.batched = batched
        return to_torch(output, theta)

    @staticmethod
    def backward(ctx, grad_output: Tensor) -> Tuple[Optional[Tensor], ...]:
        grad_np = to_numpy(grad_output)

        if ctx.batched:
            dtheta = np.stack([pb.backward(grad_np[i]) for i, pb in enumerate(ctx.pullbacks)])
        else:
            dtheta = ctx.pullbacks[0].backward(grad_np)

        return (
            None,  # component
            to_torch(dtheta, grad_output),
            None,  # targets
            None,  # kwargs
            None,  # batched
        )


# =============================================================================
# Functional API
# =============================================================================


def predict(
    component: Differentiable,
    theta: Tensor,
    batched: Optional[bool] = None,
    **kwargs: Any,
) -> Tensor:
    """
    Differentiable prediction of a regularized, perturbed or interpolated maximizer.

    Args:
        component: SoftArgmax, SparseArgmax, PerturbedAdditive,
            PerturbedMultiplicative, PerturbedComposition, Interpolation, ...
        theta: Objective (d,) or (batch, d)
        batched: Treat the first dimension as a batch (default: theta.dim() == 2)
        **kwargs: Forwarded to the maximizer

    Returns:
        Prediction with the shape of theta (or (batch,) for a composition)

    Example:
        >>> perturbed = PerturbedAdditive(one_hot_argmax, epsilon=1.0, nb_samples=100)
        >>> theta = torch.tensor([3., 1., 2.], requires_grad=True)
        >>> y = predict(perturbed, theta)
        >>> (y * cost).sum().backward()
    """
    if batched is None:
        batched = theta.dim() == 2
    return PullbackFunction.apply(component, theta, (), kwargs, batched)


def structured_loss(
    loss: Differentiable,
    theta: Tensor,
    *targets: Any,
    batched: Optional[bool] = None,
    **kwargs: Any,
) -> Tensor:
    """
    Differentiable structured loss value(s).

    Args:
        loss: FenchelYoungLoss, SPOPlusLoss or StructuredSVMLoss
        theta: Objective (d,) or (batch, d)
        *targets: Loss targets, e.g. y_true, or (theta_true, y_true) for SPO+
        batched: Treat the first dimension as a batch (default: theta.dim() == 2)
        **kwargs: Forwarded to the maximizer

    Returns:
        Scalar loss, or per-sample losses (batch,)

    Example:
        >>> loss = FenchelYoungLoss(SoftArgmax())
        >>> theta = torch.tensor([3., 1., 2.], requires_grad=True)
        >>> structured_loss(loss, theta, torch.tensor([1., 0., 0.])).backward()
        >>> theta.grad  # soft_argmax(theta) - y_true
    """
    if batched is None:
        batched = theta.dim() == 2
    return PullbackFunction.apply(loss, theta, targets, kwargs, batched)
