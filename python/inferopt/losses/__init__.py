"""
Structured Losses
=================

Losses aware of the combinatorial layer, each with a closed-form
(sub)gradient exposed through the backward-pass protocol.

FenchelYoungLoss
    Learning by imitation with a regularized or perturbed predictor.
SPOPlusLoss
    Learning with true objectives (Smart "Predict, then Optimize").
StructuredSVMLoss
    Structured hinge loss over a pluggable BaseLoss (e.g. ZeroOneBaseLoss).
"""

from .fenchel_young import FenchelYoungLoss
from .spo import SPOPlusLoss
from .ssvm import BaseLoss, StructuredSVMLoss, ZeroOneBaseLoss

__all__ = [
    "FenchelYoungLoss",
    "SPOPlusLoss",
    "StructuredSVMLoss",
    "BaseLoss",
    "ZeroOneBaseLoss",
]
