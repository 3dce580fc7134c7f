"""
Backward-Pass Protocol
======================

Every differentiable component of inferopt exposes

    forward(theta, ...) -> Pullback(output, backward)

where ``backward`` maps the sensitivity of a downstream quantity with
respect to ``output`` to its sensitivity with respect to ``theta``. This is
the reverse-mode rule of the component; ``inferopt.torch`` registers it with
PyTorch autograd as an opaque node.

Components wrapping a black-box maximizer never differentiate through the
maximizer itself, only through the smoothing built around it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, NamedTuple

import numpy as np


class Pullback(NamedTuple):
    """Output of a forward pass together with its reverse-mode rule."""
    output: Any                            # Prediction or loss value
    backward: Callable[[Any], np.ndarray]  # d(output) -> d(theta)


class Differentiable(ABC):
    """Base class for components that implement the backward-pass protocol."""

    @abstractmethod
    def forward(self, theta: np.ndarray, *args: Any, **kwargs: Any) -> Pullback:
        """Evaluate the component and return its pullback."""
        pass

    def __call__(self, theta: np.ndarray, *args: Any, **kwargs: Any) -> Any:
        return self.forward(theta, *args, **kwargs).output


def chain(outer: Callable[[Any], Pullback], inner: Pullback) -> Pullback:
    """
    Compose pullbacks with the chain rule.

    Args:
        outer: Forward function of the outer component, called on
            ``inner.output``
        inner: Pullback of the inner component

    Returns:
        Pullback of ``outer ∘ inner``

    Example:
        >>> cost = np.array([1., 0., 2.])
        >>> linear = lambda y: Pullback(cost @ y, lambda dl: dl * cost)
        >>> composed = chain(linear, SoftArgmax().forward(theta))
        >>> dtheta = composed.backward(1.0)
    """
    outer_pullback = outer(inner.output)

    def backward(dout: Any) -> np.ndarray:
        return inner.backward(outer_pullback.backward(dout))

    return Pullback(outer_pullback.output, backward)
