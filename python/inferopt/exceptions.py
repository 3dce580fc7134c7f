"""
InferOpt Exception Classes
==========================

Custom exceptions for inferopt error handling.

Errors raised by a user-supplied maximizer are never caught by this
package: they reach the caller exactly as the maximizer raised them.
"""

from typing import Optional


class InferOptError(Exception):
    """Base exception for all inferopt errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidConfigError(InferOptError):
    """
    Raised when a component is built with invalid hyperparameters.

    Examples: non-positive noise scale, zero Monte-Carlo samples,
    negative loss scaling, unsupported predictor.
    """

    def __init__(self, message: str) -> None:
        super().__init__(f"Invalid configuration: {message}")


class InvalidInputError(InferOptError):
    """
    Raised when call-time input data is invalid.

    Examples: missing true cost vector, non-numeric arrays.
    """

    def __init__(self, message: str) -> None:
        super().__init__(f"Invalid input: {message}")


class DimensionError(InferOptError):
    """
    Raised when objective, solution or target shapes are incompatible.
    """

    def __init__(self, message: str) -> None:
        super().__init__(f"Dimension mismatch: {message}")


class NumericalError(InferOptError):
    """
    Raised when non-finite values are encountered.

    This may indicate NaN/inf inputs, overflow, or a division by a zero
    objective entry in the multiplicative perturbation.
    """

    def __init__(self, message: str = "Numerical error encountered") -> None:
        super().__init__(message)


class OracleFailure(InferOptError):
    """
    Raised by a maximizer to signal that its problem has no solution.

    Maximizers may raise this (or anything else); inferopt propagates it
    unchanged and never retries the call.

    theta_shape is filled in by the maximizer that raises, if it wants to
    report the shape of the objective it failed on. inferopt never sets it.
    """

    def __init__(
        self,
        message: str = "Maximizer failed to return a solution",
        theta_shape: Optional[tuple] = None,
    ) -> None:
        self.theta_shape = theta_shape
        super().__init__(message)
