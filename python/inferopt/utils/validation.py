"""Input validation utilities."""

from typing import Any, Tuple

import numpy as np

from ..exceptions import DimensionError, InvalidInputError, NumericalError


def as_array(x: Any, name: str = "theta", finite: bool = True) -> np.ndarray:
    """
    Convert x to a float64 array.

    Raises:
        InvalidInputError: If x is None or not numeric
        NumericalError: If finite=True and x has NaN/inf entries
    """
    if x is None:
        raise InvalidInputError(f"{name} is required")
    try:
        arr = np.asarray(x, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"{name} is not numeric: {e}") from e

    if finite and not np.all(np.isfinite(arr)):
        raise NumericalError(f"{name} contains non-finite values")
    return arr


def validate_pair(theta: np.ndarray, y: np.ndarray) -> Tuple[bool, str]:
    """
    Validate that an objective and a solution live in the same space.

    Returns:
        (is_valid, error_message) tuple
    """
    if theta.shape != y.shape:
        return False, f"theta has shape {theta.shape} but y has shape {y.shape}"
    if theta.size == 0:
        return False, "theta is empty"
    return True, ""


def check_pair(theta: np.ndarray, y: np.ndarray) -> None:
    """Raise DimensionError unless validate_pair(theta, y) succeeds."""
    is_valid, message = validate_pair(theta, y)
    if not is_valid:
        raise DimensionError(message)


def as_cotangent(dy: Any, y: np.ndarray) -> np.ndarray:
    """
    Convert a pullback argument to a float64 array shaped like the output y.

    Raises:
        DimensionError: If dy and y have different shapes
    """
    dy = np.asarray(dy, dtype=np.float64)
    if dy.shape != np.shape(y):
        raise DimensionError(f"dy has shape {dy.shape} but the output has shape {np.shape(y)}")
    return dy
