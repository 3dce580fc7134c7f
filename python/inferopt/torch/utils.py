"""
Utility functions for PyTorch integration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Sequence, Tuple

import numpy as np

if TYPE_CHECKING:
    import torch


def check_torch_available() -> None:
    """
    Raise ImportError if PyTorch is not available.

    Raises:
        ImportError: If torch is not installed
    """
    try:
        import torch  # noqa: F401
    except ImportError as e:
        raise ImportError(
            "PyTorch is required for inferopt.torch. "
            "Install with: pip install inferopt[torch]"
        ) from e


def to_numpy(tensor: torch.Tensor) -> np.ndarray:
    """
    Detach a tensor (any device) into a float64 NumPy array.

    The maximizers wrapped by inferopt are black boxes, so they always
    receive plain arrays, never tensors that track gradients.
    """
    return tensor.detach().cpu().numpy().astype(np.float64)


def to_torch(array: Any, like: torch.Tensor) -> torch.Tensor:
    """
    Convert an array (or scalar) to a tensor with the device and dtype of `like`.
    """
    import torch

    array = np.asarray(array, dtype=np.float64)
    return torch.from_numpy(array).to(device=like.device, dtype=like.dtype)


def targets_to_numpy(targets: Sequence[Any]) -> Tuple[Optional[np.ndarray], ...]:
    """Convert loss targets (tensors, arrays or None) to NumPy arrays."""
    import torch

    converted = []
    for target in targets:
        if target is None:
            converted.append(None)
        elif isinstance(target, torch.Tensor):
            converted.append(to_numpy(target))
        else:
            converted.append(np.asarray(target, dtype=np.float64))
    return tuple(converted)


def select_row(targets: Sequence[Optional[np.ndarray]], i: int) -> Tuple[Optional[np.ndarray], ...]:
    """Row i of every batched target (None targets stay None)."""
    return tuple(None if target is None else target[i] for target in targets)
