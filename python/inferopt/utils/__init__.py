"""Shared helpers."""

from .validation import as_array, as_cotangent, check_pair, validate_pair

__all__ = ["as_array", "as_cotangent", "check_pair", "validate_pair"]
