"""Proof paths sized for state-changing instructions."""

from .builder import truncate

__all__ = [
    "truncate",
]
