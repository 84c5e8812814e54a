"""Utility functions and helpers for DepDiff."""

from .logging import DepDiffLogger, get_logger, setup_logging

__all__ = [
    "DepDiffLogger",
    "get_logger",
    "setup_logging",
]
