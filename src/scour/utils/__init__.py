"""Shared utilities."""

from .datetime import utc_now
from .logging import setup_logging

__all__ = [
    "setup_logging",
    "utc_now",
]
