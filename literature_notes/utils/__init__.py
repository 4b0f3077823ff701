"""Utility functions and helpers for the literature notes pipeline.

This package provides logging utilities that integrate with Hydra's logging
configuration and support unicode/emoji for user-friendly terminal output.
"""

from .logging import log_error, log_library_table, setup_logging

__all__ = [
    "setup_logging",
    "log_error",
    "log_library_table",
]
