"""Command-line interface components for the literature notes pipeline.

This package provides the command implementations behind ``command=...``.
Commands are called from the main entry point after configuration validation
and library loading.
"""

from .commands import COMMANDS, run_command

__all__ = ["COMMANDS", "run_command"]
