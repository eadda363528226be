"""Utility modules for infrastructure and helpers."""

from .memory_monitor import MemoryMonitor
from .logging_setup import setup_logger, verbosity_to_level
from .validation import validate_cli_arguments

__all__ = [
    "MemoryMonitor",
    "setup_logger",
    "verbosity_to_level",
    "validate_cli_arguments",
]
