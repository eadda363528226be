"""Input/Output modules for file operations."""

from .metrics_reader import MetricsReader
from .faststructure_writer import FastStructureEncoder
from .run_info_writer import RunInfoWriter

__all__ = [
    "MetricsReader",
    "FastStructureEncoder",
    "RunInfoWriter",
]
