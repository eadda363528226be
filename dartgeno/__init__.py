"""dartgeno - genotype dataset filtering and faststructure export.

Subset a genotype matrix by population or by a locus quality metric while
keeping the matrix and its individual / locus metadata in step, and export
diploid data in the two-rows-per-individual faststructure format.
"""

from .version import __version__
from .core import (
    GenotypeDataset,
    Individual,
    LocusRecord,
    Ploidy,
    HistoryRecord,
    TransformationHistory,
    PopulationFilter,
    MetricRangeFilter,
    MonomorphismDetector,
    VCFParser,
    ConfigurationError,
    DomainError,
    ValidationError,
)
from .io import FastStructureEncoder
from .app import DartGenoApp, DartGenoConfig

__all__ = [
    "__version__",
    "GenotypeDataset",
    "Individual",
    "LocusRecord",
    "Ploidy",
    "HistoryRecord",
    "TransformationHistory",
    "PopulationFilter",
    "MetricRangeFilter",
    "MonomorphismDetector",
    "VCFParser",
    "ConfigurationError",
    "DomainError",
    "ValidationError",
    "FastStructureEncoder",
    "DartGenoApp",
    "DartGenoConfig",
]
