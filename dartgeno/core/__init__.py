"""Core dataset model and transformation modules."""

from .errors import DartGenoError, ConfigurationError, DomainError, ValidationError
from .history import HistoryRecord, TransformationHistory
from .dataset import GenotypeDataset, Individual, LocusRecord, Ploidy
from .monomorphism import MonomorphismDetector
from .population_filter import PopulationFilter
from .metric_filter import MetricRangeFilter
from .vcf_parser import VCFParser

__all__ = [
    "DartGenoError",
    "ConfigurationError",
    "DomainError",
    "ValidationError",
    "HistoryRecord",
    "TransformationHistory",
    "GenotypeDataset",
    "Individual",
    "LocusRecord",
    "Ploidy",
    "MonomorphismDetector",
    "PopulationFilter",
    "MetricRangeFilter",
    "VCFParser",
]
