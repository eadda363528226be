"""Main application coordinator for dartgeno."""

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List, Optional

from .core import (
    GenotypeDataset,
    MetricRangeFilter,
    MonomorphismDetector,
    PopulationFilter,
    VCFParser,
)
from .core.metric_filter import RDEPTH
from .io import FastStructureEncoder, MetricsReader, RunInfoWriter
from .utils import MemoryMonitor, setup_logger
from .utils.logging_setup import DEFAULT_VERBOSITY

__all__ = ["DartGenoConfig", "DartGenoApp"]


@dataclass
class DartGenoConfig:
    """Configuration for the dartgeno pipeline.

    Attributes:
        input_vcf: Path to input VCF/BCF file
        output_prefix: Path to output folder (will be created if absent)
        ind_metrics: Optional TSV of per-individual attributes (with ``pop``)
        loc_metrics: Optional TSV of numeric per-locus metrics
        keep_pop: Population labels to keep (empty keeps everyone)
        as_pop: Individual attribute used as population while selecting
        mono_rm: Remove loci left monomorphic after population selection
        metric: Locus metric to filter on (None disables metric filtering)
        lower: Inclusive lower bound for ``metric``
        upper: Inclusive upper bound for ``metric``
        outfile: Name of the faststructure output file
        probar: Whether to show a progress bar while exporting
        verbose: Verbosity 0-5
        log_format: Logging format (text or json)

    Example:
        >>> config = DartGenoConfig(
        ...     input_vcf=Path("sample.vcf"),
        ...     output_prefix=Path("output"),
        ...     keep_pop=["EmsubRopeMata", "EmvicVictJasp"],
        ...     metric="rdepth",
        ... )
        >>> config.lower, config.upper, config.outfile
        (5.0, 50.0, 'gl.str')
    """

    input_vcf: Path
    output_prefix: Path
    ind_metrics: Optional[Path] = None
    loc_metrics: Optional[Path] = None
    keep_pop: List[str] = field(default_factory=list)
    as_pop: Optional[str] = None
    mono_rm: bool = False
    metric: Optional[str] = None
    lower: float = 5.0
    upper: float = 50.0
    outfile: str = "gl.str"
    probar: bool = False
    verbose: int = DEFAULT_VERBOSITY
    log_format: str = "text"


class DartGenoApp:
    """Loads a dataset, applies the configured filters and exports it."""

    def __init__(self, config: DartGenoConfig):
        self.config = config
        self.logger = setup_logger("dartgeno", config.verbose, config.log_format)
        self.memory_monitor = MemoryMonitor(self.logger)

        detector = MonomorphismDetector(self.logger)
        self.vcf_parser = VCFParser(
            self.memory_monitor, self.logger, MetricsReader(self.logger)
        )
        self.population_filter = PopulationFilter(self.logger, detector)
        self.metric_filter = MetricRangeFilter(self.logger, detector)
        self.encoder = FastStructureEncoder(self.logger, show_progress=config.probar)
        self.run_info_writer = RunInfoWriter(self.memory_monitor)

        self.memory_monitor.check_memory_and_warn("initialization")

    def run(self) -> GenotypeDataset:
        """Execute the complete pipeline and return the exported dataset.

        1. VCF parsing and validation
        2. Population selection (if populations are listed)
        3. Locus metric range filtering (if a metric is named)
        4. faststructure export
        5. run_info.txt
        """
        loaded = self.vcf_parser.parse_and_validate(
            self.config.input_vcf, self.config.ind_metrics, self.config.loc_metrics
        )
        dataset = loaded

        if self.config.keep_pop:
            dataset = self.population_filter.apply(
                dataset,
                self.config.keep_pop,
                as_pop=self.config.as_pop,
                mono_rm=self.config.mono_rm,
            )

        if self.config.metric == RDEPTH:
            dataset = self.metric_filter.filter_rdepth(
                dataset, self.config.lower, self.config.upper
            )
        elif self.config.metric is not None:
            dataset = self.metric_filter.apply(
                dataset, self.config.metric, self.config.lower, self.config.upper
            )

        self.memory_monitor.check_memory_and_warn("filtering complete")

        self.encoder.write(dataset, self.config.outfile, self.config.output_prefix)

        run_info_path = self.run_info_writer.write_run_info(
            self.config.output_prefix, loaded, dataset, asdict(self.config)
        )
        if self.logger.isEnabledFor(logging.INFO):
            self.logger.info(f"Run information written: {run_info_path}")
            final_memory = self.memory_monitor.get_memory_usage_mb()
            self.logger.info(f"Final memory usage: {final_memory:.1f}MB")

        return dataset
