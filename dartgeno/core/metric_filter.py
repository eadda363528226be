"""Filter loci on a numeric locus metric such as read depth."""

import logging
from typing import Optional

from .dataset import GenotypeDataset
from .history import HistoryRecord
from .monomorphism import MonomorphismDetector

__all__ = ["RDEPTH", "MetricRangeFilter"]

RDEPTH = "rdepth"


class MetricRangeFilter:
    """Keep loci whose metric lies within an inclusive [lower, upper] range."""

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        detector: Optional[MonomorphismDetector] = None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.detector = detector or MonomorphismDetector(self.logger)

    def apply(
        self,
        dataset: GenotypeDataset,
        metric_name: str,
        lower: float,
        upper: float,
        operation: str = "filter_metric",
    ) -> GenotypeDataset:
        """Return a dataset retaining loci with ``lower <= metric <= upper``.

        Matrix columns and locus records are removed together. ``lower`` may
        exceed ``upper``; that empties the locus set and is logged as a warning.

        Raises:
            ConfigurationError: if ``metric_name`` is missing for any locus
        """
        if self.logger.isEnabledFor(logging.INFO):
            self.logger.info(f"Starting {operation}")

        values = dataset.locus_metric_values(metric_name)

        if lower > upper and self.logger.isEnabledFor(logging.WARNING):
            self.logger.warning(
                f"Lower threshold {lower} exceeds upper threshold {upper}; "
                "no loci will be retained"
            )

        if self.logger.isEnabledFor(logging.WARNING):
            if self.detector.classify(dataset).any():
                self.logger.warning("Dataset contains monomorphic loci")

        n0 = dataset.n_loc
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(f"  Initial no. of loci = {n0}")
        if self.logger.isEnabledFor(logging.INFO):
            self.logger.info(
                f"  Removing loci with {metric_name} < {lower} and > {upper}"
            )

        keep = (values >= lower) & (values <= upper)
        result = dataset.subset_loci(keep)

        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(f"  No. of loci deleted = {n0 - result.n_loc}")
            self.logger.debug("Summary of filtered dataset")
            self.logger.debug(
                f"  {metric_name} >= {lower} and {metric_name} <= {upper}"
            )
            self.logger.debug(f"  No. of loci: {result.n_loc}")
            self.logger.debug(f"  No. of individuals: {result.n_ind}")
            self.logger.debug(f"  No. of populations: {len(result.populations())}")

        result = result.with_history_record(
            HistoryRecord.create(
                operation, metric_name=metric_name, lower=lower, upper=upper
            )
        )

        if self.logger.isEnabledFor(logging.INFO):
            self.logger.info(f"Completed: {operation}")
        return result

    def filter_rdepth(
        self, dataset: GenotypeDataset, lower: float = 5, upper: float = 50
    ) -> GenotypeDataset:
        """Filter loci on read depth (the ``rdepth`` locus metric)."""
        return self.apply(dataset, RDEPTH, lower, upper, operation="filter_rdepth")
