"""Detection and removal of loci that carry no informative variation."""

import logging
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from .dataset import GenotypeDataset
from .history import HistoryRecord

__all__ = ["MonomorphismDetector"]


class MonomorphismDetector:
    """Flags monomorphic and all-missing loci."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def classify(self, dataset: GenotypeDataset) -> NDArray[np.bool_]:
        """Return a mask over loci, true where the locus is uninformative.

        A locus is flagged when every non-missing call is identical, or when
        it has no non-missing call at all.

        Example:
            >>> ds = GenotypeDataset.build(
            ...     [[0, 1, None], [0, 2, None]], 2,
            ...     [Individual("a"), Individual("b")],
            ...     [LocusRecord("L1"), LocusRecord("L2"), LocusRecord("L3")],
            ... )
            >>> MonomorphismDetector().classify(ds).tolist()
            [True, False, True]
        """
        m = dataset.matrix
        if dataset.n_ind == 0:
            return np.ones(dataset.n_loc, dtype=bool)

        called = ~np.isnan(m)
        n_called = called.sum(axis=0)
        col_min = np.where(called, m, np.inf).min(axis=0)
        col_max = np.where(called, m, -np.inf).max(axis=0)
        return (n_called == 0) | (col_min == col_max)

    def remove_monomorphs(self, dataset: GenotypeDataset) -> GenotypeDataset:
        """Return a new dataset without monomorphic or all-missing loci."""
        if self.logger.isEnabledFor(logging.INFO):
            self.logger.info("Starting filter_monomorphs")

        flagged = self.classify(dataset)
        result = dataset.subset_loci(~flagged)

        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(
                f"  Identified and removed {int(flagged.sum())} monomorphic or "
                f"all-missing loci; {result.n_loc} loci retained"
            )

        result = result.with_history_record(HistoryRecord.create("filter_monomorphs"))

        if self.logger.isEnabledFor(logging.INFO):
            self.logger.info("Completed: filter_monomorphs")
        return result
