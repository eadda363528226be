"""Retain only individuals that belong to selected populations."""

import logging
from typing import Iterable, List, Optional

import numpy as np

from .dataset import GenotypeDataset
from .errors import ConfigurationError
from .history import HistoryRecord
from .monomorphism import MonomorphismDetector

__all__ = ["PopulationFilter"]


class PopulationFilter:
    """Subset individuals by population label (the keep-pop operation)."""

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
        pop_list: Iterable[str],
        as_pop: Optional[str] = None,
        mono_rm: bool = False,
    ) -> GenotypeDataset:
        """Return a dataset holding only individuals in ``pop_list``.

        Args:
            dataset: Input dataset (left untouched)
            pop_list: Population labels to keep. Labels absent from the
                dataset are dropped with a warning. Sets are sorted so the
                history record does not depend on hash order.
            as_pop: Name of an individual attribute to use as the population
                label while selecting (e.g. "sex"). The returned dataset keeps
                its original population labels.
            mono_rm: Also remove loci left monomorphic or all-missing by the
                subset

        Returns:
            New dataset with kept individuals in their original order and one
            ``keep_pop`` record appended to its history

        Raises:
            ConfigurationError: no listed population is present, or ``as_pop``
                is not an attribute of every individual

        Example:
            >>> pf = PopulationFilter()
            >>> kept = pf.apply(ds, ["EmsubRopeMata", "EmvicVictJasp"])
            >>> females = pf.apply(ds, ["Female"], as_pop="sex")
        """
        if self.logger.isEnabledFor(logging.INFO):
            self.logger.info("Starting keep_pop")
            self.logger.info(f"  Processing a {dataset.ploidy.data_type} dataset")

        if isinstance(pop_list, str):
            pop_list = [pop_list]
        elif isinstance(pop_list, (set, frozenset)):
            pop_list = sorted(pop_list)

        labels = dataset.pop
        if as_pop is not None:
            labels = dataset.ind_metric(as_pop)
            if self.logger.isEnabledFor(logging.DEBUG):
                self.logger.debug(
                    f"  Temporarily setting population assignments to {as_pop} "
                    "as specified by the as_pop parameter"
                )

        keep = self._resolve_labels(pop_list, set(labels))

        if self.logger.isEnabledFor(logging.INFO):
            self.logger.info(f"  Retaining only populations {', '.join(keep)}")

        keep_set = set(keep)
        mask = np.array([label in keep_set for label in labels], dtype=bool)
        result = dataset.subset_individuals(mask)

        if mono_rm:
            result = result.subset_loci(~self.detector.classify(result))

        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug("  Summary of recoded dataset")
            self.logger.debug(f"    No. of loci: {result.n_loc}")
            self.logger.debug(f"    No. of individuals: {result.n_ind}")
            if as_pop is not None:
                remaining = {label for label, kept in zip(labels, mask) if kept}
                self.logger.debug(
                    f"    No. of levels of {as_pop} remaining: {len(remaining)}"
                )
            self.logger.debug(f"    No. of populations: {len(result.populations())}")

        if self.logger.isEnabledFor(logging.INFO):
            self.logger.info("  Note: Locus metrics not recalculated")
            if mono_rm:
                self.logger.info("  Note: Resultant monomorphic loci deleted")
            else:
                self.logger.info("  Note: Resultant monomorphic loci not deleted")

        result = result.with_history_record(
            HistoryRecord.create("keep_pop", pop_list=keep, as_pop=as_pop, mono_rm=mono_rm)
        )

        if self.logger.isEnabledFor(logging.INFO):
            self.logger.info("Completed: keep_pop")
        return result

    def _resolve_labels(self, pop_list: Iterable[str], present: set) -> List[str]:
        """Drop requested labels that are not in the dataset, keeping order."""
        keep: List[str] = []
        for case in dict.fromkeys(pop_list):
            if case in present:
                keep.append(case)
            elif self.logger.isEnabledFor(logging.WARNING):
                self.logger.warning(
                    f"Listed population {case} not present in the dataset -- ignored"
                )
        if not keep:
            raise ConfigurationError("No populations listed to keep are present in the dataset")
        return keep
