"""Export of diploid datasets to the faststructure text format."""

import logging
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, Union

import numpy as np
from numpy.typing import NDArray
from tqdm import tqdm

from ..core.dataset import GenotypeDataset, Ploidy
from ..core.errors import DomainError

__all__ = ["N_LEADING_COLUMNS", "MISSING_CODE", "FastStructureEncoder"]

N_LEADING_COLUMNS = 6
MISSING_CODE = -9
LOW_ALLELE = 1
HIGH_ALLELE = 2


class FastStructureEncoder:
    """Recode dosage genotypes into two allele rows per individual.

    Each individual becomes two consecutive rows, one per chromosome copy.
    Every row starts with six placeholder columns holding the 1-based
    individual index, followed by one allele code per locus:

    ========  ===========  ===========
    dosage    copy 1       copy 2
    ========  ===========  ===========
    0         1            1
    1         1            2
    2         2            2
    missing   -9           -9
    ========  ===========  ===========

    Heterozygotes always give the low allele to copy 1. This is a fixed
    convention, not an estimate of haplotype phase.
    """

    def __init__(
        self, logger: Optional[logging.Logger] = None, show_progress: bool = False
    ):
        """Initialize encoder.

        Args:
            logger: Logger instance for output
            show_progress: Whether to show a progress bar while encoding rows
        """
        self.logger = logger or logging.getLogger(__name__)
        self.show_progress = show_progress

    @staticmethod
    def encode_individual(dosages: NDArray[np.float64]) -> NDArray[np.int64]:
        """Return the (2, n_loc) allele-code block for one individual.

        Example:
            >>> FastStructureEncoder.encode_individual(np.array([0, 1, 2, np.nan]))
            array([[ 1,  1,  2, -9],
                   [ 1,  2,  2, -9]])
        """
        dosages = np.asarray(dosages, dtype=float)
        copy1 = np.where(dosages == 2, HIGH_ALLELE, LOW_ALLELE)
        copy2 = np.where(dosages == 0, LOW_ALLELE, HIGH_ALLELE)
        block = np.vstack([copy1, copy2]).astype(np.int64)
        block[:, np.isnan(dosages)] = MISSING_CODE
        return block

    def encode_array(
        self,
        dataset: GenotypeDataset,
        progress: Optional[Callable[[int], None]] = None,
    ) -> NDArray[np.int64]:
        """Return the full (2 * n_ind, 6 + n_loc) integer export matrix."""
        self._check(dataset)
        out = np.empty((2 * dataset.n_ind, N_LEADING_COLUMNS + dataset.n_loc), dtype=np.int64)
        for i, block in self._iter_blocks(dataset, progress):
            out[2 * i : 2 * i + 2] = block
        return out

    def encode(
        self,
        dataset: GenotypeDataset,
        progress: Optional[Callable[[int], None]] = None,
    ) -> List[str]:
        """Return the export as tab-separated lines (without newlines).

        Args:
            dataset: Diploid dataset to export
            progress: Optional callback receiving each completed 0-based row
                index; it does not influence the output

        Raises:
            DomainError: dataset is not diploid
            ValidationError: matrix and metadata are out of sync
        """
        self._check(dataset)
        return list(self._iter_lines(dataset, progress))

    def write(
        self,
        dataset: GenotypeDataset,
        outfile: str = "gl.str",
        outpath: Union[str, Path] = ".",
        progress: Optional[Callable[[int], None]] = None,
    ) -> Path:
        """Write the export to ``outpath/outfile``, replacing any existing file.

        The file is truncated once and the rows are then written strictly in
        individual order.

        Returns:
            Path of the written file
        """
        if self.logger.isEnabledFor(logging.INFO):
            self.logger.info("Starting gl2faststructure")
        self._check(dataset)

        outfilespec = Path(outpath) / outfile
        outfilespec.parent.mkdir(parents=True, exist_ok=True)
        with open(outfilespec, "w", encoding="utf-8") as fh:
            for line in self._iter_lines(dataset, progress):
                fh.write(line + "\n")

        if self.logger.isEnabledFor(logging.INFO):
            self.logger.info(f"Saved faststructure file: {outfilespec.resolve()}")
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(
                f"Consists of {dataset.n_ind} individuals and {dataset.n_loc} loci."
            )
        if self.logger.isEnabledFor(logging.INFO):
            self.logger.info("Completed: gl2faststructure")
        return outfilespec

    def _check(self, dataset: GenotypeDataset) -> None:
        if dataset.ploidy is not Ploidy.DIPLOID:
            raise DomainError(
                f"Detected {dataset.ploidy.data_type} data (ploidy "
                f"{dataset.ploidy.value}). Please provide a SNP dataset"
            )
        dataset.validate()
        if self.logger.isEnabledFor(logging.INFO):
            self.logger.info("  Processing a SNP dataset")

    def _iter_blocks(
        self,
        dataset: GenotypeDataset,
        progress: Optional[Callable[[int], None]],
    ) -> Iterator[tuple]:
        rows: Iterable[int] = range(dataset.n_ind)
        if self.show_progress:
            rows = tqdm(rows, desc="Encoding individuals", unit="ind", leave=False)

        for i in rows:
            block = self.encode_individual(dataset.matrix[i])
            leading = np.full((2, N_LEADING_COLUMNS), i + 1, dtype=np.int64)
            yield i, np.hstack([leading, block])
            if progress is not None:
                progress(i)

    def _iter_lines(
        self,
        dataset: GenotypeDataset,
        progress: Optional[Callable[[int], None]],
    ) -> Iterator[str]:
        for _, block in self._iter_blocks(dataset, progress):
            for row in block:
                yield "\t".join(str(v) for v in row.tolist())
