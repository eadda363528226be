"""VCF/BCF loading into a GenotypeDataset."""

import sys
import logging
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

import numpy as np
import pysam

from ..utils.memory_monitor import MemoryMonitor
from ..io.metrics_reader import MetricsReader
from .dataset import GenotypeDataset, Individual, LocusRecord, Ploidy
from .errors import DomainError
from .genotype_utils import gt_to_dosage, gt_to_string, is_multiallelic
from .metric_filter import RDEPTH

__all__ = ["VCFParser"]


class VCFParser:
    """Builds a GenotypeDataset from a VCF file and optional metric tables."""

    def __init__(
        self,
        memory_monitor: MemoryMonitor,
        logger: logging.Logger,
        metrics_reader: Optional[MetricsReader] = None,
    ):
        """Initialize VCF parser with memory monitoring and logging."""
        self.memory_monitor = memory_monitor
        self.logger = logger
        self.metrics_reader = metrics_reader or MetricsReader(logger)

    def parse_and_validate(
        self,
        vcf_path: Path,
        ind_metrics_path: Optional[Path] = None,
        loc_metrics_path: Optional[Path] = None,
    ) -> GenotypeDataset:
        """Parse a VCF file and return a validated dataset.

        Args:
            vcf_path: Path to VCF/VCF.gz/BCF file
            ind_metrics_path: Optional TSV with per-individual attributes; a
                ``pop`` column supplies population labels
            loc_metrics_path: Optional TSV with numeric per-locus metrics,
                overriding metrics derived from the VCF

        Returns:
            GenotypeDataset with an empty history

        Raises:
            SystemExit: If the input is malformed (missing samples, duplicate
                IDs, multiallelic sites)
            DomainError: If calls mix haploid and diploid genotypes
        """
        samples = self._validate_headers(vcf_path)
        columns, loci, ploidies = self._validate_variants(vcf_path, samples)

        ploidy = self._resolve_ploidy(ploidies)
        if self.logger.isEnabledFor(logging.INFO):
            self.logger.info(f"Processing a {ploidy.data_type} dataset")

        individuals = self._build_individuals(samples, ind_metrics_path)
        if loc_metrics_path is not None:
            loci = self._merge_loc_metrics(loci, loc_metrics_path)

        self.memory_monitor.check_memory_and_warn("VCF parsing")
        self.memory_monitor.warn_for_large_dataset(len(loci), len(samples))

        matrix = np.array(columns, dtype=float).T if columns else np.empty((len(samples), 0))
        return GenotypeDataset.build(
            matrix, ploidy, individuals, loci, logger=self.logger
        )

    def _validate_headers(self, vcf_path: Path) -> List[str]:
        """Validate VCF headers and extract sample names."""
        try:
            with pysam.VariantFile(str(vcf_path)) as vf:
                samples = list(vf.header.samples)
        except Exception as e:
            sys.exit(f"ERROR: Failed to read VCF/BCF headers via pysam: {e}")

        if not samples:
            sys.exit("ERROR: No samples found in VCF header.")
        return samples

    def _validate_variants(
        self, vcf_path: Path, samples: List[str]
    ) -> Tuple[List[List[float]], List[LocusRecord], Set[int]]:
        """Parse variant records into per-locus dosage columns and metrics."""
        seen_ids: Set[str] = set()
        columns: List[List[float]] = []
        loci: List[LocusRecord] = []
        ploidies: Set[int] = set()

        if self.logger.isEnabledFor(logging.INFO):
            self.logger.info(f"Parsing VCF variants with {len(samples)} samples")

        with pysam.VariantFile(str(vcf_path)) as vf:
            line_number = 0
            for rec in vf:
                line_number += 1

                locus_id = rec.id if rec.id and rec.id != "." else f"{rec.chrom}_{rec.pos}"
                if locus_id in seen_ids:
                    sys.exit(
                        f"ERROR: Line {line_number}: Duplicate locus ID '{locus_id}'. "
                        "Ensure locus IDs are unique."
                    )
                seen_ids.add(locus_id)

                if rec.alts and len(rec.alts) > 1:
                    sys.exit(
                        f"ERROR: Line {line_number}: Multiallelic site detected (ALT='{','.join(rec.alts)}'). "
                        "Filter or split multiallelic sites before processing."
                    )

                dosages: List[float] = []
                depths: List[float] = []
                for sample_idx, sample in enumerate(samples):
                    data = rec.samples[sample]
                    gt = data.get("GT")
                    if is_multiallelic(gt):
                        sys.exit(
                            f"ERROR: Line {line_number}, Sample {sample_idx + 1}: "
                            f"Multiallelic genotype detected (GT='{gt_to_string(gt)}'). "
                            "Filter or split multiallelic sites before processing."
                        )
                    dosage = gt_to_dosage(gt)
                    if not np.isnan(dosage):
                        ploidies.add(len(gt))
                    dosages.append(dosage)

                    dp = data.get("DP") if "DP" in rec.format else None
                    if isinstance(dp, (int, float)) and not isinstance(dp, bool):
                        depths.append(float(dp))

                columns.append(dosages)
                loci.append(LocusRecord(locus_id, self._locus_metrics(rec, depths)))

                if line_number % 10000 == 0 and self.logger.isEnabledFor(logging.INFO):
                    self.logger.info(f"Processed {line_number} variants...")

        if not columns:
            sys.exit(
                "ERROR: No data lines found in VCF. "
                "Ensure VCF contains variant records."
            )

        if self.logger.isEnabledFor(logging.INFO):
            self.logger.info(
                f"VCF validation complete: {len(columns)} variants, "
                f"{len(samples)} samples processed successfully."
            )
        return columns, loci, ploidies

    @staticmethod
    def _locus_metrics(rec: "pysam.VariantRecord", depths: List[float]) -> Dict[str, float]:
        """Scalar numeric INFO fields plus mean per-sample read depth."""
        metrics: Dict[str, float] = {}
        for key, value in rec.info.items():
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                metrics[key] = float(value)
        if depths:
            metrics[RDEPTH] = float(np.mean(depths))
        return metrics

    def _resolve_ploidy(self, ploidies: Set[int]) -> Ploidy:
        if not ploidies:
            if self.logger.isEnabledFor(logging.WARNING):
                self.logger.warning("No called genotypes found; assuming diploid data")
            return Ploidy.DIPLOID
        if len(ploidies) > 1:
            raise DomainError(
                f"Ploidy must be universally 1 (presence/absence data) or 2 "
                f"(SNP data), found {sorted(ploidies)}"
            )
        return Ploidy.from_value(ploidies.pop())

    def _build_individuals(
        self, samples: List[str], ind_metrics_path: Optional[Path]
    ) -> List[Individual]:
        if ind_metrics_path is None:
            return [Individual(sample) for sample in samples]

        table = self.metrics_reader.read_ind_metrics(ind_metrics_path)
        missing = [s for s in samples if s not in table]
        if missing:
            sys.exit(
                f"ERROR: {len(missing)} VCF sample(s) missing from individual metrics "
                f"file {ind_metrics_path}: {', '.join(missing[:5])}"
            )
        individuals = []
        for sample in samples:
            metrics = table[sample]
            pop = metrics.get("pop")
            individuals.append(
                Individual(sample, pop=pop if pop and pop != "NA" else None, metrics=metrics)
            )
        return individuals

    def _merge_loc_metrics(
        self, loci: List[LocusRecord], loc_metrics_path: Path
    ) -> List[LocusRecord]:
        table = self.metrics_reader.read_loc_metrics(loc_metrics_path)
        merged = [
            LocusRecord(loc.id, {**loc.metrics, **table.get(loc.id, {})}) for loc in loci
        ]
        unmatched = len(set(table) - {loc.id for loc in loci})
        if unmatched and self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(
                f"{unmatched} locus metric row(s) do not match any VCF locus and were ignored"
            )
        return merged
