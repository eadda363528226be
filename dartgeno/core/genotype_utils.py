"""Genotype call conversion helpers."""

from typing import Optional, Sequence

import numpy as np

__all__ = [
    "gt_to_dosage",
    "gt_to_string",
    "is_multiallelic",
]


def gt_to_dosage(gt: Optional[Sequence[Optional[int]]]) -> float:
    """Convert a GT allele tuple to alternate-allele dosage.

    Args:
        gt: Allele indices as returned by pysam (e.g. (0, 1)); None entries
            are missing alleles

    Returns:
        Count of alternate alleles, or NaN when any allele is missing

    Example:
        >>> gt_to_dosage((0, 0))
        0.0
        >>> gt_to_dosage((0, 1))
        1.0
        >>> gt_to_dosage((1, 1))
        2.0
        >>> gt_to_dosage((1,))      # haploid presence
        1.0
        >>> gt_to_dosage((0, None))
        nan
    """
    if not gt or any(a is None for a in gt):
        return np.nan
    return float(sum(1 for a in gt if a == 1))


def gt_to_string(gt: Optional[Sequence[Optional[int]]]) -> str:
    """Render a GT tuple the way it reads in a VCF (unphased)."""
    if not gt:
        return "."
    return "/".join("." if a is None else str(a) for a in gt)


def is_multiallelic(gt: Optional[Sequence[Optional[int]]]) -> bool:
    """Return True if the call references an allele beyond the first ALT."""
    return bool(gt) and any(a is not None and a > 1 for a in gt)
