"""Genotype matrix with individual and locus metadata kept in lock-step."""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, FrozenSet, List, Mapping, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .errors import ConfigurationError, DomainError, ValidationError
from .history import HistoryRecord, TransformationHistory

__all__ = [
    "DEFAULT_POPULATION",
    "Ploidy",
    "Individual",
    "LocusRecord",
    "GenotypeDataset",
]

DEFAULT_POPULATION = "pop1"


class Ploidy(Enum):
    """Ploidy model shared by every call in a dataset."""

    HAPLOID = 1
    DIPLOID = 2

    @classmethod
    def from_value(cls, value: "int | Ploidy") -> "Ploidy":
        if isinstance(value, Ploidy):
            return value
        if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
            try:
                return cls(int(value))
            except ValueError:
                pass
        raise DomainError(
            f"Ploidy must be universally 1 (presence/absence data) or 2 "
            f"(SNP data), got {value!r}"
        )

    @property
    def allowed_values(self) -> Tuple[float, ...]:
        """Non-missing call values permitted under this ploidy."""
        if self is Ploidy.HAPLOID:
            return (0.0, 1.0)
        return (0.0, 1.0, 2.0)

    @property
    def data_type(self) -> str:
        return "presence/absence" if self is Ploidy.HAPLOID else "SNP"


@dataclass(frozen=True)
class Individual:
    """One genotyped individual.

    Attributes:
        id: Stable identifier (sample name)
        pop: Current population label
        metrics: Additional per-individual attributes (e.g. sex, site)
    """

    id: str
    pop: Optional[str] = None
    metrics: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class LocusRecord:
    """Per-locus metadata: identifier and named numeric metrics."""

    id: str
    metrics: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True, eq=False)
class GenotypeDataset:
    """Individuals x loci genotype calls with their metadata.

    Calls are stored as float64 with NaN for missing. Diploid cells hold the
    alternate-allele dosage (0, 1, 2); haploid cells hold presence/absence
    (0, 1). Row ``i`` of ``matrix`` belongs to ``individuals[i]`` and column
    ``j`` to ``loci[j]``.

    Instances are never modified. Every transformation returns a new dataset,
    so one dataset may feed several independent filter pipelines.

    Example:
        >>> ds = GenotypeDataset.build(
        ...     [[0, 1, 2], [2, None, 0]],
        ...     ploidy=2,
        ...     individuals=[Individual("i1", "A"), Individual("i2", "B")],
        ...     loci=[LocusRecord(f"L{j}", {"rdepth": 10.0}) for j in range(3)],
        ... )
        >>> ds.n_ind, ds.n_loc, ds.populations()
        (2, 3, ['A', 'B'])
    """

    matrix: NDArray[np.float64]
    ploidy: Ploidy
    individuals: Tuple[Individual, ...]
    loci: Tuple[LocusRecord, ...]
    history: TransformationHistory = field(default_factory=TransformationHistory)

    def __post_init__(self) -> None:
        matrix = self.matrix
        if not isinstance(matrix, np.ndarray) or matrix.flags.writeable:
            # never freeze an array the caller still holds
            matrix = np.array(matrix, dtype=float)
            matrix.setflags(write=False)
            object.__setattr__(self, "matrix", matrix)

    @classmethod
    def build(
        cls,
        matrix: ArrayLike,
        ploidy: "int | Ploidy",
        individuals: Sequence[Individual],
        loci: Sequence[LocusRecord],
        history: Optional[TransformationHistory] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "GenotypeDataset":
        """Create a validated dataset from raw components.

        The matrix is copied. ``None`` / NaN cells are missing calls. When no
        individual carries a population label, all are assigned to a single
        population labelled ``pop1``.

        Raises:
            DomainError: ploidy is not 1 or 2
            ValidationError: shapes disagree, a call is outside the ploidy's
                domain, or only some individuals have a population label
        """
        arr = np.array(matrix, dtype=float)
        if arr.size == 0 and arr.ndim < 2:
            arr = arr.reshape(len(individuals), len(loci))

        individuals = tuple(individuals)
        if individuals and all(not ind.pop for ind in individuals):
            if logger and logger.isEnabledFor(logging.INFO):
                logger.info(
                    "Population assignments not detected, individuals assigned "
                    f"to a single population labelled '{DEFAULT_POPULATION}'"
                )
            individuals = tuple(replace(ind, pop=DEFAULT_POPULATION) for ind in individuals)

        dataset = cls(
            matrix=_frozen(arr),
            ploidy=Ploidy.from_value(ploidy),
            individuals=individuals,
            loci=tuple(loci),
            history=history if history is not None else TransformationHistory(),
        )
        dataset.validate()
        return dataset

    def validate(self) -> None:
        """Check every dataset invariant, raising ValidationError on failure."""
        if self.matrix.ndim != 2:
            raise ValidationError(
                f"Genotype matrix must be two-dimensional, got {self.matrix.ndim} dimension(s)"
            )
        n_rows, n_cols = self.matrix.shape
        if n_rows != len(self.individuals):
            raise ValidationError(
                f"The number of matrix rows ({n_rows}) does not match the number "
                f"of individuals ({len(self.individuals)})"
            )
        if n_cols != len(self.loci):
            raise ValidationError(
                f"The number of matrix columns ({n_cols}) does not match the number "
                f"of rows in the locus metrics table ({len(self.loci)})"
            )
        called = self.matrix[~np.isnan(self.matrix)]
        bad = ~np.isin(called, self.ploidy.allowed_values)
        if bad.any():
            raise ValidationError(
                f"Genotype values {sorted(set(called[bad].tolist()))} are not valid "
                f"for ploidy {self.ploidy.value}"
            )
        for ind in self.individuals:
            if not ind.pop:
                raise ValidationError(f"Individual '{ind.id}' has no population label")

    # Read access

    @property
    def n_ind(self) -> int:
        return len(self.individuals)

    @property
    def n_loc(self) -> int:
        return len(self.loci)

    @property
    def ind_names(self) -> List[str]:
        return [ind.id for ind in self.individuals]

    @property
    def loc_names(self) -> List[str]:
        return [loc.id for loc in self.loci]

    @property
    def pop(self) -> List[str]:
        """Population label of every individual, in row order."""
        return [ind.pop for ind in self.individuals]

    def populations(self) -> List[str]:
        """Distinct population labels, sorted."""
        return sorted(set(self.pop))

    def value_at(self, row: int, col: int) -> Optional[int]:
        """Return the call at (row, col), or None when missing."""
        value = self.matrix[row, col]
        return None if np.isnan(value) else int(value)

    def population_label_of(self, row: int) -> str:
        return self.individuals[row].pop

    def metric_of(self, col: int, name: str) -> float:
        return float(self.loci[col].metrics[name])

    def metric_names(self, col: int) -> FrozenSet[str]:
        return frozenset(self.loci[col].metrics)

    def locus_metric_values(self, name: str) -> NDArray[np.float64]:
        """Values of one locus metric across all loci.

        Raises:
            ConfigurationError: if any locus lacks the metric
        """
        missing = [loc.id for loc in self.loci if name not in loc.metrics]
        if missing:
            raise ConfigurationError(
                f"Locus metrics do not include '{name}' "
                f"(absent for {len(missing)} of {self.n_loc} loci)"
            )
        return np.array([loc.metrics[name] for loc in self.loci], dtype=float)

    def ind_metric_names(self) -> FrozenSet[str]:
        """Individual attributes available for every individual."""
        if not self.individuals:
            return frozenset()
        names = set(self.individuals[0].metrics)
        for ind in self.individuals[1:]:
            names &= set(ind.metrics)
        return frozenset(names)

    def ind_metric(self, name: str) -> List[str]:
        """Values of one individual attribute, in row order.

        Raises:
            ConfigurationError: if any individual lacks the attribute
        """
        if name not in self.ind_metric_names():
            raise ConfigurationError(f"Individual metrics do not include '{name}'")
        return [str(ind.metrics[name]) for ind in self.individuals]

    # Value-semantics transformations

    def with_population_labels(self, labels: Sequence[str]) -> "GenotypeDataset":
        """Return a copy whose individuals carry ``labels`` as population."""
        if len(labels) != self.n_ind:
            raise ValidationError(
                f"Got {len(labels)} population labels for {self.n_ind} individuals"
            )
        individuals = tuple(
            replace(ind, pop=str(label)) for ind, label in zip(self.individuals, labels)
        )
        return self._derive(individuals=individuals, validate=True)

    def with_population_label(self, row: int, label: str) -> "GenotypeDataset":
        labels = self.pop
        labels[row] = label
        return self.with_population_labels(labels)

    def subset_individuals(self, mask: ArrayLike) -> "GenotypeDataset":
        """Keep the individuals (rows) where ``mask`` is true, in order."""
        index = self._mask_to_index(mask, self.n_ind, "individual")
        return self._derive(
            matrix=_frozen(self.matrix[index, :]),
            individuals=tuple(self.individuals[i] for i in index),
        )

    def subset_loci(self, mask: ArrayLike) -> "GenotypeDataset":
        """Keep the loci where ``mask`` is true.

        Matrix columns and locus records are selected with the same index, so
        each surviving column stays paired with its own metadata record.
        """
        index = self._mask_to_index(mask, self.n_loc, "locus")
        return self._derive(
            matrix=_frozen(self.matrix[:, index]),
            loci=tuple(self.loci[j] for j in index),
        )

    def with_history_record(self, record: HistoryRecord) -> "GenotypeDataset":
        return self._derive(history=self.history.append(record))

    def summary(self) -> Dict[str, int]:
        return {
            "n_ind": self.n_ind,
            "n_loc": self.n_loc,
            "n_pop": len(self.populations()),
        }

    def _derive(self, validate: bool = False, **changes) -> "GenotypeDataset":
        # the read-only matrix is shared when unchanged
        derived = replace(self, **changes)
        if validate:
            derived.validate()
        return derived

    @staticmethod
    def _mask_to_index(mask: ArrayLike, length: int, axis: str) -> NDArray[np.intp]:
        mask_arr = np.asarray(mask, dtype=bool)
        if mask_arr.shape != (length,):
            raise ValidationError(
                f"{axis.capitalize()} mask has shape {mask_arr.shape}, expected ({length},)"
            )
        return np.flatnonzero(mask_arr)


def _frozen(arr: NDArray[np.float64]) -> NDArray[np.float64]:
    arr.setflags(write=False)
    return arr
