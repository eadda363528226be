"""Readers for per-individual and per-locus metric tables (TSV)."""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

__all__ = ["MISSING_TOKENS", "MetricsReader"]

MISSING_TOKENS = frozenset({"", "NA", "na", "NaN", "nan", "."})


class MetricsReader:
    """Load tab-separated metric tables keyed by their first column.

    Both tables need a header row. The first column holds the individual or
    locus ID; every other column is a named metric.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def read_ind_metrics(self, path: Path) -> Dict[str, Dict[str, str]]:
        """Read individual attributes (e.g. pop, sex, site) as strings.

        Example:
            >>> # id    pop     sex
            >>> # S1    north   Female
            >>> MetricsReader().read_ind_metrics(Path("ind_metrics.tsv"))
            {'S1': {'pop': 'north', 'sex': 'Female'}}
        """
        columns, rows = self._read_table(path)
        table = {row_id: dict(zip(columns, values)) for row_id, values in rows}
        if self.logger.isEnabledFor(logging.INFO):
            self.logger.info(
                f"Read {len(columns)} individual metric(s) for {len(table)} individuals from {path}"
            )
        return table

    def read_loc_metrics(self, path: Path) -> Dict[str, Dict[str, float]]:
        """Read numeric locus metrics; missing tokens (NA, '.', '') are omitted."""
        columns, rows = self._read_table(path)
        table: Dict[str, Dict[str, float]] = {}
        for row_id, values in rows:
            metrics: Dict[str, float] = {}
            for name, raw in zip(columns, values):
                if raw in MISSING_TOKENS:
                    continue
                try:
                    metrics[name] = float(raw)
                except ValueError:
                    sys.exit(
                        f"ERROR: {path}: locus '{row_id}', metric '{name}': "
                        f"value '{raw}' is not numeric"
                    )
            table[row_id] = metrics
        if self.logger.isEnabledFor(logging.INFO):
            self.logger.info(
                f"Read {len(columns)} locus metric(s) for {len(table)} loci from {path}"
            )
        return table

    def _read_table(self, path: Path) -> Tuple[List[str], List[Tuple[str, List[str]]]]:
        try:
            with open(path, encoding="utf-8") as fh:
                lines = [line.rstrip("\r\n") for line in fh if line.strip()]
        except OSError as e:
            sys.exit(f"ERROR: Failed to read metrics file {path}: {e}")

        if not lines:
            sys.exit(f"ERROR: Metrics file {path} is empty; a header row is required")

        header = lines[0].split("\t")
        columns = [c.strip() for c in header[1:]]
        rows: List[Tuple[str, List[str]]] = []
        seen = set()
        for line_number, line in enumerate(lines[1:], start=2):
            parts = [p.strip() for p in line.split("\t")]
            if len(parts) != len(header):
                sys.exit(
                    f"ERROR: {path}: line {line_number}: expected {len(header)} "
                    f"columns, found {len(parts)}"
                )
            row_id = parts[0]
            if row_id in seen:
                sys.exit(f"ERROR: {path}: line {line_number}: duplicate ID '{row_id}'")
            seen.add(row_id)
            rows.append((row_id, parts[1:]))
        return columns, rows
