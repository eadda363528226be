"""Run information file output operations."""

import datetime
import platform
from pathlib import Path
from typing import Any, Dict

from ..core.dataset import GenotypeDataset
from ..utils.memory_monitor import MemoryMonitor
from ..version import __version__ as dartgeno_version, get_git_commit

__all__ = ["RunInfoWriter"]


class RunInfoWriter:
    """Handles run information file output."""

    def __init__(self, memory_monitor: MemoryMonitor):
        """Initialize run info writer with memory monitor.

        Args:
            memory_monitor: MemoryMonitor instance for tracking memory usage
        """
        self.memory_monitor = memory_monitor

    def write_run_info(
        self,
        output_prefix: Path,
        initial: GenotypeDataset,
        final: GenotypeDataset,
        config_data: Dict[str, Any],
    ) -> Path:
        """Write run information, dataset summaries and history to a file.

        Args:
            output_prefix: Path to output directory
            initial: Dataset as loaded from input
            final: Dataset after all filters were applied
            config_data: Dictionary containing configuration information

        Returns:
            Path to the created run_info.txt

        Example:
            >>> writer = RunInfoWriter(memory_monitor)
            >>> writer.write_run_info(Path("output"), loaded, filtered, asdict(config))
            PosixPath('output/run_info.txt')
        """
        run_info_path = output_prefix / "run_info.txt"

        git_commit = get_git_commit()

        timestamp = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        memory_summary = self.memory_monitor.get_memory_summary()
        estimated_matrix_mb = self.memory_monitor.estimate_matrix_memory_mb(
            initial.n_loc, initial.n_ind
        )

        lines = [
            "dartgeno Run Information",
            "========================",
            "",
            f"Version: {dartgeno_version}",
            f"Git commit: {git_commit}",
            f"Python version: {platform.python_version()}",
            f"Platform: {platform.platform()}",
            "",
            f"Run timestamp: {timestamp}",
            "",
            "System Memory Information:",
            f"  Current process memory: {memory_summary['current_mb']:.1f} MB",
            f"  Peak process memory: {memory_summary['peak_mb']:.1f} MB",
            f"  Available system memory: {memory_summary['available_mb']:.1f} MB",
            f"  Total system memory: {memory_summary['total_mb']:.1f} MB",
            f"  Memory warning threshold: {memory_summary['warning_threshold_mb']:.1f} MB ({memory_summary['warning_percent']:.0f}%)",
            f"  Critical threshold: {memory_summary['critical_threshold_mb']:.1f} MB ({memory_summary['critical_percent']:.0f}%)",
            f"  Estimated genotype matrix memory: {estimated_matrix_mb:.1f} MB",
            "",
            "Configuration:",
        ]
        for key, value in config_data.items():
            lines.append(f"  {key}: {value}")

        lines.extend(["", "Input Data Summary:"])
        lines.extend(self._dataset_lines(initial))
        lines.extend(["", "Output Data Summary:"])
        lines.extend(self._dataset_lines(final))

        lines.extend(["", "Transformation History:"])
        if len(final.history) == 0:
            lines.append("  (none)")
        for i, record in enumerate(final.history, 1):
            lines.append(f"  {i}. {record}")

        output_prefix.mkdir(parents=True, exist_ok=True)
        with open(run_info_path, "w", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")

        return run_info_path

    @staticmethod
    def _dataset_lines(dataset: GenotypeDataset) -> list:
        return [
            f"  Data type: {dataset.ploidy.data_type} (ploidy {dataset.ploidy.value})",
            f"  Number of individuals: {dataset.n_ind}",
            f"  Number of loci: {dataset.n_loc}",
            f"  Populations: {', '.join(dataset.populations()) or '-'}",
        ]
