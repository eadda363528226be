"""Command-line interface for dartgeno."""

import argparse
import logging
import platform
import sys
from pathlib import Path

from .app import DartGenoApp, DartGenoConfig
from .core.errors import DartGenoError
from .utils.validation import validate_cli_arguments
from .version import __version__, get_git_commit

__all__ = ["parser_resolve_path", "create_parser", "main"]


def _build_version_string() -> str:
    """Compose version string with build and runtime info."""
    commit = get_git_commit()
    py = platform.python_version()
    return f"dartgeno {__version__} (commit hash {commit})\nPython {py}"


def parser_resolve_path(path: str) -> Path:
    """Resolve CLI-provided path string to an absolute Path.

    Example:
        >>> parser_resolve_path("sample.vcf")
        PosixPath('/absolute/path/to/sample.vcf')
    """
    return Path(path).resolve()


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser.

    Example:
        >>> parser = create_parser()
        >>> args = parser.parse_args(["input.vcf", "output", "-p", "A", "B"])
        >>> args.keep_pop
        ['A', 'B']
    """
    parser = argparse.ArgumentParser(
        prog="dartgeno",
        description=(
            "Subset a genotype dataset by population and locus quality metric, "
            "then export it in faststructure format."
        ),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        epilog=(
            "Notes: Input VCF must be bi-allelic. The faststructure export "
            "requires diploid (SNP) genotypes."
        ),
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=_build_version_string(),
        help="Show program version, commit hash, and Python version, then exit",
    )

    parser.add_argument(
        "ivcf",
        help="Input VCF/BCF file (bi-allelic)",
        type=parser_resolve_path,
        metavar="IVCF",
    )
    parser.add_argument(
        "outdir",
        help="Path to output folder (will be created if absent)",
        type=parser_resolve_path,
        metavar="OUTPUT_FOLDER",
    )

    grp_input = parser.add_argument_group("Input", "Metadata tables")
    grp_input.add_argument(
        "-i",
        "--ind-metrics",
        dest="ind_metrics",
        help="TSV of individual attributes; first column ID, optional 'pop' column",
        type=parser_resolve_path,
        default=None,
        metavar="IND_TSV",
    )
    grp_input.add_argument(
        "-l",
        "--loc-metrics",
        dest="loc_metrics",
        help="TSV of numeric locus metrics; first column locus ID",
        type=parser_resolve_path,
        default=None,
        metavar="LOC_TSV",
    )

    grp_filter = parser.add_argument_group("Filtering", "Individual and locus filters")
    grp_filter.add_argument(
        "-p",
        "--keep-pop",
        dest="keep_pop",
        help="Populations to keep (all are kept when omitted)",
        nargs="+",
        default=[],
        metavar="POP",
    )
    grp_filter.add_argument(
        "--as-pop",
        dest="as_pop",
        help="Individual attribute to treat as population when selecting (e.g. sex)",
        default=None,
        metavar="FIELD",
    )
    grp_filter.add_argument(
        "--mono-rm",
        dest="mono_rm",
        help="Remove loci left monomorphic after population selection",
        action="store_true",
        default=False,
    )
    grp_filter.add_argument(
        "-m",
        "--metric",
        help="Locus metric to filter on, e.g. rdepth (no metric filter when omitted)",
        default=None,
        metavar="METRIC",
    )
    grp_filter.add_argument(
        "--lower",
        help="Lower threshold; loci with metric below it are removed",
        default=5.0,
        type=float,
    )
    grp_filter.add_argument(
        "--upper",
        help="Upper threshold; loci with metric above it are removed",
        default=50.0,
        type=float,
    )

    grp_output = parser.add_argument_group("Output", "faststructure export")
    grp_output.add_argument(
        "-o",
        "--outfile",
        help="Name of the faststructure file written to OUTPUT_FOLDER",
        default="gl.str",
    )
    grp_output.add_argument(
        "--probar",
        help="Show a progress bar while exporting",
        action="store_true",
        default=False,
    )

    grp_log = parser.add_argument_group("Logging", "Logging verbosity and format")
    grp_log.add_argument(
        "-v",
        "--verbose",
        help=(
            "Verbosity: 0 silent or fatal errors; 1 begin and end; 2 progress log; "
            "3 progress and results summary; 5 full report"
        ),
        default=2,
        type=int,
    )
    grp_log.add_argument(
        "-F",
        "--log-format",
        help="Logging format: text or json",
        choices=["text", "json"],
        default="text",
    )

    return parser


def main() -> None:
    """CLI entry point.

    Example:
        >>> # python -m dartgeno input.vcf output -i ind.tsv -p A B -m rdepth
    """
    parser = create_parser()
    args = parser.parse_args()

    validate_cli_arguments(args)

    config = DartGenoConfig(
        input_vcf=args.ivcf,
        output_prefix=args.outdir,
        ind_metrics=args.ind_metrics,
        loc_metrics=args.loc_metrics,
        keep_pop=args.keep_pop,
        as_pop=args.as_pop,
        mono_rm=args.mono_rm,
        metric=args.metric,
        lower=args.lower,
        upper=args.upper,
        outfile=args.outfile,
        probar=args.probar,
        verbose=args.verbose,
        log_format=args.log_format,
    )

    app = DartGenoApp(config)
    try:
        app.run()
    except DartGenoError as e:
        if app.logger.isEnabledFor(logging.ERROR):
            app.logger.error(str(e))
        sys.exit(f"ERROR: {e}")


if __name__ == "__main__":
    main()
