"""Input validation utilities."""

import sys
import argparse

__all__ = ["validate_cli_arguments"]


def validate_cli_arguments(args: argparse.Namespace) -> None:
    """Validate CLI argument combinations and constraints.

    Args:
        args: Parsed command line arguments
    """
    if not args.ivcf.exists():
        sys.exit(f"Input file not found: {args.ivcf}")

    for path in (args.ind_metrics, args.loc_metrics):
        if path is not None and not path.exists():
            sys.exit(f"Metrics file not found: {path}")

    if args.as_pop is not None and not args.keep_pop:
        sys.exit("--as-pop requires --keep-pop")

    if args.as_pop is not None and args.ind_metrics is None:
        sys.exit("--as-pop requires --ind-metrics to supply individual attributes")

    if args.mono_rm and not args.keep_pop:
        sys.exit("--mono-rm requires --keep-pop")

    if not args.outfile or "/" in args.outfile:
        sys.exit("-o (output file name) must be a plain file name; use OUTPUT_FOLDER for the directory")
