"""
Command line entry point: run the ignored Logger metadata check over
serialized AST files.

    ilm --logger-config config/logger.yml lib_app.json lib_worker.yaml

Exit status:
    0  no issues
    1  issues found
    2  at least one file could not be analyzed
"""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence

from ilm import __version__
from ilm.backends import ReportFormat, generate_report, save_report_file
from ilm.check import Issue, explain, run_check
from ilm.config import CheckParams, ConfigError, load_logger_config, load_params, normalize_key
from ilm.serialization import ASTDecodeError, load_ast_file

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ilm",
        description="Find Logger calls whose metadata the console backend will ignore",
    )
    parser.add_argument("ast_files", nargs="*", help="Serialized AST files (.json, .yaml)")
    parser.add_argument("--params", type=Path, help="YAML file with check params")
    parser.add_argument(
        "--logger-config",
        type=Path,
        help="YAML rendering of the app's logger config (default metadata keys)",
    )
    parser.add_argument(
        "--metadata-key",
        action="append",
        default=[],
        metavar="KEY",
        help="Additional allowed metadata key (repeatable)",
    )
    parser.add_argument(
        "--ignore-function",
        action="append",
        default=[],
        metavar="NAME",
        help="Logger function not to check (repeatable)",
    )
    parser.add_argument(
        "--format",
        choices=[f.value for f in ReportFormat],
        default=ReportFormat.TEXT.value,
        help="Report format",
    )
    parser.add_argument("--output", help="Write the report to this file instead of stdout")
    parser.add_argument("--explain", action="store_true", help="Explain the check and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def resolve_params(args: argparse.Namespace) -> CheckParams:
    """Params file / logger config first, then command line additions."""
    logger_config = load_logger_config(args.logger_config) if args.logger_config else None
    params = load_params(args.params, logger_config=logger_config)

    extra_keys = frozenset(normalize_key(k) for k in args.metadata_key)
    extra_ignored = frozenset(normalize_key(f) for f in args.ignore_function)
    if extra_keys or extra_ignored:
        params = replace(
            params,
            metadata_keys=params.metadata_keys | extra_keys,
            ignore_functions=params.ignore_functions | extra_ignored,
        )
    return params


def check_files(paths: Sequence[str], params: CheckParams) -> tuple[List[Issue], List[str]]:
    """
    Run the check on each file.

    Returns all issues (file order, then line order) and the files that
    could not be analyzed.
    """
    issues: List[Issue] = []
    failed: List[str] = []

    for path in paths:
        try:
            root = load_ast_file(path)
        except (FileNotFoundError, ASTDecodeError) as e:
            logger.warning("Skipping %s: %s", path, e)
            failed.append(path)
            continue

        file_issues = run_check(str(path), root, params)
        logger.debug("%s: %d issue(s)", path, len(file_issues))
        issues.extend(file_issues)

    return issues, failed


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose, args.quiet)

    if args.explain:
        print(explain())
        return 0

    if not args.ast_files:
        parser.error("at least one AST file is required")

    try:
        params = resolve_params(args)
    except (FileNotFoundError, ConfigError) as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    logger.debug("Allowed metadata keys: %s", sorted(params.metadata_keys))

    issues, failed = check_files(args.ast_files, params)

    fmt = ReportFormat(args.format)
    if args.output:
        save_report_file(issues, args.output, fmt=fmt)
        logger.info("Report written to %s", args.output)
    else:
        print(generate_report(issues, fmt=fmt))

    if failed:
        return 2
    return 1 if issues else 0


if __name__ == "__main__":
    sys.exit(main())
