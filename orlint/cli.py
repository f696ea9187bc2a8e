"""Command-line entry point for orlint."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import Config, find_and_load, load_config
from .errors import AnalyzerError
from .linter import Linter, list_rules
from .parser import parse_orbit_file
from .reporter import Reporter
from .result import Summary
from .severity import Severity
from .utils import iter_component_files, read_text_file

logger = logging.getLogger(__name__)


def _rule_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="orlint",
        description="Static analysis for .orbit UI component files",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr.")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Lint component files and report issues.")
    analyze.add_argument("paths", nargs="+", help="Component files or directories to analyze.")
    analyze.add_argument(
        "--format",
        "-f",
        choices=["text", "json", "html"],
        default=None,
        help="Report format (defaults to the configured format, text).",
    )
    analyze.add_argument(
        "--output",
        "-o",
        dest="output_path",
        default=None,
        help="Write the report to this path instead of stdout.",
    )
    analyze.add_argument("--config", "-c", default=None, help="Configuration file to use.")
    analyze.add_argument(
        "--rules",
        type=_rule_list,
        default=None,
        help="Comma-separated rules to run (all others are skipped).",
    )
    analyze.add_argument(
        "--disable-rules",
        type=_rule_list,
        default=None,
        help="Comma-separated rules to skip.",
    )
    analyze.add_argument(
        "--min-severity",
        choices=[severity.value for severity in Severity],
        default=None,
        help="Drop issues below this severity.",
    )
    analyze.add_argument(
        "--parallel",
        action="store_true",
        default=None,
        help="Lint files in parallel.",
    )
    analyze.set_defaults(handler=run_analyze)

    validate = subparsers.add_parser("validate", help="Only check that component files parse.")
    validate.add_argument("paths", nargs="+", help="Component files or directories to validate.")
    validate.set_defaults(handler=run_validate)

    rules = subparsers.add_parser("list-rules", help="List the available rules.")
    rules.set_defaults(handler=run_list_rules)
    return parser


def _load(config_path: Optional[str]) -> Config:
    if config_path:
        return load_config(config_path)
    return find_and_load()


def run_analyze(args: argparse.Namespace) -> int:
    config = _load(args.config).with_overrides(
        enabled_rules=args.rules,
        disabled_rules=args.disable_rules,
        report_format=args.format,
        output_path=args.output_path,
        min_severity=args.min_severity,
        parallel=args.parallel,
    )
    files = list(iter_component_files(args.paths))
    if not files:
        logger.warning("No component files found in %s", ", ".join(args.paths))

    issues = Linter(config).lint_files(files)
    reporter = Reporter(config.reporter.format, config.reporter.output_path)
    reporter.report_all_issues(issues)
    if reporter.output_path is not None:
        print(f"Report written to {reporter.output_path}")
    return Summary.from_issues(issues).exit_code()


def run_validate(args: argparse.Namespace) -> int:
    failures = 0
    for root in args.paths:
        try:
            paths = list(iter_component_files([root]))
        except AnalyzerError as exc:
            failures += 1
            print(f"{exc}", file=sys.stderr)
            continue
        for path in paths:
            try:
                parse_orbit_file(read_text_file(path), str(path))
            except AnalyzerError as exc:
                failures += 1
                print(f"{exc}", file=sys.stderr)
                continue
            print(f"{path}: OK")
    return 1 if failures else 0


def run_list_rules(args: argparse.Namespace) -> int:
    rules = list_rules()
    width = max(len(rule.name) for rule in rules)
    for rule in rules:
        print(f"{rule.name:<{width}}  {rule.default_severity.value:<7}  {rule.description}")
    return 0


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.WARNING
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args)
    try:
        return args.handler(args)
    except AnalyzerError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
