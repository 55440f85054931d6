"""Command-line entry point for git-secret-guard."""

from __future__ import annotations

import argparse
import itertools
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import ConfigError, GuardConfig, filter_findings, find_config, load_config
from .hooks import NotAGitRepository, initialize
from .patterns import CatalogError
from .result import ScanResult, format_finding, format_pattern_table, format_summary_table
from .scanner import SKIP_DIRECTORIES, SecretScanner
from .utils import iter_files

logger = logging.getLogger("secretguard")

NEXT_STEPS = (
    "What to do next",
    "-" * 40,
    "1. Remove the secrets from your code",
    "2. Add sensitive files to .gitignore",
    "3. Use environment variables or a secrets manager",
    "4. Rotate any secrets that may have been exposed",
    "",
    "Run 'git-secret-guard patterns' to see all detection patterns",
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-secret-guard",
        description="Pre-commit secret detection for developers",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser("scan", help="Scan files or directories for secrets")
    scan_parser.add_argument("path", nargs="?", default=".", help="File or directory to scan (default: .)")
    scan_parser.add_argument(
        "--config",
        "-c",
        default=None,
        help="Path to a configuration file with custom patterns (default: ./.gitsecretguard.yml if present).",
    )
    scan_parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log scanned files and skipped matches.",
    )
    scan_parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON (useful for CI integration).",
    )
    scan_parser.add_argument(
        "--out",
        "--output",
        dest="output_path",
        default=None,
        help="Also write the JSON report to this path.",
    )
    scan_parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop at the first finding.",
    )

    subparsers.add_parser("init", help="Install the pre-commit hook in the current repository")

    patterns_parser = subparsers.add_parser("patterns", help="List all detection patterns")
    patterns_parser.add_argument("--config", "-c", default=None, help="Include custom patterns from this file.")

    return parser


def configure_logging(verbose: bool) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S"))
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def resolve_config(config_path: Optional[str]) -> GuardConfig:
    if config_path:
        path = Path(config_path)
        if not path.is_file():
            raise ConfigError(f"Configuration file not found: {path}")
        return load_config(path)
    return load_config(find_config(Path.cwd()))


def run_scan(target: Path, config: GuardConfig, fail_fast: bool = False) -> ScanResult:
    scanner = SecretScanner(config.merged_patterns())
    root = target if target.is_dir() else target.parent
    findings = filter_findings(scanner.scan_path(target), config, root)
    if fail_fast:
        findings = itertools.islice(findings, 1)

    result = ScanResult()
    for finding in findings:
        logger.debug("%s in %s:%d -> %s", finding.pattern_id, finding.source, finding.line_number, finding.redacted)
        result.add_finding(finding)
    result.files_scanned = _count_files(target)
    return result


def _count_files(target: Path) -> int:
    if target.is_file():
        return 1
    return sum(1 for _ in iter_files(target, skip_dirs=SKIP_DIRECTORIES))


def write_output(result: ScanResult, output_path: Optional[str], as_json: bool) -> None:
    payload = json.dumps(result.to_dict(), indent=2)
    if as_json:
        print(payload)
    else:
        _print_pretty(result)

    if output_path:
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(payload, encoding="utf-8")
        if not as_json:
            print(f"\nReport written to {output_path}")


def _print_pretty(result: ScanResult) -> None:
    if result.passed:
        print("No secrets detected!")
        print(f"Scanned {result.files_scanned} file(s)")
        return

    print(f"Found {len(result.findings)} potential secret(s)!")
    print()
    for source, findings in result.by_source().items():
        print(f"== {source}")
        for finding in findings:
            print(format_finding(finding))
            print()
    print(format_summary_table(result))
    print()
    print("\n".join(NEXT_STEPS))


def _scan_command(args: argparse.Namespace) -> int:
    target = Path(args.path)
    if not target.exists():
        print(f"Error: Path not found: {target.resolve()}", file=sys.stderr)
        return 1
    try:
        config = resolve_config(args.config)
        result = run_scan(target, config, fail_fast=args.fail_fast)
    except (ConfigError, CatalogError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    write_output(result, args.output_path, args.json)
    return result.exit_code()


def _init_command(_args: argparse.Namespace) -> int:
    try:
        outcome = initialize(Path.cwd())
    except NotAGitRepository as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"Created pre-commit hook at {outcome.hook_path}")
    if outcome.config_created:
        print(f"Created {outcome.config_path.name} configuration file")
    else:
        print(f"{outcome.config_path.name} already exists, skipping")
    print()
    print("git-secret-guard initialized! Your commits will now be scanned for secrets.")
    print("Run 'git-secret-guard scan .' to test the scanner")
    return 0


def _patterns_command(args: argparse.Namespace) -> int:
    try:
        config = resolve_config(args.config)
        scanner = SecretScanner(config.merged_patterns())
    except (ConfigError, CatalogError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    print(format_pattern_table(scanner.patterns))
    return 0


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(getattr(args, "verbose", False))

    if args.command == "scan":
        return _scan_command(args)
    if args.command == "init":
        return _init_command(args)
    if args.command == "patterns":
        return _patterns_command(args)

    parser.error(f"Unsupported command: {args.command}")
    return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
