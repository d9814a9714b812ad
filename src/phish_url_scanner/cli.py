"""Command-line entrypoint: scan a single URL and print the JSON report."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from phish_url_scanner.config.settings import DEFAULT_PATTERNS_PATH, load_config
from phish_url_scanner.core.errors import (
    ConfigError,
    RepositoryUnavailableError,
    ScanTimeoutError,
    UrlParseError,
)
from phish_url_scanner.domain.patterns import load_pattern_snapshot
from phish_url_scanner.orchestrator.pipeline import scan

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_PARSE_ERROR = 2
EXIT_REPOSITORY_ERROR = 3
EXIT_TIMEOUT = 4


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="phish-url-scanner")
    parser.add_argument("--url", required=True, help="URL to score.")
    parser.add_argument("--patterns", help="YAML file with legitimate_domains and phishing_patterns. Defaults to the bundled brand list.")
    parser.add_argument("--config", help="Override the default config YAML.")
    parser.add_argument("--timeout", type=float, help="Deadline in seconds for the component analyzers.")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Overrides log_level from config.",
    )
    return parser


def _fail(message: str, code: int) -> int:
    print(json.dumps({"error": message}, ensure_ascii=True), file=sys.stderr)
    return code


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg, _ = load_config(args.config)
    except ConfigError as exc:
        return _fail(str(exc), EXIT_CONFIG_ERROR)
    logging.basicConfig(
        level=args.log_level or cfg.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    patterns_path = args.patterns or cfg.patterns_path or DEFAULT_PATTERNS_PATH
    try:
        repo = load_pattern_snapshot(patterns_path)
        report = scan(args.url, repo, settings=cfg, timeout_s=args.timeout)
    except UrlParseError as exc:
        return _fail(str(exc), EXIT_PARSE_ERROR)
    except RepositoryUnavailableError as exc:
        return _fail(str(exc), EXIT_REPOSITORY_ERROR)
    except ScanTimeoutError as exc:
        return _fail(str(exc), EXIT_TIMEOUT)

    print(json.dumps(report.model_dump(mode="json"), ensure_ascii=True, indent=2))
    return EXIT_OK
