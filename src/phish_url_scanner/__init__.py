"""Phishing risk scoring for URLs."""

from phish_url_scanner.core.errors import (
    ConfigError,
    ParseError,
    RepositoryUnavailableError,
    ScannerError,
    ScanTimeoutError,
    UrlParseError,
)
from phish_url_scanner.domain.patterns import PatternSnapshot, PhishingPattern, load_pattern_snapshot
from phish_url_scanner.domain.url import normalize_url, parse_url, url_hash
from phish_url_scanner.orchestrator.pipeline import scan

__all__ = [
    "ConfigError",
    "ParseError",
    "PatternSnapshot",
    "PhishingPattern",
    "RepositoryUnavailableError",
    "ScanTimeoutError",
    "ScannerError",
    "UrlParseError",
    "load_pattern_snapshot",
    "normalize_url",
    "parse_url",
    "scan",
    "url_hash",
]
