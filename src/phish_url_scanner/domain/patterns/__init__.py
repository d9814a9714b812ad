"""Known phishing patterns and legitimate domains."""

from phish_url_scanner.domain.patterns.models import PhishingPattern
from phish_url_scanner.domain.patterns.repository import (
    PatternRepository,
    PatternSnapshot,
    load_pattern_snapshot,
)

__all__ = ["PhishingPattern", "PatternRepository", "PatternSnapshot", "load_pattern_snapshot"]
