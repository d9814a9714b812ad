from __future__ import annotations

import pytest

from phish_url_scanner.domain.patterns import PatternSnapshot

LEGITIMATE_DOMAINS = (
    "google.com",
    "paypal.com",
    "facebook.com",
    "amazon.com",
    "microsoft.com",
    "apple.com",
)

PHISHING_PATTERNS = (
    {"id": "p-1", "pattern": "paypal-verify.com", "severity": "high", "target_brand": "paypal"},
    {"id": "p-2", "pattern": "*-appleid-*.com", "severity": "high", "target_brand": "apple"},
    {"id": "p-3", "pattern": "amaz?n-gift.net", "severity": "medium", "target_brand": "amazon"},
    {"id": "p-4", "pattern": "google.com", "severity": "low", "target_brand": "google"},
    {"id": "p-5", "pattern": "old-phish.com", "severity": "high", "active": False},
)


@pytest.fixture
def snapshot() -> PatternSnapshot:
    return PatternSnapshot(LEGITIMATE_DOMAINS, PHISHING_PATTERNS)


@pytest.fixture
def empty_snapshot() -> PatternSnapshot:
    return PatternSnapshot()


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "DEFAULT_CONFIG_PATH",
        "TIMEOUT_S",
        "MAX_WORKERS",
        "LOG_LEVEL",
        "TYPOSQUAT_THRESHOLD",
        "PATTERNS_PATH",
    ):
        monkeypatch.delenv(f"PHISH_URL_SCANNER_{name}", raising=False)
    return monkeypatch
