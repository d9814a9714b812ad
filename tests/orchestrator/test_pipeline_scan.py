import json
import threading

import pytest

from phish_url_scanner.config.settings import ScannerConfig
from phish_url_scanner.core.errors import RepositoryUnavailableError, ScanTimeoutError, UrlParseError
from phish_url_scanner.domain.results import COMPONENT_NAMES
from phish_url_scanner.orchestrator import pipeline
from phish_url_scanner.orchestrator.pipeline import scan


class FailingRepository:
    def lookup_legitimate(self, domain):
        raise ConnectionError("pattern store offline")

    def all_legitimate_domains(self):
        raise ConnectionError("pattern store offline")

    def lookup_exact_phishing(self, domain):
        raise ConnectionError("pattern store offline")

    def all_active_patterns(self):
        raise ConnectionError("pattern store offline")


class BlockingRepository:
    def __init__(self):
        self.release = threading.Event()

    def lookup_legitimate(self, domain):
        self.release.wait(5)
        return False

    def all_legitimate_domains(self):
        return frozenset()

    def lookup_exact_phishing(self, domain):
        return None

    def all_active_patterns(self):
        return []


def test_typosquat_scenario_is_dangerous(snapshot):
    report = scan("http://paypa1-secure-login.tk/verify/account", snapshot)
    assert report.classification == "dangerous"
    assert report.final_score == pytest.approx(0.62)
    assert "high_similarity_to_legitimate" in report.results["domain"].flags
    assert report.results["path"].score == pytest.approx(0.4)
    assert report.results["heuristics"].score == pytest.approx(0.9)
    assert report.aggregate.explanation.startswith("domain: ")
    assert report.normalized_url == "http://paypa1-secure-login.tk/verify/account"


def test_known_legitimate_url_is_safe(snapshot):
    report = scan("https://www.google.com", snapshot)
    assert report.final_score == 0.0
    assert report.classification == "safe"
    assert report.results["domain"].flags == ["known_legitimate_domain"]
    assert not report.aggregate.is_definitely_dangerous


def test_shortener_scores_low(snapshot):
    report = scan("https://bit.ly/abc123", snapshot)
    assert report.classification == "safe"
    assert report.final_score < 0.3
    assert "url_shortener_detected" in report.results["heuristics"].flags


def test_near_miss_brand_lookalike_stays_safe(snapshot):
    report = scan("http://facetime.com", snapshot)
    assert report.results["domain"].score == 0.0
    assert report.final_score == pytest.approx(0.03)
    assert report.classification == "safe"


def test_exact_phishing_url(snapshot):
    report = scan("http://paypal-verify.com/login", snapshot)
    assert report.aggregate.is_definitely_dangerous
    assert report.final_score == 1.0
    assert report.aggregate.confidence == "high"


def test_report_has_every_component_and_serializes(snapshot):
    report = scan("https://secure.paypal.evil.tk/login?redirect=https://x.tk", snapshot)
    assert set(report.results) == set(COMPONENT_NAMES)
    payload = json.loads(json.dumps(report.model_dump(mode="json")))
    assert payload["aggregate"]["classification"] in {"safe", "suspicious", "dangerous"}
    assert payload["components"]["subdomain"] == "secure.paypal"
    assert len(payload["url_hash"]) == 64


def test_scan_is_deterministic(snapshot):
    first = scan("http://paypa1-secure-login.tk/verify/account", snapshot)
    second = scan("http://paypa1-secure-login.tk/verify/account", snapshot)
    assert first.model_dump() == second.model_dump()


def test_parse_error_raised_before_analysis(snapshot):
    with pytest.raises(UrlParseError):
        scan("   ", snapshot)


def test_repository_failure_is_wrapped():
    with pytest.raises(RepositoryUnavailableError) as excinfo:
        scan("https://example.com", FailingRepository())
    assert isinstance(excinfo.value.__cause__, ConnectionError)


def test_analyzer_error_propagates_unchanged(monkeypatch, snapshot):
    def boom(path, components=None):
        raise RuntimeError("path analyzer crashed")

    monkeypatch.setattr(pipeline, "analyze_path", boom)
    with pytest.raises(RuntimeError, match="path analyzer crashed"):
        scan("https://example.com/a", snapshot)


def test_timeout_raises_scan_timeout():
    repo = BlockingRepository()
    try:
        with pytest.raises(ScanTimeoutError, match="domain"):
            scan("https://example.com", repo, timeout_s=0.05)
    finally:
        repo.release.set()


def test_default_timeout_from_settings():
    repo = BlockingRepository()
    try:
        with pytest.raises(ScanTimeoutError):
            scan("https://example.com", repo, settings=ScannerConfig(default_timeout_s=0.05))
    finally:
        repo.release.set()


def test_component_weights_from_settings(snapshot):
    settings = ScannerConfig(
        component_weights={"domain": 1.0, "subdomain": 0.0, "path": 0.0, "query": 0.0, "heuristics": 0.0}
    )
    report = scan("http://paypa1-secure-login.tk/verify/account", snapshot, settings=settings)
    assert report.final_score == pytest.approx(0.95)
    assert report.aggregate.weights_used["domain"] == 1.0
