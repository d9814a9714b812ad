import logging
import re

import pytest

from phish_url_scanner.domain.patterns import PatternSnapshot
from phish_url_scanner.domain.url import parse_url
from phish_url_scanner.tools.intel import domain_intel
from phish_url_scanner.tools.intel.domain_intel import analyze_domain, wildcard_regex


def _domain(url, repo):
    parts = parse_url(url)
    return analyze_domain(parts.domain, parts, repo)


def test_legitimate_domain_wins_over_phishing_pattern(snapshot):
    # google.com is listed both as legitimate and as an exact phishing pattern.
    result = _domain("https://www.google.com", snapshot)
    assert result.score == 0.0
    assert result.flags == ["known_legitimate_domain"]
    assert result.matches == [{"type": "exact_legitimate", "domain": "google.com"}]


def test_exact_phishing_match(snapshot):
    result = _domain("http://paypal-verify.com/login", snapshot)
    assert result.score == 1.0
    assert result.flags == ["exact_phishing_match"]
    match = result.matches[0]
    assert match["pattern_id"] == "p-1"
    assert match["severity"] == "high"
    assert match["target_brand"] == "paypal"
    assert match["pattern"] == "paypal-verify.com"


def test_typosquat_with_digit_homoglyph(snapshot):
    result = _domain("http://paypa1-secure-login.tk/verify/account", snapshot)
    assert "high_similarity_to_legitimate" in result.flags
    assert "suspicious_tld" in result.flags
    assert "homoglyph_brand_impersonation" in result.flags
    assert result.score == pytest.approx(0.95)
    typo = [item for item in result.matches if item["type"] == "typosquatting"][0]
    assert typo["legitimate_domain"] == "paypal.com"
    assert 0.75 <= typo["similarity"] < 1.0
    assert result.score >= typo["similarity"]
    assert result.details["best_match"]["compared_to"] == "paypal"


def test_wildcard_pattern_match(snapshot):
    result = _domain("https://my-appleid-verify.com/", snapshot)
    assert "pattern_match" in result.flags
    assert 0.85 <= result.score < 1.0
    evidence = [item for item in result.matches if item["type"] == "pattern_match"]
    assert evidence[0]["pattern_id"] == "p-2"


def test_question_mark_wildcard(snapshot):
    result = _domain("https://amazon-gift.net", snapshot)
    assert "pattern_match" in result.flags
    assert "brand_with_suspicious_keyword" in result.flags


def test_wildcard_regex_escapes_dots():
    regex = wildcard_regex("*.evil.tk")
    assert regex.match("login.evil.tk")
    assert not regex.match("login-evil-tk")
    assert wildcard_regex("amaz?n.com").match("AMAZON.COM")


def test_invalid_wildcard_is_skipped(monkeypatch, caplog, snapshot):
    def broken(pattern):
        raise re.error("bad pattern")

    monkeypatch.setattr(domain_intel, "wildcard_regex", broken)
    with caplog.at_level(logging.WARNING, logger="phish_url_scanner.intel.domain"):
        result = _domain("https://my-appleid-verify.com/", snapshot)
    assert "pattern_match" not in result.flags
    assert "skipping invalid wildcard pattern" in caplog.text


def test_brand_on_foreign_tld_stays_below_one(snapshot):
    result = _domain("https://paypal.tk", snapshot)
    assert "brand_with_suspicious_keyword" in result.flags
    assert "suspicious_tld" in result.flags
    assert 0.65 <= result.score < 1.0


def test_brand_with_keyword(snapshot):
    result = _domain("https://paypal-login.com", snapshot)
    assert "brand_with_suspicious_keyword" in result.flags
    assert result.score >= 0.65


def test_script_mixing_and_homoglyphs(snapshot):
    result = analyze_domain("pаypal.com", None, snapshot)
    assert "mixed_character_scripts" in result.flags
    assert "homoglyph_brand_impersonation" in result.flags
    assert result.score == pytest.approx(0.95)


def test_punycode_label(snapshot):
    result = _domain("https://xn--pypal-4ve.com", snapshot)
    assert "punycode_idn_detected" in result.flags
    assert result.score >= 0.8


def test_structural_flags(empty_snapshot):
    result = _domain("https://a-b-c-d123.com", empty_snapshot)
    assert "excessive_hyphens" in result.flags
    assert "contains_multiple_digits" in result.flags
    assert result.score == pytest.approx(0.2)

    long = _domain("https://averyveryverylongdomainnameforshop.com", empty_snapshot)
    assert "unusually_long_domain" in long.flags


@pytest.mark.parametrize("url", ["https://zzqqxx.org", "http://facetime.com", "http://appliance.com"])
def test_similarity_below_typosquat_band_adds_nothing(snapshot, url):
    result = _domain(url, snapshot)
    assert result.score == 0.0
    assert result.flags == []
    # The closest brand is still reported for context.
    assert result.details["best_match"]["similarity"] < 0.75


def test_empty_repository_does_not_fail():
    result = _domain("https://example.com", PatternSnapshot())
    assert result.score == 0.0
    assert result.component == "domain"
