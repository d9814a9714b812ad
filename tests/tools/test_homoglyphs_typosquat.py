import pytest

from phish_url_scanner.tools.similarity import (
    best_legitimate_match,
    brand_name,
    detect_homoglyphs,
    detect_typosquat,
    normalize_homoglyphs,
)

LEGIT = ("google.com", "paypal.com", "apple.com", "microsoft.com")


def test_normalize_homoglyphs():
    assert normalize_homoglyphs("paypa1") == "paypal"
    assert normalize_homoglyphs("gооgle") == "google"
    assert normalize_homoglyphs("rnicrosoft") == "microsoft"
    assert normalize_homoglyphs("vvalmart") == "walmart"
    assert normalize_homoglyphs("аpple") == "apple"


def test_detect_homoglyphs_reports_positions():
    report = detect_homoglyphs("gооgle")
    assert report.detected
    assert report.normalized == "google"
    assert [item[0] for item in report.substitutions] == [1, 2]
    assert report.score >= 0.5
    assert len(report.non_ascii_substitutions) == 2


def test_digit_swaps_score_lower_than_script_swaps():
    digits = detect_homoglyphs("g00gle")
    script = detect_homoglyphs("gооgle")
    assert digits.detected
    assert digits.score < script.score


def test_plain_ascii_is_not_flagged():
    report = detect_homoglyphs("example")
    assert not report.detected
    assert report.substitutions == []
    assert report.score == 0.0


def test_brand_name():
    assert brand_name("paypal.com") == "paypal"
    assert brand_name("login.paypal.co.uk") == "paypal"
    assert brand_name("localhost") == "localhost"


def test_best_match_compares_hyphen_tokens():
    match = best_legitimate_match("paypa1-secure-login.tk", LEGIT)
    assert match is not None
    assert match.legitimate_domain == "paypal.com"
    assert match.candidate == "paypa1"
    assert match.compared_to == "paypal"
    assert match.similarity == pytest.approx(0.79, abs=1e-4)


def test_detect_typosquat_band():
    hit = detect_typosquat("paypa1-secure-login.tk", LEGIT)
    assert hit is not None
    assert hit.evidence() == {
        "type": "typosquatting",
        "legitimate_domain": "paypal.com",
        "similarity": hit.similarity,
    }
    assert detect_typosquat("paypal.com", LEGIT) is None
    assert detect_typosquat("zzqqxx.org", LEGIT) is None
    assert detect_typosquat("paypa1-secure-login.tk", LEGIT, threshold_low=0.95) is None


def test_best_match_without_references():
    assert best_legitimate_match("paypal.com", ()) is None
