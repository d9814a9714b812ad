import base64

import pytest

from phish_url_scanner.config.scoring import HeuristicPoints
from phish_url_scanner.domain.url import parse_url
from phish_url_scanner.tools.intel.heuristic_intel import analyze_heuristics, find_encoded_url


def _heuristics(url, points=None):
    return analyze_heuristics(parse_url(url), points)


def test_typosquat_scenario_heuristics():
    result = _heuristics("http://paypa1-secure-login.tk/verify/account")
    assert result.flags == [
        "http_on_financial_domain",
        "suspicious_tld",
        "multiple_phishing_keywords_4",
    ]
    assert result.score == pytest.approx(0.9)


def test_plain_http():
    result = _heuristics("http://example.org")
    assert result.flags == ["http_protocol_used"]
    assert result.score == pytest.approx(0.15)


def test_clean_https_url():
    result = _heuristics("https://www.example.org/about")
    assert result.flags == []
    assert result.score == 0.0


def test_keywords_in_fragment_are_not_counted():
    result = _heuristics("https://example.com/#verify-secure-account")
    assert result.flags == []
    assert result.score == 0.0

    in_path = _heuristics("https://example.com/verify-secure-account")
    assert in_path.flags == ["multiple_phishing_keywords_3"]


def test_private_ip_with_port():
    result = _heuristics("http://192.168.1.10:8080/admin")
    assert result.flags == [
        "http_protocol_used",
        "ip_address_used",
        "private_ip_detected",
        "non_standard_port_8080",
    ]
    assert result.score == pytest.approx(0.85)


def test_localhost_is_informational():
    result = _heuristics("https://localhost/")
    assert result.flags == ["localhost_detected"]
    assert result.score == 0.0


def test_at_symbol():
    result = _heuristics("https://paypal.com@evil.tk/")
    assert "at_symbol_in_url" in result.flags
    assert "suspicious_tld" in result.flags
    assert result.score == pytest.approx(0.8)


def test_mixed_case_hostname():
    result = _heuristics("https://PayPal.com")
    assert result.flags == ["mixed_case_hostname"]


def test_excessive_subdomains_and_hyphens():
    assert _heuristics("https://a.b.c.d.example.com").flags == ["excessive_subdomains_4"]
    assert _heuristics("https://my-shop-deal-now.com").flags == ["excessive_hyphens_3"]


def test_excessive_length():
    url = "https://example.com/" + "a" * 80
    result = _heuristics(url)
    assert result.flags == [f"excessive_length_{len(url)}_chars"]


def test_url_shortener():
    result = _heuristics("https://bit.ly/abc123")
    assert result.flags == ["url_shortener_detected"]
    assert result.score == pytest.approx(0.5)


def test_base64_encoded_destination():
    target = base64.b64encode(b"https://evil.example.com/login?session=12345").decode()
    result = _heuristics(f"https://example.com/r?u={target}")
    assert "base64_encoded_url_detected" in result.flags
    assert result.details["decoded_url"].startswith("https://evil.example.com")


def test_base64_noise_is_ignored():
    assert find_encoded_url("token=" + "A" * 48) is None
    assert find_encoded_url("") is None


def test_double_extension():
    result = _heuristics("https://example.com/files/invoice.pdf.exe")
    assert result.flags == ["double_extension_detected"]
    assert result.score == pytest.approx(0.35)


def test_unicode_characters():
    result = _heuristics("https://exämple.com")
    assert "unicode_characters_detected" in result.flags


def test_score_is_capped():
    result = _heuristics("http://192.168.1.1:8080/verify/secure/account/login@x.tk")
    assert result.score == 1.0


def test_adding_indicators_never_lowers_score():
    base = _heuristics("https://example.com").score
    with_http = _heuristics("http://example.com").score
    with_port = _heuristics("http://example.com:8080").score
    with_ip = _heuristics("http://10.0.0.1:8080").score
    assert base <= with_http <= with_port <= with_ip <= 1.0


def test_custom_points():
    result = _heuristics("https://bit.ly/abc123", HeuristicPoints(url_shortener=0.1))
    assert result.score == pytest.approx(0.1)
