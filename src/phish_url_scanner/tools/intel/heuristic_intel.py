"""Whole-URL structural heuristics.

Each check adds a fixed number of points; the total is capped at 1.0. Point
values come from ``HeuristicPoints`` so deployments can retune them without
touching the checks.
"""

from __future__ import annotations

import base64
import binascii
import ipaddress
import logging
import re
from urllib.parse import unquote, urlsplit

from phish_url_scanner.config.scoring import HeuristicPoints
from phish_url_scanner.domain.results import ComponentResult
from phish_url_scanner.domain.url import UrlComponents
from phish_url_scanner.tools.intel.indicators import (
    FINANCIAL_KEYWORDS,
    PHISHING_KEYWORDS,
    has_suspicious_tld,
)

logger = logging.getLogger("phish_url_scanner.intel.heuristics")

STANDARD_PORTS = (80, 443)
MAX_URL_LENGTH = 75
MAX_SUBDOMAIN_LABELS = 3
MIN_HYPHENS = 3
MIN_PHISHING_KEYWORDS = 3
_BASE64_RUN_RE = re.compile(r"[A-Za-z0-9+/_-]{40,}={0,2}")
_DOUBLE_EXTENSION_RE = re.compile(
    r"\.(pdf|docx?|xlsx?|pptx?|txt|rtf|jpe?g|png|gif|zip|rar)\.(exe|scr|bat|cmd|com|pif|js|vbs|msi|jar|ps1|hta)$"
)


class _Tally:
    def __init__(self) -> None:
        self.score = 0.0
        self.flags: list[str] = []

    def add(self, flag: str, points: float) -> None:
        self.score += max(0.0, float(points))
        self.flags.append(flag)


def _is_financial(components: UrlComponents) -> bool:
    haystack = " ".join((components.domain, components.subdomain, components.path))
    return any(keyword in haystack for keyword in FINANCIAL_KEYWORDS)


def _ip(hostname: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
    try:
        return ipaddress.ip_address(hostname)
    except ValueError:
        return None


def _original_query(components: UrlComponents) -> str:
    raw = components.original_url.strip()
    if "://" not in raw:
        raw = "https://" + raw
    try:
        return unquote(urlsplit(raw).query)
    except ValueError:
        return ""


def find_encoded_url(query: str) -> str | None:
    """Return the first base64 run in ``query`` that decodes to an http(s) URL."""

    for run in _BASE64_RUN_RE.findall(query or ""):
        candidate = run.replace("-", "+").replace("_", "/").rstrip("=")
        candidate += "=" * (-len(candidate) % 4)
        try:
            decoded = base64.b64decode(candidate).decode("utf-8", errors="ignore")
        except (binascii.Error, ValueError):
            continue
        if decoded.lower().startswith(("http://", "https://")):
            return decoded
    return None


def analyze_heuristics(components: UrlComponents, points: HeuristicPoints | None = None) -> ComponentResult:
    pts = points or HeuristicPoints()
    tally = _Tally()
    details: dict[str, object] = {}
    hostname = components.hostname

    if components.scheme == "http":
        if _is_financial(components):
            tally.add("http_on_financial_domain", pts.http_on_financial_domain)
        else:
            tally.add("http_protocol_used", pts.http_protocol_used)

    if components.is_ip:
        tally.add("ip_address_used", pts.ip_address_used)

    address = _ip(hostname)
    if hostname == "localhost" or hostname.endswith(".localhost") or (address is not None and address.is_loopback):
        tally.add("localhost_detected", 0.0)
    elif address is not None and address.is_private:
        tally.add("private_ip_detected", 0.0)

    if has_suspicious_tld(hostname):
        tally.add("suspicious_tld", pts.suspicious_tld)

    if components.port is not None and components.port not in STANDARD_PORTS:
        tally.add(f"non_standard_port_{components.port}", pts.non_standard_port)

    if components.url_length > MAX_URL_LENGTH:
        tally.add(f"excessive_length_{components.url_length}_chars", pts.excessive_length)

    if "@" in components.original_url:
        tally.add("at_symbol_in_url", pts.at_symbol_in_url)

    labels = components.subdomain_labels
    if len(labels) > MAX_SUBDOMAIN_LABELS:
        tally.add(f"excessive_subdomains_{len(labels)}", pts.excessive_subdomains)

    hyphens = hostname.count("-")
    if hyphens >= MIN_HYPHENS:
        tally.add(f"excessive_hyphens_{hyphens}", pts.excessive_hyphens)

    if components.original_hostname != components.original_hostname.lower():
        tally.add("mixed_case_hostname", pts.mixed_case_hostname)

    lowered = components.normalized_url.lower()
    keywords = [keyword for keyword in PHISHING_KEYWORDS if keyword in lowered]
    if len(keywords) >= MIN_PHISHING_KEYWORDS:
        tally.add(f"multiple_phishing_keywords_{len(keywords)}", pts.multiple_phishing_keywords)
        details["phishing_keywords"] = keywords

    if components.is_shortener:
        tally.add("url_shortener_detected", pts.url_shortener)

    encoded = find_encoded_url(_original_query(components))
    if encoded:
        tally.add("base64_encoded_url_detected", pts.base64_encoded_url)
        details["decoded_url"] = encoded

    if _DOUBLE_EXTENSION_RE.search(components.path):
        tally.add("double_extension_detected", pts.double_extension)

    if not components.original_url.isascii():
        tally.add("unicode_characters_detected", pts.unicode_characters)

    score = round(min(1.0, tally.score), 4)
    logger.debug("url=%s heuristics=%.4f flags=%s", components.normalized_url, score, tally.flags)
    return ComponentResult(
        component="heuristics",
        value=components.normalized_url,
        score=score,
        flags=tally.flags,
        details=details,
    )
