"""Subdomain analysis: credential keywords, brand placement, depth."""

from __future__ import annotations

import logging
import re

from phish_url_scanner.domain.patterns import PatternRepository
from phish_url_scanner.domain.results import ComponentResult
from phish_url_scanner.domain.url import UrlComponents
from phish_url_scanner.tools.intel.indicators import SUBDOMAIN_KEYWORDS
from phish_url_scanner.tools.similarity import brand_name

logger = logging.getLogger("phish_url_scanner.intel.subdomain")

KEYWORD_POINTS = 0.15
BRAND_POINTS = 0.35
LONG_SUBDOMAIN_POINTS = 0.20
LONG_SUBDOMAIN_CHARS = 30
LEVEL_POINTS = 0.10
DIGITS_POINTS = 0.15
HYPHENS_POINTS = 0.10
MIN_HYPHENS = 2


def _brands(repo: PatternRepository | None) -> list[str]:
    if repo is None:
        return []
    names = {brand_name(item) for item in repo.all_legitimate_domains()}
    return sorted(name for name in names if len(name) >= 3)


def analyze_subdomain(
    subdomain: str,
    domain: str,
    components: UrlComponents | None = None,
    repo: PatternRepository | None = None,
) -> ComponentResult:
    sub = (subdomain or "").strip().lower()
    if not sub:
        return ComponentResult(component="subdomain", value="", score=0.0, flags=["no_subdomain"])

    labels = [label for label in sub.split(".") if label]
    score = 0.0
    flags: list[str] = []
    keywords: list[str] = []
    for label in labels:
        for keyword in SUBDOMAIN_KEYWORDS:
            if keyword in label:
                score += KEYWORD_POINTS
                keywords.append(keyword)
                flags.append(f"keyword_{keyword}")

    brand_hits: list[str] = []
    parent = (domain or "").lower()
    for brand in _brands(repo):
        # A brand living only in the subdomain is borrowing someone else's name.
        if brand in sub and brand not in parent:
            score += BRAND_POINTS
            brand_hits.append(brand)
            flags.append(f"brand_in_subdomain_{brand}")

    if len(sub) > LONG_SUBDOMAIN_CHARS:
        score += LONG_SUBDOMAIN_POINTS
        flags.append("long_subdomain")

    if len(labels) >= 2:
        score += LEVEL_POINTS * len(labels)
        flags.append(f"multiple_subdomain_levels_{len(labels)}")

    if re.search(r"\d{2,}", sub):
        score += DIGITS_POINTS
        flags.append("contains_multiple_digits")

    if sub.count("-") >= MIN_HYPHENS:
        score += HYPHENS_POINTS
        flags.append("multiple_hyphens")

    score = round(min(1.0, score), 4)
    logger.debug("subdomain=%s score=%.4f flags=%s", sub, score, flags)
    return ComponentResult(
        component="subdomain",
        value=sub,
        score=score,
        flags=list(dict.fromkeys(flags)),
        matches=[{"type": "brand_in_subdomain", "brand": brand} for brand in brand_hits],
        details={"levels": len(labels), "keywords": keywords},
    )
