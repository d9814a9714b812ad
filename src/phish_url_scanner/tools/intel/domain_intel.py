"""Domain-level phishing intelligence."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
import logging
import re
from typing import Any, Callable, Optional
import unicodedata

from phish_url_scanner.config.scoring import DEFAULT_SCORING_WEIGHTS, ScoringWeights
from phish_url_scanner.domain.patterns import PatternRepository, PhishingPattern
from phish_url_scanner.domain.results import ComponentResult
from phish_url_scanner.domain.url import UrlComponents
from phish_url_scanner.tools.intel.indicators import has_suspicious_tld
from phish_url_scanner.tools.similarity import (
    best_legitimate_match,
    brand_name,
    detect_homoglyphs,
)
from phish_url_scanner.tools.similarity.typosquat import name_tokens

logger = logging.getLogger("phish_url_scanner.intel.domain")

SUSPICIOUS_TLD_FLOOR = 0.30
EXCESSIVE_HYPHENS_FLOOR = 0.20
MULTIPLE_DIGITS_FLOOR = 0.15
PUNYCODE_FLOOR = 0.80
MIXED_SCRIPTS_FLOOR = 0.70
HOMOGLYPH_BRAND_FLOOR = 0.95
BRAND_KEYWORD_FLOOR = 0.65
LONG_DOMAIN_FLOOR = 0.15
LONG_DOMAIN_CHARS = 30
# Only exact pattern hits may reach 1.0.
MAX_NON_EXACT_SCORE = 0.9999


@dataclass
class DomainContext:
    domain: str
    hostname: str
    components: UrlComponents | None
    repo: PatternRepository
    weights: ScoringWeights
    score: float = 0.0
    flags: list[str] = field(default_factory=list)
    matches: list[dict[str, Any]] = field(default_factory=list)
    details: dict[str, Any] = field(default_factory=dict)

    def raise_to(self, value: float, flag: str | None = None) -> None:
        self.score = max(self.score, value)
        if flag and flag not in self.flags:
            self.flags.append(flag)

    def legitimate_names(self) -> set[str]:
        return {
            name
            for name in (brand_name(item) for item in self.repo.all_legitimate_domains())
            if len(name) >= 3
        }


DomainRule = Callable[[DomainContext], Optional[ComponentResult]]
DomainStep = Callable[[DomainContext], None]


def _known_legitimate(ctx: DomainContext) -> ComponentResult | None:
    if not (ctx.repo.lookup_legitimate(ctx.domain) or ctx.repo.lookup_legitimate(ctx.hostname)):
        return None
    return ComponentResult(
        component="domain",
        value=ctx.domain,
        score=0.0,
        flags=["known_legitimate_domain"],
        matches=[{"type": "exact_legitimate", "domain": ctx.domain}],
    )


def _exact_phishing(ctx: DomainContext) -> ComponentResult | None:
    pattern = ctx.repo.lookup_exact_phishing(ctx.domain) or ctx.repo.lookup_exact_phishing(ctx.hostname)
    if pattern is None:
        return None
    return ComponentResult(
        component="domain",
        value=ctx.domain,
        score=1.0,
        flags=["exact_phishing_match"],
        matches=[pattern.evidence("exact_phishing")],
    )


# Evaluated in order; legitimacy wins over a phishing hit on the same domain.
DOMAIN_RULES: tuple[DomainRule, ...] = (_known_legitimate, _exact_phishing)


@lru_cache(maxsize=1024)
def wildcard_regex(pattern: str) -> re.Pattern[str]:
    body = "".join(".*" if char == "*" else "." if char == "?" else re.escape(char) for char in pattern)
    return re.compile(f"^{body}$", re.IGNORECASE)


def _wildcard_hits(patterns: list[PhishingPattern], domain: str, hostname: str) -> list[PhishingPattern]:
    hits: list[PhishingPattern] = []
    for pattern in patterns:
        if not pattern.is_wildcard:
            continue
        try:
            regex = wildcard_regex(pattern.pattern)
        except re.error as exc:
            logger.warning("skipping invalid wildcard pattern id=%s pattern=%r: %s", pattern.id, pattern.pattern, exc)
            continue
        if regex.match(domain) or regex.match(hostname):
            hits.append(pattern)
    return hits


def _similarity_step(ctx: DomainContext) -> None:
    best = best_legitimate_match(ctx.domain, ctx.repo.all_legitimate_domains(), ctx.weights.similarity)
    if best is None:
        return
    ctx.details["best_match"] = {
        "legitimate_domain": best.legitimate_domain,
        "candidate": best.candidate,
        "compared_to": best.compared_to,
        "similarity": best.similarity,
    }
    if ctx.weights.typosquat_threshold <= best.similarity < 1.0:
        ctx.raise_to(best.similarity, "high_similarity_to_legitimate")
        ctx.matches.append(best.evidence())


def _wildcard_step(ctx: DomainContext) -> None:
    hits = _wildcard_hits(ctx.repo.all_active_patterns(), ctx.domain, ctx.hostname)
    if not hits:
        return
    ctx.raise_to(ctx.weights.pattern_match_floor, "pattern_match")
    ctx.matches.extend(item.evidence("pattern_match") for item in hits)


def _structure_step(ctx: DomainContext) -> None:
    if has_suspicious_tld(ctx.domain):
        ctx.raise_to(SUSPICIOUS_TLD_FLOOR, "suspicious_tld")
    if ctx.domain.count("-") >= 3:
        ctx.raise_to(EXCESSIVE_HYPHENS_FLOOR, "excessive_hyphens")
    if re.search(r"\d{2,}", ctx.domain):
        ctx.raise_to(MULTIPLE_DIGITS_FLOOR, "contains_multiple_digits")
    if len(ctx.domain) > LONG_DOMAIN_CHARS:
        ctx.raise_to(LONG_DOMAIN_FLOOR, "unusually_long_domain")


def _scripts(value: str) -> set[str]:
    found: set[str] = set()
    for char in value:
        if not char.isalpha():
            continue
        name = unicodedata.name(char, "")
        for script in ("LATIN", "CYRILLIC", "GREEK"):
            if name.startswith(script):
                found.add(script)
    return found


def _idn_step(ctx: DomainContext) -> None:
    if any(label.startswith("xn--") for label in ctx.hostname.split(".")):
        ctx.raise_to(PUNYCODE_FLOOR, "punycode_idn_detected")
    scripts = _scripts(ctx.hostname)
    if "LATIN" in scripts and scripts & {"CYRILLIC", "GREEK"}:
        ctx.raise_to(MIXED_SCRIPTS_FLOOR, "mixed_character_scripts")
        ctx.details["scripts"] = sorted(scripts)


def _brand_step(ctx: DomainContext) -> None:
    names = ctx.legitimate_names()
    if not names:
        return
    own = brand_name(ctx.domain)
    keys = list(dict.fromkeys([own, *name_tokens(ctx.domain)]))

    for key in keys:
        report = detect_homoglyphs(key)
        if not report.detected:
            continue
        ctx.details.setdefault("homoglyphs", {})[key] = {
            "normalized": report.normalized,
            "substitutions": report.substitutions,
            "score": report.score,
        }
        if report.normalized != key and report.normalized in names:
            ctx.raise_to(HOMOGLYPH_BRAND_FLOOR, "homoglyph_brand_impersonation")
            ctx.matches.append(
                {"type": "homoglyph", "candidate": key, "normalized": report.normalized}
            )

    brand_tokens = sorted(set(name_tokens(ctx.domain)) & names)
    if brand_tokens:
        ctx.raise_to(BRAND_KEYWORD_FLOOR, "brand_with_suspicious_keyword")
        ctx.matches.extend({"type": "brand_keyword", "brand": brand} for brand in brand_tokens)


DOMAIN_STEPS: tuple[DomainStep, ...] = (
    _similarity_step,
    _wildcard_step,
    _structure_step,
    _idn_step,
    _brand_step,
)


def analyze_domain(
    domain: str,
    components: UrlComponents | None,
    repo: PatternRepository,
    weights: ScoringWeights | None = None,
) -> ComponentResult:
    """Score a registrable domain against known brands and patterns."""

    active = (weights or DEFAULT_SCORING_WEIGHTS).normalized()
    clean = (domain or "").strip().lower()
    hostname = components.hostname if components is not None else clean
    ctx = DomainContext(
        domain=clean,
        hostname=hostname or clean,
        components=components,
        repo=repo,
        weights=active,
    )

    for rule in DOMAIN_RULES:
        result = rule(ctx)
        if result is not None:
            logger.debug("domain=%s rule=%s score=%.4f", clean, rule.__name__, result.score)
            return result

    for step in DOMAIN_STEPS:
        step(ctx)

    score = min(MAX_NON_EXACT_SCORE, round(max(0.0, ctx.score), 4))
    logger.debug("domain=%s score=%.4f flags=%s", clean, score, ctx.flags)
    return ComponentResult(
        component="domain",
        value=clean,
        score=score,
        flags=ctx.flags,
        matches=ctx.matches,
        details=ctx.details,
    )
