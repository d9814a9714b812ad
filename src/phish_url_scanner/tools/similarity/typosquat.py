"""Typosquat detection against a set of legitimate domains."""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Iterable, Mapping

from phish_url_scanner.config.scoring import SimilarityWeights
from phish_url_scanner.domain.url.parse import split_hostname
from phish_url_scanner.tools.similarity.metrics import SimilarityScores, combined_similarity

_NAME_SPLIT_RE = re.compile(r"[-_]+")
MIN_TOKEN_LENGTH = 3


@dataclass(frozen=True)
class TyposquatMatch:
    legitimate_domain: str
    candidate: str
    compared_to: str
    scores: SimilarityScores

    @property
    def similarity(self) -> float:
        return self.scores.weighted

    def evidence(self) -> dict[str, object]:
        return {
            "type": "typosquatting",
            "legitimate_domain": self.legitimate_domain,
            "similarity": self.similarity,
        }


def brand_name(domain: str) -> str:
    """Registrable domain without its TLD: ``login.paypal.co.uk`` -> ``paypal``."""

    registrable, _, tld = split_hostname((domain or "").strip().lower().rstrip("."))
    if tld and registrable.endswith("." + tld):
        return registrable[: -len(tld) - 1]
    return registrable


def name_tokens(domain: str) -> list[str]:
    name = brand_name(domain)
    return [token for token in _NAME_SPLIT_RE.split(name) if len(token) >= MIN_TOKEN_LENGTH]


def best_match(
    candidate: str,
    references: Mapping[str, str] | Iterable[str],
    weights: SimilarityWeights | None = None,
) -> TyposquatMatch | None:
    """Highest-scoring reference for ``candidate``.

    ``references`` maps a legitimate domain to the string it is compared as;
    a plain iterable compares each domain as itself. Ties keep the first
    domain in sorted order.
    """

    pairs = references if isinstance(references, Mapping) else {item: item for item in references}
    best: TyposquatMatch | None = None
    for legitimate in sorted(pairs):
        target = pairs[legitimate]
        if not target:
            continue
        scores = combined_similarity(candidate, target, weights)
        if best is None or scores.weighted > best.similarity:
            best = TyposquatMatch(
                legitimate_domain=legitimate,
                candidate=candidate,
                compared_to=target,
                scores=scores,
            )
    return best


def best_legitimate_match(
    domain: str,
    legitimate: Iterable[str],
    weights: SimilarityWeights | None = None,
) -> TyposquatMatch | None:
    """Compare the full domain and each hyphen token of its name to known brands."""

    known = sorted(set(legitimate))
    if not domain or not known:
        return None
    candidates: list[tuple[str, Mapping[str, str]]] = [(domain, {item: item for item in known})]
    names = {item: brand_name(item) for item in known}
    own_name = brand_name(domain)
    keys = [own_name] + [token for token in name_tokens(domain) if token != own_name]
    candidates.extend((key, names) for key in keys if key)

    best: TyposquatMatch | None = None
    for candidate, references in candidates:
        match = best_match(candidate, references, weights)
        if match is not None and (best is None or match.similarity > best.similarity):
            best = match
    return best


def detect_typosquat(
    candidate: str,
    legitimate: Iterable[str],
    threshold_low: float = 0.75,
    weights: SimilarityWeights | None = None,
) -> TyposquatMatch | None:
    """Best legitimate match whose similarity falls in ``[threshold_low, 1.0)``."""

    match = best_legitimate_match(candidate, legitimate, weights)
    if match is None:
        return None
    if threshold_low <= match.similarity < 1.0:
        return match
    return None
