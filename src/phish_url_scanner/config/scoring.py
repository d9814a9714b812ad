"""Tunable weight and point tables for URL risk scoring."""

from __future__ import annotations

from dataclasses import dataclass, field, fields


@dataclass(frozen=True)
class SimilarityWeights:
    levenshtein: float = 0.35
    jaro_winkler: float = 0.40
    token: float = 0.10
    lcs: float = 0.15

    def normalize(self) -> "SimilarityWeights":
        total = self.levenshtein + self.jaro_winkler + self.token + self.lcs
        if total <= 0:
            return SimilarityWeights()
        return SimilarityWeights(
            levenshtein=self.levenshtein / total,
            jaro_winkler=self.jaro_winkler / total,
            token=self.token / total,
            lcs=self.lcs / total,
        )


@dataclass(frozen=True)
class ComponentWeights:
    domain: float = 0.40
    subdomain: float = 0.15
    path: float = 0.15
    query: float = 0.10
    heuristics: float = 0.20

    def normalize(self) -> "ComponentWeights":
        total = self.domain + self.subdomain + self.path + self.query + self.heuristics
        if total <= 0:
            return ComponentWeights()
        return ComponentWeights(
            domain=self.domain / total,
            subdomain=self.subdomain / total,
            path=self.path / total,
            query=self.query / total,
            heuristics=self.heuristics / total,
        )

    def as_dict(self) -> dict[str, float]:
        return {item.name: float(getattr(self, item.name)) for item in fields(self)}


@dataclass(frozen=True)
class HeuristicPoints:
    http_on_financial_domain: float = 0.40
    http_protocol_used: float = 0.15
    ip_address_used: float = 0.50
    suspicious_tld: float = 0.30
    non_standard_port: float = 0.20
    excessive_length: float = 0.15
    at_symbol_in_url: float = 0.50
    excessive_subdomains: float = 0.25
    excessive_hyphens: float = 0.20
    mixed_case_hostname: float = 0.10
    multiple_phishing_keywords: float = 0.20
    url_shortener: float = 0.50
    base64_encoded_url: float = 0.60
    double_extension: float = 0.35
    unicode_characters: float = 0.20


@dataclass(frozen=True)
class ScoringWeights:
    """Everything the engine treats as a tunable constant, in one place."""

    components: ComponentWeights = field(default_factory=ComponentWeights)
    similarity: SimilarityWeights = field(default_factory=SimilarityWeights)
    heuristics: HeuristicPoints = field(default_factory=HeuristicPoints)
    typosquat_threshold: float = 0.75
    pattern_match_floor: float = 0.85

    def normalized(self) -> "ScoringWeights":
        threshold = min(0.99, max(0.0, float(self.typosquat_threshold)))
        floor = min(1.0, max(0.0, float(self.pattern_match_floor)))
        return ScoringWeights(
            components=self.components.normalize(),
            similarity=self.similarity.normalize(),
            heuristics=self.heuristics,
            typosquat_threshold=threshold,
            pattern_match_floor=floor,
        )


DEFAULT_SCORING_WEIGHTS = ScoringWeights()
