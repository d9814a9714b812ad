"""Per-component and aggregated scan results."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from phish_url_scanner.domain.url.models import UrlComponents

Classification = Literal["safe", "suspicious", "dangerous"]
Confidence = Literal["low", "medium", "high"]
COMPONENT_NAMES = ("domain", "subdomain", "path", "query", "heuristics")


class ComponentResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    component: str
    value: str = ""
    score: float = Field(default=0.0, ge=0.0, le=1.0)
    flags: list[str] = Field(default_factory=list)
    matches: list[dict[str, Any]] = Field(default_factory=list)
    details: dict[str, Any] = Field(default_factory=dict)

    def has_flag(self, flag: str) -> bool:
        return flag in self.flags


class ComponentBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw_score: float
    weight: float
    weighted_score: float
    flags: list[str] = Field(default_factory=list)


class ResultSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_flags: int = 0
    highest_scoring_component: str | None = None
    highest_weighted_score: float = 0.0
    risk_level: Literal["low", "medium", "high"] = "low"


class AggregatedResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    final_score: float = Field(ge=0.0, le=1.0)
    classification: Classification
    confidence: Confidence
    recommendation: Literal["safe", "suspicious", "block"]
    action: Literal["allow", "warn", "block"]
    is_definitely_dangerous: bool = False
    breakdown: dict[str, ComponentBreakdown] = Field(default_factory=dict)
    weights_used: dict[str, float] = Field(default_factory=dict)
    summary: ResultSummary = Field(default_factory=ResultSummary)
    explanation: str = ""


class ScanReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    normalized_url: str
    url_hash: str
    components: UrlComponents
    results: dict[str, ComponentResult]
    aggregate: AggregatedResult

    @property
    def final_score(self) -> float:
        return self.aggregate.final_score

    @property
    def classification(self) -> Classification:
        return self.aggregate.classification
