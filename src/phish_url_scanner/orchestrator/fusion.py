"""Risk fusion of per-component scores into one classification."""

from __future__ import annotations

import logging
from typing import Iterable

from phish_url_scanner.config.scoring import ComponentWeights
from phish_url_scanner.domain.results import (
    AggregatedResult,
    Classification,
    ComponentBreakdown,
    ComponentResult,
    Confidence,
    ResultSummary,
)
from phish_url_scanner.tools.intel.indicators import NEUTRAL_FLAGS

logger = logging.getLogger("phish_url_scanner.fusion")

SUSPICIOUS_THRESHOLD = 0.3
DANGEROUS_THRESHOLD = 0.6
THRESHOLDS = (SUSPICIOUS_THRESHOLD, DANGEROUS_THRESHOLD)
BORDERLINE_MARGIN = 0.05
HIGH_CONFIDENCE_LOW = 0.15
HIGH_CONFIDENCE_HIGH = 0.8
MAX_EXPLAINED_COMPONENTS = 3

_RECOMMENDATIONS = {
    "safe": ("safe", "allow"),
    "suspicious": ("suspicious", "warn"),
    "dangerous": ("block", "block"),
}

_DISPLAY = {
    "safe": {
        "message": "This URL appears to be safe",
        "description": "No significant phishing indicators were found.",
        "color": "green",
    },
    "suspicious": {
        "message": "This URL looks suspicious",
        "description": "Some phishing indicators were found. Proceed with caution.",
        "color": "orange",
    },
    "dangerous": {
        "message": "This URL is likely a phishing attempt",
        "description": "Strong phishing indicators were found. Do not enter any information.",
        "color": "red",
    },
}


def _bounded(raw: float) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    return max(0.0, min(1.0, value))


def classify(score: float) -> Classification:
    if score >= DANGEROUS_THRESHOLD:
        return "dangerous"
    if score >= SUSPICIOUS_THRESHOLD:
        return "suspicious"
    return "safe"


def confidence(score: float) -> Confidence:
    if any(abs(score - threshold) <= BORDERLINE_MARGIN for threshold in THRESHOLDS):
        return "low"
    if score <= HIGH_CONFIDENCE_LOW or score >= HIGH_CONFIDENCE_HIGH:
        return "high"
    return "medium"


def is_definitely_dangerous(results: Iterable[ComponentResult]) -> bool:
    return any(result.has_flag("exact_phishing_match") for result in results)


def classification_display(classification: str) -> dict[str, str]:
    return dict(_DISPLAY.get(classification, _DISPLAY["suspicious"]))


def _risk_level(score: float) -> str:
    if score >= DANGEROUS_THRESHOLD:
        return "high"
    if score >= SUSPICIOUS_THRESHOLD:
        return "medium"
    return "low"


def generate_explanation(result: AggregatedResult) -> str:
    """Summarize the strongest contributing components for a human reader."""

    ranked = sorted(
        result.breakdown.items(),
        key=lambda item: item[1].weighted_score,
        reverse=True,
    )
    parts: list[str] = []
    for name, entry in ranked:
        flags = [flag for flag in entry.flags if flag not in NEUTRAL_FLAGS]
        if not flags:
            continue
        parts.append(f"{name}: {', '.join(flags)}")
        if len(parts) >= MAX_EXPLAINED_COMPONENTS:
            break
    if not parts:
        if result.classification == "safe":
            return "No phishing indicators detected."
        return f"Classified {result.classification} from the combined component scores."
    return "; ".join(parts)


def aggregate(
    domain: ComponentResult,
    subdomain: ComponentResult,
    path: ComponentResult,
    query: ComponentResult,
    heuristics: ComponentResult,
    weights: ComponentWeights | None = None,
) -> AggregatedResult:
    norm = (weights or ComponentWeights()).normalize()
    weight_map = norm.as_dict()
    results = {
        "domain": domain,
        "subdomain": subdomain,
        "path": path,
        "query": query,
        "heuristics": heuristics,
    }

    breakdown: dict[str, ComponentBreakdown] = {}
    total = 0.0
    for name, result in results.items():
        raw = _bounded(result.score)
        weighted = raw * weight_map[name]
        total += weighted
        breakdown[name] = ComponentBreakdown(
            raw_score=round(raw, 4),
            weight=round(weight_map[name], 4),
            weighted_score=round(weighted, 4),
            flags=list(result.flags),
        )

    definite = is_definitely_dangerous(results.values())
    if definite:
        final_score = 1.0
        label: Classification = "dangerous"
        conf: Confidence = "high"
    else:
        final_score = round(_bounded(total), 4)
        label = classify(final_score)
        conf = confidence(final_score)

    top_name, top_entry = max(breakdown.items(), key=lambda item: item[1].weighted_score)
    summary = ResultSummary(
        total_flags=sum(len(entry.flags) for entry in breakdown.values()),
        highest_scoring_component=top_name if top_entry.weighted_score > 0 else None,
        highest_weighted_score=top_entry.weighted_score,
        risk_level=_risk_level(final_score),
    )
    recommendation, action = _RECOMMENDATIONS[label]
    draft = AggregatedResult(
        final_score=final_score,
        classification=label,
        confidence=conf,
        recommendation=recommendation,
        action=action,
        is_definitely_dangerous=definite,
        breakdown=breakdown,
        weights_used={name: round(value, 4) for name, value in weight_map.items()},
        summary=summary,
    )
    explained = draft.model_copy(update={"explanation": generate_explanation(draft)})
    logger.debug("final_score=%.4f classification=%s confidence=%s", final_score, label, conf)
    return explained
