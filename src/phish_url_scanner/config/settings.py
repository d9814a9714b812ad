"""Config loader from env + yaml."""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
import os
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from phish_url_scanner.config.scoring import (
    ComponentWeights,
    HeuristicPoints,
    ScoringWeights,
    SimilarityWeights,
)
from phish_url_scanner.core.errors import ConfigError

PACKAGE_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG_PATH = PACKAGE_ROOT / "config" / "defaults.yaml"
DEFAULT_PATTERNS_PATH = PACKAGE_ROOT / "config" / "known_brands.yaml"
ENV_PREFIX = "PHISH_URL_SCANNER_"
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ScannerConfig(BaseModel):
    component_weights: dict[str, float] = Field(default_factory=lambda: asdict(ComponentWeights()))
    similarity_weights: dict[str, float] = Field(default_factory=lambda: asdict(SimilarityWeights()))
    heuristic_points: dict[str, float] = Field(default_factory=dict)
    typosquat_threshold: float = Field(default=0.75, ge=0.0, lt=1.0)
    pattern_match_floor: float = Field(default=0.85, ge=0.0, le=1.0)
    default_timeout_s: float | None = Field(default=None)
    max_workers: int = Field(default=5, ge=1)
    log_level: str = Field(default="WARNING")
    patterns_path: str | None = Field(default=None)
    default_config_path: str = Field(default=str(DEFAULT_CONFIG_PATH))

    def scoring_weights(self) -> ScoringWeights:
        return ScoringWeights(
            components=ComponentWeights(**self.component_weights),
            similarity=SimilarityWeights(**self.similarity_weights),
            heuristics=HeuristicPoints(**self.heuristic_points),
            typosquat_threshold=self.typosquat_threshold,
            pattern_match_floor=self.pattern_match_floor,
        ).normalized()


def load_yaml(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {}
    try:
        payload = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid yaml in {p}: {exc}") from exc
    return payload if isinstance(payload, dict) else {}


def _pick_env(name: str, fallback: Any) -> Any:
    value = os.getenv(ENV_PREFIX + name)
    return value if value not in (None, "") else fallback


def _parse_int(raw: Any, fallback: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return fallback
    return value if value > 0 else fallback


def _parse_float(raw: Any, fallback: float) -> float:
    try:
        return float(raw)
    except (TypeError, ValueError):
        return fallback


def _parse_optional_float(raw: Any) -> float | None:
    if raw is None or str(raw).strip().lower() in {"", "none", "null"}:
        return None
    value = _parse_float(raw, 0.0)
    return value if value > 0 else None


def _parse_log_level(raw: Any, fallback: str) -> str:
    value = str(raw or "").strip().upper()
    return value if value in _LOG_LEVELS else fallback


def _parse_weight_table(raw: Any, allowed: set[str], *, section: str) -> dict[str, float]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{section} must be a mapping")
    table: dict[str, float] = {}
    for key, value in raw.items():
        name = str(key).strip()
        if name not in allowed:
            raise ConfigError(f"unknown {section} entry: {name}")
        try:
            weight = float(value)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"{section}.{name} must be a number") from exc
        if weight < 0:
            raise ConfigError(f"{section}.{name} must not be negative")
        table[name] = weight
    return table


def _resolve_default_config_path(path: str | Path | None) -> Path:
    if path is not None:
        return Path(path)
    env_default_path = os.getenv(ENV_PREFIX + "DEFAULT_CONFIG_PATH")
    if env_default_path:
        return Path(env_default_path)
    return DEFAULT_CONFIG_PATH


def load_config(path: str | Path | None = None) -> tuple[ScannerConfig, dict[str, Any]]:
    default_path = _resolve_default_config_path(path)
    merged = load_yaml(default_path)
    scoring = merged.get("scoring")
    scoring_map = scoring if isinstance(scoring, dict) else {}

    component_weights = asdict(ComponentWeights())
    component_weights.update(
        _parse_weight_table(
            scoring_map.get("component_weights"),
            set(component_weights),
            section="component_weights",
        )
    )
    similarity_weights = asdict(SimilarityWeights())
    similarity_weights.update(
        _parse_weight_table(
            scoring_map.get("similarity_weights"),
            set(similarity_weights),
            section="similarity_weights",
        )
    )
    heuristic_points = _parse_weight_table(
        scoring_map.get("heuristic_points"),
        set(HeuristicPoints.__dataclass_fields__),
        section="heuristic_points",
    )

    threshold = _parse_float(
        _pick_env("TYPOSQUAT_THRESHOLD", scoring_map.get("typosquat_threshold", 0.75)),
        0.75,
    )
    if not 0.0 <= threshold < 1.0:
        raise ConfigError(f"typosquat_threshold must be in [0, 1): {threshold}")

    payload = {
        "component_weights": component_weights,
        "similarity_weights": similarity_weights,
        "heuristic_points": heuristic_points,
        "typosquat_threshold": threshold,
        "pattern_match_floor": _parse_float(scoring_map.get("pattern_match_floor", 0.85), 0.85),
        "default_timeout_s": _parse_optional_float(
            _pick_env("TIMEOUT_S", merged.get("default_timeout_s")),
        ),
        "max_workers": _parse_int(_pick_env("MAX_WORKERS", merged.get("max_workers", 5)), 5),
        "log_level": _parse_log_level(_pick_env("LOG_LEVEL", merged.get("log_level", "WARNING")), "WARNING"),
        "patterns_path": _pick_env("PATTERNS_PATH", merged.get("patterns_path")),
        "default_config_path": str(default_path),
    }

    try:
        cfg = ScannerConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"invalid scanner config in {default_path}: {exc}") from exc
    return cfg, merged
