"""Read-only pattern repository contract and an in-memory snapshot."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Mapping, Protocol

import yaml

from phish_url_scanner.core.errors import RepositoryUnavailableError
from phish_url_scanner.domain.patterns.models import PhishingPattern


class PatternRepository(Protocol):
    """Lookup surface the engine reads from; implementations must not change mid-scan."""

    def lookup_legitimate(self, domain: str) -> bool: ...

    def all_legitimate_domains(self) -> frozenset[str]: ...

    def lookup_exact_phishing(self, domain: str) -> PhishingPattern | None: ...

    def all_active_patterns(self) -> list[PhishingPattern]: ...


def _clean_domain(value: Any) -> str:
    return str(value or "").strip().lower().rstrip(".")


def _coerce_pattern(item: PhishingPattern | Mapping[str, Any], index: int) -> PhishingPattern:
    if isinstance(item, PhishingPattern):
        pattern = item
    else:
        payload = dict(item)
        payload.setdefault("id", str(index + 1))
        payload["id"] = str(payload["id"])
        pattern = PhishingPattern.model_validate(payload)
    return pattern.model_copy(update={"pattern": _clean_domain(pattern.pattern)})


class PatternSnapshot:
    """Immutable repository snapshot taken once per scan (or shared across scans)."""

    def __init__(
        self,
        legitimate_domains: Iterable[str] = (),
        patterns: Iterable[PhishingPattern | Mapping[str, Any]] = (),
    ) -> None:
        self._legitimate = frozenset(
            domain for domain in (_clean_domain(item) for item in legitimate_domains) if domain
        )
        coerced = [_coerce_pattern(item, index) for index, item in enumerate(patterns)]
        self._active = tuple(item for item in coerced if item.active)
        self._exact: dict[str, PhishingPattern] = {}
        for item in self._active:
            if not item.is_wildcard:
                self._exact.setdefault(item.pattern, item)

    def lookup_legitimate(self, domain: str) -> bool:
        return _clean_domain(domain) in self._legitimate

    def all_legitimate_domains(self) -> frozenset[str]:
        return self._legitimate

    def lookup_exact_phishing(self, domain: str) -> PhishingPattern | None:
        return self._exact.get(_clean_domain(domain))

    def all_active_patterns(self) -> list[PhishingPattern]:
        return list(self._active)

    def __len__(self) -> int:
        return len(self._legitimate) + len(self._active)


def load_pattern_snapshot(path: str | Path) -> PatternSnapshot:
    """Load ``legitimate_domains`` and ``phishing_patterns`` from a YAML file."""

    p = Path(path)
    try:
        payload = yaml.safe_load(p.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise RepositoryUnavailableError(f"cannot read pattern snapshot {p}: {exc}") from exc
    if payload is None:
        return PatternSnapshot()
    if not isinstance(payload, dict):
        raise RepositoryUnavailableError(f"pattern snapshot {p} must be a mapping")
    legitimate = payload.get("legitimate_domains") or []
    patterns = payload.get("phishing_patterns") or []
    if not isinstance(legitimate, list) or not isinstance(patterns, list):
        raise RepositoryUnavailableError(f"pattern snapshot {p} has malformed sections")
    try:
        return PatternSnapshot(legitimate, patterns)
    except (TypeError, ValueError) as exc:
        raise RepositoryUnavailableError(f"invalid pattern entry in {p}: {exc}") from exc
