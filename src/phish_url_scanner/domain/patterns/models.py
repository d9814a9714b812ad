"""Known-pattern models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

WILDCARD_CHARS = ("*", "?")


class PhishingPattern(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    pattern: str = Field(min_length=1)
    severity: str = "medium"
    target_brand: str = ""
    active: bool = True

    @property
    def is_wildcard(self) -> bool:
        return any(char in self.pattern for char in WILDCARD_CHARS)

    def evidence(self, match_type: str) -> dict[str, object]:
        return {
            "type": match_type,
            "pattern": self.pattern,
            "severity": self.severity,
            "target_brand": self.target_brand,
            "pattern_id": self.id,
        }
