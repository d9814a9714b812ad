"""URL path analysis."""

from __future__ import annotations

import logging

from phish_url_scanner.domain.results import ComponentResult
from phish_url_scanner.domain.url import UrlComponents
from phish_url_scanner.tools.intel.indicators import PATH_KEYWORDS

logger = logging.getLogger("phish_url_scanner.intel.path")

KEYWORD_POINTS = 0.20
DEEP_PATH_POINTS = 0.20
DEEP_PATH_SEGMENTS = 5
ENCODED_CHAR_POINTS = 0.05
ENCODED_CHAR_CAP = 0.20
TRAVERSAL_POINTS = 0.30


def analyze_path(path: str, components: UrlComponents | None = None) -> ComponentResult:
    value = (path or "").lower()
    if value in {"", "/"}:
        return ComponentResult(component="path", value=value or "/", score=0.0, flags=["root_path"])

    score = 0.0
    flags: list[str] = []
    keywords = [keyword for keyword in PATH_KEYWORDS if keyword in value]
    for keyword in keywords:
        score += KEYWORD_POINTS
        flags.append(f"keyword_{keyword}")

    segments = [segment for segment in value.split("/") if segment]
    if len(segments) > DEEP_PATH_SEGMENTS:
        score += DEEP_PATH_POINTS
        flags.append(f"deep_path_{len(segments)}")

    encoded = value.count("%")
    if encoded:
        score += min(ENCODED_CHAR_CAP, encoded * ENCODED_CHAR_POINTS)
        flags.append(f"encoded_characters_{encoded}")

    if "../" in value or "..%2f" in value:
        score += TRAVERSAL_POINTS
        flags.append("path_traversal_pattern")

    score = round(min(1.0, score), 4)
    logger.debug("path=%s score=%.4f flags=%s", value, score, flags)
    return ComponentResult(
        component="path",
        value=value,
        score=score,
        flags=flags,
        details={"depth": len(segments), "keywords": keywords},
    )
