"""Query string analysis: open redirects and embedded URLs."""

from __future__ import annotations

import logging
from urllib.parse import parse_qsl, unquote

from phish_url_scanner.domain.results import ComponentResult
from phish_url_scanner.domain.url import UrlComponents
from phish_url_scanner.tools.intel.indicators import REDIRECT_PARAMS

logger = logging.getLogger("phish_url_scanner.intel.query")

REDIRECT_POINTS = 0.25
EMBEDDED_URL_POINTS = 0.30
LONG_QUERY_POINTS = 0.15
LONG_QUERY_CHARS = 100
LONG_VALUE_POINTS = 0.15
LONG_VALUE_CHARS = 100
MANY_PARAMS_POINTS = 0.20
MANY_PARAMS_COUNT = 10


def _url_params(params: list[tuple[str, str]]) -> list[str]:
    keys: list[str] = []
    for key, val in params:
        if val.startswith(("http://", "https://")) and key not in keys:
            keys.append(key)
    return keys


def _long_params(params: list[tuple[str, str]]) -> list[str]:
    keys: list[str] = []
    for key, val in params:
        if len(val) > LONG_VALUE_CHARS and key not in keys:
            keys.append(key)
    return keys


def analyze_query(query: str, components: UrlComponents | None = None) -> ComponentResult:
    value = (query or "").lower()
    if not value:
        return ComponentResult(component="query", value="", score=0.0, flags=["no_query_params"])

    score = 0.0
    flags: list[str] = []
    redirects = [param for param in REDIRECT_PARAMS if f"{param}=" in value]
    for param in redirects:
        score += REDIRECT_POINTS
        flags.append(f"redirect_param_{param}")

    params = parse_qsl(value, keep_blank_values=True)

    # A parameter value that is itself a URL is charged per key; anything
    # else embedded in the query is charged once.
    url_keys = _url_params(params)
    for key in url_keys:
        score += EMBEDDED_URL_POINTS
        flags.append(f"url_in_param_{key}")
    decoded = unquote(value)
    if not url_keys and ("http://" in decoded or "https://" in decoded):
        score += EMBEDDED_URL_POINTS
        flags.append("url_in_params")

    for key in _long_params(params):
        score += LONG_VALUE_POINTS
        flags.append(f"very_long_param_value_{key}")

    if len(value) > LONG_QUERY_CHARS:
        score += LONG_QUERY_POINTS
        flags.append("long_query_string")

    if len(params) > MANY_PARAMS_COUNT:
        score += MANY_PARAMS_POINTS
        flags.append(f"many_parameters_{len(params)}")

    score = round(min(1.0, score), 4)
    logger.debug("query=%s score=%.4f flags=%s", value, score, flags)
    return ComponentResult(
        component="query",
        value=value,
        score=score,
        flags=flags,
        details={"parameters": len(params), "redirect_params": redirects, "url_params": url_keys},
    )
