"""URL parsing and models."""

from phish_url_scanner.domain.url.models import UrlComponents
from phish_url_scanner.domain.url.parse import (
    is_valid_url,
    normalize_url,
    parse_url,
    registrable_domain,
    url_hash,
)

__all__ = [
    "UrlComponents",
    "parse_url",
    "normalize_url",
    "url_hash",
    "is_valid_url",
    "registrable_domain",
]
