"""URL parsing, canonicalization and hashing."""

from __future__ import annotations

import hashlib
import re
from urllib.parse import SplitResult, parse_qsl, urlencode, urlsplit

from phish_url_scanner.core.errors import UrlParseError
from phish_url_scanner.domain.url.models import UrlComponents

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_ANY_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)
_IPV4_RE = re.compile(r"^\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}$")
_ILLEGAL_HOST_CHARS = re.compile(r"[\s<>\"{}|\\^`%]")
_DEFAULT_PORTS = {"http": 80, "https": 443}

MULTI_PART_SUFFIXES = ("co.uk", "com.vn", "com.au", "org.uk", "net.au", "com.br")
URL_SHORTENERS = (
    "bit.ly",
    "bitly.com",
    "tinyurl.com",
    "goo.gl",
    "t.co",
    "ow.ly",
    "is.gd",
    "buff.ly",
    "j.mp",
    "adf.ly",
    "tiny.cc",
    "lnkd.in",
    "db.tt",
    "qr.ae",
    "cur.lv",
    "rb.gy",
    "shorturl.at",
    "v.gd",
    "clk.sh",
    "bl.ink",
    "short.link",
    "rebrand.ly",
    "cutt.ly",
    "s.id",
)


def _ensure_scheme(value: str) -> str:
    if _SCHEME_RE.match(value):
        return value
    return "https://" + value


def _split(value: str) -> SplitResult:
    try:
        parsed = urlsplit(value)
        # .port validates lazily; force it here so bad ports fail the parse.
        parsed.port
    except ValueError as exc:
        raise UrlParseError(f"cannot parse url: {exc}") from exc
    return parsed


def _validated_host(parsed: SplitResult) -> str:
    host = (parsed.hostname or "").rstrip(".")
    if not host:
        raise UrlParseError("url has no host")
    if _ILLEGAL_HOST_CHARS.search(host):
        raise UrlParseError(f"illegal characters in host: {host!r}")
    if ":" not in host and any(not label for label in host.split(".")):
        raise UrlParseError(f"empty label in host: {host!r}")
    return host


def _raw_host(netloc: str) -> str:
    host = netloc.rpartition("@")[2]
    if host.startswith("["):
        return host[1:].split("]", 1)[0]
    return host.split(":", 1)[0].rstrip(".")


def is_ip_address(hostname: str) -> bool:
    return bool(_IPV4_RE.match(hostname or ""))


def is_shortener_host(hostname: str) -> bool:
    host = (hostname or "").lower()
    return any(host == item or host.endswith("." + item) for item in URL_SHORTENERS)


def split_hostname(hostname: str) -> tuple[str, str, str]:
    """Return ``(domain, subdomain, tld)`` for a lower-cased hostname."""

    if is_ip_address(hostname) or ":" in hostname:
        return hostname, "", ""
    labels = hostname.split(".")
    if len(labels) < 2:
        return hostname, "", ""
    last_two = ".".join(labels[-2:])
    if last_two in MULTI_PART_SUFFIXES and len(labels) > 2:
        return ".".join(labels[-3:]), ".".join(labels[:-3]), last_two
    return last_two, ".".join(labels[:-2]), labels[-1]


def registrable_domain(hostname: str) -> str:
    return split_hostname((hostname or "").lower().rstrip("."))[0]


def _canonical_path(path: str) -> str:
    if not path:
        return "/"
    if len(path) > 1 and path.endswith("/"):
        return path[:-1]
    return path


def _canonical_query(query: str) -> str:
    if not query:
        return ""
    pairs = parse_qsl(query, keep_blank_values=True)
    return urlencode(sorted(pairs, key=lambda item: item[0]))


def _canonical_from_parts(scheme: str, host: str, port: int | None, path: str, query: str) -> str:
    result = f"{scheme}://{host}"
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        result += f":{port}"
    result += _canonical_path(path)
    canonical_query = _canonical_query(query)
    if canonical_query:
        result += f"?{canonical_query}"
    return result


def _hash_normalized(normalized: str) -> str:
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


def parse_url(raw: str) -> UrlComponents:
    """Parse a raw URL string into its structural components."""

    original = raw if isinstance(raw, str) else ""
    trimmed = original.strip()
    if not trimmed:
        raise UrlParseError("url is empty")
    if _ANY_SCHEME_RE.match(trimmed) and not _SCHEME_RE.match(trimmed):
        raise UrlParseError(f"unsupported scheme in url: {trimmed.split(':', 1)[0]!r}")

    prefixed = _ensure_scheme(trimmed)
    lowered = _ensure_scheme(trimmed.lower())
    parsed = _split(lowered)
    hostname = _validated_host(parsed)
    domain, subdomain, tld = split_hostname(hostname)
    port = parsed.port

    netloc_host = f"[{hostname}]" if ":" in hostname else hostname
    normalized = _canonical_from_parts(parsed.scheme, netloc_host, port, parsed.path, parsed.query)
    case_preserved = urlsplit(prefixed)

    return UrlComponents(
        original_url=original,
        normalized_url=normalized,
        url_hash=_hash_normalized(normalized),
        scheme=parsed.scheme,
        hostname=hostname,
        original_hostname=_raw_host(case_preserved.netloc),
        domain=domain,
        subdomain=subdomain,
        tld=tld,
        port=port,
        path=parsed.path or "/",
        query=parsed.query,
        fragment=parsed.fragment,
        username=parsed.username or "",
        password=parsed.password or "",
        has_auth=bool(parsed.username or parsed.password),
        is_ip=is_ip_address(hostname),
        is_shortener=is_shortener_host(hostname),
        has_subdomain=bool(subdomain),
        url_length=len(prefixed),
    )


def normalize_url(raw: str) -> str:
    """Canonical form used for identity: no fragment, sorted query keys."""

    return parse_url(raw).normalized_url


def url_hash(raw: str) -> str:
    return parse_url(raw).url_hash


def is_valid_url(raw: str) -> bool:
    try:
        parse_url(raw)
    except UrlParseError:
        return False
    return True
