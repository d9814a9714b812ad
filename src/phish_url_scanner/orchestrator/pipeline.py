"""End-to-end URL scan: parse once, analyze components concurrently, fuse."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FutureTimeoutError
import logging
from typing import Any, Callable

from phish_url_scanner.config.settings import ScannerConfig
from phish_url_scanner.core.errors import RepositoryUnavailableError, ScanTimeoutError
from phish_url_scanner.domain.patterns import PatternRepository, PhishingPattern
from phish_url_scanner.domain.results import COMPONENT_NAMES, ComponentResult, ScanReport
from phish_url_scanner.domain.url import UrlComponents, parse_url
from phish_url_scanner.orchestrator.fusion import aggregate
from phish_url_scanner.tools.intel.domain_intel import analyze_domain
from phish_url_scanner.tools.intel.heuristic_intel import analyze_heuristics
from phish_url_scanner.tools.intel.path_intel import analyze_path
from phish_url_scanner.tools.intel.query_intel import analyze_query
from phish_url_scanner.tools.intel.subdomain_intel import analyze_subdomain

logger = logging.getLogger("phish_url_scanner.pipeline")


class GuardedRepository:
    """Wraps a repository so any lookup failure surfaces as ``RepositoryUnavailableError``."""

    def __init__(self, inner: PatternRepository) -> None:
        self._inner = inner

    def _call(self, name: str, *args: Any) -> Any:
        try:
            return getattr(self._inner, name)(*args)
        except RepositoryUnavailableError:
            raise
        except Exception as exc:
            raise RepositoryUnavailableError(f"pattern repository {name} failed: {exc}") from exc

    def lookup_legitimate(self, domain: str) -> bool:
        return bool(self._call("lookup_legitimate", domain))

    def all_legitimate_domains(self) -> frozenset[str]:
        return frozenset(self._call("all_legitimate_domains"))

    def lookup_exact_phishing(self, domain: str) -> PhishingPattern | None:
        return self._call("lookup_exact_phishing", domain)

    def all_active_patterns(self) -> list[PhishingPattern]:
        return list(self._call("all_active_patterns"))


def _analyzers(
    components: UrlComponents,
    repo: PatternRepository,
    settings: ScannerConfig,
) -> dict[str, Callable[[], ComponentResult]]:
    weights = settings.scoring_weights()
    return {
        "domain": lambda: analyze_domain(components.domain, components, repo, weights),
        "subdomain": lambda: analyze_subdomain(components.subdomain, components.domain, components, repo),
        "path": lambda: analyze_path(components.path, components),
        "query": lambda: analyze_query(components.query, components),
        "heuristics": lambda: analyze_heuristics(components, weights.heuristics),
    }


def _join(
    futures: dict[Future[ComponentResult], str],
    timeout_s: float | None,
) -> dict[str, ComponentResult]:
    results: dict[str, ComponentResult] = {}
    errors: dict[str, BaseException] = {}
    try:
        for future in as_completed(futures, timeout=timeout_s):
            name = futures[future]
            exc = future.exception()
            if exc is not None:
                errors[name] = exc
                continue
            results[name] = future.result()
    except FutureTimeoutError as exc:
        pending = sorted(name for future, name in futures.items() if not future.done())
        raise ScanTimeoutError(f"scan exceeded {timeout_s}s; pending components: {', '.join(pending)}") from exc

    for name in COMPONENT_NAMES:
        if name in errors:
            raise errors[name]
    return results


def scan(
    raw: str,
    repo: PatternRepository,
    *,
    settings: ScannerConfig | None = None,
    timeout_s: float | None = None,
) -> ScanReport:
    """Scan one URL and return the full report.

    Raises ``UrlParseError`` before any analyzer runs, ``RepositoryUnavailableError``
    when the repository fails during the scan, and ``ScanTimeoutError`` when the
    analyzers miss the deadline. No partial report is ever returned.
    """

    active = settings or ScannerConfig()
    deadline = timeout_s if timeout_s is not None else active.default_timeout_s
    components = parse_url(raw)
    guarded = GuardedRepository(repo)

    pool = ThreadPoolExecutor(max_workers=active.max_workers, thread_name_prefix="phish-url-scan")
    try:
        futures = {
            pool.submit(fn): name for name, fn in _analyzers(components, guarded, active).items()
        }
        results = _join(futures, deadline)
    finally:
        # A timed-out analyzer keeps its thread; don't block the caller on it.
        pool.shutdown(wait=False, cancel_futures=True)

    for name in COMPONENT_NAMES:
        logger.debug("component=%s score=%.4f flags=%s", name, results[name].score, results[name].flags)

    fused = aggregate(
        results["domain"],
        results["subdomain"],
        results["path"],
        results["query"],
        results["heuristics"],
        weights=active.scoring_weights().components,
    )
    logger.info(
        "scanned url=%s score=%.4f classification=%s",
        components.normalized_url,
        fused.final_score,
        fused.classification,
    )
    return ScanReport(
        url=components.original_url,
        normalized_url=components.normalized_url,
        url_hash=components.url_hash,
        components=components,
        results=results,
        aggregate=fused,
    )
