"""Prometheus metrics for the Bible API.

Everything is registered under ``settings.METRICS_NAMESPACE`` and served by
the ``/metrics`` route. Request metrics are labelled by route template
(``/verses/{ref}``), never by the raw path.
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager

from prometheus_client import (  # type: ignore
    CONTENT_TYPE_LATEST,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

from ..config import settings

NAMESPACE = settings.METRICS_NAMESPACE

HTTP_REQUESTS = Counter(
    "http_requests_total",
    "API requests served, by route template and status code",
    labelnames=("method", "route", "status"),
    namespace=NAMESPACE,
)

HTTP_REQUEST_SECONDS = Histogram(
    "http_request_duration_seconds",
    "Time spent serving an API request",
    labelnames=("method", "route"),
    namespace=NAMESPACE,
    # Verse lookups are single-row reads; search pages can take longer
    buckets=(0.002, 0.005, 0.01, 0.02, 0.05, 0.1, 0.2, 0.5, 1.0, 2.5),
)

HTTP_SERVER_ERRORS = Counter(
    "http_server_errors_total",
    "Requests that ended in a 5xx response",
    labelnames=("method", "route"),
    namespace=NAMESPACE,
)

CACHE_LOOKUPS = Counter(
    "cache_lookups_total",
    "Translation metadata cache lookups",
    labelnames=("layer", "result"),
    namespace=NAMESPACE,
)

CACHE_ENTRIES = Gauge(
    "cache_memory_entries",
    "Entries currently held by the in-process cache",
    namespace=NAMESPACE,
)

STORE_QUERY_SECONDS = Histogram(
    "store_query_duration_seconds",
    "Verse store query latency, by repository query",
    labelnames=("query",),
    namespace=NAMESPACE,
    buckets=(0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)

SEARCH_QUERIES = Counter(
    "search_queries_total",
    "Substring searches executed, split by whether anything matched",
    labelnames=("outcome",),
    namespace=NAMESPACE,
)


def observe_request(method: str, route: str, status_code: int, duration: float) -> None:
    HTTP_REQUESTS.labels(method=method, route=route, status=str(status_code)).inc()
    HTTP_REQUEST_SECONDS.labels(method=method, route=route).observe(duration)
    if status_code >= 500:
        HTTP_SERVER_ERRORS.labels(method=method, route=route).inc()


def record_cache_lookup(layer: str, hit: bool) -> None:
    CACHE_LOOKUPS.labels(layer=layer, result="hit" if hit else "miss").inc()


def metrics_response() -> tuple[bytes, str]:
    """Serialized exposition payload and its content type."""
    return generate_latest(), CONTENT_TYPE_LATEST


@contextmanager
def timed_query(name: str) -> Iterator[None]:
    """Record how long the enclosed store query took, failures included."""
    start = time.perf_counter()
    try:
        yield
    finally:
        STORE_QUERY_SECONDS.labels(query=name).observe(time.perf_counter() - start)
