"""Prometheus metrics for the event pipeline."""

from __future__ import annotations

from prometheus_client import Counter, start_http_server

events_received_total = Counter(
    "kubesentry_events_received_total",
    "Events delivered to the pipeline as added notifications",
    ["type"],
)
events_skipped_total = Counter(
    "kubesentry_events_skipped_total",
    "Events dropped by the classifier",
)
alerts_captured_total = Counter(
    "kubesentry_alerts_captured_total",
    "Alerts handed to the sink",
    ["level"],
)
anomalies_total = Counter(
    "kubesentry_anomalies_total",
    "Notifications that could not be processed",
    ["kind"],
)
recency_cache_hits_total = Counter(
    "kubesentry_recency_cache_hits_total",
    "Enricher lookups that found the key already recorded",
)
watch_restarts_total = Counter(
    "kubesentry_watch_restarts_total",
    "Times the event watch was re-established",
    ["reason"],
)


def start_metrics_server(port: int) -> None:
    """Expose /metrics on *port*.  A port of 0 leaves exposition disabled."""
    if port > 0:
        start_http_server(port)
