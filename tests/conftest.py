"""Shared fixtures and factories for kube-sentry tests.

Events are built in the camelCase JSON shape the API server sends, so the
same payloads exercise RawEvent parsing, the pipeline and the watcher.
"""

from __future__ import annotations

from typing import Any

import pytest

from kubesentry.cache.recency import RecencyCache
from kubesentry.enrichers import build_default_registry
from kubesentry.models.alerts import Alert
from kubesentry.models.config import SentryDefaults
from kubesentry.models.events import RawEvent
from kubesentry.pipeline.processor import EventPipeline
from kubesentry.sink.base import Sink

# ---------------------------------------------------------------------------
# Event factories
# ---------------------------------------------------------------------------


def make_event_dict(
    type: str = "Warning",
    reason: str = "Unhealthy",
    message: str = "Liveness probe failed",
    component: str = "kubelet",
    kind: str = "Pod",
    name: str = "web-1",
    namespace: str = "prod",
    api_version: str = "v1",
    field_path: str = "",
    involved_uid: str = "pod-uid-1",
    uid: str = "event-uid-1",
    resource_version: str = "100",
    count: int | None = 3,
    action: str = "",
    cluster_name: str = "",
    creation_timestamp: str = "2026-02-18T12:00:00Z",
) -> dict[str, Any]:
    """Create a v1.Event payload with sensible defaults for testing."""
    metadata: dict[str, Any] = {
        "name": f"{name}.{uid}",
        "namespace": namespace,
        "uid": uid,
        "resourceVersion": resource_version,
        "creationTimestamp": creation_timestamp,
    }
    if cluster_name:
        metadata["clusterName"] = cluster_name
    obj: dict[str, Any] = {
        "apiVersion": "v1",
        "kind": "Event",
        "metadata": metadata,
        "involvedObject": {
            "kind": kind,
            "namespace": namespace,
            "name": name,
            "apiVersion": api_version,
            "fieldPath": field_path,
            "uid": involved_uid,
        },
        "reason": reason,
        "message": message,
        "type": type,
        "source": {"component": component, "host": "node-a"},
    }
    if count is not None:
        obj["count"] = count
    if action:
        obj["action"] = action
    return obj


def make_event(**kwargs: Any) -> RawEvent:
    """Create a RawEvent from ``make_event_dict`` keyword arguments."""
    return RawEvent.from_dict(make_event_dict(**kwargs))


# ---------------------------------------------------------------------------
# Sink double
# ---------------------------------------------------------------------------


class RecordingSink(Sink):
    """Sink that keeps everything it receives in memory."""

    def __init__(self) -> None:
        self.alerts: list[Alert] = []
        self.anomalies: list[str] = []
        self.exceptions: list[BaseException] = []
        self.flushes: list[float] = []

    @property
    def sink_name(self) -> str:
        return "recording"

    def capture(self, alert: Alert) -> None:
        self.alerts.append(alert)

    def capture_anomaly(self, message: str) -> None:
        self.anomalies.append(message)

    def capture_exception(self, exc: BaseException) -> None:
        self.exceptions.append(exc)

    def flush(self, timeout: float) -> None:
        self.flushes.append(timeout)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def defaults() -> SentryDefaults:
    return SentryDefaults()


@pytest.fixture
def recency_cache() -> RecencyCache:
    return RecencyCache(capacity=500)


@pytest.fixture
def pipeline(defaults: SentryDefaults, recency_cache: RecencyCache) -> EventPipeline:
    return EventPipeline(defaults=defaults, registry=build_default_registry(recency_cache))


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()
