"""EventWatcher: list + watch of core/v1 Events.

The watcher keeps an index of known event objects (key -> resourceVersion)
so that relists only deliver *new* objects to the pipeline.  The collection
is listed once at startup.  Each watch is closed by the server after
``resync_seconds`` and reopened from the last resourceVersion seen (object
or bookmark), so a healthy watcher never repeats the cluster-wide list.
A 410 Gone forces an immediate relist.  Any other failure relists after an
exponential back-off, which resets only once a watch has ended cleanly or
delivered a notification.

Notification handling is synchronous.  Cancelling the watcher task can only
interrupt it between notifications, so a notification that has started
processing always completes.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from enum import StrEnum
from typing import Any

from kubesentry.collector.source import NAMESPACE_ALL, EventSource, ResourceExpiredError, WatchNotification
from kubesentry.errors import MalformedEventError
from kubesentry.models.alerts import Alert
from kubesentry.observability.logging import get_logger
from kubesentry.observability.metrics import alerts_captured_total, anomalies_total, watch_restarts_total
from kubesentry.pipeline.processor import EventPipeline
from kubesentry.sink.base import Sink

_log = get_logger("collector.event_watcher")

DEFAULT_RESYNC_SECONDS = 30
_INITIAL_BACKOFF = 1.0
_MAX_BACKOFF = 30.0

ANOMALY_MESSAGE = "Unexpected event type"


class WatcherState(StrEnum):
    INITIALIZING = "initializing"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"


def object_key(obj: object) -> str | None:
    """Index key for a listed/watched object: its UID, else namespace/name."""
    if not isinstance(obj, Mapping):
        return None
    metadata = obj.get("metadata")
    if not isinstance(metadata, Mapping):
        return None
    uid = metadata.get("uid")
    if uid:
        return str(uid)
    name = metadata.get("name")
    if not name:
        return None
    return f"{metadata.get('namespace', '')}/{name}"


def _resource_version(obj: object) -> str:
    if isinstance(obj, Mapping) and isinstance(obj.get("metadata"), Mapping):
        return str(obj["metadata"].get("resourceVersion") or "")
    return ""


class EventWatcher:
    """Feeds every newly added Event through the pipeline into the sink.

    Args:
        source:          List/watch access to the Events API.
        pipeline:        Classify/build/enrich processor.
        sink:            Destination for finished alerts and anomalies.
        namespace:       Namespace to watch; empty watches all namespaces.
        resync_seconds:  Server-side watch timeout; the watch reopens after it.
    """

    def __init__(
        self,
        source: EventSource,
        pipeline: EventPipeline,
        sink: Sink,
        namespace: str = NAMESPACE_ALL,
        resync_seconds: int = DEFAULT_RESYNC_SECONDS,
    ) -> None:
        self._source = source
        self._pipeline = pipeline
        self._sink = sink
        self._namespace = namespace or NAMESPACE_ALL
        self._resync_seconds = resync_seconds
        self._known: dict[str, str] = {}
        self._watch_progressed = False
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task[None] | None = None
        self._state = WatcherState.INITIALIZING

    @property
    def state(self) -> WatcherState:
        return self._state

    @property
    def namespace(self) -> str:
        return self._namespace

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Spawn the background list/watch task."""
        if self._state is not WatcherState.INITIALIZING:
            raise RuntimeError(f"EventWatcher cannot start from state {self._state}")
        self._task = asyncio.create_task(self._run(), name="event-watcher")
        self._state = WatcherState.RUNNING
        _log.info(
            "event_watcher_started",
            namespace=self._namespace or "<all>",
            resync_seconds=self._resync_seconds,
        )

    async def stop(self) -> None:
        """Stop the watch and wait for the task to finish.  Idempotent."""
        if self._state is WatcherState.STOPPED:
            return
        if self._state is WatcherState.STOPPING:
            await self.wait()
            return

        self._state = WatcherState.STOPPING
        self._stop_event.set()
        if self._task is not None and not self._task.done():
            self._task.cancel()
        await self.wait()
        self._state = WatcherState.STOPPED
        _log.info("event_watcher_stopped")

    async def wait(self) -> None:
        """Block until the background task has exited."""
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    # ------------------------------------------------------------------
    # Watch loop
    # ------------------------------------------------------------------

    async def _run(self) -> None:
        backoff = _INITIAL_BACKOFF
        resource_version = ""
        while not self._stop_event.is_set():
            self._watch_progressed = False
            try:
                if not resource_version:
                    resource_version = await self._relist()
                resource_version = await self._watch(resource_version)
                backoff = _INITIAL_BACKOFF
                watch_restarts_total.labels(reason="resync").inc()
            except ResourceExpiredError as exc:
                resource_version = ""
                watch_restarts_total.labels(reason="expired").inc()
                _log.info("event_watch_expired", detail=str(exc))
            except Exception as exc:
                resource_version = ""
                if self._watch_progressed:
                    backoff = _INITIAL_BACKOFF
                watch_restarts_total.labels(reason="error").inc()
                _log.warning("event_watch_failed", error=str(exc), retry_in=backoff)
                await self._sleep(backoff)
                backoff = min(backoff * 2, _MAX_BACKOFF)

    async def _relist(self) -> str:
        listing = await self._source.list_events(self._namespace)
        previous = self._known
        self._known = {}
        added = 0
        for obj in listing.items:
            key = object_key(obj)
            if key is not None:
                self._known[key] = _resource_version(obj)
                if key in previous:
                    continue
            self.handle_added(obj)
            added += 1
        _log.debug("event_relist", items=len(listing.items), added=added)
        return listing.resource_version

    async def _watch(self, resource_version: str) -> str:
        """Consume one watch; return the resourceVersion to resume from."""
        stream = self._source.watch_events(self._namespace, resource_version, self._resync_seconds)
        async for notification in stream:
            if self._stop_event.is_set():
                break
            self._watch_progressed = True
            resource_version = _resource_version(notification.object) or resource_version
            self._dispatch(notification)
        return resource_version

    def _dispatch(self, notification: WatchNotification) -> None:
        obj = notification.object
        key = object_key(obj)
        if notification.type in ("ADDED", "MODIFIED"):
            if key is None:
                self.handle_added(obj)
            elif key not in self._known:
                self._known[key] = _resource_version(obj)
                self.handle_added(obj)
            else:
                self._known[key] = _resource_version(obj)
        elif notification.type == "DELETED":
            if key is not None:
                self._known.pop(key, None)
        elif notification.type != "BOOKMARK":
            _log.debug("event_watch_notification_ignored", type=notification.type)

    async def _sleep(self, seconds: float) -> None:
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
        except TimeoutError:
            pass

    # ------------------------------------------------------------------
    # Per-event handling
    # ------------------------------------------------------------------

    def handle_added(self, obj: object) -> Alert | None:
        """Run one added object through the pipeline and into the sink.

        Never raises: malformed payloads become a single anomaly report and
        unexpected errors are reported as exceptions.
        """
        try:
            alert = self._pipeline.process(obj)
        except MalformedEventError as exc:
            anomalies_total.labels(kind="malformed").inc()
            _log.warning("unexpected_event_payload", error=str(exc), payload_type=type(obj).__name__)
            self._report(self._sink.capture_anomaly, ANOMALY_MESSAGE)
            return None
        except Exception as exc:
            anomalies_total.labels(kind="pipeline_error").inc()
            _log.error("event_processing_failed", error=str(exc), exc_info=True)
            self._report(self._sink.capture_exception, exc)
            return None

        if alert is None:
            return None

        _log.info("alert_captured", level=alert.level.value, message=alert.message)
        if self._report(self._sink.capture, alert):
            alerts_captured_total.labels(level=alert.level.value).inc()
        return alert

    def _report(self, fn: Callable[[Any], None], payload: Any) -> bool:
        try:
            fn(payload)
        except Exception as exc:
            _log.error("sink_capture_failed", sink=self._sink.sink_name, error=str(exc))
            return False
        return True
