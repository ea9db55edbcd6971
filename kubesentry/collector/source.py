"""List/watch access to core/v1 Events.

``EventSource`` is the narrow interface the watcher consumes.
``KubernetesEventSource`` implements it on kubernetes-asyncio and always
hands out the camelCase JSON form of each object, so the rest of the
pipeline never touches generated client models.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from kubesentry.errors import KubeSentryError

NAMESPACE_ALL = ""

_HTTP_GONE = 410


class ResourceExpiredError(KubeSentryError):
    """The watch resourceVersion is too old; the caller must relist."""


class WatchError(KubeSentryError):
    """The API server sent an ERROR notification other than 410 Gone."""


@dataclass(frozen=True)
class EventList:
    """Result of a list call: the items and the collection resourceVersion."""

    items: list[Any] = field(default_factory=list)
    resource_version: str = ""


@dataclass(frozen=True)
class WatchNotification:
    """One watch notification: ``ADDED``, ``MODIFIED``, ``DELETED`` or ``BOOKMARK``."""

    type: str
    object: Any


class EventSource(Protocol):
    """Minimal list/watch interface required by EventWatcher."""

    async def list_events(self, namespace: str) -> EventList: ...

    def watch_events(
        self,
        namespace: str,
        resource_version: str,
        timeout_seconds: int,
    ) -> AsyncIterator[WatchNotification]: ...


def raise_for_error(notification_type: str, obj: object) -> None:
    """Translate an ERROR watch notification into an exception."""
    if notification_type != "ERROR":
        return
    code = obj.get("code") if isinstance(obj, Mapping) else None
    message = obj.get("message", "") if isinstance(obj, Mapping) else str(obj)
    if code == _HTTP_GONE:
        raise ResourceExpiredError(message)
    raise WatchError(f"watch error {code}: {message}")


class KubernetesEventSource:
    """EventSource backed by a kubernetes-asyncio ``CoreV1Api``."""

    def __init__(self, core_v1: Any) -> None:
        self._v1 = core_v1

    async def list_events(self, namespace: str) -> EventList:
        if namespace == NAMESPACE_ALL:
            result = await self._v1.list_event_for_all_namespaces()
        else:
            result = await self._v1.list_namespaced_event(namespace)
        serialize = self._v1.api_client.sanitize_for_serialization
        return EventList(
            items=[serialize(item) for item in result.items or []],
            resource_version=result.metadata.resource_version or "",
        )

    async def watch_events(
        self,
        namespace: str,
        resource_version: str,
        timeout_seconds: int,
    ) -> AsyncIterator[WatchNotification]:
        from kubernetes_asyncio import watch  # type: ignore[import-untyped]
        from kubernetes_asyncio.client.exceptions import ApiException  # type: ignore[import-untyped]

        if namespace == NAMESPACE_ALL:
            func, args = self._v1.list_event_for_all_namespaces, ()
        else:
            func, args = self._v1.list_namespaced_event, (namespace,)

        try:
            async with watch.Watch().stream(
                func,
                *args,
                resource_version=resource_version,
                timeout_seconds=timeout_seconds,
                allow_watch_bookmarks=True,
            ) as stream:
                async for event in stream:
                    raw = event.get("raw_object", event.get("object"))
                    raise_for_error(event["type"], raw)
                    yield WatchNotification(type=event["type"], object=raw)
        except ApiException as exc:
            if exc.status == _HTTP_GONE:
                raise ResourceExpiredError(str(exc.reason)) from exc
            raise
