"""Raw Kubernetes event data structures and enumerations."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from kubesentry.errors import MalformedEventError

EVENT_TYPE_NORMAL = "Normal"
EVENT_TYPE_WARNING = "Warning"
EVENT_TYPE_ERROR = "Error"


class Level(StrEnum):
    """Alert severity level, using Sentry's level names."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class ObjectReference:
    """The object an event is about (``involvedObject``)."""

    kind: str = ""
    namespace: str = ""
    name: str = ""
    api_version: str = ""
    field_path: str = ""
    uid: str = ""


@dataclass(frozen=True)
class RawEvent:
    """A core/v1 Event as received from the API server.

    Immutable: the pipeline only reads it while processing one notification.
    """

    reason: str
    involved_object: ObjectReference
    message: str
    type: str
    source_component: str = ""
    source_host: str = ""
    creation_timestamp: datetime | None = None
    count: int = 1
    action: str = ""
    cluster_name: str = ""
    uid: str = ""
    resource_version: str = ""

    @classmethod
    def from_dict(cls, obj: object) -> RawEvent:
        """Build a RawEvent from the camelCase JSON form of a v1.Event.

        Raises:
            MalformedEventError: if *obj* is not shaped like an Event.
        """
        if not isinstance(obj, Mapping):
            raise MalformedEventError(f"expected a mapping, got {type(obj).__name__}")

        metadata = obj.get("metadata") or {}
        involved = obj.get("involvedObject") or {}
        source = obj.get("source") or {}
        if not isinstance(metadata, Mapping) or not isinstance(involved, Mapping) or not isinstance(source, Mapping):
            raise MalformedEventError("metadata, involvedObject and source must be mappings")

        kind = obj.get("kind")
        if kind is not None and kind != "Event":
            raise MalformedEventError(f"expected kind Event, got {kind!r}")

        return cls(
            reason=_str(obj.get("reason")),
            involved_object=ObjectReference(
                kind=_str(involved.get("kind")),
                namespace=_str(involved.get("namespace")),
                name=_str(involved.get("name")),
                api_version=_str(involved.get("apiVersion")),
                field_path=_str(involved.get("fieldPath")),
                uid=_str(involved.get("uid")),
            ),
            message=_str(obj.get("message")),
            type=_str(obj.get("type")),
            source_component=_str(source.get("component")),
            source_host=_str(source.get("host")),
            creation_timestamp=_parse_timestamp(metadata.get("creationTimestamp")),
            count=_int(obj.get("count"), default=1),
            action=_str(obj.get("action")),
            cluster_name=_str(metadata.get("clusterName")),
            uid=_str(metadata.get("uid")),
            resource_version=_str(metadata.get("resourceVersion")),
        )


def _str(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def _int(value: object, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return default


def _parse_timestamp(value: object) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None
