"""Alert assembly from a raw event, the process defaults and an enrichment."""

from __future__ import annotations

import dataclasses
import time

from kubesentry.enrichers.base import Enrichment
from kubesentry.models.alerts import Alert
from kubesentry.models.config import SentryDefaults
from kubesentry.models.events import Level, RawEvent


def alert_message(event: RawEvent) -> str:
    obj = event.involved_object
    return f"{obj.kind}/{obj.name}: {event.message}"


def base_fingerprint(event: RawEvent) -> tuple[str, ...]:
    """Coarse grouping key; enrichers narrow it further."""
    return (event.source_component, event.type, event.reason, event.message)


def base_tags(event: RawEvent, defaults: SentryDefaults) -> dict[str, str]:
    """Default tags overlaid with the tags derived from *event*."""
    tags = dict(defaults.tags)
    tags["namespace"] = event.involved_object.namespace
    tags["component"] = event.source_component
    if event.cluster_name:
        tags["cluster"] = event.cluster_name
    tags["reason"] = event.reason
    tags["kind"] = event.involved_object.kind
    tags["type"] = event.type
    return tags


def base_extra(event: RawEvent) -> dict[str, object]:
    extra: dict[str, object] = {"count": event.count}
    if event.action:
        extra["action"] = event.action
    return extra


def build_alert(event: RawEvent, defaults: SentryDefaults, level: Level) -> Alert:
    """Build the un-enriched alert for *event*.

    The environment is the configured default when set, otherwise the
    involved object's namespace.  Events without a creation timestamp are
    stamped with the current time.
    """
    if event.creation_timestamp is not None:
        timestamp = event.creation_timestamp.timestamp()
    else:
        timestamp = time.time()

    return Alert(
        environment=defaults.environment or event.involved_object.namespace,
        message=alert_message(event),
        level=level,
        timestamp=timestamp,
        fingerprint=base_fingerprint(event),
        tags=base_tags(event, defaults),
        extra=base_extra(event),
    )


def apply_enrichment(alert: Alert, enrichment: Enrichment) -> Alert:
    """Return a copy of *alert* with *enrichment* appended and merged.

    Enricher tags are applied last and override base tags with the same key.
    """
    return dataclasses.replace(
        alert,
        fingerprint=alert.fingerprint + tuple(enrichment.fingerprint),
        tags={**alert.tags, **enrichment.tags},
    )
