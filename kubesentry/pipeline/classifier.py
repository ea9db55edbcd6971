"""Event classification: keep/skip decision and alert level."""

from __future__ import annotations

from dataclasses import dataclass

from kubesentry.models.events import EVENT_TYPE_ERROR, EVENT_TYPE_NORMAL, EVENT_TYPE_WARNING, Level, RawEvent
from kubesentry.observability.logging import get_logger

_logger = get_logger("pipeline.classifier")

_LEVELS: dict[str, Level] = {
    EVENT_TYPE_WARNING: Level.WARNING,
    EVENT_TYPE_ERROR: Level.ERROR,
}


@dataclass(frozen=True)
class Classification:
    keep: bool
    level: Level


def skip_event(event: RawEvent) -> bool:
    """Routine ``Normal`` events are never forwarded."""
    return event.type == EVENT_TYPE_NORMAL


def event_level(event: RawEvent) -> Level:
    """Map the event type to an alert level.

    Unknown types fall back to INFO and are logged so that new upstream
    event types show up in the logs.
    """
    level = _LEVELS.get(event.type)
    if level is None:
        _logger.warning(
            "unexpected_event_type",
            event_type=event.type,
            reason=event.reason,
            kind=event.involved_object.kind,
            name=event.involved_object.name,
        )
        return Level.INFO
    return level


def classify(event: RawEvent) -> Classification:
    """Decide whether *event* becomes an alert, and at which level."""
    if skip_event(event):
        return Classification(keep=False, level=Level.INFO)
    return Classification(keep=True, level=event_level(event))
