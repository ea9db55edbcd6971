"""Classify → build → enrich for one added event notification.

The processor holds no per-event state; it is safe to call from several
delivery workers at once.  The only shared structure it reaches is the
enrichers' recency cache, which is internally locked.
"""

from __future__ import annotations

from kubesentry.enrichers.base import EnricherRegistry
from kubesentry.models.alerts import Alert
from kubesentry.models.config import SentryDefaults
from kubesentry.models.events import EVENT_TYPE_ERROR, EVENT_TYPE_NORMAL, EVENT_TYPE_WARNING, RawEvent
from kubesentry.observability.logging import get_logger
from kubesentry.observability.metrics import events_received_total, events_skipped_total
from kubesentry.pipeline.builder import apply_enrichment, build_alert
from kubesentry.pipeline.classifier import classify

_logger = get_logger("pipeline.processor")

_KNOWN_TYPES = frozenset({EVENT_TYPE_NORMAL, EVENT_TYPE_WARNING, EVENT_TYPE_ERROR})


def type_label(event_type: str) -> str:
    """Metric label for an upstream event type; unknown values share ``other``."""
    return event_type if event_type in _KNOWN_TYPES else "other"


class EventPipeline:
    """Turns v1.Event payloads into alerts."""

    def __init__(self, defaults: SentryDefaults, registry: EnricherRegistry) -> None:
        self._defaults = defaults
        self._registry = registry

    @property
    def defaults(self) -> SentryDefaults:
        return self._defaults

    def process(self, obj: object) -> Alert | None:
        """Process one added notification payload.

        Returns None when the classifier drops the event.

        Raises:
            MalformedEventError: if *obj* is not a v1.Event payload.
        """
        event = RawEvent.from_dict(obj)
        return self.process_event(event)

    def process_event(self, event: RawEvent) -> Alert | None:
        events_received_total.labels(type=type_label(event.type)).inc()

        classification = classify(event)
        if not classification.keep:
            events_skipped_total.inc()
            return None

        alert = build_alert(event, self._defaults, classification.level)
        enricher = self._registry.resolve(event)
        alert = apply_enrichment(alert, enricher.enrich(event))
        _logger.debug(
            "alert_built",
            enricher=enricher.name,
            fingerprint=list(alert.fingerprint),
        )
        return alert
