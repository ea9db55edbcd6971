"""Container lifecycle enricher.

Narrows grouping of kubelet container events (probe failures, back-off,
kills) to the container rather than the individual pod replica, and tags
whether this container of this pod was already reported since startup.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from kubesentry.cache.recency import RecencyCache
from kubesentry.enrichers.base import Enricher, Enrichment
from kubesentry.models.events import RawEvent
from kubesentry.observability.logging import get_logger
from kubesentry.observability.metrics import recency_cache_hits_total

_logger = get_logger("enrichers.container")

_RE_CONTAINER_PATH = re.compile(r"^spec\.(?:containers|initContainers|ephemeralContainers)\{([^}]+)\}")

CONTAINER_REASONS = frozenset(
    {
        "BackOff",
        "ExceededGracePeriod",
        "Failed",
        "FailedPostStartHook",
        "FailedPreStopHook",
        "Killing",
        "OOMKilling",
        "ProbeWarning",
        "Unhealthy",
    }
)


@dataclass(frozen=True)
class TerminationKey:
    """Recency cache key for one container of one pod instance."""

    pod_uid: str
    container_name: str


def container_name_from_path(field_path: str) -> str | None:
    """Extract ``web`` from ``spec.containers{web}``."""
    match = _RE_CONTAINER_PATH.match(field_path)
    if match:
        return match.group(1)
    return None


class ContainerEnricher(Enricher):
    """Handles container lifecycle events reported against a Pod."""

    name = "container"
    reasons = CONTAINER_REASONS
    kinds = frozenset({"Pod"})

    def __init__(self, cache: RecencyCache) -> None:
        self._cache = cache

    def enrich(self, event: RawEvent) -> Enrichment:
        obj = event.involved_object
        container = container_name_from_path(obj.field_path)
        if container is None:
            return Enrichment(fingerprint=(obj.namespace, obj.name), tags={"pod": obj.name})

        key = TerminationKey(pod_uid=obj.uid or f"{obj.namespace}/{obj.name}", container_name=container)
        repeated = self._cache.seen(key)
        if repeated:
            recency_cache_hits_total.inc()
            _logger.debug("container_condition_repeated", pod=obj.name, container=container)

        return Enrichment(
            fingerprint=(obj.namespace, container),
            tags={
                "pod": obj.name,
                "container": container,
                "repeated": "true" if repeated else "false",
            },
        )
