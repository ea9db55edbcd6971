"""Workload enricher.

Controllers keep stable names across rollouts, so their events are grouped
per object (API version, namespace, name) and tagged with ``Kind/name``.
"""

from __future__ import annotations

from kubesentry.enrichers.base import Enricher, Enrichment
from kubesentry.models.events import RawEvent

WORKLOAD_KINDS = frozenset(
    {
        "CronJob",
        "DaemonSet",
        "Deployment",
        "HorizontalPodAutoscaler",
        "Job",
        "ReplicaSet",
        "StatefulSet",
    }
)


class WorkloadEnricher(Enricher):
    name = "workload"
    kinds = WORKLOAD_KINDS

    def enrich(self, event: RawEvent) -> Enrichment:
        obj = event.involved_object
        return Enrichment(
            fingerprint=(obj.api_version, obj.namespace, obj.name),
            tags={"workload": f"{obj.kind}/{obj.name}"},
        )
