"""Node enricher: groups node events per node."""

from __future__ import annotations

from kubesentry.enrichers.base import Enricher, Enrichment
from kubesentry.models.events import RawEvent


class NodeEnricher(Enricher):
    name = "node"
    kinds = frozenset({"Node"})

    def enrich(self, event: RawEvent) -> Enrichment:
        node = event.involved_object.name or event.source_host
        return Enrichment(fingerprint=(node,), tags={"node": node})
