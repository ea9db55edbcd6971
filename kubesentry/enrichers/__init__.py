"""Per-category fingerprint and tag enrichers.

Exports:
    Enricher          -- ABC every category handler implements.
    EnricherRegistry  -- Resolves an event to exactly one enricher.
    Enrichment        -- Fingerprint segments and tags from one enricher.
    build_default_registry -- Registry with the built-in enrichers.
"""

from __future__ import annotations

from kubesentry.cache.recency import RecencyCache
from kubesentry.enrichers.base import DefaultEnricher, Enricher, EnricherRegistry, Enrichment
from kubesentry.enrichers.container import ContainerEnricher, TerminationKey
from kubesentry.enrichers.node import NodeEnricher
from kubesentry.enrichers.workload import WorkloadEnricher

__all__ = [
    "ContainerEnricher",
    "DefaultEnricher",
    "Enricher",
    "EnricherRegistry",
    "Enrichment",
    "NodeEnricher",
    "TerminationKey",
    "WorkloadEnricher",
    "build_default_registry",
]


def build_default_registry(cache: RecencyCache) -> EnricherRegistry:
    """Build the registry used by the running watcher."""
    registry = EnricherRegistry()
    registry.register(ContainerEnricher(cache))
    registry.register(NodeEnricher())
    registry.register(WorkloadEnricher())
    return registry
