"""Enricher base class and category registry.

An enricher contributes extra fingerprint segments and tags for one category
of event.  The registry maps an event to exactly one enricher:

1. the first enricher whose ``reasons`` contains the event reason and whose
   ``kinds`` (when non-empty) contains the involved object kind;
2. otherwise the first enricher with no ``reasons`` whose ``kinds`` contains
   the involved object kind;
3. otherwise the default enricher, which contributes nothing.

New categories are added by registering another enricher; resolution never
changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar, TypeVar

from kubesentry.models.events import RawEvent
from kubesentry.observability.logging import get_logger

_logger = get_logger("enrichers")

_E = TypeVar("_E", bound="Enricher")


@dataclass(frozen=True)
class Enrichment:
    """Fingerprint segments and tags contributed by one enricher."""

    fingerprint: tuple[str, ...] = ()
    tags: dict[str, str] = field(default_factory=dict)


class Enricher(ABC):
    """Abstract base class for every event category handler.

    Subclasses declare which events they handle through the ``reasons`` and
    ``kinds`` class attributes and must not raise from ``enrich``.
    """

    name: ClassVar[str] = "base"
    reasons: ClassVar[frozenset[str]] = frozenset()
    kinds: ClassVar[frozenset[str]] = frozenset()

    def matches_reason(self, event: RawEvent) -> bool:
        if event.reason not in self.reasons:
            return False
        return not self.kinds or event.involved_object.kind in self.kinds

    def matches_kind(self, event: RawEvent) -> bool:
        return not self.reasons and event.involved_object.kind in self.kinds

    @abstractmethod
    def enrich(self, event: RawEvent) -> Enrichment:
        """Return the fingerprint segments and tags for *event*."""


class DefaultEnricher(Enricher):
    """Fallback for events no specialised enricher claims."""

    name = "default"

    def enrich(self, event: RawEvent) -> Enrichment:
        return Enrichment()


class EnricherRegistry:
    """Ordered collection of enrichers with a guaranteed fallback."""

    def __init__(self, default: Enricher | None = None) -> None:
        self._enrichers: list[Enricher] = []
        self._default = default or DefaultEnricher()

    def register(self, enricher: Enricher) -> Enricher:
        """Add *enricher*; earlier registrations win ties."""
        self._enrichers.append(enricher)
        _logger.debug(
            "enricher_registered",
            enricher=enricher.name,
            reasons=sorted(enricher.reasons),
            kinds=sorted(enricher.kinds),
        )
        return enricher

    def register_class(self, cls: type[_E]) -> type[_E]:
        """Class decorator form of ``register`` for argument-free enrichers."""
        self.register(cls())
        return cls

    def resolve(self, event: RawEvent) -> Enricher:
        """Return the enricher responsible for *event*.  Never returns None."""
        for enricher in self._enrichers:
            if enricher.matches_reason(event):
                return enricher
        for enricher in self._enrichers:
            if enricher.matches_kind(event):
                return enricher
        return self._default

    def __len__(self) -> int:
        return len(self._enrichers)
