"""Alert data structures."""

from __future__ import annotations

from dataclasses import dataclass, field

from kubesentry.models.events import Level

PLATFORM = "other"
LOGGER_NAME = "kubernetes"


@dataclass(frozen=True)
class Alert:
    """Normalised alert record, built by the pipeline and consumed by the sink.

    Never mutated after it is handed to the sink. ``fingerprint`` order is
    significant: Sentry groups events by the exact sequence.
    """

    environment: str
    message: str
    level: Level
    timestamp: float
    fingerprint: tuple[str, ...]
    tags: dict[str, str] = field(default_factory=dict)
    extra: dict[str, object] = field(default_factory=dict)
    platform: str = PLATFORM
    logger: str = LOGGER_NAME
