"""Configuration data structures."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


def _empty_tags() -> Mapping[str, str]:
    return MappingProxyType({})


@dataclass(frozen=True)
class SentryDefaults:
    """Process-wide alert defaults.  Built once at startup, shared read-only."""

    environment: str = ""
    release: str = ""
    tags: Mapping[str, str] = field(default_factory=_empty_tags)
    namespace: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.tags, MappingProxyType):
            object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))


@dataclass(frozen=True)
class WatchConfig:
    """Event watch configuration."""

    resync_seconds: int = 30
    cache_size: int = 500


@dataclass(frozen=True)
class LogConfig:
    """Logging configuration."""

    level: str = "info"
    format: str = "json"


@dataclass(frozen=True)
class MetricsConfig:
    """Prometheus exposition configuration.  Port 0 disables the server."""

    port: int = 0


@dataclass(frozen=True)
class KubeSentryConfig:
    """Top-level kube-sentry configuration."""

    sentry_dsn: str = ""
    kubeconfig: str = ""
    defaults: SentryDefaults = field(default_factory=SentryDefaults)
    watch: WatchConfig = field(default_factory=WatchConfig)
    log: LogConfig = field(default_factory=LogConfig)
    metrics: MetricsConfig = field(default_factory=MetricsConfig)
