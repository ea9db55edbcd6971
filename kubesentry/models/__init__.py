"""Core data structures for kube-sentry."""

from kubesentry.models.alerts import Alert
from kubesentry.models.config import (
    KubeSentryConfig,
    LogConfig,
    MetricsConfig,
    SentryDefaults,
    WatchConfig,
)
from kubesentry.models.events import Level, ObjectReference, RawEvent

__all__ = [
    "Alert",
    "KubeSentryConfig",
    "Level",
    "LogConfig",
    "MetricsConfig",
    "ObjectReference",
    "RawEvent",
    "SentryDefaults",
    "WatchConfig",
]
