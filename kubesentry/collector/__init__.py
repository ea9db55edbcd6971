"""Collector package for kube-sentry.

Submodules
----------
source        -- EventSource protocol and the kubernetes-asyncio implementation.
event_watcher -- EventWatcher: list + watch with resync, feeding the pipeline.
"""

from kubesentry.collector.event_watcher import EventWatcher, WatcherState
from kubesentry.collector.source import EventList, EventSource, KubernetesEventSource, WatchNotification

__all__ = [
    "EventList",
    "EventSource",
    "EventWatcher",
    "KubernetesEventSource",
    "WatchNotification",
    "WatcherState",
]
