"""Exception hierarchy for kube-sentry."""

from __future__ import annotations


class KubeSentryError(Exception):
    """Base class for all kube-sentry errors."""


class TagFormatError(KubeSentryError, ValueError):
    """Raised when a default tag string entry is not a ``key=value`` pair."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"invalid tag '{tag}', expected key=value pair")
        self.tag = tag


class MalformedEventError(KubeSentryError):
    """Raised when a watch notification does not carry a v1.Event payload."""
