"""Sink interface.

A sink receives finished alerts.  Delivery is the sink's responsibility once
``capture`` returns; the pipeline never waits for it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from kubesentry.models.alerts import Alert


class Sink(ABC):
    """Abstract base class for alert sinks."""

    @property
    @abstractmethod
    def sink_name(self) -> str:
        """Identifier used in logs."""

    @abstractmethod
    def capture(self, alert: Alert) -> None:
        """Queue *alert* for delivery.  Must not block."""

    @abstractmethod
    def capture_anomaly(self, message: str) -> None:
        """Report a notification the pipeline could not interpret."""

    @abstractmethod
    def capture_exception(self, exc: BaseException) -> None:
        """Report an unexpected error (startup failures, pipeline bugs)."""

    @abstractmethod
    def flush(self, timeout: float) -> None:
        """Block for at most *timeout* seconds while buffered alerts drain."""
