"""Alert sinks.

Exports:
    Sink        -- ABC for alert destinations.
    SentrySink  -- sentry_sdk-backed sink used in production.
"""

from kubesentry.sink.base import Sink
from kubesentry.sink.sentry import SentrySink, alert_to_event

__all__ = ["SentrySink", "Sink", "alert_to_event"]
