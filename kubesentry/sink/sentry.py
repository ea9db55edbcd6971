"""Sentry sink.

Alerts are translated to Sentry event payloads and handed to ``sentry_sdk``,
whose background transport does the buffering and HTTP delivery.
"""

from __future__ import annotations

from typing import Any

import sentry_sdk

from kubesentry.models.alerts import Alert
from kubesentry.observability.logging import get_logger
from kubesentry.sink.base import Sink

_log = get_logger("sink.sentry")


def alert_to_event(alert: Alert) -> dict[str, Any]:
    """Serialise *alert* to a Sentry event payload."""
    return {
        "platform": alert.platform,
        "environment": alert.environment,
        "logger": alert.logger,
        "message": alert.message,
        "level": alert.level.value,
        "timestamp": alert.timestamp,
        "fingerprint": list(alert.fingerprint),
        "tags": dict(alert.tags),
        "extra": dict(alert.extra),
    }


class SentrySink(Sink):
    """Sink backed by the process-wide ``sentry_sdk`` client.

    Args:
        dsn:         Sentry DSN.  When empty the SDK is initialised disabled
                     and every capture is a no-op.
        environment: Default environment for events that do not set one.
        release:     Release identifier attached to every event.
    """

    def __init__(self, dsn: str = "", environment: str = "", release: str = "") -> None:
        if not dsn:
            _log.warning("sentry_dsn_not_set", detail="can not report to Sentry")
        sentry_sdk.init(
            dsn=dsn or None,
            environment=environment or None,
            release=release or None,
            default_integrations=False,
        )

    @property
    def sink_name(self) -> str:
        return "sentry"

    def capture(self, alert: Alert) -> None:
        sentry_sdk.capture_event(alert_to_event(alert))

    def capture_anomaly(self, message: str) -> None:
        sentry_sdk.capture_message(message)

    def capture_exception(self, exc: BaseException) -> None:
        sentry_sdk.capture_exception(exc)

    def flush(self, timeout: float) -> None:
        sentry_sdk.flush(timeout=timeout)
