"""Configuration loading from environment variables.

The Sentry-facing settings keep their historical unprefixed names
(``SENTRY_DSN``, ``ENVIRONMENT``, ``RELEASE``, ``TAGS``, ``NAMESPACE``);
tuning knobs live under the ``KUBESENTRY_`` prefix.
"""

from __future__ import annotations

import os

from kubesentry.errors import TagFormatError
from kubesentry.models.config import (
    KubeSentryConfig,
    LogConfig,
    MetricsConfig,
    SentryDefaults,
    WatchConfig,
)
from kubesentry.observability.logging import LOG_FORMATS


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"KUBESENTRY_{key}", default)


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    val = int(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def _validate_log_format(value: str) -> str:
    if value.lower() not in LOG_FORMATS:
        raise ValueError(f"Invalid log format: {value}. Must be one of {LOG_FORMATS}")
    return value.lower()


def parse_tags(tags: str) -> dict[str, str]:
    """Parse ``"key=value,key=value"`` into a dict.

    An empty string yields no tags.  Every other entry must contain exactly
    one ``=``; later duplicates of a key win.

    Raises:
        TagFormatError: on the first malformed entry.
    """
    result: dict[str, str] = {}
    if not tags:
        return result
    for tag in tags.split(","):
        key_value = tag.split("=")
        if len(key_value) != 2:
            raise TagFormatError(tag)
        key, value = key_value
        result[key] = value
    return result


def load_defaults() -> SentryDefaults:
    """Load the alert defaults shared by every pipeline stage."""
    return SentryDefaults(
        environment=os.environ.get("ENVIRONMENT", ""),
        release=os.environ.get("RELEASE", ""),
        tags=parse_tags(os.environ.get("TAGS", "")),
        namespace=os.environ.get("NAMESPACE", ""),
    )


def load_config(kubeconfig: str = "", log_level: str | None = None) -> KubeSentryConfig:
    """Load configuration from the environment.

    Args:
        kubeconfig: Explicit kubeconfig path from the command line.
        log_level:  Command-line override for ``KUBESENTRY_LOG_LEVEL``.

    Raises:
        TagFormatError: if ``TAGS`` is malformed.
        ValueError:     if a numeric or log-level setting is invalid.
    """
    return KubeSentryConfig(
        sentry_dsn=os.environ.get("SENTRY_DSN", ""),
        kubeconfig=kubeconfig,
        defaults=load_defaults(),
        watch=WatchConfig(
            resync_seconds=_env_int("RESYNC_SECONDS", 30, min_val=1, max_val=3600),
            cache_size=_env_int("CACHE_SIZE", 500, min_val=1),
        ),
        log=LogConfig(
            level=_validate_log_level(log_level or _env("LOG_LEVEL", "info")),
            format=_validate_log_format(_env("LOG_FORMAT", "json")),
        ),
        metrics=MetricsConfig(
            port=_env_int("METRICS_PORT", 0, min_val=0, max_val=65535),
        ),
    )
