"""Application bootstrap for kube-sentry.

Wires all components in dependency order and manages the asyncio lifecycle.
Startup order: config → logging → sink → K8s client → recency cache
              → enrichers → pipeline → event watcher → metrics

Shutdown stops the watcher (bounded by a grace period), closes the API
client and flushes the sink exactly once.
"""

from __future__ import annotations

import asyncio
import os
import signal
from pathlib import Path
from typing import TYPE_CHECKING, Any

from kubesentry.config import load_config
from kubesentry.models.config import KubeSentryConfig
from kubesentry.observability.logging import get_logger, setup_logging

if TYPE_CHECKING:
    import structlog

    from kubesentry.collector.event_watcher import EventWatcher
    from kubesentry.sink.base import Sink

_SHUTDOWN_GRACE_SECONDS = 15
_FLUSH_TIMEOUT_SECONDS = 1.0


class _ComponentError(Exception):
    """Raised when a mandatory component fails to start."""

    def __init__(self, component: str, cause: Exception) -> None:
        super().__init__(f"Component '{component}' failed to start: {cause}")
        self.component = component
        self.cause = cause


def in_cluster() -> bool:
    """True when both service-account discovery variables are set."""
    return bool(os.environ.get("KUBERNETES_SERVICE_HOST")) and bool(os.environ.get("KUBERNETES_SERVICE_PORT"))


def resolve_kubeconfig(explicit: str = "") -> str | None:
    """Pick the kubeconfig file to load, or None for in-cluster config.

    Order: explicit path, in-cluster detection, ``~/.kube/config``.
    """
    if explicit:
        return explicit
    if in_cluster():
        return None
    return str(Path.home() / ".kube" / "config")


async def create_api_client(kubeconfig: str = "") -> Any:
    """Load client configuration and return a kubernetes-asyncio ApiClient."""
    from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]
    from kubernetes_asyncio import config as k8s_config  # type: ignore[import-untyped]

    config_file = resolve_kubeconfig(kubeconfig)
    if config_file is None:
        k8s_config.load_incluster_config()
    else:
        await k8s_config.load_kube_config(config_file=config_file)
    return k8s_client.ApiClient()


class KubeSentryApp:
    """Application root.  Owns every component and coordinates their lifecycle.

    ``stop()`` is safe to call on an app that was never started or is
    already stopped; the sink is flushed at most once.
    """

    def __init__(self, kubeconfig: str = "", log_level: str | None = None) -> None:
        self._kubeconfig = kubeconfig
        self._log_level = log_level
        self.config: KubeSentryConfig | None = None

        self._sink: Sink | None = None
        self._api_client: Any = None
        self._watcher: EventWatcher | None = None

        self._running = False
        self._flushed = False
        self._log: structlog.stdlib.BoundLogger | None = None

    @property
    def running(self) -> bool:
        return self._running

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Start all components in dependency order.

        Raises _ComponentError if a mandatory component cannot start; the
        failure is reported to the sink when the sink is already up.
        """
        # --- 1. Configuration -------------------------------------------
        try:
            self.config = load_config(kubeconfig=self._kubeconfig, log_level=self._log_level)
        except ValueError as exc:
            raise _ComponentError("config", exc) from exc

        # --- 2. Logging -------------------------------------------------
        setup_logging(self.config.log.level, self.config.log.format)
        self._log = get_logger("app")
        self._log.info("kube-sentry starting", version=_kubesentry_version())

        # --- 3. Sink ----------------------------------------------------
        self._start_sink()

        try:
            # --- 4. Kubernetes client -----------------------------------
            await self._start_k8s_client()

            # --- 5. Pipeline + watcher ----------------------------------
            await self._start_watcher()
        except _ComponentError as exc:
            assert self._sink is not None
            self._sink.capture_exception(exc.cause)
            raise

        # --- 6. Metrics -------------------------------------------------
        self._start_metrics()

        self._running = True
        self._log.info("kube-sentry started", namespace=self.config.defaults.namespace or "<all>")

    # ------------------------------------------------------------------
    # Component startup helpers
    # ------------------------------------------------------------------

    def _start_sink(self) -> None:
        assert self._log is not None
        assert self.config is not None
        try:
            from kubesentry.sink.sentry import SentrySink

            self._sink = SentrySink(
                dsn=self.config.sentry_dsn,
                environment=self.config.defaults.environment,
                release=self.config.defaults.release,
            )
            self._log.info("sink started", sink=self._sink.sink_name)
        except Exception as exc:
            raise _ComponentError("sink", exc) from exc

    async def _start_k8s_client(self) -> None:
        """Initialise the kubernetes-asyncio client from kubeconfig or in-cluster config."""
        assert self._log is not None
        assert self.config is not None
        self._log.debug("starting k8s client")
        try:
            self._api_client = await create_api_client(self.config.kubeconfig)
            self._log.info("k8s client configured", in_cluster=in_cluster() and not self.config.kubeconfig)
        except Exception as exc:
            raise _ComponentError("k8s_client", exc) from exc

    async def _start_watcher(self) -> None:
        """Build the pipeline and start the event watcher."""
        assert self._log is not None
        assert self.config is not None
        assert self._sink is not None
        self._log.debug("starting event watcher")
        try:
            from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]

            from kubesentry.cache import RecencyCache
            from kubesentry.collector.event_watcher import EventWatcher
            from kubesentry.collector.source import KubernetesEventSource
            from kubesentry.enrichers import build_default_registry
            from kubesentry.pipeline import EventPipeline

            cache = RecencyCache(capacity=self.config.watch.cache_size)
            pipeline = EventPipeline(
                defaults=self.config.defaults,
                registry=build_default_registry(cache),
            )
            watcher = EventWatcher(
                source=KubernetesEventSource(k8s_client.CoreV1Api(self._api_client)),
                pipeline=pipeline,
                sink=self._sink,
                namespace=self.config.defaults.namespace,
                resync_seconds=self.config.watch.resync_seconds,
            )
            await watcher.start()
            self._watcher = watcher
            self._log.info("event watcher started")
        except Exception as exc:
            raise _ComponentError("watcher", exc) from exc

    def _start_metrics(self) -> None:
        """Expose Prometheus metrics if a port is configured.  Non-fatal."""
        assert self._log is not None
        assert self.config is not None
        port = self.config.metrics.port
        if not port:
            return
        try:
            from kubesentry.observability.metrics import start_metrics_server

            start_metrics_server(port)
            self._log.info("metrics server started", port=port)
        except Exception as exc:
            self._log.warning("metrics server failed to start", port=port, error=str(exc))

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    async def stop(self) -> None:
        """Stop the watcher, close the client and flush the sink once."""
        if not self._running and self._log is None:
            return

        log = self._log or get_logger("app")
        log.info("kube-sentry shutting down")
        self._running = False

        if self._watcher is not None:
            try:
                await asyncio.wait_for(self._watcher.stop(), timeout=_SHUTDOWN_GRACE_SECONDS)
            except TimeoutError:
                log.warning("event watcher stop timed out", timeout=_SHUTDOWN_GRACE_SECONDS)
            except Exception as exc:
                log.error("event watcher stop raised an error", error=str(exc))
            self._watcher = None

        await self._stop_k8s_client()

        if self._sink is not None and not self._flushed:
            self._flushed = True
            # Make sure all events are delivered before we terminate.
            self._sink.flush(_FLUSH_TIMEOUT_SECONDS)

        log.info("kube-sentry stopped")

    async def _stop_k8s_client(self) -> None:
        """Close the kubernetes-asyncio ApiClient connection pool."""
        if self._api_client is None:
            return
        log = self._log or get_logger("app")
        try:
            await self._api_client.close()
        except Exception as exc:
            log.debug("k8s client close raised (non-fatal)", error=str(exc))
        self._api_client = None


def _kubesentry_version() -> str:
    from kubesentry import __version__

    return __version__


# ---------------------------------------------------------------------------
# Async entrypoint
# ---------------------------------------------------------------------------


async def main(kubeconfig: str = "", log_level: str | None = None) -> None:
    """Create the app, register OS signals, run until shutdown is requested."""
    app = KubeSentryApp(kubeconfig=kubeconfig, log_level=log_level)
    loop = asyncio.get_running_loop()
    shutdown = asyncio.Event()

    for sig in (signal.SIGTERM, signal.SIGINT, signal.SIGHUP):
        loop.add_signal_handler(sig, shutdown.set)

    try:
        await app.start()
        await shutdown.wait()
    except _ComponentError as exc:
        # A mandatory component failed; log and exit non-zero
        log = get_logger("app")
        log.critical(
            "fatal startup error",
            component=exc.component,
            error=str(exc.cause),
        )
        await app.stop()
        raise SystemExit(1) from exc
    await app.stop()
