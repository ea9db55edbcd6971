"""Command-line entry point."""

from __future__ import annotations

import asyncio

import click

from kubesentry import __version__


@click.command(name="kube-sentry")
@click.option(
    "--kubeconfig",
    default="",
    help="Kubeconfig file. Defaults to in-cluster config or ~/.kube/config.",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Overrides KUBESENTRY_LOG_LEVEL.",
)
@click.version_option(__version__, prog_name="kube-sentry")
def cli(kubeconfig: str, log_level: str | None) -> None:
    """Forward Kubernetes warning events to Sentry."""
    from kubesentry.app import main

    asyncio.run(main(kubeconfig=kubeconfig, log_level=log_level))
