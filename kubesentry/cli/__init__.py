"""kube-sentry command-line interface.

Exposes:
    cli -- Click command entry point (registered as ``kube-sentry`` script).
"""

from kubesentry.cli.main import cli

__all__ = ["cli"]
