"""Entry point for `python -m kubesentry`.

Usage:
    python -m kubesentry [--kubeconfig PATH]
"""

from __future__ import annotations

from kubesentry.cli import cli

cli()
