"""Logging and metrics for kube-sentry."""
