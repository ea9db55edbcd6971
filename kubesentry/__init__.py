"""kube-sentry: forward Kubernetes warning events to Sentry."""

__version__ = "0.3.0"
