"""Event pipeline: classifier, alert builder and the processor tying them together."""

from kubesentry.pipeline.builder import apply_enrichment, build_alert
from kubesentry.pipeline.classifier import Classification, classify
from kubesentry.pipeline.processor import EventPipeline

__all__ = [
    "Classification",
    "EventPipeline",
    "apply_enrichment",
    "build_alert",
    "classify",
]
