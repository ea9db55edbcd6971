"""Cache layer for kube-sentry.

Submodules:
    recency -- Bounded, lock-protected LRU used to spot repeated conditions.
"""

from kubesentry.cache.recency import DEFAULT_CAPACITY, RecencyCache

__all__ = ["DEFAULT_CAPACITY", "RecencyCache"]
