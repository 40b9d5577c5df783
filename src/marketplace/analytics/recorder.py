"""Analytics recorder abstraction: where checkout writes financial snapshots.

The repository recorder persists a SellerAnalytics aggregate through the
current unit of work, so a failed checkout leaves no snapshot behind.
Selected via the ANALYTICS_RECORDER environment variable.
"""

import os
from abc import ABC, abstractmethod

from protean.utils.globals import current_domain

from marketplace.analytics.seller_analytics import SellerAnalytics


class AnalyticsRecorder(ABC):
    """Abstract sink for per-order financial snapshots."""

    @abstractmethod
    def record(self, order_id: str, seller_id: str, breakdown) -> str:
        """Persist a snapshot of ``breakdown`` for the order and return its id."""
        ...


class RepositoryAnalyticsRecorder(AnalyticsRecorder):
    def record(self, order_id: str, seller_id: str, breakdown) -> str:
        analytics = SellerAnalytics.snapshot(order_id, seller_id, breakdown)
        current_domain.repository_for(SellerAnalytics).add(analytics)
        return str(analytics.id)


_recorder_instance = None


def get_analytics_recorder() -> AnalyticsRecorder:
    """Return the configured analytics recorder (singleton)."""
    global _recorder_instance
    if _recorder_instance is None:
        adapter = os.environ.get("ANALYTICS_RECORDER", "repository")
        if adapter == "repository":
            _recorder_instance = RepositoryAnalyticsRecorder()
        else:
            raise ValueError(f"Unknown analytics recorder: {adapter}")
    return _recorder_instance


def reset_analytics_recorder():
    """Reset the recorder singleton (useful for testing)."""
    global _recorder_instance
    _recorder_instance = None
