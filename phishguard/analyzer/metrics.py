"""Analysis metrics tracking.

Counts which classifier tiers fire and how requests end, so thresholds and
list contents can be tuned from real traffic.
"""

import logging
import threading
from collections import defaultdict
from datetime import datetime
from typing import Optional

logger = logging.getLogger(__name__)


class DetectionMetrics:
    """Thread-safe metrics collector for URL analysis."""

    _instance: Optional["DetectionMetrics"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "DetectionMetrics":
        """Singleton pattern for global metrics access."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        if self._initialized:
            return
        self._initialized = True
        self._lock = threading.Lock()
        self._reset_counters()

    def _reset_counters(self) -> None:
        self._rules: dict[str, int] = defaultdict(int)
        self._classifications: dict[str, int] = defaultdict(int)
        self._outcomes: dict[str, int] = defaultdict(int)
        self._total_analyses: int = 0
        self._started: datetime = datetime.now()

    def record_rule(self, rule: str) -> None:
        """Record which classifier tier produced a verdict."""
        with self._lock:
            self._rules[rule] += 1

    def record_classification(self, classification: str) -> None:
        with self._lock:
            self._classifications[classification] += 1

    def record_outcome(self, outcome: str) -> None:
        """Record how an analysis request finished."""
        with self._lock:
            self._outcomes[outcome] += 1
            self._total_analyses += 1

    def get_summary(self) -> dict:
        """Get a summary of all metrics."""
        with self._lock:
            uptime = datetime.now() - self._started
            return {
                "uptime_seconds": int(uptime.total_seconds()),
                "total_analyses": self._total_analyses,
                "rules": dict(self._rules),
                "classifications": dict(self._classifications),
                "outcomes": dict(self._outcomes),
            }

    def reset(self) -> None:
        """Reset all metrics (useful for testing)."""
        with self._lock:
            self._reset_counters()


metrics = DetectionMetrics()
