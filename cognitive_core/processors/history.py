"""
Cognitive Core Session History

Bounded in-memory buffer of interaction records for the current session.
Computes sliding-window metrics over the most recent records; these feed
the analyzers in the behavioral classifier.

Usage:
    history = SessionHistory(capacity=100)
    history.add(record)
    metrics = history.get_metrics(20)
"""

from collections import deque
from typing import Any, Deque, Dict, List

from cognitive_core.schemas.inputs import ActionRecord
from cognitive_core.schemas.outputs import ErrorClusterSummary, SessionMetrics


# =============================================================================
# Constants
# =============================================================================

DEFAULT_CAPACITY = 100

# Maximum gap between two failures for them to belong to the same cluster
ERROR_CLUSTER_WINDOW_MS = 5000.0


# =============================================================================
# Session History
# =============================================================================

class SessionHistory:
    """
    Circular buffer of ActionRecords with FIFO eviction.

    All read methods are pure functions of the current buffer contents:
    calling them repeatedly without adding records returns equal results.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._buffer: Deque[ActionRecord] = deque(maxlen=capacity)
        self._total_recorded: int = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._buffer)

    def add(self, record: ActionRecord) -> None:
        """Append a record, evicting the oldest one when the buffer is full."""
        self._buffer.append(record)
        self._total_recorded += 1

    def get_latest(self, count: int) -> List[ActionRecord]:
        """
        Return the most recent ``count`` records, oldest first.

        ``count`` is clamped to the buffer size; zero or negative returns [].
        """
        if count <= 0:
            return []
        if count >= len(self._buffer):
            return list(self._buffer)
        return list(self._buffer)[-count:]

    def get_all(self) -> List[ActionRecord]:
        return list(self._buffer)

    def get_metrics(self, window_size: int) -> SessionMetrics:
        """
        Calculate metrics over the latest ``window_size`` records.

        Args:
            window_size: Number of recent records to analyze.

        Returns:
            SessionMetrics. An empty window yields all-zero metrics.

        Note:
            Records without a duration are excluded from the average
            instead of being counted as zero.
        """
        window = self.get_latest(window_size)
        total = len(window)

        if total == 0:
            return SessionMetrics()

        errors = sum(1 for record in window if not record.success)

        durations = [record.duration_ms for record in window if record.duration_ms is not None]
        average_duration = sum(durations) / len(durations) if durations else 0.0

        action_variety = len({record.type for record in window})

        time_window = window[-1].timestamp - window[0].timestamp if total > 1 else 0.0

        return SessionMetrics(
            error_rate=errors / total,
            recent_errors=errors,
            average_duration=average_duration,
            action_variety=action_variety,
            total_actions=total,
            time_window=time_window,
        )

    def get_error_clusters(self, time_window_ms: float = ERROR_CLUSTER_WINDOW_MS) -> ErrorClusterSummary:
        """
        Group failures that happened close together in time.

        Consecutive failures separated by at most ``time_window_ms`` share a
        cluster. Only clusters with two or more failures are reported.
        """
        errors = [record for record in self._buffer if not record.success]
        if not errors:
            return ErrorClusterSummary()

        clusters: List[List[ActionRecord]] = []
        current = [errors[0]]

        for previous, record in zip(errors, errors[1:]):
            if record.timestamp - previous.timestamp <= time_window_ms:
                current.append(record)
            else:
                if len(current) > 1:
                    clusters.append(current)
                current = [record]

        if len(current) > 1:
            clusters.append(current)

        sizes = [len(cluster) for cluster in clusters]
        return ErrorClusterSummary(
            clusters=clusters,
            max_cluster_size=max(sizes, default=0),
            average_cluster_size=sum(sizes) / len(sizes) if sizes else 0.0,
            total_clusters=len(clusters),
        )

    def get_stats(self) -> Dict[str, Any]:
        """Buffer occupancy; ``total_recorded`` counts evicted records too."""
        return {
            "capacity": self._capacity,
            "current_size": len(self._buffer),
            "total_recorded": self._total_recorded,
            "is_full": len(self._buffer) >= self._capacity,
        }

    def clear(self) -> None:
        """Empty the buffer (used on classifier reset)."""
        self._buffer.clear()
        self._total_recorded = 0
