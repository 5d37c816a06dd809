"""
Cognitive Core Analyzers

Pure heuristic predicates over session metrics, plus the hysteresis
counters they drive.

Each analyzer is STATELESS and DETERMINISTIC: ``holds(metrics, history)``
answers whether its condition is met for the current window. The
SignalTracker turns a run of consecutive "yes" answers into a signal
strength; any "no" resets the run.
"""

from typing import Dict, List, Sequence

from cognitive_core.processors.history import SessionHistory
from cognitive_core.schemas.inputs import ActionRecord
from cognitive_core.schemas.outputs import CognitiveSignals, SessionMetrics


SIGNAL_NAMES = ("frustrated", "concentrated", "exploring", "learning")


# =============================================================================
# Analyzers
# =============================================================================

class SignalAnalyzer:
    """Base class: one predicate feeding one named signal."""

    signal: str = ""

    def holds(self, metrics: SessionMetrics, history: SessionHistory) -> bool:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(signal={self.signal!r})"


class FrustrationAnalyzer(SignalAnalyzer):
    """
    Frustrated pattern:
        - error rate above 40%
        - at least 3 failures in the window
    """

    signal = "frustrated"

    ERROR_RATE: float = 0.4
    MIN_ERRORS: int = 3

    def holds(self, metrics: SessionMetrics, history: SessionHistory) -> bool:
        return metrics.error_rate > self.ERROR_RATE and metrics.recent_errors >= self.MIN_ERRORS


class ConcentrationAnalyzer(SignalAnalyzer):
    """
    Concentrated pattern:
        - fast actions (average duration under 400ms)
        - error rate under 10%
    """

    signal = "concentrated"

    MAX_AVERAGE_DURATION_MS: float = 400.0
    MAX_ERROR_RATE: float = 0.1

    def holds(self, metrics: SessionMetrics, history: SessionHistory) -> bool:
        return (
            metrics.average_duration < self.MAX_AVERAGE_DURATION_MS
            and metrics.error_rate < self.MAX_ERROR_RATE
        )


class ExplorationAnalyzer(SignalAnalyzer):
    """
    Exploring pattern:
        - at least 3 distinct action types
        - error rate under 50%
    """

    signal = "exploring"

    MIN_VARIETY: int = 3
    MAX_ERROR_RATE: float = 0.5

    def holds(self, metrics: SessionMetrics, history: SessionHistory) -> bool:
        return metrics.action_variety >= self.MIN_VARIETY and metrics.error_rate < self.MAX_ERROR_RATE


class LearningAnalyzer(SignalAnalyzer):
    """
    Learning pattern: the success rate of the newest half of the window
    beats the oldest half by more than ``improvement_threshold``.

    The window must be full; a partial window never counts as learning.
    """

    signal = "learning"

    def __init__(self, window: int = 20, improvement_threshold: float = 0.15) -> None:
        if window < 2:
            raise ValueError(f"learning window must be >= 2, got {window}")
        self.window = window
        self.improvement_threshold = improvement_threshold

    def improvement(self, records: Sequence[ActionRecord]) -> float:
        mid = len(records) // 2
        older, newer = records[:mid], records[mid:]
        return _success_rate(newer) - _success_rate(older)

    def holds(self, metrics: SessionMetrics, history: SessionHistory) -> bool:
        records = history.get_latest(self.window)
        if len(records) < self.window:
            return False
        return self.improvement(records) > self.improvement_threshold


def _success_rate(records: Sequence[ActionRecord]) -> float:
    if not records:
        return 0.0
    return sum(1 for record in records if record.success) / len(records)


def default_analyzers(
    learning_window: int = 20,
    learning_improvement_threshold: float = 0.15,
) -> List[SignalAnalyzer]:
    return [
        FrustrationAnalyzer(),
        ConcentrationAnalyzer(),
        ExplorationAnalyzer(),
        LearningAnalyzer(learning_window, learning_improvement_threshold),
    ]


# =============================================================================
# Hysteresis Counters
# =============================================================================

class SignalTracker:
    """
    Per-state counters with reset-on-break hysteresis.

    Rules:
        - condition holds   -> counter += 1
        - condition broken  -> counter = 0
    """

    def __init__(self) -> None:
        self._counters: Dict[str, int] = {name: 0 for name in SIGNAL_NAMES}

    def update(self, signal: str, holds: bool) -> int:
        """Advance or reset one counter; returns its new value."""
        if signal not in self._counters:
            raise KeyError(f"Unknown signal: {signal!r}")
        self._counters[signal] = self._counters[signal] + 1 if holds else 0
        return self._counters[signal]

    def get(self, signal: str) -> int:
        return self._counters[signal]

    def strongest(self) -> int:
        return max(self._counters.values())

    def snapshot(self) -> CognitiveSignals:
        return CognitiveSignals(**self._counters)

    def reset(self) -> None:
        for name in self._counters:
            self._counters[name] = 0
