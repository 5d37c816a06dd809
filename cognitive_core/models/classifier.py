"""
Cognitive Core Behavioral Classifier

Turns the raw action stream into a small, stable state label with a
confidence value. Installed as the first interceptor of the store:

    1. Record the action in session history (before reducers run)
    2. Let the action continue down the pipeline
    3. Analyze the freshest metrics window
    4. On a state change, dispatch ``cognitive/STATE_CHANGE`` through the
       same store, so reducers and subscribers see it like any other action

Analysis is event-driven: it runs once per recorded action, never on a
timer. Cost is O(metrics window) per action.
"""

from __future__ import annotations

import logging
import math
import time
import uuid
from typing import Any, Callable, Dict, List, Optional, Sequence

from cognitive_core.config import CognitiveConfig
from cognitive_core.models.analyzers import (
    SIGNAL_NAMES,
    SignalAnalyzer,
    SignalTracker,
    default_analyzers,
)
from cognitive_core.processors.history import SessionHistory
from cognitive_core.schemas.inputs import Action, ActionRecord
from cognitive_core.schemas.outputs import (
    STATE_CHANGE,
    CognitiveState,
    SessionMetrics,
    StateChangePayload,
)


logger = logging.getLogger(__name__)


# Substrings that mark an action type as a failure when success is not explicit
_FAILURE_MARKERS = ("error", "fail")

CONFIDENCE_SCALE = 10.0


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


def state_change(payload: StateChangePayload) -> Action:
    """Action creator for a cognitive state change."""
    return Action(
        type=STATE_CHANGE,
        payload=payload.model_dump(mode="json"),
        success=True,
        timestamp=payload.timestamp,
    )


def infer_success(action_type: str) -> bool:
    """
    Fallback success inference from the type string.

    Misclassifies types such as "error_recovery_succeeded"; producers should
    set ``success`` explicitly instead of relying on this.
    """
    lowered = action_type.lower()
    return not any(marker in lowered for marker in _FAILURE_MARKERS)


def _coerce_duration(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return float(value)


class BehavioralClassifier:
    """
    Hysteresis-based state machine over session history.

    One instance is owned by one pipeline; its history and signal counters
    are never shared.

    Attributes:
        config: Thresholds and window sizes.
        _history: Bounded record buffer.
        _signals: Reset-on-break counters per candidate state.
        _current_state: The single current CognitiveState.
    """

    def __init__(
        self,
        config: Optional[CognitiveConfig] = None,
        history: Optional[SessionHistory] = None,
        clock: Optional[Callable[[], float]] = None,
        analyzers: Optional[Sequence[SignalAnalyzer]] = None,
    ) -> None:
        self.config = config or CognitiveConfig()
        self._history = history or SessionHistory(self.config.history_capacity)
        self._clock = clock or monotonic_ms

        if analyzers is None:
            analyzers = default_analyzers(
                self.config.learning_window,
                self.config.learning_improvement_threshold,
            )
        for analyzer in analyzers:
            if analyzer.signal not in SIGNAL_NAMES:
                raise ValueError(f"Analyzer {analyzer!r} feeds unknown signal {analyzer.signal!r}")
        self._analyzers: List[SignalAnalyzer] = list(analyzers)

        self._signals = SignalTracker()
        self._current_state = CognitiveState.NEUTRAL
        self._previous_state = CognitiveState.NEUTRAL
        self._confidence: float = 0.0
        self._last_transition_ts: Optional[float] = None

        # Checked in order; the first signal at its threshold wins
        self._priority = (
            (CognitiveState.FRUSTRATED, "frustrated", self.config.frustrated_threshold),
            (CognitiveState.CONCENTRATED, "concentrated", self.config.concentrated_threshold),
            (CognitiveState.EXPLORING, "exploring", self.config.exploring_threshold),
            (CognitiveState.LEARNING, "learning", self.config.learning_threshold),
        )

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def history(self) -> SessionHistory:
        return self._history

    @property
    def current_state(self) -> CognitiveState:
        return self._current_state

    @property
    def previous_state(self) -> CognitiveState:
        return self._previous_state

    @property
    def confidence(self) -> float:
        return self._confidence

    @property
    def signals(self):
        """Snapshot copy of the signal counters."""
        return self._signals.snapshot()

    def get_metrics(self, window: Optional[int] = None) -> SessionMetrics:
        if window is None:
            window = self.config.metrics_window
        return self._history.get_metrics(window)

    def get_snapshot(self) -> Dict[str, Any]:
        """Diagnostic view of the classifier (JSON-serialisable)."""
        return {
            "current_state": self._current_state.value,
            "previous_state": self._previous_state.value,
            "confidence": self._confidence,
            "last_transition_ts": self._last_transition_ts,
            "signals": self._signals.snapshot().model_dump(),
            "metrics": self.get_metrics().model_dump(by_alias=True),
            "history": self._history.get_stats(),
            "error_clusters": self._history.get_error_clusters().total_clusters,
        }

    # -------------------------------------------------------------------------
    # Interceptor
    # -------------------------------------------------------------------------

    def observes(self, action: Action) -> bool:
        """Own state changes and ``@@`` control actions are not interactions."""
        return action.type != STATE_CHANGE and not action.type.startswith("@@")

    def __call__(self, api, action: Action, call_next: Callable[[Action], Any]) -> Any:
        if not self.observes(action):
            return call_next(action)

        self.record_action(action)
        result = call_next(action)

        change = self.analyze()
        if change is not None:
            api.dispatch(state_change(change))

        return result

    # -------------------------------------------------------------------------
    # Recording
    # -------------------------------------------------------------------------

    def record_action(self, action: Action) -> ActionRecord:
        """
        Convert an action into an ActionRecord and append it to history.

        Never raises for malformed payloads: absent or ill-typed fields fall
        back to safe defaults (missing duration stays missing).
        """
        payload = action.payload if isinstance(action.payload, dict) else {}
        metadata = payload.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}

        if action.success is not None:
            success = action.success
        elif isinstance(payload.get("success"), bool):
            success = payload["success"]
        else:
            success = infer_success(action.type)

        if action.duration_ms is not None:
            duration_ms = action.duration_ms
        else:
            duration_ms = _coerce_duration(metadata.get("duration", metadata.get("duration_ms")))

        record_id = action.id or metadata.get("actionId") or uuid.uuid4().hex
        timestamp = action.timestamp if action.timestamp is not None else self._clock()

        record = ActionRecord(
            id=str(record_id),
            timestamp=timestamp,
            type=action.type,
            success=success,
            duration_ms=duration_ms,
            metadata=dict(metadata),
        )
        self._history.add(record)

        if self.config.debug_mode:
            logger.debug(
                f"Action recorded: type={record.type} success={record.success} "
                f"duration_ms={record.duration_ms}"
            )

        return record

    # -------------------------------------------------------------------------
    # Analysis
    # -------------------------------------------------------------------------

    def analyze(self) -> Optional[StateChangePayload]:
        """
        Run all analyzers over the current window and transition if needed.

        Returns:
            StateChangePayload when the state changed, None otherwise
            (including when there is not enough data to classify).
        """
        metrics = self._history.get_metrics(self.config.metrics_window)

        if metrics.total_actions < self.config.min_actions:
            if self.config.debug_mode:
                logger.debug(
                    f"Not enough actions for analysis "
                    f"(need {self.config.min_actions}+, have {metrics.total_actions})"
                )
            return None

        for analyzer in self._analyzers:
            try:
                holds = bool(analyzer.holds(metrics, self._history))
            except Exception:
                logger.exception(f"Analyzer {analyzer!r} failed; treating as no signal this cycle")
                holds = False
            self._signals.update(analyzer.signal, holds)

        if self.config.debug_mode:
            logger.debug(
                f"Analysis: error_rate={metrics.error_rate:.2f} "
                f"avg_duration={metrics.average_duration:.1f} "
                f"variety={metrics.action_variety} signals={self._signals.snapshot().model_dump()}"
            )

        target = self._determine_state()
        if target == self._current_state:
            return None

        return self._transition(target, metrics)

    def _determine_state(self) -> CognitiveState:
        for state, signal, threshold in self._priority:
            if self._signals.get(signal) >= threshold:
                return state
        return CognitiveState.NEUTRAL

    def _transition(self, target: CognitiveState, metrics: SessionMetrics) -> StateChangePayload:
        previous = self._current_state
        timestamp = self._clock()

        self._previous_state = previous
        self._current_state = target
        self._confidence = min(self._signals.strongest() / CONFIDENCE_SCALE, 1.0)
        self._last_transition_ts = timestamp

        logger.info(
            f"Cognitive state transition: {previous.value} -> {target.value} "
            f"(confidence={self._confidence:.2f})"
        )

        return StateChangePayload(
            previous_state=previous,
            new_state=target,
            confidence=self._confidence,
            signals=self._signals.snapshot(),
            metrics=metrics,
            timestamp=timestamp,
        )

    # -------------------------------------------------------------------------
    # Control
    # -------------------------------------------------------------------------

    def force_state(self, state: CognitiveState) -> Optional[StateChangePayload]:
        """
        Transition directly to ``state`` (debugging and tests).

        The caller is responsible for dispatching the returned payload.
        """
        state = CognitiveState(state)
        if state == self._current_state:
            return None
        logger.info(f"Forcing cognitive state: {state.value}")
        return self._transition(state, self.get_metrics())

    def reset(self) -> None:
        """Clear history and signals; return to neutral."""
        self._history.clear()
        self._signals.reset()
        self._current_state = CognitiveState.NEUTRAL
        self._previous_state = CognitiveState.NEUTRAL
        self._confidence = 0.0
        self._last_transition_ts = None
        logger.info("Behavioral classifier reset")
