"""
Integration tests for the full pipeline:
CognitiveEngine -> Store -> BehavioralClassifier -> reducers -> listeners

Run with: pytest tests/integration/ -v -s
"""

import logging

import pytest

from cognitive_core.config import CognitiveConfig
from cognitive_core.engine import CognitiveEngine, EngineDestroyedError
from cognitive_core.reducers import cognitive_reducer
from cognitive_core.reducers.navigation import navigate
from cognitive_core.schemas.outputs import STATE_CHANGE, CognitiveState
from cognitive_core.store import MalformedActionError


FAST = {"type": "navigation/NAVIGATE", "success": True, "duration_ms": 150}


def state_changes(engine):
    entries = engine.get_state()["action_log"].entries
    return [entry.action for entry in entries if entry.action.type == STATE_CHANGE]


# =============================================================================
# Scenarios
# =============================================================================

class TestScenarios:
    """End-to-end behavior through the store."""

    def test_sustained_fast_navigation_concentrates(self, engine):
        for _ in range(20):
            engine.dispatch(FAST)

        cognitive = engine.get_state()["cognitive"]
        assert cognitive.current_state == CognitiveState.CONCENTRATED
        assert cognitive.previous_state == CognitiveState.NEUTRAL
        assert cognitive.confidence == pytest.approx(0.5)

        metrics = engine.get_metrics()
        assert metrics.error_rate == 0.0
        assert metrics.average_duration == pytest.approx(150.0)
        assert len(state_changes(engine)) == 1

        print(f"\n✅ Concentrated after 20 actions (confidence={cognitive.confidence})")

    def test_error_burst_frustrates(self, engine):
        outcomes = [True, True, False, False, False, True, False, True, False, True]
        for success in outcomes:
            engine.dispatch({"type": "navigation/NAVIGATE", "success": success})

        cognitive = engine.get_state()["cognitive"]
        assert cognitive.current_state == CognitiveState.FRUSTRATED
        assert cognitive.signals.frustrated == 3
        assert engine.classifier.signals.frustrated == 6

    def test_malformed_dispatch_changes_nothing(self, engine):
        for _ in range(3):
            engine.dispatch(FAST)
        calls = []
        engine.subscribe(lambda: calls.append(1))
        before = engine.get_state()

        with pytest.raises(MalformedActionError):
            engine.dispatch({})

        assert len(engine.classifier.history) == 3
        assert calls == []
        assert engine.get_state() == before

    @pytest.mark.parametrize("extra", [
        {"duration_ms": -5},
        {"duration_ms": float("nan")},
        {"success": "maybe"},
        {"payload": None},
        {"timestamp": "soon"},
        {"id": 42},
    ])
    def test_bad_optional_field_is_recorded(self, engine, extra):
        engine.dispatch({"type": "navigation/NAVIGATE", **extra})

        assert len(engine.classifier.history) == 1
        assert engine.get_state()["action_log"].total_actions == 1

    def test_adapter_toggles_do_not_classify(self, engine):
        for action_type in (
            "@@input/KEYBOARD_ENABLED",
            "@@input/GESTURE_ENABLED",
            "@@input/VOICE_ENABLED",
            "@@input/VOICE_LISTENING_STARTED",
            "@@input/VOICE_LISTENING_STOPPED",
            "@@input/GESTURE_DISABLED",
            "@@input/RESET",
        ):
            engine.dispatch({"type": action_type})

        assert len(engine.classifier.history) == 0
        assert engine.current_state == CognitiveState.NEUTRAL
        assert engine.get_state()["input"].voice.is_listening is False

    def test_zero_window_metrics_are_empty(self, engine):
        for _ in range(5):
            engine.dispatch(FAST)

        assert engine.get_metrics(0).total_actions == 0
        assert engine.get_metrics().total_actions == 5

    def test_two_actions_never_classify(self, clock):
        config = CognitiveConfig(frustrated_threshold=1, concentrated_threshold=1)
        engine = CognitiveEngine(config, clock=clock)

        engine.dispatch({"type": "x", "success": False})
        engine.dispatch({"type": "x", "success": False})

        assert engine.current_state == CognitiveState.NEUTRAL
        assert state_changes(engine) == []

    def test_eviction_keeps_metrics_bounded(self, clock):
        config = CognitiveConfig(history_capacity=10, metrics_window=5, learning_window=10)
        engine = CognitiveEngine(config, clock=clock)

        for i in range(25):
            engine.dispatch({"type": "navigation/NAVIGATE", "success": i >= 20})

        stats = engine.classifier.history.get_stats()
        assert stats["current_size"] == 10
        assert stats["total_recorded"] == 25
        assert engine.get_metrics().error_rate == 0.0

    def test_metrics_read_is_idempotent(self, engine):
        for i in range(6):
            engine.dispatch({"type": f"t{i % 2}", "success": i % 3 != 0, "duration_ms": 100 * i})

        assert engine.get_metrics() == engine.get_metrics()
        assert engine.get_metrics(4) == engine.get_metrics(4)

    def test_input_adapters_drive_navigation_and_classifier(self, engine):
        for _ in range(3):
            engine.dispatch(navigate("right", "gesture", metadata={"duration": 120}, success=True))

        state = engine.get_state()
        assert state["navigation"].current_card == 3
        assert state["navigation"].last_source == "gesture"
        assert engine.get_metrics().average_duration == pytest.approx(120.0)


# =============================================================================
# State Change Contract
# =============================================================================

class TestStateChangeContract:
    """State-change actions are replayable and observable."""

    def test_replay_reproduces_slice(self, engine):
        for _ in range(7):
            engine.dispatch(FAST)

        captured = state_changes(engine)
        assert len(captured) == 1

        replayed = cognitive_reducer(None, captured[0])
        live = engine.get_state()["cognitive"]

        assert replayed.current_state == live.current_state
        assert replayed.confidence == live.confidence

    def test_subscribers_see_state_change(self, engine):
        seen = []
        engine.subscribe(lambda: seen.append(engine.get_state()["cognitive"].current_state))

        for _ in range(7):
            engine.dispatch(FAST)

        # One notification per action plus one for the state change
        assert len(seen) == 8
        assert seen[-2] == CognitiveState.NEUTRAL
        assert seen[-1] == CognitiveState.CONCENTRATED

    def test_extra_interceptors_see_state_change(self, clock):
        seen = []

        def spy(api, action, call_next):
            seen.append(action.type)
            return call_next(action)

        engine = CognitiveEngine(clock=clock, extra_interceptors=[spy])
        for _ in range(7):
            engine.dispatch(FAST)

        assert seen.count(STATE_CHANGE) == 1
        assert seen[-1] == STATE_CHANGE


# =============================================================================
# Engine Control
# =============================================================================

class TestEngineControl:
    """Tests for force_state, reset, snapshot and destroy."""

    def test_force_state_updates_slice(self, engine):
        action = engine.force_state(CognitiveState.EXPLORING)

        assert action.type == STATE_CHANGE
        assert engine.get_state()["cognitive"].current_state == CognitiveState.EXPLORING
        assert engine.force_state(CognitiveState.EXPLORING) is None

    def test_reset(self, engine):
        for _ in range(7):
            engine.dispatch(FAST)
        engine.reset()

        assert engine.current_state == CognitiveState.NEUTRAL
        assert engine.get_state()["cognitive"].current_state == CognitiveState.NEUTRAL
        assert len(engine.classifier.history) == 0

    def test_snapshot_is_plain_data(self, engine):
        engine.dispatch(FAST)
        snapshot = engine.snapshot()

        assert set(snapshot) == {"cognitive", "navigation", "input", "action_log"}
        assert snapshot["cognitive"]["current_state"] == "neutral"
        assert snapshot["action_log"]["total_actions"] == 1

    def test_destroy(self, clock):
        engine = CognitiveEngine(clock=clock)
        calls = []
        engine.subscribe(lambda: calls.append(1))
        engine.destroy()
        engine.destroy()

        assert engine.store.listener_count == 0
        with pytest.raises(EngineDestroyedError):
            engine.dispatch(FAST)

    def test_engines_are_isolated(self, clock):
        first = CognitiveEngine(clock=clock)
        second = CognitiveEngine(clock=clock)

        for _ in range(7):
            first.dispatch(FAST)

        assert first.current_state == CognitiveState.CONCENTRATED
        assert second.current_state == CognitiveState.NEUTRAL
        assert len(second.classifier.history) == 0

    def test_debug_mode_logs_actions(self, clock, caplog):
        engine = CognitiveEngine(CognitiveConfig(debug_mode=True), clock=clock)

        with caplog.at_level(logging.DEBUG, logger="cognitive_core"):
            engine.dispatch(FAST)

        assert "Action: navigation/NAVIGATE" in caplog.text
        assert "Action recorded" in caplog.text
