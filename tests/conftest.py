"""
Cognitive Core Test Suite - Shared Pytest Fixtures

This conftest.py provides fixtures for all test categories including:
- A deterministic clock for timestamps
- Action / record factories
- History, classifier and engine instances

Usage:
    pytest tests/ -v -s
"""

from typing import Any, Dict, Optional

import pytest

from cognitive_core.config import CognitiveConfig
from cognitive_core.engine import CognitiveEngine
from cognitive_core.models.classifier import BehavioralClassifier
from cognitive_core.processors.history import SessionHistory
from cognitive_core.schemas.inputs import Action, ActionRecord


# =============================================================================
# Clock
# =============================================================================

class FakeClock:
    """Monotonic millisecond clock that advances a fixed step per read."""

    def __init__(self, start: float = 1000.0, step: float = 100.0) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return value


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# =============================================================================
# Factories
# =============================================================================

def make_record(
    index: int,
    action_type: str = "navigation/NAVIGATE",
    success: bool = True,
    duration_ms: Optional[float] = None,
    timestamp: Optional[float] = None,
) -> ActionRecord:
    """Build an ActionRecord with a predictable id and timestamp."""
    return ActionRecord(
        id=str(index),
        timestamp=timestamp if timestamp is not None else index * 100.0,
        type=action_type,
        success=success,
        duration_ms=duration_ms,
    )


def make_action(
    action_type: str = "navigation/NAVIGATE",
    success: Optional[bool] = True,
    duration_ms: Optional[float] = None,
    payload: Optional[Dict[str, Any]] = None,
    **kwargs: Any,
) -> Action:
    """Build a dispatchable Action."""
    return Action(
        type=action_type,
        success=success,
        duration_ms=duration_ms,
        payload=payload or {},
        **kwargs,
    )


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def action_factory():
    return make_action


# =============================================================================
# Component Fixtures
# =============================================================================

@pytest.fixture
def config() -> CognitiveConfig:
    return CognitiveConfig()


@pytest.fixture
def history() -> SessionHistory:
    return SessionHistory(capacity=100)


@pytest.fixture
def classifier(config, clock) -> BehavioralClassifier:
    return BehavioralClassifier(config, clock=clock)


@pytest.fixture
def engine(config, clock) -> CognitiveEngine:
    engine = CognitiveEngine(config, clock=clock)
    yield engine
    engine.destroy()
