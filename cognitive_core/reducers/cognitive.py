"""
Cognitive Slice Reducer

Projects ``cognitive/STATE_CHANGE`` actions into a queryable, serialisable
sub-state. Replaying a captured state-change action through this reducer
alone reproduces the state and confidence the live pipeline produced.
"""

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cognitive_core.schemas.inputs import Action
from cognitive_core.schemas.outputs import (
    STATE_CHANGE,
    CognitiveSignals,
    CognitiveState,
    SessionMetrics,
)


logger = logging.getLogger(__name__)

COGNITIVE_RESET = "@@cognitive/RESET"


class CognitiveSlice(BaseModel):
    """Cognitive sub-state of the store."""
    model_config = ConfigDict(frozen=True)

    current_state: CognitiveState = CognitiveState.NEUTRAL
    previous_state: CognitiveState = CognitiveState.NEUTRAL
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    last_update: Optional[float] = None
    signals: CognitiveSignals = Field(default_factory=CognitiveSignals)
    metrics: Optional[SessionMetrics] = None


def cognitive_reset() -> Action:
    return Action(type=COGNITIVE_RESET)


def _apply_state_change(state: CognitiveSlice, action: Action) -> CognitiveSlice:
    payload: Dict[str, Any] = action.payload

    # Classifier payloads carry new_state; hand-written ones may use current_state
    raw_state = payload.get("new_state", payload.get("current_state"))
    try:
        new_state = CognitiveState(raw_state)
    except ValueError:
        logger.warning(f"Ignoring state change with unknown state {raw_state!r}")
        return state

    previous_state = state.current_state
    if payload.get("previous_state") is not None:
        try:
            previous_state = CognitiveState(payload["previous_state"])
        except ValueError:
            pass

    try:
        confidence = min(max(float(payload.get("confidence", 0.0)), 0.0), 1.0)
    except (TypeError, ValueError):
        confidence = 0.0

    signals = state.signals
    if isinstance(payload.get("signals"), dict):
        try:
            signals = CognitiveSignals.model_validate(payload["signals"])
        except ValidationError:
            logger.warning("Ignoring malformed signals in state change")

    metrics = state.metrics
    if isinstance(payload.get("metrics"), dict):
        try:
            metrics = SessionMetrics.model_validate(payload["metrics"])
        except ValidationError:
            logger.warning("Ignoring malformed metrics in state change")

    timestamp = payload.get("timestamp", action.timestamp)

    return CognitiveSlice(
        current_state=new_state,
        previous_state=previous_state,
        confidence=confidence,
        last_update=timestamp if isinstance(timestamp, (int, float)) else action.timestamp,
        signals=signals,
        metrics=metrics,
    )


def cognitive_reducer(state: Optional[CognitiveSlice], action: Action) -> CognitiveSlice:
    if state is None:
        state = CognitiveSlice()

    if action.type == STATE_CHANGE:
        return _apply_state_change(state, action)

    if action.type == COGNITIVE_RESET:
        return CognitiveSlice()

    return state
