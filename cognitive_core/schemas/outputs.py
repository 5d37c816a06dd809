"""
Cognitive Core Output Schemas

This module defines Pydantic V2 models for everything the core produces:
sliding-window metrics, signal snapshots, and the state-change contract
consumed by the cognitive reducer and by subscribers.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cognitive_core.schemas.inputs import ActionRecord


STATE_CHANGE = "cognitive/STATE_CHANGE"


# =============================================================================
# Enums
# =============================================================================

class CognitiveState(str, Enum):
    """Behavioral state inferred from the interaction stream."""
    NEUTRAL = "neutral"
    FRUSTRATED = "frustrated"
    CONCENTRATED = "concentrated"
    EXPLORING = "exploring"
    LEARNING = "learning"


# =============================================================================
# Session Metrics
# =============================================================================

class SessionMetrics(BaseModel):
    """
    Metrics derived from the most recent window of session history.

    Serialises with camelCase aliases (``errorRate``, ``averageDuration``...)
    so snapshots match what browser-side consumers expect.
    """
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    error_rate: float = Field(0.0, ge=0.0, le=1.0, description="Failed / total in window")
    recent_errors: int = Field(0, ge=0, description="Failed actions in window")
    average_duration: float = Field(
        0.0,
        ge=0.0,
        description="Mean duration over records that report one (ms)"
    )
    action_variety: int = Field(0, ge=0, description="Distinct action types in window")
    total_actions: int = Field(0, ge=0, description="Records in window")
    time_window: float = Field(0.0, description="Last timestamp - first timestamp (ms)")


class ErrorClusterSummary(BaseModel):
    """Failures grouped by temporal proximity."""
    model_config = ConfigDict(frozen=True)

    clusters: List[List[ActionRecord]] = Field(default_factory=list)
    max_cluster_size: int = 0
    average_cluster_size: float = 0.0
    total_clusters: int = 0


# =============================================================================
# Signals & State Change
# =============================================================================

class CognitiveSignals(BaseModel):
    """Snapshot of the per-state hysteresis counters."""
    model_config = ConfigDict(frozen=True)

    frustrated: int = Field(0, ge=0)
    concentrated: int = Field(0, ge=0)
    exploring: int = Field(0, ge=0)
    learning: int = Field(0, ge=0)

    def strongest(self) -> int:
        return max(self.frustrated, self.concentrated, self.exploring, self.learning)


class StateChangePayload(BaseModel):
    """Payload of a ``cognitive/STATE_CHANGE`` action."""
    model_config = ConfigDict(frozen=True)

    previous_state: CognitiveState = Field(..., description="State before the transition")
    new_state: CognitiveState = Field(..., description="State after the transition")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Saturating signal strength")
    signals: CognitiveSignals = Field(default_factory=CognitiveSignals)
    metrics: SessionMetrics = Field(default_factory=SessionMetrics)
    timestamp: float = Field(..., description="Monotonic timestamp of the transition (ms)")
