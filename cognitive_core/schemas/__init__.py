"""
Cognitive Core Schemas

Public exports for input and output Pydantic models.
"""

# Input schemas
from cognitive_core.schemas.inputs import (
    Action,
    ActionRecord,
)

# Output schemas
from cognitive_core.schemas.outputs import (
    STATE_CHANGE,
    CognitiveSignals,
    CognitiveState,
    ErrorClusterSummary,
    SessionMetrics,
    StateChangePayload,
)

__all__ = [
    # Input
    "Action",
    "ActionRecord",
    # Output
    "STATE_CHANGE",
    "CognitiveState",
    "CognitiveSignals",
    "ErrorClusterSummary",
    "SessionMetrics",
    "StateChangePayload",
]
