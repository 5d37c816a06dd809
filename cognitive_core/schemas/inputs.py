"""
Cognitive Core Input Schemas

This module defines Pydantic V2 models for:
- Actions dispatched into the store by input adapters (Action)
- Interaction records kept by the session history (ActionRecord)
"""

import logging
import math
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


logger = logging.getLogger(__name__)


def _finite_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


# =============================================================================
# Dispatched Action
# =============================================================================

class Action(BaseModel):
    """
    A single action submitted to the store.

    Only ``type`` is required, and it is the only field whose failure
    rejects the action. Any other ill-typed field is logged and dropped
    (``payload`` becomes ``{}``, the rest become None) so the classifier's
    fallbacks apply. Producers SHOULD set ``success`` explicitly; when it
    is absent the classifier infers it from the type string.
    """
    model_config = ConfigDict(frozen=True)

    type: str = Field(..., description="Namespaced action type, e.g. 'navigation/NAVIGATE'")
    payload: Dict[str, Any] = Field(default_factory=dict, description="Action data")
    success: Optional[bool] = Field(None, description="Explicit outcome of the interaction")
    duration_ms: Optional[float] = Field(None, ge=0.0, description="Interaction duration in milliseconds")
    timestamp: Optional[float] = Field(None, description="Monotonic timestamp in milliseconds")
    id: Optional[str] = Field(None, description="Producer-assigned unique identifier")

    @field_validator("type")
    @classmethod
    def type_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("action type must be a non-empty string")
        return value

    @field_validator("payload", mode="before")
    @classmethod
    def payload_or_empty(cls, value: Any) -> Dict[str, Any]:
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            logger.warning(f"Dropping non-mapping action payload: {type(value).__name__}")
            return {}
        return {str(key): item for key, item in value.items()}

    @field_validator("success", mode="before")
    @classmethod
    def success_or_none(cls, value: Any) -> Optional[bool]:
        if value is None or isinstance(value, bool):
            return value
        logger.warning(f"Dropping non-boolean action success: {value!r}")
        return None

    @field_validator("duration_ms", mode="before")
    @classmethod
    def duration_or_none(cls, value: Any) -> Optional[float]:
        if value is None:
            return None
        if not _finite_number(value) or value < 0:
            logger.warning(f"Dropping invalid action duration_ms: {value!r}")
            return None
        return float(value)

    @field_validator("timestamp", mode="before")
    @classmethod
    def timestamp_or_none(cls, value: Any) -> Optional[float]:
        if value is None:
            return None
        if not _finite_number(value):
            logger.warning(f"Dropping invalid action timestamp: {value!r}")
            return None
        return float(value)

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, value: Any) -> Optional[str]:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        logger.warning(f"Dropping invalid action id: {value!r}")
        return None


# =============================================================================
# Recorded Interaction
# =============================================================================

class ActionRecord(BaseModel):
    """Immutable record of one user-observable interaction outcome."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique record identifier")
    timestamp: float = Field(..., description="Monotonic timestamp in milliseconds")
    type: str = Field(..., description="Namespaced action type")
    success: bool = Field(True, description="Whether the interaction succeeded")
    duration_ms: Optional[float] = Field(
        None,
        description="Interaction duration; None when the producer did not report one"
    )
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Free-form producer metadata")
