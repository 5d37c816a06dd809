"""
Cognitive Core Configuration

Thresholds and window sizes for the behavioral classifier. Values are
validated by Pydantic so a bad deployment setting fails at startup rather
than silently skewing classification.

Environment variables (all optional, prefix COGNITIVE_):
    COGNITIVE_METRICS_WINDOW, COGNITIVE_FRUSTRATED_THRESHOLD,
    COGNITIVE_CONCENTRATED_THRESHOLD, COGNITIVE_EXPLORING_THRESHOLD,
    COGNITIVE_LEARNING_THRESHOLD, COGNITIVE_LEARNING_WINDOW,
    COGNITIVE_LEARNING_IMPROVEMENT_THRESHOLD, COGNITIVE_MIN_ACTIONS,
    COGNITIVE_HISTORY_CAPACITY, COGNITIVE_DEBUG_MODE
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


logger = logging.getLogger(__name__)

ENV_PREFIX = "COGNITIVE_"

_TRUTHY = {"1", "true", "yes", "on"}


class CognitiveConfig(BaseModel):
    """Tunable parameters for history, analyzers and state thresholds."""
    model_config = ConfigDict(frozen=True)

    # Metrics
    metrics_window: int = Field(20, ge=1, description="Records analyzed per cycle")
    min_actions: int = Field(3, ge=1, description="Minimum records before classifying")
    history_capacity: int = Field(100, ge=1, description="Session history buffer size")

    # State thresholds (consecutive qualifying cycles)
    frustrated_threshold: int = Field(3, ge=1)
    concentrated_threshold: int = Field(5, ge=1)
    exploring_threshold: int = Field(4, ge=1)
    learning_threshold: int = Field(3, ge=1)

    # Learning detection
    learning_window: int = Field(20, ge=2, description="Records compared half against half")
    learning_improvement_threshold: float = Field(0.15, ge=0.0, le=1.0)

    debug_mode: bool = Field(False, description="Emit per-action classifier traces")

    @model_validator(mode="after")
    def windows_fit_history(self) -> "CognitiveConfig":
        if self.metrics_window > self.history_capacity:
            raise ValueError(
                f"metrics_window ({self.metrics_window}) exceeds "
                f"history_capacity ({self.history_capacity})"
            )
        if self.learning_window > self.history_capacity:
            raise ValueError(
                f"learning_window ({self.learning_window}) exceeds "
                f"history_capacity ({self.history_capacity})"
            )
        return self

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> CognitiveConfig:
        """
        Build a config from COGNITIVE_* environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ).

        Returns:
            Validated CognitiveConfig; unset variables keep their defaults.
        """
        environ = os.environ if environ is None else environ
        values: Dict[str, Any] = {}

        for name in cls.model_fields:
            raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is None or raw == "":
                continue
            if name == "debug_mode":
                values[name] = raw.strip().lower() in _TRUTHY
            else:
                values[name] = raw

        config = cls(**values)
        if values:
            logger.info(f"Loaded cognitive config overrides: {sorted(values)}")
        return config
