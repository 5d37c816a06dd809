"""
Cognitive Core

Central module exports for the behavioral state inference layer.
"""

from cognitive_core.config import CognitiveConfig
from cognitive_core.engine import CognitiveEngine
from cognitive_core.models.classifier import BehavioralClassifier

__all__ = [
    "CognitiveConfig",
    "CognitiveEngine",
    "BehavioralClassifier",
]
