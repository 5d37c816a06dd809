"""
Cognitive Core Models

Heuristic analyzers and the hysteresis state machine.
"""

from cognitive_core.models.analyzers import (
    ConcentrationAnalyzer,
    ExplorationAnalyzer,
    FrustrationAnalyzer,
    LearningAnalyzer,
    SignalAnalyzer,
    SignalTracker,
)
from cognitive_core.models.classifier import BehavioralClassifier, state_change

__all__ = [
    "BehavioralClassifier",
    "state_change",
    "SignalAnalyzer",
    "SignalTracker",
    "FrustrationAnalyzer",
    "ConcentrationAnalyzer",
    "ExplorationAnalyzer",
    "LearningAnalyzer",
]
