"""
Cognitive Core Processors

Public exports for session history and metric derivation.
"""

from cognitive_core.processors.history import SessionHistory

__all__ = [
    "SessionHistory",
]
