"""
Cognitive Core Reducers

Slice reducers and the combined root reducer.

Root state shape:
    {
        "cognitive":  CognitiveSlice,
        "navigation": NavigationSlice,
        "input":      InputSlice,
        "action_log": ActionLogSlice,
    }
"""

from cognitive_core.reducers.action_log import ActionLogSlice, action_log_reducer
from cognitive_core.reducers.cognitive import (
    COGNITIVE_RESET,
    CognitiveSlice,
    cognitive_reducer,
    cognitive_reset,
)
from cognitive_core.reducers.input import InputSlice, input_reducer
from cognitive_core.reducers.navigation import NAVIGATE, NavigationSlice, navigate, navigation_reducer
from cognitive_core.store.combine import combine_reducers


SLICE_REDUCERS = {
    "cognitive": cognitive_reducer,
    "navigation": navigation_reducer,
    "input": input_reducer,
    "action_log": action_log_reducer,
}


def create_root_reducer():
    return combine_reducers(SLICE_REDUCERS)


__all__ = [
    "SLICE_REDUCERS",
    "create_root_reducer",
    "COGNITIVE_RESET",
    "NAVIGATE",
    "CognitiveSlice",
    "NavigationSlice",
    "InputSlice",
    "ActionLogSlice",
    "cognitive_reducer",
    "navigation_reducer",
    "input_reducer",
    "action_log_reducer",
    "cognitive_reset",
    "navigate",
]
