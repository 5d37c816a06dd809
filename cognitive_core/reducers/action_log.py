"""
Action Log Slice Reducer

Bounded log of dispatched domain actions, for debugging what reached the
reducers. Store control actions and the log's own control actions are not
logged.
"""

import logging
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

from cognitive_core.schemas.inputs import Action


logger = logging.getLogger(__name__)

ENABLE = "@@action_log/ENABLE"
DISABLE = "@@action_log/DISABLE"
CLEAR = "@@action_log/CLEAR"
SET_MAX_ENTRIES = "@@action_log/SET_MAX_ENTRIES"

_UNLOGGED_PREFIXES = ("@@store/", "@@action_log/")

DEFAULT_MAX_ENTRIES = 50


class ActionLogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    action: Action
    timestamp: Optional[float] = None


class ActionLogSlice(BaseModel):
    """
    Action log sub-state.

    ``total_actions`` keeps counting while the log is disabled and after
    entries fall off the end; only CLEAR resets it.
    """
    model_config = ConfigDict(frozen=True)

    entries: Tuple[ActionLogEntry, ...] = ()
    max_entries: int = DEFAULT_MAX_ENTRIES
    total_actions: int = 0
    enabled: bool = True


def set_max_entries(max_entries: int) -> Action:
    return Action(type=SET_MAX_ENTRIES, payload={"max_entries": max_entries})


def action_log_reducer(state: Optional[ActionLogSlice], action: Action) -> ActionLogSlice:
    if state is None:
        state = ActionLogSlice()

    if action.type == ENABLE:
        return state.model_copy(update={"enabled": True})

    if action.type == DISABLE:
        return state.model_copy(update={"enabled": False})

    if action.type == CLEAR:
        return state.model_copy(update={"entries": (), "total_actions": 0})

    if action.type == SET_MAX_ENTRIES:
        max_entries = action.payload.get("max_entries")
        if not isinstance(max_entries, int) or isinstance(max_entries, bool) or max_entries < 1:
            logger.warning(f"Invalid max_entries value, ignoring: {max_entries!r}")
            return state
        return state.model_copy(update={
            "max_entries": max_entries,
            "entries": state.entries[-max_entries:],
        })

    if action.type.startswith(_UNLOGGED_PREFIXES):
        return state

    if not state.enabled:
        return state.model_copy(update={"total_actions": state.total_actions + 1})

    entry = ActionLogEntry(action=action, timestamp=action.timestamp)
    return state.model_copy(update={
        "entries": (state.entries + (entry,))[-state.max_entries:],
        "total_actions": state.total_actions + 1,
    })
