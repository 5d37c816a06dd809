"""
Cognitive Core Logging Interceptor

Development aid: logs every action with the state before and after it.
Enabled by the engine when ``debug_mode`` is set.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from pydantic import BaseModel

from cognitive_core.schemas.inputs import Action


logger = logging.getLogger(__name__)

Predicate = Callable[[Any, Action], bool]


def _dump(state: Any) -> Any:
    if isinstance(state, BaseModel):
        return state.model_dump(mode="json")
    if isinstance(state, Mapping):
        return {key: _dump(value) for key, value in state.items()}
    return state


def state_diff(previous: Any, current: Any) -> Dict[str, Dict[str, Any]]:
    """
    Shallow per-slice diff between two state trees.

    Returns:
        {slice: {"type": "added" | "deleted" | "updated", ...}} for slices
        whose object identity changed.
    """
    if not isinstance(previous, Mapping) or not isinstance(current, Mapping):
        return {"state": {"type": "updated", "prev": previous, "next": current}}

    diff: Dict[str, Dict[str, Any]] = {}
    for key in list(previous) + [k for k in current if k not in previous]:
        prev_value = previous.get(key)
        next_value = current.get(key)
        if prev_value is next_value:
            continue
        if key not in previous:
            diff[key] = {"type": "added", "value": next_value}
        elif key not in current:
            diff[key] = {"type": "deleted", "value": prev_value}
        else:
            diff[key] = {"type": "updated", "prev": prev_value, "next": next_value}
    return diff


class LoggingInterceptor:
    """
    Logs action type, previous state, action and next state.

    Args:
        predicate: Optional filter ``(state, action) -> bool``; actions it
            rejects pass through silently.
        level: Logging level for the records (default DEBUG).
        diff: Also log the per-slice diff.
    """

    def __init__(
        self,
        predicate: Optional[Predicate] = None,
        level: int = logging.DEBUG,
        diff: bool = False,
    ) -> None:
        self.predicate = predicate
        self.level = level
        self.diff = diff

    def __call__(self, api, action: Action, call_next: Callable[[Action], Any]) -> Any:
        if not logger.isEnabledFor(self.level):
            return call_next(action)

        previous = api.get_state()
        if self.predicate is not None and not self.predicate(previous, action):
            return call_next(action)

        logger.log(self.level, f"Action: {action.type}")
        logger.log(self.level, f"  previous state: {_dump(previous)}")
        logger.log(self.level, f"  action: {action.model_dump(mode='json')}")

        result = call_next(action)

        current = api.get_state()
        logger.log(self.level, f"  next state: {_dump(current)}")
        if self.diff:
            logger.log(self.level, f"  diff: {sorted(state_diff(previous, current))}")

        return result
