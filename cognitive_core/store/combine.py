"""
Cognitive Core Reducer Combination

Turns a mapping of slice name -> reducer into a single root reducer.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from cognitive_core.schemas.inputs import Action
from cognitive_core.store.errors import StoreError


logger = logging.getLogger(__name__)

SliceReducer = Callable[[Any, Action], Any]


def combine_reducers(reducers: Mapping[str, SliceReducer]) -> Callable[[Optional[Mapping[str, Any]], Action], Dict[str, Any]]:
    """
    Combine slice reducers into one root reducer.

    Each slice reducer receives only its own sub-state plus the full action.
    The combined reducer returns the previous mapping object unchanged when
    no slice produced a new value, so identity checks detect no-ops.

    Non-callable entries are skipped with a warning.
    """
    final_reducers: Dict[str, SliceReducer] = {}
    for key, reducer in reducers.items():
        if callable(reducer):
            final_reducers[key] = reducer
        else:
            logger.warning(f'combine_reducers: reducer for key "{key}" is not a function. Skipping.')

    def combination(state: Optional[Mapping[str, Any]], action: Action) -> Dict[str, Any]:
        state = {} if state is None else state
        has_changed = False
        next_state: Dict[str, Any] = {}

        for key, reducer in final_reducers.items():
            previous_for_key = state.get(key)
            next_for_key = reducer(previous_for_key, action)

            if next_for_key is None:
                raise StoreError(
                    f'Given action "{action.type}", reducer "{key}" returned None. '
                    f"To ignore an action, you must explicitly return the previous state."
                )

            next_state[key] = next_for_key
            has_changed = has_changed or next_for_key is not previous_for_key

        # Keys with no reducer are dropped
        has_changed = has_changed or len(final_reducers) != len(state)

        if has_changed:
            return next_state
        return state  # type: ignore[return-value]

    return combination
