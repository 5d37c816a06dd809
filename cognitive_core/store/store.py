"""
Cognitive Core Store

Holds the state tree. The only way to change it is to dispatch an action:

    action -> boundary validation -> interceptors -> root reducer -> listeners

Dispatch is synchronous and non-reentrant. Reducers and listeners may not
dispatch; interceptors may, because they run outside those phases.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Callable, List, Optional, Sequence

from cognitive_core.schemas.inputs import Action
from cognitive_core.store.errors import ReentrantDispatchError, StoreError
from cognitive_core.store.pipeline import (
    ActionLike,
    Interceptor,
    InterceptorPipeline,
    normalize_action,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

INIT = "@@store/INIT"
REPLACE = "@@store/REPLACE"

Reducer = Callable[[Any, Action], Any]
Listener = Callable[[], None]
Unsubscribe = Callable[[], None]


# =============================================================================
# Interceptor API
# =============================================================================

class StoreAPI:
    """Read-only state access plus dispatch, handed to every interceptor."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def get_state(self) -> Any:
        return self._store.get_state()

    def dispatch(self, action: ActionLike) -> Any:
        return self._store.dispatch(action)


# =============================================================================
# Store
# =============================================================================

class Store:
    """
    Redux-style store with an interceptor pipeline.

    Attributes:
        _state: Current state tree (replaced, never mutated, by reducers).
        _listeners: Subscribed listeners in subscription order.
        _is_reducing: True while the root reducer runs.
        _is_notifying: True while listeners are being called.
    """

    def __init__(
        self,
        reducer: Reducer,
        preloaded_state: Any = None,
        interceptors: Sequence[Interceptor] = (),
    ) -> None:
        if not callable(reducer):
            raise TypeError("Expected the reducer to be a function.")

        self._reducer: Reducer = reducer
        self._state: Any = preloaded_state
        self._listeners: List[Listener] = []
        self._is_reducing: bool = False
        self._is_notifying: bool = False

        self._api = StoreAPI(self)
        self._pipeline = InterceptorPipeline(interceptors, self._api, self._reduce_and_notify)

        # Every slice produces its initial state; interceptors never see INIT
        self._reduce_and_notify(Action(type=INIT))

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_state(self) -> Any:
        """Return a read-only view of the current state tree."""
        if self._is_reducing:
            raise ReentrantDispatchError(
                "You may not call get_state() while the reducer is executing. "
                "The reducer has already received the state as an argument."
            )
        if isinstance(self._state, dict):
            return MappingProxyType(self._state)
        return self._state

    @property
    def is_dispatching(self) -> bool:
        return self._is_reducing or self._is_notifying

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def dispatch(self, action: ActionLike) -> Action:
        """
        Validate and dispatch an action.

        Raises:
            MalformedActionError: before any interceptor runs, if the action
                has no valid ``type``.
            ReentrantDispatchError: if called from a reducer or listener.
        """
        action = normalize_action(action)
        self._guard_reentry()
        return self._pipeline.run(action)

    def _guard_reentry(self) -> None:
        if self._is_reducing:
            raise ReentrantDispatchError("Reducers may not dispatch actions.")
        if self._is_notifying:
            raise ReentrantDispatchError("Listeners may not dispatch actions.")

    def _reduce_and_notify(self, action: Action) -> Action:
        self._guard_reentry()

        try:
            self._is_reducing = True
            next_state = self._reducer(self._state, action)
        finally:
            self._is_reducing = False

        if next_state is None:
            raise StoreError(f"Root reducer returned None for action {action.type!r}")
        self._state = next_state

        # Changes to the listener list take effect on the next dispatch
        listeners = tuple(self._listeners)
        try:
            self._is_notifying = True
            for listener in listeners:
                listener()
        finally:
            self._is_notifying = False

        return action

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """
        Add a change listener, called once after every dispatch.

        Returns:
            A function that removes this listener; calling it twice is a no-op.
        """
        if not callable(listener):
            raise TypeError("Expected the listener to be a function.")
        if self._is_reducing:
            raise ReentrantDispatchError(
                "You may not call subscribe() while the reducer is executing."
            )

        self._listeners.append(listener)
        subscribed = True

        def unsubscribe() -> None:
            nonlocal subscribed
            if not subscribed:
                return
            if self._is_reducing:
                raise ReentrantDispatchError(
                    "You may not unsubscribe from a store listener while the reducer is executing."
                )
            subscribed = False
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def remove_all_listeners(self) -> None:
        self._listeners = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    # -------------------------------------------------------------------------
    # Reducer replacement
    # -------------------------------------------------------------------------

    def replace_reducer(self, next_reducer: Reducer) -> None:
        """Swap the root reducer and let every slice rebuild its state."""
        if not callable(next_reducer):
            raise TypeError("Expected the next_reducer to be a function.")
        self._reducer = next_reducer
        logger.info("Root reducer replaced")
        self._reduce_and_notify(Action(type=REPLACE))
