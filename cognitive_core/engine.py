"""
Cognitive Engine

Wires one behavioral classifier, the root reducer and the store into a
single owned instance per pipeline:

    dispatch -> [LoggingInterceptor] -> BehavioralClassifier -> reducers -> listeners

The logging interceptor is only installed when ``debug_mode`` is on. It
sits before the classifier so it also logs the state changes the
classifier dispatches.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from cognitive_core.config import CognitiveConfig
from cognitive_core.models.classifier import BehavioralClassifier, state_change
from cognitive_core.reducers import cognitive_reset, create_root_reducer
from cognitive_core.schemas.inputs import Action
from cognitive_core.schemas.outputs import CognitiveState, SessionMetrics
from cognitive_core.store import Interceptor, LoggingInterceptor, Store
from cognitive_core.store.pipeline import ActionLike


logger = logging.getLogger(__name__)


class EngineDestroyedError(RuntimeError):
    """Raised when a destroyed engine is used."""
    pass


class CognitiveEngine:
    """
    Embeddable cognitive pipeline.

    Attributes:
        config: Validated configuration shared with the classifier.
        classifier: The single BehavioralClassifier owned by this engine.
        store: The Store the classifier is installed in.
    """

    def __init__(
        self,
        config: Optional[CognitiveConfig] = None,
        clock: Optional[Callable[[], float]] = None,
        extra_interceptors: Optional[List[Interceptor]] = None,
    ) -> None:
        self.config = config or CognitiveConfig()
        self.classifier = BehavioralClassifier(self.config, clock=clock)

        interceptors: List[Interceptor] = []
        if self.config.debug_mode:
            interceptors.append(LoggingInterceptor(diff=True))
        interceptors.append(self.classifier)
        interceptors.extend(extra_interceptors or [])

        self.store = Store(create_root_reducer(), interceptors=interceptors)
        self._destroyed = False

        logger.info(
            f"CognitiveEngine initialized (window={self.config.metrics_window}, "
            f"capacity={self.config.history_capacity}, debug={self.config.debug_mode})"
        )

    # -------------------------------------------------------------------------
    # Store facade
    # -------------------------------------------------------------------------

    def _ensure_alive(self) -> None:
        if self._destroyed:
            raise EngineDestroyedError("CognitiveEngine has been destroyed")

    def dispatch(self, action: ActionLike) -> Action:
        self._ensure_alive()
        return self.store.dispatch(action)

    def get_state(self) -> Any:
        return self.store.get_state()

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        self._ensure_alive()
        return self.store.subscribe(listener)

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------

    @property
    def current_state(self) -> CognitiveState:
        return self.classifier.current_state

    def get_metrics(self, window: Optional[int] = None) -> SessionMetrics:
        return self.classifier.get_metrics(window)

    def snapshot(self) -> Dict[str, Any]:
        """JSON-serialisable dump of every slice."""
        return {name: value.model_dump(mode="json") for name, value in self.store.get_state().items()}

    # -------------------------------------------------------------------------
    # Control
    # -------------------------------------------------------------------------

    def force_state(self, state: CognitiveState) -> Optional[Action]:
        """Force a transition and dispatch it like a classifier-driven change."""
        self._ensure_alive()
        payload = self.classifier.force_state(state)
        if payload is None:
            return None
        return self.store.dispatch(state_change(payload))

    def reset(self) -> None:
        """Clear session history and signals; cognitive slice back to neutral."""
        self._ensure_alive()
        self.classifier.reset()
        self.store.dispatch(cognitive_reset())

    def destroy(self) -> None:
        if self._destroyed:
            return
        self.classifier.reset()
        self.store.remove_all_listeners()
        self._destroyed = True
        logger.info("CognitiveEngine destroyed")
