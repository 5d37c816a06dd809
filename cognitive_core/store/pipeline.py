"""
Cognitive Core Interceptor Pipeline

Interceptors sit between ``Store.dispatch`` and the root reducer. Each one
is a callable ``(api, action, call_next) -> result`` that may observe the
action, transform it, dispatch follow-up actions through ``api``, and must
call ``call_next(action)`` to let it propagate.

The chain is an explicit ordered tuple run by index. Every continuation is
built once when the pipeline is constructed, so a long chain never nests
closures.
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Sequence, Union

from pydantic import ValidationError

from cognitive_core.schemas.inputs import Action
from cognitive_core.store.errors import MalformedActionError

if TYPE_CHECKING:
    from cognitive_core.store.store import StoreAPI


NextFn = Callable[[Action], Any]
Interceptor = Callable[["StoreAPI", Action, NextFn], Any]
ActionLike = Union[Action, Mapping[str, Any]]


def normalize_action(action: ActionLike) -> Action:
    """
    Validate an action at the dispatch boundary.

    Raises:
        MalformedActionError: if the action is not a mapping/Action or has
            a missing, non-string or blank ``type``.
    """
    if isinstance(action, Action):
        return action

    if not isinstance(action, Mapping):
        raise MalformedActionError(
            f"Actions must be Action models or mappings, got {type(action).__name__}"
        )

    try:
        return Action.model_validate(dict(action))
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        raise MalformedActionError(
            f"Malformed action {dict(action)!r}: invalid field(s) {fields}"
        ) from e


class InterceptorPipeline:
    """Runs an action through an ordered list of interceptors, then the terminal."""

    def __init__(
        self,
        interceptors: Sequence[Interceptor],
        api: "StoreAPI",
        terminal: NextFn,
    ) -> None:
        for interceptor in interceptors:
            if not callable(interceptor):
                raise TypeError(f"Expected interceptor to be callable, got {interceptor!r}")

        self._interceptors = tuple(interceptors)
        self._api = api
        self._terminal = terminal

        # continuation[i] resumes the chain at interceptor i + 1
        self._continuations = tuple(
            partial(self._run_from, index + 1) for index in range(len(self._interceptors))
        )

    def __len__(self) -> int:
        return len(self._interceptors)

    def run(self, action: Action) -> Any:
        return self._run_from(0, action)

    def _run_from(self, index: int, action: ActionLike) -> Any:
        # Action instances pass through; mappings forwarded by an interceptor are validated here
        action = normalize_action(action)
        if index >= len(self._interceptors):
            return self._terminal(action)
        return self._interceptors[index](self._api, action, self._continuations[index])


class _CurriedInterceptor:
    """Adapter for middleware written as ``api -> next -> action -> result``."""

    def __init__(self, middleware: Callable[["StoreAPI"], Callable[[NextFn], NextFn]]) -> None:
        self._middleware = middleware
        self._handlers: Dict[Any, NextFn] = {}
        self.__name__ = getattr(middleware, "__name__", type(middleware).__name__)

    def __call__(self, api: "StoreAPI", action: Action, call_next: NextFn) -> Any:
        # Continuations are fixed per pipeline, so each binding is built once
        handler = self._handlers.get(call_next)
        if handler is None:
            handler = self._middleware(api)(call_next)
            self._handlers[call_next] = handler
        return handler(action)


def from_middleware(middleware: Callable[["StoreAPI"], Callable[[NextFn], NextFn]]) -> Interceptor:
    """Wrap a curried middleware so it can join an interceptor pipeline."""
    return _CurriedInterceptor(middleware)
