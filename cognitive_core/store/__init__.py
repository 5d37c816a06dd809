"""
Cognitive Core Store

Public exports for the dispatch pipeline.
"""

from cognitive_core.store.combine import combine_reducers
from cognitive_core.store.errors import (
    MalformedActionError,
    ReentrantDispatchError,
    StoreError,
)
from cognitive_core.store.logging_interceptor import LoggingInterceptor
from cognitive_core.store.pipeline import (
    Interceptor,
    InterceptorPipeline,
    from_middleware,
    normalize_action,
)
from cognitive_core.store.store import INIT, REPLACE, Store, StoreAPI

__all__ = [
    "INIT",
    "REPLACE",
    "Store",
    "StoreAPI",
    "combine_reducers",
    "Interceptor",
    "InterceptorPipeline",
    "from_middleware",
    "normalize_action",
    "LoggingInterceptor",
    "StoreError",
    "MalformedActionError",
    "ReentrantDispatchError",
]
