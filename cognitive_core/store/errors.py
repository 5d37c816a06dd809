"""
Cognitive Core Store Exceptions

Structural violations of the dispatch contract. These indicate integration
bugs and are always raised, never absorbed.
"""


class StoreError(Exception):
    """Base class for dispatch pipeline errors."""
    pass


class MalformedActionError(StoreError, ValueError):
    """Raised at the dispatch boundary when an action has no valid type."""
    pass


class ReentrantDispatchError(StoreError, RuntimeError):
    """Raised when a reducer or listener touches the store mid-dispatch."""
    pass
