"""
Navigation Slice Reducer

Carousel position for the navigation UI: card-to-card movement (left/right,
wrapping) and layer switching (up/down, clamped to the first/last layer).
"""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict

from cognitive_core.schemas.inputs import Action


# =============================================================================
# Action Types
# =============================================================================

NAVIGATE = "navigation/NAVIGATE"
ANIMATION_COMPLETE = "@@navigation/ANIMATION_COMPLETE"
SET_CONFIG = "@@navigation/SET_CONFIG"
NAVIGATION_RESET = "@@navigation/RESET"

DIRECTIONS = ("left", "right", "up", "down")
SOURCES = ("keyboard", "gesture", "voice", "system")

Direction = Literal["left", "right", "up", "down"]


# =============================================================================
# State
# =============================================================================

class NavigationSlice(BaseModel):
    """
    Navigation sub-state.

    Default layout is 4 layers of 5 cards each.
    """
    model_config = ConfigDict(frozen=True)

    current_card: int = 0
    current_layer: int = 0
    total_cards: int = 5
    total_layers: int = 4
    direction: Optional[Direction] = None
    is_animating: bool = False
    last_source: Optional[str] = None
    last_navigation_time: Optional[float] = None


# =============================================================================
# Action Creators
# =============================================================================

def navigate(
    direction: str,
    source: str,
    metadata: Optional[Dict[str, Any]] = None,
    success: Optional[bool] = None,
    duration_ms: Optional[float] = None,
    timestamp: Optional[float] = None,
) -> Action:
    """Navigation request from an input adapter (keyboard, gesture, voice)."""
    return Action(
        type=NAVIGATE,
        payload={"direction": direction, "source": source, "metadata": dict(metadata or {})},
        success=success,
        duration_ms=duration_ms,
        timestamp=timestamp,
    )


def animation_complete() -> Action:
    return Action(type=ANIMATION_COMPLETE)


def set_config(total_cards: Optional[int] = None, total_layers: Optional[int] = None) -> Action:
    return Action(type=SET_CONFIG, payload={"total_cards": total_cards, "total_layers": total_layers})


def navigation_reset() -> Action:
    return Action(type=NAVIGATION_RESET)


# =============================================================================
# Reducer
# =============================================================================

def _navigate(state: NavigationSlice, action: Action) -> NavigationSlice:
    direction = action.payload.get("direction")
    if direction not in DIRECTIONS:
        return state

    card, layer = state.current_card, state.current_layer

    if direction == "right":
        card = (card + 1) % state.total_cards
    elif direction == "left":
        card = state.total_cards - 1 if card == 0 else card - 1
    elif direction == "down" and layer < state.total_layers - 1:
        layer += 1
        card = 0
    elif direction == "up" and layer > 0:
        layer -= 1
        card = 0
    # At the first/last layer up/down only updates direction for feedback

    metadata = action.payload.get("metadata")
    navigation_time = metadata.get("timestamp") if isinstance(metadata, dict) else None
    if not isinstance(navigation_time, (int, float)):
        navigation_time = action.timestamp

    source = action.payload.get("source")

    return state.model_copy(update={
        "current_card": card,
        "current_layer": layer,
        "direction": direction,
        "is_animating": True,
        "last_source": source if isinstance(source, str) else None,
        "last_navigation_time": navigation_time,
    })


def _positive_int(value: Any) -> Optional[int]:
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    return None


def navigation_reducer(state: Optional[NavigationSlice], action: Action) -> NavigationSlice:
    if state is None:
        state = NavigationSlice()

    if action.type == NAVIGATE:
        return _navigate(state, action)

    if action.type == ANIMATION_COMPLETE:
        return state.model_copy(update={"is_animating": False})

    if action.type == SET_CONFIG:
        total_cards = _positive_int(action.payload.get("total_cards")) or state.total_cards
        total_layers = _positive_int(action.payload.get("total_layers")) or state.total_layers
        return state.model_copy(update={
            "total_cards": total_cards,
            "total_layers": total_layers,
            "current_card": min(state.current_card, total_cards - 1),
            "current_layer": min(state.current_layer, total_layers - 1),
        })

    if action.type == NAVIGATION_RESET:
        # Layout configuration survives a reset
        return NavigationSlice(total_cards=state.total_cards, total_layers=state.total_layers)

    return state
