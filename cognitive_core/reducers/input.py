"""
Input Slice Reducer

Tracks which input sources (keyboard, gesture, voice) are enabled, what
each last reported, and which source was used most recently.
"""

from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from cognitive_core.schemas.inputs import Action


# =============================================================================
# Action Types
# =============================================================================

# @@-prefixed types are adapter control and never recorded as interactions
KEYBOARD_ENABLED = "@@input/KEYBOARD_ENABLED"
KEYBOARD_DISABLED = "@@input/KEYBOARD_DISABLED"
KEYBOARD_KEY_PRESS = "input/KEYBOARD_KEY_PRESS"
KEYBOARD_KEY_RELEASE = "input/KEYBOARD_KEY_RELEASE"

GESTURE_ENABLED = "@@input/GESTURE_ENABLED"
GESTURE_DISABLED = "@@input/GESTURE_DISABLED"
GESTURE_DETECTED = "input/GESTURE_DETECTED"

VOICE_ENABLED = "@@input/VOICE_ENABLED"
VOICE_DISABLED = "@@input/VOICE_DISABLED"
VOICE_COMMAND = "input/VOICE_COMMAND"
VOICE_LISTENING_STARTED = "@@input/VOICE_LISTENING_STARTED"
VOICE_LISTENING_STOPPED = "@@input/VOICE_LISTENING_STOPPED"

SET_ACTIVE_SOURCE = "@@input/SET_ACTIVE_SOURCE"
INPUT_RESET = "@@input/RESET"

INPUT_SOURCES = ("keyboard", "gesture", "voice", "system")


# =============================================================================
# State
# =============================================================================

class KeyboardInputState(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    last_key: Optional[str] = None
    last_timestamp: Optional[float] = None
    active_keys: Tuple[str, ...] = ()


class GestureInputState(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    last_gesture: Optional[str] = None
    last_timestamp: Optional[float] = None
    confidence: float = 0.0


class VoiceInputState(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    last_command: Optional[str] = None
    last_timestamp: Optional[float] = None
    confidence: float = 0.0
    is_listening: bool = False


class InputSlice(BaseModel):
    """Input sub-state of the store."""
    model_config = ConfigDict(frozen=True)

    keyboard: KeyboardInputState = Field(default_factory=KeyboardInputState)
    gesture: GestureInputState = Field(default_factory=GestureInputState)
    voice: VoiceInputState = Field(default_factory=VoiceInputState)
    active_source: Optional[str] = None


# =============================================================================
# Action Creators
# =============================================================================

def key_press(key: str, timestamp: Optional[float] = None) -> Action:
    return Action(type=KEYBOARD_KEY_PRESS, payload={"key": key, "timestamp": timestamp}, timestamp=timestamp)


def key_release(key: str, timestamp: Optional[float] = None) -> Action:
    return Action(type=KEYBOARD_KEY_RELEASE, payload={"key": key, "timestamp": timestamp}, timestamp=timestamp)


def gesture_detected(gesture: str, confidence: float, timestamp: Optional[float] = None) -> Action:
    return Action(
        type=GESTURE_DETECTED,
        payload={"gesture": gesture, "confidence": confidence, "timestamp": timestamp},
        timestamp=timestamp,
    )


def voice_command(command: str, confidence: float, timestamp: Optional[float] = None) -> Action:
    return Action(
        type=VOICE_COMMAND,
        payload={"command": command, "confidence": confidence, "timestamp": timestamp},
        timestamp=timestamp,
    )


def set_active_source(source: Optional[str]) -> Action:
    return Action(type=SET_ACTIVE_SOURCE, payload={"source": source})


# =============================================================================
# Reducer
# =============================================================================

def _timestamp(action: Action) -> Optional[float]:
    value = action.payload.get("timestamp")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return action.timestamp


def _confidence(action: Action) -> float:
    value = action.payload.get("confidence", 0.0)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return min(max(float(value), 0.0), 1.0)
    return 0.0


def _text(action: Action, key: str) -> Optional[str]:
    value: Any = action.payload.get(key)
    return value if isinstance(value, str) else None


def input_reducer(state: Optional[InputSlice], action: Action) -> InputSlice:
    if state is None:
        state = InputSlice()

    kind = action.type

    # Keyboard
    if kind == KEYBOARD_ENABLED:
        return state.model_copy(update={"keyboard": state.keyboard.model_copy(update={"enabled": True})})

    if kind == KEYBOARD_DISABLED:
        keyboard = state.keyboard.model_copy(update={"enabled": False, "active_keys": ()})
        return state.model_copy(update={"keyboard": keyboard})

    if kind == KEYBOARD_KEY_PRESS:
        key = _text(action, "key")
        if key is None:
            return state
        active_keys = state.keyboard.active_keys
        if key not in active_keys:
            active_keys = active_keys + (key,)
        keyboard = state.keyboard.model_copy(update={
            "last_key": key,
            "last_timestamp": _timestamp(action),
            "active_keys": active_keys,
        })
        return state.model_copy(update={"keyboard": keyboard, "active_source": "keyboard"})

    if kind == KEYBOARD_KEY_RELEASE:
        key = _text(action, "key")
        if key is None or key not in state.keyboard.active_keys:
            return state
        active_keys = tuple(k for k in state.keyboard.active_keys if k != key)
        return state.model_copy(update={"keyboard": state.keyboard.model_copy(update={"active_keys": active_keys})})

    # Gesture
    if kind == GESTURE_ENABLED:
        return state.model_copy(update={"gesture": state.gesture.model_copy(update={"enabled": True})})

    if kind == GESTURE_DISABLED:
        return state.model_copy(update={"gesture": state.gesture.model_copy(update={"enabled": False})})

    if kind == GESTURE_DETECTED:
        gesture = _text(action, "gesture")
        if gesture is None:
            return state
        updated = state.gesture.model_copy(update={
            "last_gesture": gesture,
            "last_timestamp": _timestamp(action),
            "confidence": _confidence(action),
        })
        return state.model_copy(update={"gesture": updated, "active_source": "gesture"})

    # Voice
    if kind == VOICE_ENABLED:
        return state.model_copy(update={"voice": state.voice.model_copy(update={"enabled": True})})

    if kind == VOICE_DISABLED:
        voice = state.voice.model_copy(update={"enabled": False, "is_listening": False})
        return state.model_copy(update={"voice": voice})

    if kind == VOICE_COMMAND:
        command = _text(action, "command")
        if command is None:
            return state
        voice = state.voice.model_copy(update={
            "last_command": command,
            "last_timestamp": _timestamp(action),
            "confidence": _confidence(action),
        })
        return state.model_copy(update={"voice": voice, "active_source": "voice"})

    if kind == VOICE_LISTENING_STARTED:
        return state.model_copy(update={"voice": state.voice.model_copy(update={"is_listening": True})})

    if kind == VOICE_LISTENING_STOPPED:
        return state.model_copy(update={"voice": state.voice.model_copy(update={"is_listening": False})})

    # General
    if kind == SET_ACTIVE_SOURCE:
        source = action.payload.get("source")
        if source is not None and source not in INPUT_SOURCES:
            return state
        return state.model_copy(update={"active_source": source})

    if kind == INPUT_RESET:
        return InputSlice()

    return state
