"""
Unit tests for the navigation slice reducer.
"""

import pytest

from cognitive_core.reducers.navigation import (
    NavigationSlice,
    animation_complete,
    navigate,
    navigation_reducer,
    navigation_reset,
    set_config,
)
from cognitive_core.schemas.inputs import Action


@pytest.fixture
def nav():
    return navigation_reducer(None, Action(type="@@store/INIT"))


def apply(state, *actions):
    for action in actions:
        state = navigation_reducer(state, action)
    return state


class TestCardNavigation:
    """Left/right movement wraps within a layer."""

    def test_right_advances(self, nav):
        state = apply(nav, navigate("right", "keyboard"))

        assert state.current_card == 1
        assert state.direction == "right"
        assert state.is_animating is True
        assert state.last_source == "keyboard"

    def test_right_wraps_to_first(self, nav):
        state = apply(nav, *[navigate("right", "gesture")] * 5)
        assert state.current_card == 0

    def test_left_wraps_to_last(self, nav):
        state = apply(nav, navigate("left", "voice"))
        assert state.current_card == 4


class TestLayerNavigation:
    """Up/down movement clamps and resets the card."""

    def test_down_moves_layer_and_resets_card(self, nav):
        state = apply(nav, navigate("right", "keyboard"), navigate("down", "keyboard"))

        assert state.current_layer == 1
        assert state.current_card == 0

    def test_up_at_first_layer_clamps(self, nav):
        state = apply(nav, navigate("right", "keyboard"), navigate("up", "keyboard"))

        assert state.current_layer == 0
        assert state.current_card == 1
        assert state.direction == "up"

    def test_down_at_last_layer_clamps(self, nav):
        state = apply(nav, *[navigate("down", "keyboard")] * 6)
        assert state.current_layer == 3


class TestNavigationControl:
    """Tests for animation, configuration and reset."""

    def test_unknown_direction_ignored(self, nav):
        action = Action(type="navigation/NAVIGATE", payload={"direction": "sideways"})
        assert navigation_reducer(nav, action) is nav

    def test_navigation_time_from_metadata(self, nav):
        state = apply(nav, navigate("right", "gesture", metadata={"timestamp": 321.0}, timestamp=999.0))
        assert state.last_navigation_time == 321.0

    def test_navigation_time_falls_back_to_action(self, nav):
        state = apply(nav, navigate("right", "gesture", timestamp=999.0))
        assert state.last_navigation_time == 999.0

    def test_animation_complete(self, nav):
        state = apply(nav, navigate("right", "keyboard"), animation_complete())
        assert state.is_animating is False

    def test_set_config_clamps_position(self, nav):
        state = apply(nav, navigate("left", "keyboard"), set_config(total_cards=3))

        assert state.total_cards == 3
        assert state.current_card == 2

    def test_set_config_ignores_invalid(self, nav):
        state = apply(nav, set_config(total_cards=0, total_layers=-2))

        assert state.total_cards == 5
        assert state.total_layers == 4

    def test_reset_keeps_layout(self, nav):
        state = apply(
            nav,
            set_config(total_cards=8, total_layers=2),
            navigate("right", "keyboard"),
            navigation_reset(),
        )

        assert state == NavigationSlice(total_cards=8, total_layers=2)
