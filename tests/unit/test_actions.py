"""
Tests for the action taxonomy: identifiers, ranks and lookup.
"""

import pytest

from keynav.actions import (
    NO_OP,
    NO_OP_RANK,
    NamedKeyAction,
    NavigationAction,
    NoOp,
    WindowAction,
    action_from_string,
    action_to_string,
    all_actions,
    default_action,
    parse_action,
    sort_actions,
)


class TestIdentifiers:
    """String identifiers for configuration files."""

    @pytest.mark.parametrize("action", all_actions())
    def test_identifier_round_trip(self, action):
        assert action_from_string(action_to_string(action)) is action

    def test_known_identifiers(self):
        assert action_from_string("next_window") is NavigationAction.NEXT_WINDOW
        assert action_from_string("fullscreen") is WindowAction.FULLSCREEN
        assert action_from_string("arrow_left") is NamedKeyAction.ARROW_LEFT
        assert action_from_string("be") is NO_OP

    def test_lookup_ignores_case_and_whitespace(self):
        assert action_from_string(" Help ") is WindowAction.HELP

    def test_unknown_identifier_raises(self):
        with pytest.raises(ValueError, match="Undefined action"):
            action_from_string("teleport")

    def test_parse_action_degrades_to_noop(self):
        assert parse_action("teleport") is NO_OP
        assert parse_action("down") is NavigationAction.DOWN

    def test_identifiers_are_unique(self):
        identifiers = [action.identifier for action in all_actions()]
        assert len(identifiers) == len(set(identifiers))

    def test_str_is_identifier(self):
        assert str(NavigationAction.PREVIOUS_ROW) == "previous_row"

    def test_labels(self):
        assert NavigationAction.NEXT_WINDOW.label == "Next Window"
        assert NO_OP.label == "Be"


class TestRanks:
    """The flat total order over all actions."""

    def test_category_offsets(self):
        assert WindowAction.HELP.rank == 0
        assert NavigationAction.RIGHT.rank == 100
        assert NamedKeyAction.ENTER.rank == 200
        assert NoOp.BE.rank == NO_OP_RANK == 999

    def test_local_rank_follows_declaration_order(self):
        assert NavigationAction.LEFT.local_rank == 1
        assert NavigationAction.LEFT.rank == 101

    def test_ordering_across_categories(self):
        assert WindowAction.MINIMIZE < NavigationAction.RIGHT
        assert NavigationAction.PREVIOUS_ROW < NamedKeyAction.ENTER
        assert NamedKeyAction.ARROW_RIGHT < NO_OP

    def test_noop_ranks_last(self):
        assert max(all_actions(), key=lambda action: action.rank) is NO_OP

    def test_all_actions_is_sorted(self):
        actions = all_actions()
        assert sort_actions(reversed(actions)) == actions

    def test_ranks_are_distinct(self):
        ranks = [action.rank for action in all_actions()]
        assert len(ranks) == len(set(ranks))

    def test_default_action_is_noop(self):
        assert default_action() is NO_OP
