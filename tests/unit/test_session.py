"""
Tests for the Session frame protocol.
"""

import logging
from unittest.mock import MagicMock

from keynav.actions import WindowAction
from keynav.choice_map import ChoiceMap, SwitchMode
from keynav.dispatcher import KeyEvent
from keynav.focus_tree import FocusTree
from keynav.key_grammar import Modifiers

from test_helpers import build_tree


class TestSession:
    """Frames and key handling through a Session."""

    def test_default_choice_map_loaded(self, session_factory):
        session = session_factory()
        assert "window" in session.choice_map.modes
        assert session.mode == "normal"

    def test_explicit_choice_map(self, session_factory):
        choice_map = ChoiceMap()
        assert session_factory(choice_map).choice_map is choice_map

    def test_begin_frame_returns_fresh_tree(self, session_factory):
        session = session_factory()
        first = session.begin_frame()
        second = session.begin_frame()
        assert isinstance(first, FocusTree) and first is not second
        assert session.frame == 2

    def test_first_frame_selects_first_leaf(self, session_factory):
        session = session_factory()
        transient = build_tree([[["a", "b"]]], keys=["main"], tree=session.begin_frame())
        assert session.end_frame(transient)
        assert session.focus_tree.selected == "a"

    def test_later_frames_do_not_reselect(self, session_factory):
        session = session_factory()
        session.end_frame(build_tree([[["a", "b"]]], keys=["main"], tree=session.begin_frame()))
        session.focus_tree.focusable("a", MagicMock())

        assert not session.end_frame(build_tree([[["a", "b"]]], keys=["main"], tree=session.begin_frame()))
        assert session.focus_tree.selected is None

    def test_log_reports_only_new_windows(self, session_factory, caplog):
        session = session_factory()
        session.end_frame(build_tree([[["a"]], [["b"]]], keys=["main", "side"], tree=session.begin_frame()))
        transient = build_tree([[["a"]], [["b"]], [["x"]]], keys=["main", "side", "dialog"],
                               tree=session.begin_frame())
        with caplog.at_level(logging.DEBUG, logger='KeyNav'):
            assert session.end_frame(transient) == 1
        assert "grafted 1 window(s)" in caplog.text

    def test_key_pressed_drives_focus(self, session_factory):
        session = session_factory()
        session.end_frame(build_tree([[["a", "b"]]], keys=["main"], tree=session.begin_frame()))
        session.key_pressed(KeyEvent("j"))
        assert session.focus_tree.selected == "b"

    def test_window_callback(self, session_factory):
        on_window_action = MagicMock()
        session = session_factory(on_window_action=on_window_action)
        assert session.key_pressed(KeyEvent("w", mods=Modifiers(control_key=True))) == SwitchMode("window")
        assert session.mode == "window"
        session.key_pressed(KeyEvent("d"))
        on_window_action.assert_called_once_with(WindowAction.DECORATIONS)
