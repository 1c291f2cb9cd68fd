"""
Tests for translating urwid key names into KeyEvents.
"""

import pytest

from keynav.dispatcher import Dispatcher
from keynav.config import load_choice_map
from keynav.key_grammar import Modifiers, parse_command
from keynav.tui.key_bindings import KEY_CLOSE_HELP, event_from_urwid


class TestEventFromUrwid:
    """urwid keypress strings."""

    @pytest.mark.parametrize("key, identifier", [
        ('enter', 'enter'),
        ('esc', 'escape'),
        ('up', 'arrow_up'),
        ('down', 'arrow_down'),
        ('left', 'arrow_left'),
        ('right', 'arrow_right'),
    ])
    def test_named_keys(self, key, identifier):
        event = event_from_urwid(key)
        assert event.named
        assert event.key == identifier

    def test_plain_character(self):
        event = event_from_urwid('j')
        assert event.key == 'j'
        assert not event.named
        assert event.mods == Modifiers()

    def test_ctrl_character(self):
        assert event_from_urwid('ctrl w').mods == Modifiers(control_key=True)

    def test_meta_is_alt(self):
        assert event_from_urwid('meta h').mods == Modifiers(alt_key=True)

    def test_stacked_modifiers(self):
        event = event_from_urwid('shift ctrl right')
        assert event.key == 'right'
        assert not event.named
        assert event.mods == Modifiers(shift_key=True, control_key=True)

    def test_space(self):
        assert event_from_urwid(' ').key == 'space'

    def test_function_key(self):
        assert event_from_urwid('f5').key == 'f5'

    @pytest.mark.parametrize("key", [('mouse press', 1, 2, 3), '', None])
    def test_non_keys(self, key):
        assert event_from_urwid(key) is None

    def test_close_help_keys(self):
        assert 'esc' in KEY_CLOSE_HELP and 'q' in KEY_CLOSE_HELP


class TestUrwidCommands:
    """urwid keys resolve against the default key map."""

    @pytest.fixture
    def dispatcher(self):
        return Dispatcher(load_choice_map())

    @pytest.mark.parametrize("key, binding", [
        ('ctrl w', '<Cr> + w'),
        ('meta h', '<Alt> + h'),
        ('J', 'J'),
        ('M', '<Sh> + M'),
        ('j', 'j'),
        ('1', '1'),
    ])
    def test_command_matches_binding(self, dispatcher, key, binding):
        assert dispatcher.command_for(event_from_urwid(key)) == parse_command(binding)
