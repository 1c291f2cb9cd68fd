"""
urwid key names for the KeyNav TUI.
Translates urwid keypress strings ('ctrl w', 'meta h', 'J', 'esc') into
KeyEvents the dispatcher understands.
"""

from typing import Optional

from ..actions import NamedKeyAction
from ..dispatcher import KeyEvent
from ..key_grammar import Modifiers

# urwid key -> named key identifier
URWID_NAMED_KEYS = {
    'enter': NamedKeyAction.ENTER.identifier,
    'esc': NamedKeyAction.ESCAPE.identifier,
    'up': NamedKeyAction.ARROW_UP.identifier,
    'down': NamedKeyAction.ARROW_DOWN.identifier,
    'left': NamedKeyAction.ARROW_LEFT.identifier,
    'right': NamedKeyAction.ARROW_RIGHT.identifier,
}

# urwid modifier prefix -> Modifiers field
URWID_MODIFIERS = {
    'shift': 'shift_key',
    'ctrl': 'control_key',
    'meta': 'alt_key',
    'super': 'super_key',
}

# Keys handled by the help dialog itself
KEY_CLOSE_HELP = ('esc', 'q')


def event_from_urwid(key) -> Optional[KeyEvent]:
    """
    Build a KeyEvent from an urwid keypress.

    Returns None for mouse events and anything that is not a key name.
    """
    if not isinstance(key, str) or not key:
        return None

    if key == ' ':
        return KeyEvent('space', mods=Modifiers())

    tokens = key.split(' ')
    names = []
    while len(tokens) > 1 and tokens[0] in URWID_MODIFIERS:
        names.append(URWID_MODIFIERS[tokens.pop(0)])
    name = ''.join(tokens)
    mods = Modifiers.from_names(names)

    if not names and name in URWID_NAMED_KEYS:
        return KeyEvent(URWID_NAMED_KEYS[name], named=True)
    return KeyEvent(name, mods=mods)
