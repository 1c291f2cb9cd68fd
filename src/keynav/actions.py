"""
Action taxonomy for KeyNav.

Every function a key binding can trigger is a member of one of four closed
categories:

- WindowAction: window-manager toggles (help, fullscreen, ...)
- NavigationAction: focus navigation across windows, groups and items
- NamedKeyAction: the named keys bound by default (enter, escape, arrows)
- NoOp: do nothing

Each member has a canonical lowercase identifier used in configuration files
and a rank that places all actions in one flat total order. NoOp always ranks
last.
"""

import logging
from enum import Enum
from functools import total_ordering
from typing import Iterable, List, Union

logger = logging.getLogger('KeyNav.Actions')

# Rank offsets per category
WINDOW_BASE_RANK = 0
NAVIGATION_BASE_RANK = 100
NAMED_KEY_BASE_RANK = 200
NO_OP_RANK = 999

NO_OP_IDENTIFIER = 'be'


@total_ordering
class _RankedAction(Enum):
    """Shared behaviour for the action categories."""

    @property
    def identifier(self) -> str:
        return self.value[0]

    @property
    def label(self) -> str:
        """Human readable name, e.g. ``'Next Window'``."""
        return self.value[1]

    @property
    def local_rank(self) -> int:
        return list(type(self)).index(self)

    @property
    def rank(self) -> int:
        return _BASE_RANKS[type(self)] + self.local_rank

    @classmethod
    def from_identifier(cls, identifier: str):
        for member in cls:
            if member.identifier == identifier:
                return member
        raise ValueError(f"Undefined {cls.__name__}: '{identifier}'")

    def __lt__(self, other):
        if not hasattr(other, 'rank'):
            return NotImplemented
        return self.rank < other.rank

    def __str__(self):
        return self.identifier


class WindowAction(_RankedAction):
    HELP = ('help', 'Help')
    MENU = ('menu', 'Menu')
    DECORATIONS = ('decorations', 'Decorations')
    FULLSCREEN = ('fullscreen', 'Fullscreen')
    MAXIMIZE = ('maximize', 'Maximize')
    MINIMIZE = ('minimize', 'Minimize')


class NavigationAction(_RankedAction):
    RIGHT = ('right', 'Right')
    LEFT = ('left', 'Left')
    UP = ('up', 'Up')
    DOWN = ('down', 'Down')
    NEXT = ('next', 'Next')
    PREVIOUS = ('previous', 'Previous')
    NEXT_WINDOW = ('next_window', 'Next Window')
    PREVIOUS_WINDOW = ('previous_window', 'Previous Window')
    NEXT_ROW = ('next_row', 'Next Row')
    PREVIOUS_ROW = ('previous_row', 'Previous Row')


class NamedKeyAction(_RankedAction):
    ENTER = ('enter', 'Enter')
    ESCAPE = ('escape', 'Escape')
    ARROW_UP = ('arrow_up', 'Arrow Up')
    ARROW_DOWN = ('arrow_down', 'Arrow Down')
    ARROW_LEFT = ('arrow_left', 'Arrow Left')
    ARROW_RIGHT = ('arrow_right', 'Arrow Right')


class NoOp(_RankedAction):
    BE = (NO_OP_IDENTIFIER, 'Be')

    @property
    def rank(self) -> int:
        return NO_OP_RANK


_BASE_RANKS = {
    WindowAction: WINDOW_BASE_RANK,
    NavigationAction: NAVIGATION_BASE_RANK,
    NamedKeyAction: NAMED_KEY_BASE_RANK,
    NoOp: NO_OP_RANK,
}

# Lookup order for from_string
CATEGORIES = (WindowAction, NavigationAction, NamedKeyAction)

Action = Union[WindowAction, NavigationAction, NamedKeyAction, NoOp]

NO_OP = NoOp.BE


def default_action() -> Action:
    return NO_OP


def action_to_string(action: Action) -> str:
    """Canonical identifier of an action, the inverse of ``action_from_string``."""
    return action.identifier


def action_from_string(text: str) -> Action:
    """
    Look up an action by identifier.

    Categories are tried in a fixed order (window, navigation, named key),
    then the no-op token. Identifiers are matched case-insensitively.

    Raises:
        ValueError: If no category defines the identifier.
    """
    token = text.strip().lower()
    for category in CATEGORIES:
        try:
            return category.from_identifier(token)
        except ValueError:
            continue
    if token == NO_OP_IDENTIFIER:
        return NO_OP
    raise ValueError(f"Undefined action: '{text}'")


def parse_action(text: str) -> Action:
    """Like ``action_from_string`` but degrades to NoOp on unknown input."""
    try:
        return action_from_string(text)
    except ValueError:
        logger.warning(f"Unknown action '{text}', treating as no-op")
        return NO_OP


def all_actions() -> List[Action]:
    """Every concrete action, in rank order."""
    actions = [member for category in CATEGORIES for member in category]
    actions.append(NO_OP)
    return actions


def sort_actions(actions: Iterable[Action]) -> List[Action]:
    return sorted(actions, key=lambda action: action.rank)
