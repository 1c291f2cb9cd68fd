"""
KeyNav: keyboard-driven focus navigation for terminal UIs.
"""

__version__ = "0.1.0"

from .actions import (
    Action,
    NamedKeyAction,
    NavigationAction,
    NoOp,
    WindowAction,
    action_from_string,
    action_to_string,
)
from .choice_map import ChoiceMap, CommandGroup, Run, SwitchMode, UNRECOGNIZED
from .config import load_choice_map
from .dispatcher import ActionHandler, Dispatcher, FocusActionHandler, KeyEvent
from .error_handler_util import ConfigError, KeyNavError, ParseError
from .focus_tree import FocusTree
from .key_grammar import Command, Modifiers, format_command, parse_command
from .session import Session

__all__ = [
    '__version__',
    'Action',
    'WindowAction',
    'NavigationAction',
    'NamedKeyAction',
    'NoOp',
    'action_from_string',
    'action_to_string',
    'ChoiceMap',
    'CommandGroup',
    'Run',
    'SwitchMode',
    'UNRECOGNIZED',
    'load_choice_map',
    'ActionHandler',
    'Dispatcher',
    'FocusActionHandler',
    'KeyEvent',
    'KeyNavError',
    'ParseError',
    'ConfigError',
    'FocusTree',
    'Command',
    'Modifiers',
    'format_command',
    'parse_command',
    'Session',
]
