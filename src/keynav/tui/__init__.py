"""
urwid front end for KeyNav.
"""

from .app import KeyNavApp, run_ui
from .key_bindings import event_from_urwid

__all__ = [
    'KeyNavApp',
    'run_ui',
    'event_from_urwid',
]
