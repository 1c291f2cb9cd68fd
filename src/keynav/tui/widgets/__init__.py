"""
Reusable UI widgets for the KeyNav TUI.
"""

from .help_dialog import HelpDialog
from .focus_window import FocusWindow

__all__ = [
    'HelpDialog',
    'FocusWindow',
]
