"""
Demo terminal UI driving urwid widgets through the KeyNav dispatcher.

Every key goes through the session first. Keys the active mode does not
recognize fall through to urwid unchanged.
"""

import logging
from functools import partial
from typing import Optional

import urwid

from ..actions import WindowAction
from ..choice_map import ChoiceMap, DEFAULT_MODE, Unrecognized
from ..session import Session
from .key_bindings import event_from_urwid
from .widgets import FocusWindow, HelpDialog

logger = logging.getLogger('KeyNav.TUI')

PALETTE = [
    ('body', 'default', 'default'),
    ('footer', 'dark gray', 'default'),
    ('mode', 'light cyan,bold', 'default'),
    ('reversed', 'default,standout', 'default'),
    ('window', 'default', 'default'),
    ('group_header', 'light green,bold', 'default'),
    ('row', 'default', 'default'),
    ('row_selected', 'black', 'light cyan'),
    ('bold', 'white,bold', 'default'),
    ('dark gray', 'dark gray', 'default'),
]

DEMO_WINDOWS = [
    ('side', 'Data', {
        'Sources': ['Load Data', 'Sample Data'],
        'Reports': ['Compare', 'Drift', 'Duplicates'],
    }),
    ('load', 'Load', {
        'File': ['Open', 'Reload'],
        'Confirm': ['Load', 'Cancel'],
    }),
]

DEMO_ROWS = [f'record {index:02d}' for index in range(1, 9)]


class KeyNavApp:
    """Two button windows and a row list, navigated from the keyboard only."""

    def __init__(self, choice_map: Optional[ChoiceMap] = None):
        self.session = Session(
            choice_map,
            on_window_action=self._on_window_action,
            on_row=self._on_row,
            on_escape=self._on_escape,
        )
        self.loop = None
        self.help_visible = False
        self.exit_requested = False
        self.activated = None
        self.decorated = True
        self.window_state = {action: False for action in (
            WindowAction.FULLSCREEN, WindowAction.MAXIMIZE, WindowAction.MINIMIZE)}

        self.windows = [FocusWindow(key, title, groups, self._on_click)
                        for key, title, groups in DEMO_WINDOWS]

        self.row_index = 0
        self.rows = [urwid.AttrMap(urwid.Text(label), 'row') for label in DEMO_ROWS]
        self.rows_box = urwid.LineBox(urwid.ListBox(urwid.SimpleFocusListWalker(self.rows)), title='Rows')

        self.columns = urwid.Columns([window.widget for window in self.windows] + [self.rows_box])
        self.status = urwid.Text('')
        self.mode_text = urwid.Text('')
        footer = urwid.AttrMap(urwid.Columns([self.status, ('pack', self.mode_text)]), 'footer')
        self.main_layout = urwid.Frame(body=urwid.AttrMap(self.columns, 'body'), footer=footer)

        self._highlight_row()
        self.render_frame()

    # Frames

    def render_frame(self) -> None:
        """Rebuild the transient focus tree and let each button claim focus."""
        transient = self.session.begin_frame()
        for window in self.windows:
            window.register(transient)
        self.session.end_frame(transient)

        tree = self.session.focus_tree
        for column, window in enumerate(self.windows):
            for handle in window.positions:
                tree.focusable(handle, partial(self._focus, column, handle))

        activation = self.session.handler.take_activation()
        if activation is not None:
            self._activate(activation)
        self._refresh_footer()

    def _focus(self, column: int, handle: str) -> None:
        self.columns.focus_position = column
        self.windows[column].focus(handle)

    def _refresh_footer(self) -> None:
        self.mode_text.set_text(('mode', f' [{self.session.mode}] '))

    # Input

    def input_filter(self, keys, raw):
        """Route keys through the dispatcher; pass on the ones it ignores."""
        if self.help_visible:
            return keys

        remaining = []
        for key in keys:
            event = event_from_urwid(key)
            if event is None:
                remaining.append(key)
                continue
            resolution = self.session.key_pressed(event)
            if isinstance(resolution, Unrecognized):
                remaining.append(key)
            if self.exit_requested:
                raise urwid.ExitMainLoop()
        self.render_frame()
        return remaining

    def unhandled_input(self, key):
        if key == 'close_help':
            self._close_help_dialog()
            return True
        logger.debug(f"unhandled_input: ignoring {key!r}")
        return None

    # Callbacks from the focus handler

    def _on_click(self, handle: str, button) -> None:
        self.session.focus_tree.select(handle)
        self._activate(handle)

    def _activate(self, handle) -> None:
        self.activated = handle
        logger.info(f"Activated {handle!r}")
        self.status.set_text(f"Activated: {handle}")

    def _on_row(self, step: int) -> None:
        self.row_index = (self.row_index + step) % len(self.rows)
        self._highlight_row()

    def _highlight_row(self) -> None:
        for index, row in enumerate(self.rows):
            row.set_attr_map({None: 'row_selected' if index == self.row_index else 'row'})

    def _on_escape(self) -> None:
        group_mode = self.session.dispatcher.action_mode
        if group_mode != DEFAULT_MODE:
            logger.info(f"Escape closed the '{group_mode}' group.")
            return
        logger.info("Escape in normal mode, exiting.")
        self.exit_requested = True

    def _on_window_action(self, action: WindowAction) -> None:
        if action == WindowAction.HELP:
            self._show_help_dialog()
        elif action == WindowAction.DECORATIONS:
            self.decorated = not self.decorated
            for window in self.windows:
                window.set_decorated(self.decorated)
            self.status.set_text(f"Decorations {'on' if self.decorated else 'off'}")
        elif action in self.window_state:
            self.window_state[action] = not self.window_state[action]
            self.status.set_text(f"{action.label}: {'on' if self.window_state[action] else 'off'}")
        else:
            self.status.set_text(f"{action.label} requested")

    # Help overlay

    def _show_help_dialog(self) -> None:
        """Show the help dialog as an overlay."""
        help_dialog = HelpDialog(self.session.choice_map, DEFAULT_MODE)
        overlay = urwid.Overlay(
            help_dialog,
            self.main_layout,
            align='center',
            width=('relative', 80),
            valign='middle',
            height=('relative', 90)
        )
        self.help_visible = True
        if self.loop is not None:
            self.loop.widget = overlay

    def _close_help_dialog(self) -> None:
        self.help_visible = False
        if self.loop is not None:
            self.loop.widget = self.main_layout

    def run(self):
        """Run the main loop. Returns the last activated handle, if any."""
        self.loop = urwid.MainLoop(
            self.main_layout,
            PALETTE,
            unhandled_input=self.unhandled_input,
            input_filter=self.input_filter,
            handle_mouse=False
        )
        try:
            self.loop.run()
        except Exception:
            logger.exception("TUI error")
            raise
        logger.info(f"Navigation path: {self.session.dispatcher.breadcrumbs.get_navigation_summary()}")
        return self.activated


def run_ui(choice_map: Optional[ChoiceMap] = None):
    return KeyNavApp(choice_map).run()
