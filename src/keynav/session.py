"""
Session state owning the key map, the persistent focus tree and the dispatcher.
"""

import logging
from typing import Callable, Optional

from .actions import WindowAction
from .choice_map import ChoiceMap
from .config import load_choice_map
from .dispatcher import Dispatcher, FocusActionHandler, KeyEvent
from .focus_tree import FocusTree

logger = logging.getLogger('KeyNav.Session')


class Session:
    """
    Long-lived input state for one UI.

    Each frame the host calls ``begin_frame`` to get a fresh transient tree,
    registers its widgets in it, then hands it back through ``end_frame``.
    """

    def __init__(self, choice_map: Optional[ChoiceMap] = None,
                 on_window_action: Optional[Callable[[WindowAction], None]] = None,
                 on_row: Optional[Callable[[int], None]] = None,
                 on_escape: Optional[Callable[[], None]] = None):
        self.choice_map = choice_map if choice_map is not None else load_choice_map()
        self.focus_tree = FocusTree()
        self.handler = FocusActionHandler(
            self.focus_tree,
            on_window_action=on_window_action,
            on_row=on_row,
            on_escape=on_escape,
        )
        self.dispatcher = Dispatcher(self.choice_map, self.handler)
        self.frame = 0

    @property
    def mode(self) -> str:
        return self.dispatcher.mode

    def begin_frame(self) -> FocusTree:
        self.frame += 1
        return FocusTree()

    def end_frame(self, transient: FocusTree) -> int:
        """Graft the frame's tree if it describes windows not yet loaded. Returns the count grafted."""
        grafted = self.focus_tree.update(transient)
        if grafted:
            logger.debug(f"Frame {self.frame}: grafted {grafted} window(s)")
            if self.focus_tree.selected is None and self.focus_tree.current_leaf_handle is None:
                self.focus_tree.select_current()
        return grafted

    def key_pressed(self, event: KeyEvent):
        return self.dispatcher.dispatch(event)
