"""
Key event dispatcher.

Turns key presses into Commands, resolves them against the ChoiceMap in the
current mode, and runs the resulting actions through an ActionHandler.

Mode selection is single-shot: a group binding switches the mode, the next
command is resolved in that mode, and running any actions returns input to
the default mode.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from .actions import Action, NamedKeyAction, NavigationAction, NoOp, WindowAction
from .breadcrumb_logger import ModeBreadcrumb
from .choice_map import ChoiceMap, DEFAULT_MODE, Resolution, Run, SwitchMode, UNRECOGNIZED
from .focus_tree import FocusTree
from .key_grammar import Command, Modifiers, NO_MODIFIERS

logger = logging.getLogger('KeyNav.Dispatcher')


@dataclass(frozen=True)
class KeyEvent:
    """
    A key event observed from the window.

    ``key`` is a named-key identifier (``'enter'``, ``'arrow_left'``) when
    ``named`` is set, otherwise the character produced. ``mods`` overrides the
    dispatcher's live modifier state when the event carries its own.
    """
    key: str
    pressed: bool = True
    named: bool = False
    mods: Optional[Modifiers] = None


class ActionHandler:
    """
    Receives the actions a dispatcher runs, one method per category.

    The base class logs and ignores everything; subclasses override the
    categories they own.
    """

    def on_window_action(self, action: WindowAction) -> None:
        logger.debug(f"Window action {action} not handled")

    def on_navigation(self, action: NavigationAction) -> None:
        logger.debug(f"Navigation action {action} not handled")

    def on_named_key(self, action: NamedKeyAction) -> None:
        logger.debug(f"Named key {action} not handled")


# Arrow keys move focus the same way as their navigation counterparts
ARROW_NAVIGATION = {
    NamedKeyAction.ARROW_UP: NavigationAction.UP,
    NamedKeyAction.ARROW_DOWN: NavigationAction.DOWN,
    NamedKeyAction.ARROW_LEFT: NavigationAction.LEFT,
    NamedKeyAction.ARROW_RIGHT: NavigationAction.RIGHT,
}


class FocusActionHandler(ActionHandler):
    """
    Runs navigation actions against a FocusTree.

    Window-manager actions, row movement and escape are forwarded to optional
    callbacks supplied by the host. Enter records an activation request for
    the element in focus, read back with ``take_activation``.
    """

    def __init__(self, tree: FocusTree,
                 on_window_action: Optional[Callable[[WindowAction], None]] = None,
                 on_row: Optional[Callable[[int], None]] = None,
                 on_escape: Optional[Callable[[], None]] = None):
        self.tree = tree
        self._on_window_action = on_window_action
        self._on_row = on_row
        self._on_escape = on_escape
        self.activation = None

    def on_window_action(self, action: WindowAction) -> None:
        if self._on_window_action is None:
            super().on_window_action(action)
            return
        self._on_window_action(action)

    def on_navigation(self, action: NavigationAction) -> None:
        tree = self.tree
        if action in (NavigationAction.RIGHT, NavigationAction.NEXT):
            tree.select_next_node()
        elif action in (NavigationAction.LEFT, NavigationAction.PREVIOUS):
            tree.select_previous_node()
        elif action == NavigationAction.UP:
            tree.select_previous()
        elif action == NavigationAction.DOWN:
            tree.select_next()
        elif action == NavigationAction.NEXT_WINDOW:
            tree.select_next_window()
        elif action == NavigationAction.PREVIOUS_WINDOW:
            tree.select_previous_window()
        elif action in (NavigationAction.NEXT_ROW, NavigationAction.PREVIOUS_ROW):
            step = 1 if action == NavigationAction.NEXT_ROW else -1
            if self._on_row is None:
                logger.debug(f"No row handler for {action}")
            else:
                logger.info(f"Selecting {'next' if step > 0 else 'previous'} row.")
                self._on_row(step)

    def on_named_key(self, action: NamedKeyAction) -> None:
        if action in ARROW_NAVIGATION:
            self.on_navigation(ARROW_NAVIGATION[action])
        elif action == NamedKeyAction.ENTER:
            self.activation = self.tree.current_leaf_id()
            logger.debug(f"Activation requested for {self.activation!r}")
        elif action == NamedKeyAction.ESCAPE:
            if self._on_escape is not None:
                self._on_escape()

    def take_activation(self):
        """Return and clear the pending activation handle."""
        activation, self.activation = self.activation, None
        return activation


class Dispatcher:
    """
    Resolves key events against a ChoiceMap and tracks the current mode.

    Not thread-safe: a host running the dispatcher from several threads must
    serialize access to the whole session.
    """

    def __init__(self, choice_map: ChoiceMap, handler: Optional[ActionHandler] = None,
                 default_mode: str = DEFAULT_MODE):
        self.choice_map = choice_map
        self.handler = handler or ActionHandler()
        self.default_mode = default_mode
        self.mode = default_mode
        # Mode the most recently run actions were resolved in
        self.action_mode = default_mode
        self.modifiers = NO_MODIFIERS
        self.breadcrumbs = ModeBreadcrumb(default_mode)

    def modifiers_changed(self, mods: Modifiers) -> None:
        logger.debug(f"Modifiers changed to {mods!r}")
        self.modifiers = mods

    def command_for(self, event: KeyEvent) -> Optional[Command]:
        """Build the Command for a key event."""
        if not event.key:
            return None
        if event.named:
            return Command(event.key)
        mods = event.mods if event.mods is not None else self.modifiers
        if event.key == event.key.upper():
            mods = mods | Modifiers(shift_key=True)
        return Command(event.key, mods)

    def dispatch(self, event: KeyEvent) -> Optional[Resolution]:
        """Handle one key event. Releases are ignored and return None."""
        if not event.pressed:
            return None
        command = self.command_for(event)
        if command is None:
            return UNRECOGNIZED
        return self.handle_command(command)

    def handle_command(self, command: Command) -> Resolution:
        resolution = self.choice_map.resolve(self.mode, command)
        logger.debug(f"'{command}' in mode '{self.mode}' -> {resolution}")

        if isinstance(resolution, SwitchMode):
            self.mode = resolution.mode
            self.breadcrumbs.did_enter_mode(resolution.mode, reason=str(command))
        elif isinstance(resolution, Run):
            self.run(resolution.actions)
        else:
            logger.debug(f"Command '{command}' not recognized in mode '{self.mode}'.")
        return resolution

    def reset_mode(self) -> None:
        if self.mode != self.default_mode:
            self.mode = self.default_mode
            self.breadcrumbs.did_enter_mode(self.default_mode, reason="actions run")

    def run(self, actions: Sequence[Action]) -> None:
        """
        Return to the default mode, then execute ``actions`` in order.

        ``action_mode`` keeps the mode they were resolved in, so handlers can
        tell an escape that closes a group from one in the default mode.
        """
        mode = self.mode
        self.action_mode = mode
        self.reset_mode()
        for action in actions:
            self.breadcrumbs.log_action(str(action), mode)
            self.execute(action)

    def execute(self, action: Action) -> None:
        if isinstance(action, WindowAction):
            self.handler.on_window_action(action)
        elif isinstance(action, NavigationAction):
            self.handler.on_navigation(action)
        elif isinstance(action, NamedKeyAction):
            self.handler.on_named_key(action)
        elif isinstance(action, NoOp):
            logger.debug("Taking no action.")
        else:
            raise TypeError(f"Unknown action type: {type(action).__name__}")
