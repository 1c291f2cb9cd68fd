"""
Bordered column of grouped buttons that registers itself in a FocusTree.
"""

from typing import Callable, Dict, List, Mapping

import urwid

from ...focus_tree import FocusTree


class FocusWindow:
    """
    One window of the demo UI.

    Each group becomes a top-level node of the window and each button a leaf
    whose handle is ``"<key>/<label>"``, so handles stay stable across frames.
    """

    def __init__(self, key: str, title: str, groups: Mapping[str, List[str]],
                 on_press: Callable[[str, urwid.Button], None]):
        self.key = key
        self.title = title
        self.groups = {name: list(labels) for name, labels in groups.items()}
        # handle -> position in the list walker
        self.positions: Dict[str, int] = {}

        items = []
        for name, labels in self.groups.items():
            items.append(urwid.AttrMap(urwid.Text(name), 'group_header'))
            for label in labels:
                handle = self.handle(label)
                button = urwid.Button(label)
                urwid.connect_signal(button, 'click', on_press, user_args=[handle])
                self.positions[handle] = len(items)
                items.append(urwid.AttrMap(button, None, focus_map='reversed'))

        self.walker = urwid.SimpleFocusListWalker(items)
        self.listbox = urwid.ListBox(self.walker)
        self.linebox = urwid.LineBox(self.listbox, title=title)
        self.widget = urwid.AttrMap(self.linebox, 'window')

    def handle(self, label: str) -> str:
        return f"{self.key}/{label}"

    def register(self, tree: FocusTree) -> None:
        """Add this window, one node per group and one leaf per button."""
        window_id, _ = tree.window(self.key)
        for labels in self.groups.values():
            node_id = tree.node()
            tree.with_window(node_id, window_id)
            for label in labels:
                tree.with_new_leaf(node_id, self.handle(label))

    def focus(self, handle: str) -> None:
        self.listbox.focus_position = self.positions[handle]

    def set_decorated(self, decorated: bool) -> None:
        self.linebox.set_title(self.title if decorated else '')
