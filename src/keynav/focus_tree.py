"""
Focus tree for keyboard navigation.

The focus tree records every focusable widget on screen as a Leaf, groups
leaves under Nodes, and assigns top-level nodes to Windows. Navigation steps
cyclically through windows, through the nodes of the current window, and
through the leaves of the current node.

All elements live in flat dictionaries keyed by UUID and refer to each other
only by id, so parent/child links never form reference cycles.

Widgets are recreated every frame, so a *transient* tree is built from
scratch each frame and merged ("grafted") into the long-lived *persistent*
tree only the first time a window appears. After that the persistent tree's
cursors stay authoritative.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Tuple

logger = logging.getLogger('KeyNav.Focus')


@dataclass
class Leaf:
    """A single focusable element, identified by its UI handle."""
    handle: Hashable
    leaf_id: uuid.UUID = field(default_factory=uuid.uuid4)
    parent: Optional[uuid.UUID] = None


@dataclass
class Node:
    """A navigable grouping of leaves and child nodes."""
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    parent: Optional[uuid.UUID] = None
    nodes: List[uuid.UUID] = field(default_factory=list)
    leaves: List[uuid.UUID] = field(default_factory=list)
    window: Optional[uuid.UUID] = None
    node_index: int = 0
    leaf_index: int = 0

    def with_window(self, window: uuid.UUID) -> None:
        self.window = window

    def with_branch(self, node: 'Node') -> None:
        """Adopt ``node`` as a child node."""
        node.parent = self.id
        self.nodes.append(node.id)

    def current_leaf(self) -> uuid.UUID:
        assert self.leaves, f"node {self.id} has no leaves"
        return self.leaves[self.leaf_index % len(self.leaves)]

    def next_leaf(self) -> uuid.UUID:
        assert self.leaves, f"next_leaf called on node {self.id} without leaves"
        self.leaf_index = (self.leaf_index + 1) % len(self.leaves)
        logger.debug(f"Leaf index is {self.leaf_index}")
        return self.leaves[self.leaf_index]

    def previous_leaf(self) -> uuid.UUID:
        assert self.leaves, f"previous_leaf called on node {self.id} without leaves"
        count = len(self.leaves)
        self.leaf_index = (self.leaf_index + count - 1) % count
        logger.debug(f"Leaf index is {self.leaf_index}")
        return self.leaves[self.leaf_index]

    def current_node(self) -> uuid.UUID:
        assert self.nodes, f"node {self.id} has no child nodes"
        return self.nodes[self.node_index % len(self.nodes)]

    def next_node(self) -> uuid.UUID:
        assert self.nodes, f"next_node called on node {self.id} without child nodes"
        self.node_index = (self.node_index + 1) % len(self.nodes)
        return self.nodes[self.node_index]

    def previous_node(self) -> uuid.UUID:
        assert self.nodes, f"previous_node called on node {self.id} without child nodes"
        count = len(self.nodes)
        self.node_index = (self.node_index + count - 1) % count
        return self.nodes[self.node_index]


@dataclass
class FocusTree:
    """
    Arena of leaves, nodes and windows with cyclic navigation cursors.

    ``selected`` holds the handle that should receive keyboard focus on the
    next paint; ``focusable`` consumes it.
    """
    leaves: Dict[uuid.UUID, Leaf] = field(default_factory=dict)
    nodes: Dict[uuid.UUID, Node] = field(default_factory=dict)
    windows: List[uuid.UUID] = field(default_factory=list)
    # Window id -> whether its subtree has been grafted
    flags: Dict[uuid.UUID, bool] = field(default_factory=dict)
    # Window id -> stable caller-supplied name
    window_keys: Dict[uuid.UUID, str] = field(default_factory=dict)
    selected: Optional[Hashable] = None
    current_leaf_handle: Optional[Hashable] = None
    window_index: int = 0
    # Window id -> index into that window's top-level nodes
    node_cursors: Dict[uuid.UUID, int] = field(default_factory=dict)

    # Construction

    def leaf(self, handle: Hashable) -> uuid.UUID:
        """Register an unparented leaf for a widget handle."""
        leaf = Leaf(handle)
        self.leaves[leaf.leaf_id] = leaf
        return leaf.leaf_id

    def node(self) -> uuid.UUID:
        """Register an empty node."""
        node = Node()
        self.nodes[node.id] = node
        return node.id

    def window(self, key: Optional[str] = None) -> Tuple[uuid.UUID, int]:
        """
        Append a new window, not yet loaded.

        Args:
            key: Optional stable name. Keyed windows are grafted into a
                persistent tree once per key, see ``update``.

        Returns:
            The window id and its position in the window list.
        """
        window_id = uuid.uuid4()
        self.windows.append(window_id)
        self.flags[window_id] = False
        if key is not None:
            self.window_keys[window_id] = key
        return window_id, len(self.windows) - 1

    def with_leaf(self, node_id: uuid.UUID, leaf_id: uuid.UUID) -> None:
        """Attach a leaf to a node, detaching it from any previous parent."""
        leaf = self.leaves.get(leaf_id)
        node = self.nodes.get(node_id)
        if leaf is None or node is None:
            logger.warning(f"Cannot attach leaf {leaf_id} to node {node_id}: not in tree")
            return

        if leaf.parent is not None and leaf.parent != node_id:
            previous = self.nodes.get(leaf.parent)
            if previous is not None and leaf_id in previous.leaves:
                previous.leaves.remove(leaf_id)
        leaf.parent = node_id
        if leaf_id not in node.leaves:
            node.leaves.append(leaf_id)

    def with_new_leaf(self, node_id: uuid.UUID, handle: Hashable) -> uuid.UUID:
        leaf_id = self.leaf(handle)
        self.with_leaf(node_id, leaf_id)
        return leaf_id

    def with_branch(self, parent_id: uuid.UUID, child_id: uuid.UUID) -> None:
        """Attach ``child_id`` as a child node of ``parent_id``."""
        parent = self.nodes.get(parent_id)
        child = self.nodes.get(child_id)
        if parent is None or child is None:
            logger.warning(f"Cannot attach node {child_id} to node {parent_id}: not in tree")
            return

        if child.parent is not None and child.parent != parent_id:
            previous = self.nodes.get(child.parent)
            if previous is not None and child_id in previous.nodes:
                previous.nodes.remove(child_id)
        if child_id not in parent.nodes:
            parent.with_branch(child)

    def with_window(self, node_id: uuid.UUID, window_id: uuid.UUID) -> None:
        node = self.nodes.get(node_id)
        if node is not None:
            node.with_window(window_id)

    def with_new_window(self, key: Optional[str] = None) -> Tuple[uuid.UUID, int]:
        """Create a window with one top-level node. Returns (node id, window index)."""
        window_id, window_index = self.window(key)
        node_id = self.node()
        self.with_window(node_id, window_id)
        return node_id, window_index

    # Windows

    def nodes_in_window(self, window_id: uuid.UUID) -> List[uuid.UUID]:
        """Top-level nodes of a window, in registration order."""
        return [node_id for node_id, node in self.nodes.items() if node.window == window_id]

    def current_window(self) -> uuid.UUID:
        assert self.windows, "current_window called on a tree without windows"
        return self.windows[self.window_index]

    def try_current_window(self) -> Optional[uuid.UUID]:
        if not self.windows:
            logger.debug("No windows in focus tree.")
            return None
        if self.window_index >= len(self.windows):
            logger.info("Window index out of bounds.")
            return None
        return self.windows[self.window_index]

    def next_window(self) -> uuid.UUID:
        """Advance to the next window, wrapping to the first."""
        assert self.windows, "next_window called on a tree without windows"
        self.window_index = (self.window_index + 1) % len(self.windows)
        return self.windows[self.window_index]

    def previous_window(self) -> uuid.UUID:
        """Retreat to the previous window, wrapping to the last."""
        assert self.windows, "previous_window called on a tree without windows"
        count = len(self.windows)
        self.window_index = (self.window_index + count - 1) % count
        return self.windows[self.window_index]

    def window_for_key(self, key: str) -> Optional[uuid.UUID]:
        for window_id, window_key in self.window_keys.items():
            if window_key == key:
                return window_id
        return None

    def select_window(self, window_id: uuid.UUID) -> bool:
        """Make ``window_id`` the current window and select its current leaf."""
        if window_id not in self.windows:
            logger.warning(f"Window {window_id} not found!")
            return False
        self.window_index = self.windows.index(window_id)
        self.select_current()
        return True

    # Nodes

    def current_node(self) -> Optional[uuid.UUID]:
        window_id = self.try_current_window()
        if window_id is None:
            return None
        nodes = self.nodes_in_window(window_id)
        if not nodes:
            return None
        index = self.node_cursors.get(window_id, 0) % len(nodes)
        return nodes[index]

    def _step_node(self, step: int) -> uuid.UUID:
        window_id = self.current_window()
        nodes = self.nodes_in_window(window_id)
        assert nodes, f"window {window_id} has no nodes"
        count = len(nodes)
        index = (self.node_cursors.get(window_id, 0) + count + step) % count
        self.node_cursors[window_id] = index
        logger.debug(f"Node index is {index}")
        return nodes[index]

    def next_node(self) -> uuid.UUID:
        """Advance to the next top-level node of the current window."""
        return self._step_node(1)

    def previous_node(self) -> uuid.UUID:
        """Retreat to the previous top-level node of the current window."""
        return self._step_node(-1)

    def next_node_inner(self) -> Optional[uuid.UUID]:
        """Advance among the child nodes of the current node."""
        node = self.nodes.get(self.current_node())
        if node is None or not node.nodes:
            return None
        return node.next_node()

    def previous_node_inner(self) -> Optional[uuid.UUID]:
        node = self.nodes.get(self.current_node())
        if node is None or not node.nodes:
            return None
        return node.previous_node()

    # Leaves

    def _current_node_with_leaves(self) -> Optional[Node]:
        node = self.nodes.get(self.current_node())
        if node is None or not node.leaves:
            logger.debug("Current node has no leaves.")
            return None
        return node

    def current_leaf(self) -> Optional[uuid.UUID]:
        node = self._current_node_with_leaves()
        return node.current_leaf() if node else None

    def current_leaf_id(self) -> Optional[Hashable]:
        """UI handle of the current leaf."""
        leaf = self.leaves.get(self.current_leaf())
        return leaf.handle if leaf else None

    def next_leaf(self) -> Optional[uuid.UUID]:
        node = self._current_node_with_leaves()
        return node.next_leaf() if node else None

    def previous_leaf(self) -> Optional[uuid.UUID]:
        node = self._current_node_with_leaves()
        return node.previous_leaf() if node else None

    # Selection

    def select(self, handle: Hashable) -> None:
        """Request keyboard focus for ``handle`` on the next paint."""
        self.selected = handle
        self.current_leaf_handle = handle

    def clear_selected(self) -> None:
        self.selected = None

    def in_focus(self, handle: Hashable) -> bool:
        return self.selected is not None and self.selected == handle

    def focusable(self, handle: Hashable, request_focus: Callable[[], Any]) -> bool:
        """
        Grant focus to ``handle`` if it is the selected element.

        Called once per widget per frame. When the handle matches the pending
        selection, ``request_focus`` is invoked and the selection is cleared.
        """
        if not self.in_focus(handle):
            return False
        logger.debug(f"Requesting focus for {handle!r}")
        request_focus()
        self.clear_selected()
        return True

    def _select_leaf(self, leaf_id: Optional[uuid.UUID]) -> Optional[Hashable]:
        leaf = self.leaves.get(leaf_id)
        if leaf is None:
            return None
        logger.info(f"Setting select to {leaf.handle!r}")
        self.select(leaf.handle)
        return leaf.handle

    def select_current(self) -> Optional[Hashable]:
        return self._select_leaf(self.current_leaf())

    def select_next(self) -> Optional[Hashable]:
        return self._select_leaf(self.next_leaf())

    def select_previous(self) -> Optional[Hashable]:
        return self._select_leaf(self.previous_leaf())

    def select_next_node(self) -> Optional[Hashable]:
        if self.current_node() is None:
            return None
        self.next_node()
        return self.select_current()

    def select_previous_node(self) -> Optional[Hashable]:
        if self.current_node() is None:
            return None
        self.previous_node()
        return self.select_current()

    def select_next_window(self) -> Optional[Hashable]:
        if not self.windows:
            return None
        self.next_window()
        return self.select_current()

    def select_previous_window(self) -> Optional[Hashable]:
        if not self.windows:
            return None
        self.previous_window()
        return self.select_current()

    # Reconciliation

    def branch(self, window_ids: Iterable[uuid.UUID]) -> 'FocusTree':
        """Copy out the subtrees of the given windows as a new tree."""
        window_ids = [window_id for window_id in window_ids if window_id in self.windows]
        subtree = FocusTree()
        subtree.windows = list(window_ids)
        for window_id in window_ids:
            subtree.flags[window_id] = self.flags.get(window_id, False)
            if window_id in self.window_keys:
                subtree.window_keys[window_id] = self.window_keys[window_id]

        pending = [node_id for window_id in window_ids for node_id in self.nodes_in_window(window_id)]
        while pending:
            node_id = pending.pop()
            node = self.nodes.get(node_id)
            if node is None or node_id in subtree.nodes:
                continue
            subtree.nodes[node_id] = node
            pending.extend(node.nodes)
            for leaf_id in node.leaves:
                if leaf_id in self.leaves:
                    subtree.leaves[leaf_id] = self.leaves[leaf_id]
        return subtree

    def graft(self, branch: 'FocusTree') -> None:
        """Merge another tree's leaves, nodes and windows into this one."""
        self.leaves.update(branch.leaves)
        self.nodes.update(branch.nodes)
        for window_id in branch.windows:
            if window_id not in self.windows:
                self.windows.append(window_id)
            self.flags.setdefault(window_id, branch.flags.get(window_id, False))
        self.window_keys.update(branch.window_keys)

    def _is_new_window(self, branch: 'FocusTree', window_id: uuid.UUID) -> bool:
        key = branch.window_keys.get(window_id)
        return key is None or self.window_for_key(key) is None

    def update(self, transient: 'FocusTree') -> int:
        """
        Reconcile this persistent tree with the tree built this frame.

        If the current window has not been loaded (or there is none yet), the
        transient tree is grafted in and its windows are marked loaded.
        Otherwise only keyed windows never seen before are grafted. Returns
        the number of windows grafted.
        """
        current = self.try_current_window()
        if current is None or not self.flags.get(current, False):
            windows = [w for w in transient.windows if self._is_new_window(transient, w)]
            if windows == transient.windows:
                logger.info("Grafting transient tree.")
                self.graft(transient)
            else:
                self.graft(transient.branch(windows))
            if current is not None:
                self.flags[current] = True
        else:
            windows = [w for w in transient.windows
                       if w in transient.window_keys and self._is_new_window(transient, w)]
            if not windows:
                return 0
            logger.info(f"Grafting {len(windows)} new window(s).")
            self.graft(transient.branch(windows))

        for window_id in windows:
            self.flags[window_id] = True
        return len(windows)
