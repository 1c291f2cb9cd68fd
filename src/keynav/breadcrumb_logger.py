"""
Breadcrumb logging for input mode transitions.
Provides visibility into how the user moves between key map modes.
"""

import logging
import time
from typing import List, Optional, Tuple

# Dedicated logger for mode breadcrumbs
breadcrumb_logger = logging.getLogger('KeyNav.Breadcrumbs')

# Number of transitions kept in the path
MAX_PATH_LENGTH = 10


class ModeBreadcrumb:
    """Tracks mode transitions and logs them as breadcrumbs."""

    def __init__(self, initial_mode: Optional[str] = None):
        self.current_mode: Optional[str] = None
        self.mode_start_time: Optional[float] = None
        self.navigation_path: List[Tuple[str, float]] = []
        if initial_mode is not None:
            self.did_enter_mode(initial_mode)

    def did_enter_mode(self, mode: str, reason: Optional[str] = None):
        """Log a transition into ``mode``."""
        now = time.time()

        if self.current_mode and self.mode_start_time:
            duration = now - self.mode_start_time
            breadcrumb_logger.info(f"Mode '{self.current_mode}' active for {duration:.2f}s")

        self.current_mode = mode
        self.mode_start_time = now
        self.navigation_path.append((mode, now))

        reason_str = f" ({reason})" if reason else ""
        breadcrumb_logger.info(f"Mode transition: entered '{mode}'{reason_str}")

        if len(self.navigation_path) > MAX_PATH_LENGTH:
            self.navigation_path = self.navigation_path[-MAX_PATH_LENGTH:]

    def log_action(self, action: str, mode: Optional[str] = None):
        """Log an action run from within a mode."""
        current = mode or self.current_mode
        breadcrumb_logger.info(f"Action in '{current}': {action}")

    def get_navigation_summary(self) -> str:
        if not self.navigation_path:
            return "No mode history"
        return " -> ".join(mode for mode, _ in self.navigation_path)
