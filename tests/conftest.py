"""Shared pytest fixtures for KeyNav tests."""

import logging

import pytest

from keynav.session import Session


@pytest.fixture
def session_factory():
    """Build Sessions with the default key map unless one is given."""
    def _make(choice_map=None, **callbacks):
        return Session(choice_map, **callbacks)
    return _make


@pytest.fixture(autouse=True)
def restore_keynav_logger():
    """Undo handlers and level changes made by setup_logging."""
    keynav_logger = logging.getLogger('KeyNav')
    handlers = list(keynav_logger.handlers)
    level = keynav_logger.level
    yield
    for handler in keynav_logger.handlers[:]:
        if handler not in handlers:
            keynav_logger.removeHandler(handler)
            handler.close()
    keynav_logger.setLevel(level)
