#!/usr/bin/env python3
"""
Unit tests for ErrorHandlerUtil class.

Tests the log-and-continue helpers, exception chaining and the error types
used throughout KeyNav.
"""

import logging
from unittest.mock import Mock, patch

import pytest

from keynav.error_handler_util import (
    ConfigError,
    ErrorContext,
    ErrorHandlerUtil,
    KeyNavError,
    ParseError,
)


@pytest.fixture
def mock_logger():
    """Create mock logger for testing."""
    return Mock(spec=logging.Logger)


def test_error_hierarchy():
    """ParseError and ConfigError are both KeyNav errors."""
    assert issubclass(ParseError, KeyNavError)
    assert issubclass(ParseError, ValueError)
    assert issubclass(ConfigError, KeyNavError)


def test_parse_error_carries_input():
    error = ParseError("bad", text="<X> + j", remainder="<X> + j")
    assert str(error) == "bad"
    assert error.text == "<X> + j"


def test_config_error_carries_section():
    assert ConfigError("missing", section="groups").section == "groups"


def test_log_and_raise_basic_functionality(mock_logger):
    """Test basic log_and_raise functionality."""
    with pytest.raises(KeyNavError, match="Test error message"):
        ErrorHandlerUtil.log_and_raise(
            message="Test error message",
            logger_instance=mock_logger
        )

    mock_logger.log.assert_called_once_with(logging.ERROR, "Test error message")


def test_log_and_raise_with_cause(mock_logger):
    """Test log_and_raise with exception chaining."""
    original_error = ValueError("Original error")

    with pytest.raises(ConfigError, match="Chained error") as exc_info:
        ErrorHandlerUtil.log_and_raise(
            message="Chained error",
            exception_class=ConfigError,
            logger_instance=mock_logger,
            cause=original_error
        )

    assert exc_info.value.__cause__ is original_error


def test_log_and_raise_default_logger():
    """Test log_and_raise uses default logger when none provided."""
    with patch('keynav.error_handler_util.logger') as mock_default_logger:
        with pytest.raises(KeyNavError):
            ErrorHandlerUtil.log_and_raise("Default logger test")

        mock_default_logger.log.assert_called_once_with(logging.ERROR, "Default logger test")


def test_handle_with_fallback_success(mock_logger):
    result = ErrorHandlerUtil.handle_with_fallback(
        lambda: "ok",
        fallback_value="fallback",
        logger_instance=mock_logger
    )

    assert result == "ok"
    mock_logger.log.assert_not_called()


def test_handle_with_fallback_absorbs_handled_errors(mock_logger):
    def failing():
        raise ConfigError("broken document")

    result = ErrorHandlerUtil.handle_with_fallback(
        failing,
        fallback_value={},
        error_message="Loading key map",
        logger_instance=mock_logger
    )

    assert result == {}
    mock_logger.log.assert_called_once_with(logging.WARNING, "Loading key map: broken document")


def test_handle_with_fallback_propagates_other_errors(mock_logger):
    """Programming errors are not absorbed."""
    def failing():
        raise TypeError("bug")

    with pytest.raises(TypeError):
        ErrorHandlerUtil.handle_with_fallback(failing, logger_instance=mock_logger)


def test_handle_with_fallback_narrow_handled_type(mock_logger):
    def failing():
        raise ParseError("not a config error")

    with pytest.raises(ParseError):
        ErrorHandlerUtil.handle_with_fallback(failing, logger_instance=mock_logger, handled=ConfigError)


def test_log_and_continue(mock_logger):
    ErrorHandlerUtil.log_and_continue(ValueError("oops"), context="Parsing", logger_instance=mock_logger)
    mock_logger.log.assert_called_once_with(logging.WARNING, "Parsing failed: oops")


class TestErrorContext:
    """ErrorContext binds the helpers to a component logger."""

    def test_create_error_context_logger_name(self):
        context = ErrorHandlerUtil.create_error_context('ChoiceMap')
        assert isinstance(context, ErrorContext)
        assert context.logger.name == 'KeyNav.ChoiceMap'

    def test_create_error_context_custom_logger(self):
        context = ErrorHandlerUtil.create_error_context('X', logger_name='Custom.Logger')
        assert context.logger.name == 'Custom.Logger'

    def test_skip_counts_and_logs(self, mock_logger):
        context = ErrorContext('ChoiceMap', mock_logger)
        context.skip('<X> + j', 'unknown modifier')
        context.skip('k', 'bad value')

        assert context.skipped == 2
        assert mock_logger.warning.call_count == 2
        assert "<X> + j" in mock_logger.warning.call_args_list[0][0][0]

    def test_context_fallback(self, mock_logger):
        context = ErrorContext('Config', mock_logger)

        def failing():
            raise ConfigError("missing [commands] section")

        assert context.handle_with_fallback(failing, fallback_value={}) == {}
        mock_logger.log.assert_called_once()

    def test_context_log_and_raise(self, mock_logger):
        context = ErrorContext('Config', mock_logger)
        with pytest.raises(ConfigError):
            context.log_and_raise("bad", exception_class=ConfigError)
