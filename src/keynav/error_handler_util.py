"""
Error types and error handling utilities for KeyNav.

Nothing in the input engine is fatal to the host application: malformed
bindings and configuration entries are logged where they are found and then
skipped. The helpers here keep that log-and-continue pattern uniform across
components.
"""

import logging
from typing import Optional, Any, Type

logger = logging.getLogger('KeyNav.ErrorHandler')


class KeyNavError(Exception):
    """Base class for all KeyNav errors."""


class ParseError(KeyNavError, ValueError):
    """Raised when a binding string does not match the key grammar."""

    def __init__(self, message: str, text: str = "", remainder: str = ""):
        super().__init__(message)
        self.text = text
        self.remainder = remainder


class ConfigError(KeyNavError):
    """Raised when a configuration document or one of its sections is unusable."""

    def __init__(self, message: str, section: Optional[str] = None):
        super().__init__(message)
        self.section = section


class ErrorHandlerUtil:
    """
    Static helpers for the log-and-continue error policy.

    Each helper takes an optional logger so messages are attributed to the
    component that hit the problem.
    """

    @staticmethod
    def log_and_raise(
        message: str,
        exception_class: Type[Exception] = KeyNavError,
        logger_instance: Optional[logging.Logger] = None,
        cause: Optional[Exception] = None,
        log_level: int = logging.ERROR
    ) -> None:
        """
        Log an error message and raise an exception.

        Args:
            message: Error message to log and include in exception
            exception_class: Type of exception to raise (default: KeyNavError)
            logger_instance: Logger to use (default: module logger)
            cause: Original exception to chain from (using 'from cause')
            log_level: Logging level to use (default: ERROR)
        """
        log_instance = logger_instance or logger
        log_instance.log(log_level, message)

        if cause:
            raise exception_class(message) from cause
        else:
            raise exception_class(message)

    @staticmethod
    def handle_with_fallback(
        operation_callable,
        fallback_value: Any = None,
        error_message: str = "Operation failed",
        logger_instance: Optional[logging.Logger] = None,
        log_level: int = logging.WARNING,
        handled: Type[Exception] = KeyNavError
    ) -> Any:
        """
        Execute an operation and return ``fallback_value`` if it raises.

        Only exceptions of type ``handled`` are absorbed; anything else is a
        programming error and propagates.
        """
        try:
            return operation_callable()
        except handled as e:
            log_instance = logger_instance or logger
            log_instance.log(log_level, f"{error_message}: {e}")
            return fallback_value

    @staticmethod
    def log_and_continue(
        error: Exception,
        context: str = "Operation",
        logger_instance: Optional[logging.Logger] = None,
        log_level: int = logging.WARNING
    ) -> None:
        """Log an error and continue execution (no exception raised)."""
        log_instance = logger_instance or logger
        log_instance.log(log_level, f"{context} failed: {error}")

    @staticmethod
    def create_error_context(
        component_name: str,
        logger_name: Optional[str] = None
    ) -> 'ErrorContext':
        """
        Create an error context for a specific component.

        Args:
            component_name: Name of the component
            logger_name: Logger name to use (default: KeyNav.{component_name})
        """
        if logger_name is None:
            logger_name = f'KeyNav.{component_name}'

        component_logger = logging.getLogger(logger_name)
        return ErrorContext(component_name, component_logger)


class ErrorContext:
    """
    ErrorHandlerUtil bound to one component's logger.

    Also counts how many entries were skipped, so loaders can report it.
    """

    def __init__(self, component_name: str, logger_instance: logging.Logger):
        self.component_name = component_name
        self.logger = logger_instance
        self.skipped = 0

    def log_and_raise(
        self,
        message: str,
        exception_class: Type[Exception] = KeyNavError,
        cause: Optional[Exception] = None
    ) -> None:
        ErrorHandlerUtil.log_and_raise(
            message=message,
            exception_class=exception_class,
            logger_instance=self.logger,
            cause=cause
        )

    def handle_with_fallback(
        self,
        operation_callable,
        fallback_value: Any = None,
        error_message: str = "Operation failed"
    ) -> Any:
        return ErrorHandlerUtil.handle_with_fallback(
            operation_callable=operation_callable,
            fallback_value=fallback_value,
            error_message=error_message,
            logger_instance=self.logger
        )

    def log_and_continue(
        self,
        error: Exception,
        context: str = "Operation"
    ) -> None:
        ErrorHandlerUtil.log_and_continue(
            error=error,
            context=context,
            logger_instance=self.logger
        )

    def skip(self, entry: str, reason: Any) -> None:
        """Record and log a configuration entry that is being dropped."""
        self.skipped += 1
        self.logger.warning(f"{self.component_name}: skipping '{entry}': {reason}")
