"""Exceptions and the default sanitizer for unhandled resolver errors."""

from uuid import uuid4

from .logging import get_logger

logger = get_logger(__name__)


class UnhandledResolverError(Exception):
    """Generic replacement for an exception raised inside a wrapped resolver."""

    def __init__(self, message: str, correlation_id: str | None = None):
        super().__init__(message)
        self.correlation_id = correlation_id


def on_unhandled_error(error: BaseException) -> UnhandledResolverError:
    """
    Default ``unhandled_error_wrapper``.

    Logs the original error with its traceback under a fresh correlation id
    and returns a generic error carrying only that id.
    """
    correlation_id = uuid4().hex
    logger.error(
        "Unhandled resolver error",
        correlation_id=correlation_id,
        error=str(error),
        error_type=type(error).__name__,
        exc_info=error,
    )
    return UnhandledResolverError(
        f"An internal error occurred, with following id: {correlation_id}, "
        "please contact Administrator!",
        correlation_id=correlation_id,
    )
