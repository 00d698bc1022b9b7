"""
Error Handling.

Exception hierarchy shared by the record store, the REST layer and the
API client. Server-side errors map onto three response shapes:

- ValidationError -> 400 {message}
- NotFoundError   -> 404 {message}
- StoreError      -> 500 {message} (detail is logged, never returned)
"""

import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


class TransformationError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about the error
        retryable: Whether the operation can be retried
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        context: Optional[dict[str, Any]] = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.retryable = retryable

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} Context: {self.context}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """
        Convert error to dictionary for logging.

        Returns:
            Dictionary with error details
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "retryable": self.retryable,
        }


class ValidationError(TransformationError):
    """Malformed or missing required input."""

    status_code = 400

    def __init__(
        self,
        message: str,
        errors: Optional[list[dict[str, Any]]] = None,
        context: Optional[dict[str, Any]] = None,
    ):
        context = context or {}
        if errors:
            context["errors"] = errors
        super().__init__(message=message, context=context, retryable=False)
        self.errors = errors or []


class NotFoundError(TransformationError):
    """A valid request addressed an unknown id or key."""

    status_code = 404

    def __init__(
        self,
        message: str,
        kind: Optional[str] = None,
        record_id: Optional[str] = None,
    ):
        context: dict[str, Any] = {}
        if kind:
            context["kind"] = kind
        if record_id:
            context["id"] = record_id
        super().__init__(message=message, context=context, retryable=False)
        self.kind = kind
        self.record_id = record_id


class StoreError(TransformationError):
    """
    Persistence layer failure.

    The original exception is kept on ``cause`` for server-side logging.
    """

    status_code = 500

    def __init__(
        self,
        message: str,
        operation: str,
        kind: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        context: dict[str, Any] = {"operation": operation}
        if kind:
            context["kind"] = kind
        if cause is not None:
            context["cause"] = f"{type(cause).__name__}: {cause}"
        super().__init__(message=message, context=context, retryable=True)
        self.operation = operation
        self.kind = kind
        self.cause = cause


class ConfigurationError(TransformationError):
    """Invalid startup configuration."""


class ApiError(TransformationError):
    """
    Error response received by the API client.

    5xx responses are retryable for reads; 4xx responses never are.
    """

    def __init__(self, status_code: int, message: str, path: Optional[str] = None):
        context: dict[str, Any] = {"status_code": status_code}
        if path:
            context["path"] = path
        super().__init__(
            message=message,
            context=context,
            retryable=status_code >= 500,
        )
        self.status_code = status_code
        self.path = path


def log_error_with_context(
    error: Exception,
    component: str,
    additional_context: Optional[dict[str, Any]] = None,
) -> None:
    """
    Log an error with its context at a level matching its severity.

    Args:
        error: The exception to log
        component: Component name where the error occurred
        additional_context: Extra context merged into the log record
    """
    context = {"component": component}
    if additional_context:
        context.update(additional_context)

    if isinstance(error, TransformationError):
        context.update(error.to_dict())
        if error.status_code >= 500:
            logger.error(f"{component}: {error.message}", extra={"context": context})
        else:
            logger.warning(f"{component}: {error.message}", extra={"context": context})
    else:
        logger.error(
            f"{component}: unexpected {type(error).__name__}: {error}",
            extra={"context": context},
            exc_info=error,
        )
