"""
PageFeed Custom Exceptions
==========================

Custom exception hierarchy for PageFeed with error codes, context
information, and user-facing messages that are safe to return over HTTP.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for categorizing exceptions."""

    # Configuration errors (C001-C099)
    CONFIG_INVALID = "C001"
    CONFIG_MISSING = "C002"

    # Validation errors (V001-V099)
    VALIDATION_REQUIRED_FIELD = "V001"
    VALIDATION_INVALID_FORMAT = "V002"

    # Page fetch errors (F001-F099)
    FETCH_TIMEOUT = "F002"
    FETCH_HTTP_ERROR = "F003"
    FETCH_NETWORK_ERROR = "F004"

    # AI processing errors (A001-A099)
    AI_API_ERROR = "A001"
    AI_INVALID_RESPONSE = "A003"
    AI_TIMEOUT = "A004"
    AI_PROVIDER_UNAVAILABLE = "A008"
    AI_INVALID_CREDENTIALS = "A009"

    # Client errors (L001-L099)
    CLIENT_SERVER_ERROR = "L001"
    CLIENT_INVALID_RESPONSE = "L002"
    CLIENT_DOMAIN_ERROR = "L003"

    # System errors (S001-S099)
    SYSTEM_UNEXPECTED = "S001"


class PageFeedError(Exception):
    """Base exception for all PageFeed errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        context: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        recoverable: bool = False,
    ):
        """Initialize PageFeed error.

        Args:
            message: Technical error message for logging
            error_code: Categorized error code
            context: Additional context information
            user_message: Message safe to show to callers
            recoverable: Whether re-issuing the request may succeed
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.user_message = user_message or message
        self.recoverable = recoverable

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code.value if self.error_code else None,
            "error_message": self.message,
            "user_message": self.user_message,
            "context": self.context,
            "recoverable": self.recoverable,
        }

    def __str__(self) -> str:
        """String representation with error code."""
        if self.error_code:
            return f"[{self.error_code.value}] {super().__str__()}"
        return super().__str__()


def _passthrough(kwargs: Dict[str, Any], *consumed: str) -> Dict[str, Any]:
    return {k: v for k, v in kwargs.items() if k not in consumed}


class ConfigurationError(PageFeedError):
    """Configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        """Initialize configuration error.

        Args:
            message: Error message
            config_key: Configuration key that caused the error
            **kwargs: Additional arguments for PageFeedError
        """
        context = kwargs.get("context", {})
        if config_key:
            context["config_key"] = config_key

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.CONFIG_INVALID),
            context=context,
            user_message=kwargs.get("user_message", "Server configuration error."),
            **_passthrough(kwargs, "context", "error_code", "user_message"),
        )


class ValidationError(PageFeedError):
    """Invalid caller input (missing or malformed URL)."""

    def __init__(self, message: str, field_name: Optional[str] = None, **kwargs):
        """Initialize validation error.

        Args:
            message: Error message
            field_name: Field name that failed validation
            **kwargs: Additional arguments for PageFeedError
        """
        context = kwargs.get("context", {})
        if field_name:
            context["field_name"] = field_name

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.VALIDATION_INVALID_FORMAT),
            context=context,
            user_message=kwargs.get(
                "user_message", f"Invalid {field_name or 'input'}: {message}"
            ),
            recoverable=kwargs.get("recoverable", False),
            **_passthrough(kwargs, "context", "error_code", "user_message", "recoverable"),
        )


class FetchError(PageFeedError):
    """Failures while retrieving the source page."""

    def __init__(self, message: str, url: Optional[str] = None, **kwargs):
        """Initialize fetch error.

        Args:
            message: Error message
            url: Page URL that failed to load
            **kwargs: Additional arguments for PageFeedError
        """
        context = kwargs.get("context", {})
        if url:
            context["url"] = url

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.FETCH_NETWORK_ERROR),
            context=context,
            user_message=kwargs.get(
                "user_message", "Failed to fetch URL: network error."
            ),
            recoverable=kwargs.get("recoverable", True),
            **_passthrough(kwargs, "context", "error_code", "user_message", "recoverable"),
        )


class FetchTimeoutError(FetchError):
    """The page did not respond within the fetch deadline."""

    def __init__(self, message: str, url: Optional[str] = None, timeout: Optional[float] = None):
        super().__init__(
            message,
            url=url,
            error_code=ErrorCode.FETCH_TIMEOUT,
            user_message="Failed to fetch URL: the request timed out.",
            context={"timeout_seconds": timeout} if timeout is not None else {},
        )
        self.timeout = timeout


class FetchHTTPError(FetchError):
    """The remote server answered with a non-success status."""

    def __init__(self, message: str, status: int, url: Optional[str] = None):
        super().__init__(
            message,
            url=url,
            error_code=ErrorCode.FETCH_HTTP_ERROR,
            user_message=f"Failed to fetch URL: the server responded with status {status}.",
            context={"status": status},
        )
        self.status = status


class FetchNetworkError(FetchError):
    """Any other transport failure (DNS, refused connection, TLS...)."""

    pass


class AIError(PageFeedError):
    """AI processing and API errors."""

    def __init__(self, message: str, provider: Optional[str] = None, **kwargs):
        """Initialize AI error.

        Args:
            message: Error message
            provider: AI provider name (e.g., 'gemini')
            **kwargs: Additional arguments for PageFeedError
        """
        context = kwargs.get("context", {})
        if provider:
            context["ai_provider"] = provider

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.AI_API_ERROR),
            context=context,
            user_message=kwargs.get(
                "user_message", "The AI service is currently unavailable."
            ),
            recoverable=kwargs.get("recoverable", True),
            **_passthrough(kwargs, "context", "error_code", "user_message", "recoverable"),
        )
        self.provider = provider


class ModelUnavailableError(AIError):
    """The generation service could not be reached or returned an error."""

    pass


class ModelConfigurationError(AIError):
    """Credentials for the generation service are missing or rejected."""

    def __init__(self, message: str, provider: Optional[str] = None, **kwargs):
        kwargs.setdefault("error_code", ErrorCode.AI_INVALID_CREDENTIALS)
        kwargs.setdefault("user_message", "Server configuration error.")
        kwargs.setdefault("recoverable", False)
        super().__init__(message, provider=provider, **kwargs)


class EmptyModelResponseError(AIError):
    """The model answered with nothing but whitespace."""

    def __init__(self, message: str = "Model returned an empty response", **kwargs):
        kwargs.setdefault("error_code", ErrorCode.AI_INVALID_RESPONSE)
        kwargs.setdefault("user_message", "The AI returned an empty response.")
        super().__init__(message, **kwargs)


class FeedClientError(PageFeedError):
    """Errors raised by the HTTP client when talking to a PageFeed server."""

    def __init__(self, message: str, status: Optional[int] = None, **kwargs):
        context = kwargs.get("context", {})
        if status is not None:
            context["status"] = status

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.CLIENT_SERVER_ERROR),
            context=context,
            user_message=kwargs.get("user_message", message),
            **_passthrough(kwargs, "context", "error_code", "user_message"),
        )
        self.status = status


class FeedDomainError(FeedClientError):
    """The server ran fine but the page had no extractable articles."""

    def __init__(self, message: str):
        super().__init__(
            message,
            status=200,
            error_code=ErrorCode.CLIENT_DOMAIN_ERROR,
        )


# Exception handling utilities


def handle_exception(
    exception: Exception,
    logger,
    operation: str,
    context: Optional[Dict[str, Any]] = None,
) -> PageFeedError:
    """Convert generic exceptions to PageFeed exceptions with proper logging.

    Args:
        exception: Original exception
        logger: Logger instance for error logging
        operation: Operation that was being performed
        context: Additional context information

    Returns:
        PageFeed exception with proper categorization
    """
    context = context or {}
    context["operation"] = operation
    context["original_exception_type"] = type(exception).__name__

    if isinstance(exception, PageFeedError):
        logger.error(f"Operation '{operation}' failed", extra=exception.to_dict())
        return exception

    elif isinstance(exception, (ConnectionError, TimeoutError)):
        error = PageFeedError(
            message=f"Network error during {operation}: {str(exception)}",
            error_code=ErrorCode.FETCH_NETWORK_ERROR,
            context=context,
            user_message="Network connection failed.",
            recoverable=True,
        )

    else:
        error = PageFeedError(
            message=f"Unexpected error during {operation}: {str(exception)}",
            error_code=ErrorCode.SYSTEM_UNEXPECTED,
            context=context,
            user_message="An unknown internal error occurred.",
            recoverable=True,
        )

    logger.error(f"Operation '{operation}' failed", extra=error.to_dict(), exc_info=exception)
    return error


def get_user_friendly_message(exception: Exception) -> str:
    """Get user-friendly error message for any exception.

    Args:
        exception: Exception to get message for

    Returns:
        User-friendly error message
    """
    if isinstance(exception, PageFeedError):
        return exception.user_message

    return "An unknown internal error occurred."
