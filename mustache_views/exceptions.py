"""Custom exceptions for mustache views with proper HTTP status codes."""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error responses."""

    # Generic errors
    VIEW_ERROR = "VIEW_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Template errors
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
    TEMPLATE_COMPILE_ERROR = "TEMPLATE_COMPILE_ERROR"

    # Configuration errors
    CONFIG_ERROR = "CONFIG_ERROR"
    UNSUPPORTED_ENCODING = "UNSUPPORTED_ENCODING"
    RESOLVER_NOT_INITIALIZED = "RESOLVER_NOT_INITIALIZED"


class ViewException(Exception):
    """Base exception for view errors with HTTP status code support.

    All custom exceptions should inherit from this class to ensure
    consistent error handling across the application.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VIEW_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        """Initialize view exception.

        Args:
            message: Human-readable error message
            code: Error code from ErrorCode enum
            status_code: HTTP status code (default 500)
            details: Additional error context/details
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class TemplateNotFoundException(ViewException):
    """Template resource does not exist in the resource namespace."""

    def __init__(self, path: str, details: dict[str, Any] | None = None):
        self.path = path
        super().__init__(
            f"Template not found: {path}",
            code=ErrorCode.TEMPLATE_NOT_FOUND,
            status_code=404,
            details={"path": path, **(details or {})},
        )


class TemplateCompileException(ViewException):
    """Template source could not be compiled."""

    def __init__(self, name: str, reason: str, details: dict[str, Any] | None = None):
        self.name = name
        super().__init__(
            f"Failed to compile template {name}: {reason}",
            code=ErrorCode.TEMPLATE_COMPILE_ERROR,
            status_code=500,
            details={"template": name, "reason": reason, **(details or {})},
        )


class ConfigurationException(ViewException):
    """Configuration errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, status_code, details)


class UnsupportedEncodingException(ConfigurationException, LookupError):
    """Character set name is not known to the codec registry."""

    def __init__(self, encoding: str):
        self.encoding = encoding
        super().__init__(
            f"Unsupported encoding: {encoding}",
            code=ErrorCode.UNSUPPORTED_ENCODING,
            details={"encoding": encoding},
        )


class ResolverNotInitializedException(ConfigurationException):
    """View resolver was used before initialize() completed."""

    def __init__(self, message: str = "View resolver has not been initialized"):
        super().__init__(message, code=ErrorCode.RESOLVER_NOT_INITIALIZED)
