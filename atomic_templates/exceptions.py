"""Custom exceptions for the template manager with structured error codes."""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error reporting."""

    # Generic errors
    TEMPLATE_MANAGER_ERROR = "TEMPLATE_MANAGER_ERROR"

    # Registration errors
    PATH_RESOLUTION_ERROR = "PATH_RESOLUTION_ERROR"

    # Compilation errors
    WALK_PERMISSION_DENIED = "WALK_PERMISSION_DENIED"
    WALK_ERROR = "WALK_ERROR"
    TEMPLATE_READ_ERROR = "TEMPLATE_READ_ERROR"
    TEMPLATE_PARSE_ERROR = "TEMPLATE_PARSE_ERROR"

    # Lookup/render errors
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
    RENDER_ERROR = "RENDER_ERROR"

    # Configuration errors
    CONFIG_ERROR = "CONFIG_ERROR"


class TemplateManagerException(Exception):
    """Base exception for template manager errors.

    All custom exceptions inherit from this class so callers can catch
    every manager failure, including the batch returned by a compile, with
    one ``except`` clause.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.TEMPLATE_MANAGER_ERROR,
        details: dict[str, Any] | None = None,
    ):
        """Initialize template manager exception.

        Args:
            message: Human-readable error message
            code: Error code from ErrorCode enum
            details: Additional error context/details
        """
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)


class PathResolutionException(TemplateManagerException):
    """A registered directory could not be converted to an absolute path."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.PATH_RESOLUTION_ERROR, details=details)


class WalkPermissionException(TemplateManagerException):
    """Permission denied while walking a template directory. Non-fatal."""

    def __init__(self, path: str, details: dict[str, Any] | None = None):
        super().__init__(
            f"{path}: permission denied",
            code=ErrorCode.WALK_PERMISSION_DENIED,
            details={"path": path, **(details or {})},
        )


class WalkException(TemplateManagerException):
    """Walking a template directory failed and was aborted."""

    def __init__(self, path: str, details: dict[str, Any] | None = None):
        super().__init__(
            f"Failed to walk {path}",
            code=ErrorCode.WALK_ERROR,
            details={"path": path, **(details or {})},
        )


class TemplateReadException(TemplateManagerException):
    """A template file could not be read."""

    def __init__(self, path: str, details: dict[str, Any] | None = None):
        super().__init__(
            f"Failed to read template file {path}",
            code=ErrorCode.TEMPLATE_READ_ERROR,
            details={"path": path, **(details or {})},
        )


class TemplateParseException(TemplateManagerException):
    """A template file contains invalid template syntax."""

    def __init__(self, path: str, details: dict[str, Any] | None = None):
        super().__init__(
            f"Failed to parse template file {path}",
            code=ErrorCode.TEMPLATE_PARSE_ERROR,
            details={"path": path, **(details or {})},
        )


class TemplateNotFoundException(TemplateManagerException):
    """No template is registered under the requested name."""

    def __init__(self, name: str, details: dict[str, Any] | None = None):
        super().__init__(
            f"The template {name!r} could not be found",
            code=ErrorCode.TEMPLATE_NOT_FOUND,
            details={"name": name, **(details or {})},
        )


class RenderException(TemplateManagerException):
    """Rendering a template body failed at runtime."""

    def __init__(self, name: str, details: dict[str, Any] | None = None):
        super().__init__(
            f"Failed to render template {name!r}",
            code=ErrorCode.RENDER_ERROR,
            details={"name": name, **(details or {})},
        )


class ConfigurationException(TemplateManagerException):
    """Configuration errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.CONFIG_ERROR, details=details)
