"""Structured exception hierarchy for the request processing pipeline.

Every failure the pipeline can produce is a typed ``SpecGateError`` so the
host application can tell a misconfigured API description apart from a bad
client request without parsing messages.

Key components:
- **ErrorCode enum**: Standardized error identifiers for programmatic handling
- **Severity enum**: Error classification for monitoring and alerting
- **SpecGateError**: Base exception with rich context and fingerprinting
- **Specialized exceptions**: One type per failure kind of the pipeline

Severity doubles as the expected/unexpected split: client mistakes (malformed
bodies, invalid parameters, unknown documents) are LOW, while description
defects and missing routing facts are HIGH or CRITICAL.
"""

import hashlib
import traceback
from collections.abc import Iterable
from enum import Enum

from src.core.types import ErrorContext


class ErrorCode(Enum):
    """Standardized error codes for SpecGate."""

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred in the system."""

    MISSING_ROUTING_CONTEXT = "MISSING_ROUTING_CONTEXT"
    """The request reached the processor without its routing facts."""

    # Description errors
    INVALID_DESCRIPTION = "INVALID_DESCRIPTION"
    """An API description document could not be read or understood."""

    UNSUPPORTED_LOCATION = "UNSUPPORTED_LOCATION"
    """A parameter declares a location the pipeline cannot read from."""

    # Client errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    """The assembled request parameters failed schema validation."""

    MALFORMED_CONTENT = "MALFORMED_CONTENT"
    """The request body could not be decoded."""

    # Resource errors
    NOT_FOUND = "NOT_FOUND"
    """The requested resource could not be found."""

    DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"
    """No API description exists for the requested identifier."""

    OPERATION_NOT_FOUND = "OPERATION_NOT_FOUND"
    """The description declares no operation for the path and method."""


class Severity(Enum):
    """Severity levels for SpecGate errors."""

    LOW = "LOW"
    """Expected errors caused by client input."""

    MEDIUM = "MEDIUM"
    """Errors that affect a single request but are not client mistakes."""

    HIGH = "HIGH"
    """Configuration defects that break every request they touch."""

    CRITICAL = "CRITICAL"
    """Programmer errors in how the pipeline is wired into the host."""


class SpecGateError(Exception):
    """Base exception class for all SpecGate exceptions.

    Args:
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        message: Human-readable error message
        severity: Severity level of the error (defaults to MEDIUM)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        severity: Severity = Severity.MEDIUM,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.severity = severity
        self.context = context or {}
        self.cause = cause

        # Capture stack trace at creation time
        self.stack_trace = traceback.format_stack()[:-1]  # Exclude this frame

        self.fingerprint = self._generate_fingerprint()

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    def _generate_fingerprint(self) -> str:
        """Generate a fingerprint for error grouping.

        Returns:
            str: A hash of the error type, code and raising location
        """
        max_frames = 5
        relevant_frames = self.stack_trace[-max_frames:]

        fingerprint_data = f"{self.__class__.__name__}:{self.error_code}"
        for frame in relevant_frames:
            if "site-packages" not in frame and "src/" in frame:
                lines = frame.strip().split("\n")
                if lines:
                    fingerprint_data += f":{lines[0]}"

        return hashlib.sha256(fingerprint_data.encode()).hexdigest()[:16]

    @property
    def is_expected(self) -> bool:
        """Whether the error is part of normal operation (LOW or MEDIUM)."""
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    @property
    def should_alert(self) -> bool:
        """Whether the error points at a defect that needs attention."""
        return self.severity in (Severity.HIGH, Severity.CRITICAL)

    def __str__(self) -> str:
        """Return the error code and message."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return a detailed representation of the exception."""
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{context_str})"
        )


class ValidationError(SpecGateError):
    """Raised when the assembled request parameters fail schema validation.

    Carries every validator message, in the order the validator reported
    them, not just the first one.

    Args:
        errors: Ordered validator messages
        message: Summary message (defaults to a generic one)
        context: Additional context information about the error
    """

    def __init__(
        self,
        errors: Iterable[str],
        message: str = "Request parameters failed validation",
        context: ErrorContext | None = None,
    ) -> None:
        self.errors = tuple(errors)
        super().__init__(
            ErrorCode.VALIDATION_ERROR,
            message,
            Severity.LOW,
            {"errors": list(self.errors), **(context or {})},
        )


class MalformedContentError(SpecGateError):
    """Raised when a request body is present but is not valid JSON.

    Args:
        message: The decoder's description of the problem
        cause: The original decoding exception
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(ErrorCode.MALFORMED_CONTENT, message, Severity.LOW, None, cause)


class MissingRoutingContextError(SpecGateError):
    """Raised when a request lacks the routing facts upstream routing must set.

    This is never the client's fault: it means the processor was invoked on a
    request that did not go through the operation router.

    Args:
        attribute: Name of the missing request attribute
    """

    def __init__(self, attribute: str) -> None:
        self.attribute = attribute
        super().__init__(
            ErrorCode.MISSING_ROUTING_CONTEXT,
            f"Request is missing the '{attribute}' routing attribute",
            Severity.CRITICAL,
            {"attribute": attribute},
        )


class UnsupportedLocationError(SpecGateError):
    """Raised when a parameter declares an unrecognized location.

    Args:
        location: The offending location value
        parameter: Name of the parameter declaring it, when known
    """

    def __init__(self, location: object, parameter: str | None = None) -> None:
        self.location = location
        message = f"Unsupported parameter location '{location}'"
        if parameter:
            message += f" for parameter '{parameter}'"
        super().__init__(
            ErrorCode.UNSUPPORTED_LOCATION,
            message,
            Severity.HIGH,
            {"location": str(location), "parameter": parameter},
        )


class InvalidDescriptionError(SpecGateError):
    """Raised when an API description document cannot be loaded.

    Args:
        message: Description of the problem
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            ErrorCode.INVALID_DESCRIPTION, message, Severity.HIGH, context, cause
        )


class NotFoundError(SpecGateError):
    """Exception raised when a requested resource cannot be found.

    Args:
        message: Description of what resource was not found
        error_code: Error code (defaults to NOT_FOUND)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.NOT_FOUND,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.LOW, context, cause)


class DocumentNotFoundError(NotFoundError):
    """Raised when the repository holds no description for an identifier."""

    def __init__(self, uri: str, cause: Exception | None = None) -> None:
        self.uri = uri
        super().__init__(
            f"API description '{uri}' not found",
            ErrorCode.DOCUMENT_NOT_FOUND,
            {"uri": uri},
            cause,
        )


class OperationNotFoundError(NotFoundError):
    """Raised when a description has no operation for a path and method."""

    def __init__(self, path: str, method: str | None = None) -> None:
        self.path = path
        self.method = method
        if method is None:
            message = f"Path '{path}' is not declared in the API description"
        else:
            message = f"No {method.upper()} operation declared for path '{path}'"
        super().__init__(
            message,
            ErrorCode.OPERATION_NOT_FOUND,
            {"path": path, "method": method},
        )
