"""Domain exceptions for approval flow resolution.

Most failures in this service are recovered locally (missing configuration,
missing directory records, unreadable store paths) and never reach callers.
The exceptions here are raised at the edges: by the store adapter when a read
fails, and by the HTTP layer for bad input. Exception handlers map them to
HTTP responses.
"""

from typing import Any


class ApprovalFlowException(Exception):
    """Base exception for all application errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. path, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the HTTP exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(ApprovalFlowException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class InvalidPathComponentError(ValidationException):
    """Raised when an id cannot be used as a Realtime Database key."""

    def __init__(self, name: str, value: str) -> None:
        super().__init__(
            f"{name} contains characters not allowed in a database path: {value!r}",
            field=name,
        )


class AuthenticationException(ApprovalFlowException):
    """Raised when the caller's ID token is missing or invalid."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class ResourceNotFoundException(ApprovalFlowException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'subject').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class SubjectNotFoundException(ResourceNotFoundException):
    """Raised when an approval subject record does not exist."""

    def __init__(self, process_type: str, subject_id: str) -> None:
        super().__init__(f"{process_type} subject", subject_id)
        self.details["process_type"] = process_type


class StoreUnavailableError(ApprovalFlowException):
    """Raised by the store adapter when a read times out or fails.

    The resolver catches it per lookup and substitutes the lookup's fallback.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            f"Data store read failed for {path}: {reason}",
            "STORE_UNAVAILABLE",
            {"path": path, "reason": reason},
        )


class StoreNotConfiguredException(ApprovalFlowException):
    """Raised when a request needs the data store but no database URL is set."""

    def __init__(self) -> None:
        super().__init__(
            "The approval data store is not configured.",
            "SERVICE_UNAVAILABLE",
        )
