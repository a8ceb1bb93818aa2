"""
Error Handling Module

Defines domain exceptions and error categories for the access-control core.
Domain exceptions are pure and have no external dependencies; the
application layer turns them into OperationResult values.
"""

from enum import Enum
from typing import Dict, Optional


class ErrorCategory(Enum):
    """Error category enumeration for structured error handling."""

    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    INVALID_INPUT = "invalid_input"
    STORAGE_FAILURE = "storage_failure"


# User-friendly error messages with actionable guidance
ERROR_MESSAGES: Dict[ErrorCategory, Dict[str, str]] = {
    ErrorCategory.NOT_FOUND: {
        "title": "Not Found",
        "message": "The requested file, share or user does not exist or has expired.",
        "action": "Check the identifier or ask the owner to share the file again.",
    },
    ErrorCategory.FORBIDDEN: {
        "title": "Access Denied",
        "message": "You do not have permission to perform this operation on the file.",
        "action": "Ask the file owner to grant you access.",
    },
    ErrorCategory.INVALID_INPUT: {
        "title": "Invalid Request",
        "message": "The request is missing required information or contains invalid data.",
        "action": "Please check your input and try again.",
    },
    ErrorCategory.STORAGE_FAILURE: {
        "title": "Storage Error",
        "message": "The file storage backend could not complete the operation.",
        "action": "Please try again later. If the problem persists, contact support.",
    },
}


# ============================================================================
# Domain Exceptions (Pure - No External Dependencies)
# ============================================================================

class DomainError(Exception):
    """
    Base exception for all domain errors.

    Every subclass carries the ErrorCategory it maps to, so callers can
    report a stable error kind without inspecting exception types.
    """

    category: ErrorCategory = ErrorCategory.STORAGE_FAILURE

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        """
        Initialize domain error.

        Args:
            message: Error message
            original_error: Optional original exception that caused this error
        """
        super().__init__(message)
        self.original_error = original_error


class NotFoundError(DomainError):
    """Raised when an object, grant, link or user is absent or expired."""

    category = ErrorCategory.NOT_FOUND


class ForbiddenError(DomainError):
    """Raised when the identity lacks the relationship an operation requires."""

    category = ErrorCategory.FORBIDDEN


class InvalidInputError(DomainError):
    """Raised for malformed identifiers, bad TTLs or empty required lists."""

    category = ErrorCategory.INVALID_INPUT


class StorageFailureError(DomainError):
    """
    Raised when the blob store or a metadata repository fails.

    Infrastructure adapters wrap their library exceptions in this type so
    the domain never depends on redis or google-cloud-storage errors.
    """

    category = ErrorCategory.STORAGE_FAILURE


def describe_error(category: ErrorCategory) -> Dict[str, str]:
    """
    Get the user-facing title/message/action for an error category.

    Args:
        category: Error category

    Returns:
        Dictionary with error information
    """
    error_info = ERROR_MESSAGES.get(category, ERROR_MESSAGES[ErrorCategory.STORAGE_FAILURE])
    return {"error": category.value, **error_info}
