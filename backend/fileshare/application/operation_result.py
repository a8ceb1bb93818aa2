"""
Operation Result Value Object

Outcome of an access-control engine operation. Operations report failures
as an error category instead of raising, and the transport layer maps the
category to its own status codes.
"""

from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar

from fileshare.domain.errors import DomainError, ErrorCategory, describe_error

T = TypeVar("T")


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """
    Value object representing the result of an engine operation.

    Attributes:
        success: Whether the operation succeeded
        value: Operation payload (if successful)
        error_category: Error kind (if failed)
        error_message: Technical error message (if failed)
    """
    success: bool
    value: Optional[T] = None
    error_category: Optional[ErrorCategory] = None
    error_message: Optional[str] = None

    @classmethod
    def ok(cls, value: Optional[T] = None) -> "OperationResult[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, category: ErrorCategory, message: str) -> "OperationResult[T]":
        return cls(success=False, error_category=category, error_message=message)

    @classmethod
    def from_error(cls, error: DomainError) -> "OperationResult[T]":
        return cls.fail(error.category, str(error))

    @property
    def is_not_found(self) -> bool:
        return self.error_category is ErrorCategory.NOT_FOUND

    @property
    def is_forbidden(self) -> bool:
        return self.error_category is ErrorCategory.FORBIDDEN

    def unwrap(self) -> T:
        """
        Return the payload of a successful result.

        Raises:
            ValueError: If the result is a failure
        """
        if not self.success:
            raise ValueError(
                f"Cannot unwrap failed result ({self.error_category.value}): {self.error_message}"
            )
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert a failed result to a structured error payload.

        Successful results serialize to ``{"success": True}``; payload
        rendering is left to the transport layer.
        """
        if self.success:
            return {"success": True}
        payload = describe_error(self.error_category)
        payload["success"] = False
        return payload
