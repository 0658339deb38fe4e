"""
Custom exceptions for the customer tracker domain.

These exceptions represent domain-level errors and are independent
of infrastructure concerns (HTTP, PostgREST, Supabase Auth).
"""

from typing import Any, Optional


class CustomerTrackerException(Exception):
    """Base exception for all customer tracker errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class RemoteServiceException(CustomerTrackerException):
    """Raised when a call to the remote data service fails."""

    def __init__(self, operation: str, reason: Optional[str] = None):
        message = f"Remote service {operation} failed"
        if reason:
            message += f": {reason}"
        super().__init__(
            message=message, details={"operation": operation, "reason": reason}
        )


class RecordNotFoundException(CustomerTrackerException):
    """Raised when no row in a table matches the given id."""

    def __init__(self, table: str, record_id: str):
        super().__init__(
            message=f"No {table} row with id {record_id}",
            details={"table": table, "id": record_id},
        )


class CustomerNotFoundException(RecordNotFoundException):
    """Raised when a customer cannot be found."""

    def __init__(self, customer_id: str):
        super().__init__("customers", customer_id)
        self.message = f"Customer not found: {customer_id}"
        self.args = (self.message,)


class ValidationException(CustomerTrackerException):
    """Raised when input validation fails."""

    def __init__(self, field: str, value: Any, reason: str):
        message = f"Validation failed for {field}: {reason}"
        super().__init__(
            message=message,
            details={"field": field, "value": str(value), "reason": reason},
        )


class DataIntegrityException(CustomerTrackerException):
    """Raised when a row returned by the remote service is malformed."""

    def __init__(self, entity: str, reason: str):
        message = f"Data integrity error for {entity}: {reason}"
        super().__init__(message=message, details={"entity": entity, "reason": reason})


class AuthError(CustomerTrackerException):
    """Raised when an authentication operation fails."""

    def __init__(self, message: str, code: str = "auth_error"):
        self.code = code
        super().__init__(message, details={"code": code})
