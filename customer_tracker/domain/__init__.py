"""Domain layer: entities and exceptions."""

from .entities import SEARCHABLE_FIELDS, Customer, CustomerStatus, UserProfile, UserRole
from .exceptions import (
    AuthError,
    CustomerNotFoundException,
    CustomerTrackerException,
    DataIntegrityException,
    RecordNotFoundException,
    RemoteServiceException,
    ValidationException,
)

__all__ = [
    "SEARCHABLE_FIELDS",
    "AuthError",
    "Customer",
    "CustomerNotFoundException",
    "CustomerStatus",
    "CustomerTrackerException",
    "DataIntegrityException",
    "RecordNotFoundException",
    "RemoteServiceException",
    "UserProfile",
    "UserRole",
    "ValidationException",
]
