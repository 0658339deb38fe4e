"""
Domain entities for customer tracking.

Core business objects representing customers and user profiles.
Entities are immutable; a changed record is a new instance.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import DataIntegrityException

SEARCHABLE_FIELDS = ("customer_name", "unique_id", "tracking_number")


class CustomerStatus(str, Enum):
    """Lifecycle states of a tracked customer."""

    ACTIVE = "active"
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class UserRole(str, Enum):
    """Roles stored on a user profile."""

    ADMIN = "admin"
    MANAGER = "manager"
    MEMBER = "member"


class Customer(BaseModel):
    """
    A customer record as stored by the remote service.

    `id`, `created_at` and `updated_at` are always server-assigned.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    customer_name: str = Field(..., min_length=1)
    unique_id: str
    tracking_number: str
    status: CustomerStatus = CustomerStatus.ACTIVE
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    created_by: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Customer":
        """
        Map a raw table row into a Customer.

        Raises:
            DataIntegrityException: If the row is missing fields or carries
                a status outside CustomerStatus
        """
        try:
            return cls.model_validate(dict(row))
        except ValidationError as e:
            fields = ", ".join(
                ".".join(str(part) for part in err["loc"]) for err in e.errors()
            )
            raise DataIntegrityException("customer", f"invalid field(s): {fields}")

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match against the searchable fields."""
        needle = term.lower()
        return any(needle in getattr(self, field).lower() for field in SEARCHABLE_FIELDS)


class UserProfile(BaseModel):
    """Row of the user_profiles table."""

    model_config = ConfigDict(frozen=True)

    id: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: UserRole = UserRole.MEMBER
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "UserProfile":
        """Map a raw user_profiles row into a UserProfile."""
        try:
            return cls.model_validate(dict(row))
        except ValidationError as e:
            raise DataIntegrityException("user_profile", f"{e.error_count()} invalid field(s)")
