"""
Pydantic models for request/response schemas.

Defines the write models used by the customer repository and the
request/response bodies of the HTTP API.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from .domain.entities import Customer, CustomerStatus

# Write Models


class CustomerCreate(BaseModel):
    """Fields a caller supplies when creating a customer."""

    customer_name: str = Field(..., min_length=1, max_length=255)
    unique_id: str = Field(..., min_length=1, max_length=255)
    tracking_number: str = Field(..., min_length=1, max_length=255)
    status: CustomerStatus = CustomerStatus.ACTIVE
    notes: Optional[str] = None

    @field_validator("customer_name", "unique_id", "tracking_number", mode="before")
    @classmethod
    def strip_required(cls, value: Any) -> Any:
        """Reject whitespace-only values for required fields."""
        if isinstance(value, str):
            return value.strip()
        return value

    def to_row(self, created_by: str) -> Dict[str, Any]:
        """Build the insert payload; id and timestamps are left to the server."""
        row = self.model_dump(mode="json")
        row["created_by"] = created_by
        return row


class CustomerUpdate(BaseModel):
    """Partial update; only explicitly supplied fields are sent."""

    customer_name: Optional[str] = Field(None, min_length=1, max_length=255)
    unique_id: Optional[str] = Field(None, min_length=1, max_length=255)
    tracking_number: Optional[str] = Field(None, min_length=1, max_length=255)
    status: Optional[CustomerStatus] = None
    notes: Optional[str] = None

    @field_validator("customer_name", "unique_id", "tracking_number", mode="before")
    @classmethod
    def strip_required(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("customer_name", "unique_id", "tracking_number", "status")
    @classmethod
    def not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("field cannot be cleared")
        return value

    def to_row(self) -> Dict[str, Any]:
        """Build the update payload from the fields that were set."""
        return self.model_dump(mode="json", exclude_unset=True)


# Auth Models


class UserSignUp(BaseModel):
    """Model for user registration."""

    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: Optional[str] = None


class UserSignIn(BaseModel):
    """Model for user sign in."""

    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """Authenticated principal."""

    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None


class SessionResponse(BaseModel):
    """Model for session data."""

    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None


class AuthResponse(BaseModel):
    """Model for authentication response with user and session."""

    user: UserResponse
    session: Optional[SessionResponse] = None


# Response Models


class CustomerListResponse(BaseModel):
    """Filtered and sorted view of the cached customer collection."""

    customers: List[Customer]
    total: int
    counts: Dict[str, int]
    is_loading: bool = False


class SearchResponse(BaseModel):
    """Results of a keyword search."""

    term: str
    customers: List[Customer]
    total: int


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str
    success: bool = True
