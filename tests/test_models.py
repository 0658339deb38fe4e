"""
Tests for request/response and write models.
"""

import pytest
from customer_tracker.domain.entities import CustomerStatus
from customer_tracker.models import CustomerCreate, CustomerUpdate, UserSignUp
from pydantic import ValidationError


class TestCustomerCreate:
    """Test CustomerCreate validation."""

    def test_to_row_sets_owner(self):
        """Test the insert payload carries created_by and no server fields."""
        row = CustomerCreate(
            customer_name="Acme Co", unique_id="U1", tracking_number="T1"
        ).to_row("user-1")

        assert row == {
            "customer_name": "Acme Co",
            "unique_id": "U1",
            "tracking_number": "T1",
            "status": "active",
            "notes": None,
            "created_by": "user-1",
        }

    def test_strips_required_fields(self):
        model = CustomerCreate(
            customer_name="  Acme Co ", unique_id=" U1", tracking_number="T1 "
        )
        assert model.customer_name == "Acme Co"
        assert model.unique_id == "U1"
        assert model.tracking_number == "T1"

    @pytest.mark.parametrize("field", ["customer_name", "unique_id", "tracking_number"])
    def test_required_fields_must_not_be_blank(self, field):
        data = {"customer_name": "A", "unique_id": "U", "tracking_number": "T", field: " "}
        with pytest.raises(ValidationError):
            CustomerCreate(**data)

    def test_status_is_enum(self):
        model = CustomerCreate(
            customer_name="A", unique_id="U", tracking_number="T", status="cancelled"
        )
        assert model.status is CustomerStatus.CANCELLED


class TestCustomerUpdate:
    """Test CustomerUpdate partial semantics."""

    def test_only_set_fields_are_sent(self):
        assert CustomerUpdate(status="completed").to_row() == {"status": "completed"}

    def test_notes_can_be_cleared(self):
        assert CustomerUpdate(notes=None).to_row() == {"notes": None}

    def test_empty_update(self):
        assert CustomerUpdate().to_row() == {}

    @pytest.mark.parametrize("field", ["customer_name", "status"])
    def test_required_fields_cannot_be_cleared(self, field):
        with pytest.raises(ValidationError):
            CustomerUpdate(**{field: None})

    def test_server_fields_are_ignored(self):
        """Test id and timestamps cannot be smuggled into an update."""
        row = CustomerUpdate.model_validate(
            {"id": "other", "created_at": "2020-01-01T00:00:00Z", "notes": "x"}
        ).to_row()
        assert row == {"notes": "x"}


class TestUserSignUp:
    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            UserSignUp(email="not-an-email", password="secret123")

    def test_short_password(self):
        with pytest.raises(ValidationError):
            UserSignUp(email="jane@example.com", password="123")
