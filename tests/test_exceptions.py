"""
Tests for domain exceptions.
"""

import pytest
from customer_tracker.domain.exceptions import (
    AuthError,
    CustomerNotFoundException,
    CustomerTrackerException,
    DataIntegrityException,
    RecordNotFoundException,
    RemoteServiceException,
    ValidationException,
)


def test_base_exception_defaults():
    """Test base exception carries message and empty details."""
    error = CustomerTrackerException("boom")
    assert error.message == "boom"
    assert error.details == {}
    assert str(error) == "boom"


def test_remote_service_exception():
    """Test remote failure message includes the reason."""
    error = RemoteServiceException("update", "timeout")
    assert error.message == "Remote service update failed: timeout"
    assert error.details == {"operation": "update", "reason": "timeout"}


def test_remote_service_exception_without_reason():
    assert RemoteServiceException("list").message == "Remote service list failed"


def test_customer_not_found_is_record_not_found():
    """Test not-found hierarchy and message."""
    error = CustomerNotFoundException("abc")
    assert isinstance(error, RecordNotFoundException)
    assert error.message == "Customer not found: abc"
    assert str(error) == "Customer not found: abc"
    assert error.details == {"table": "customers", "id": "abc"}


def test_validation_exception():
    error = ValidationException("term", "  ", "search term must not be blank")
    assert error.message == "Validation failed for term: search term must not be blank"
    assert error.details["value"] == "  "


def test_data_integrity_exception():
    error = DataIntegrityException("customer", "invalid field(s): status")
    assert "customer" in error.message


def test_auth_error():
    """Test AuthError exception."""
    error = AuthError("Test error message", "test_code")
    assert error.message == "Test error message"
    assert error.code == "test_code"
    assert str(error) == "Test error message"


@pytest.mark.parametrize(
    "error",
    [
        RemoteServiceException("list"),
        RecordNotFoundException("customers", "x"),
        ValidationException("f", 1, "bad"),
        DataIntegrityException("customer", "bad"),
        AuthError("nope"),
    ],
)
def test_all_inherit_from_base(error):
    assert isinstance(error, CustomerTrackerException)
