"""
Listing helpers for the customer table and search screen.

Pure functions over a repository snapshot: text and status filtering,
column sorting, per-status counts and search-term normalisation.
"""

from typing import Dict, Iterable, List, Optional, Union

from .domain.entities import Customer, CustomerStatus
from .domain.exceptions import ValidationException

SORTABLE_FIELDS = (
    "customer_name",
    "unique_id",
    "tracking_number",
    "status",
    "created_at",
    "updated_at",
)

ALL_STATUSES = "all"


def filter_customers(
    customers: Iterable[Customer],
    text: str = "",
    status: Optional[Union[CustomerStatus, str]] = None,
) -> List[Customer]:
    """
    Filter customers by free text and status.

    Args:
        customers: Snapshot to filter
        text: Case-insensitive substring matched against name, unique id
            and tracking number; empty matches everything
        status: Exact status, or None / "all" for any

    Returns:
        Matching customers in their original order
    """
    if status == ALL_STATUSES:
        status = None
    if status is not None:
        try:
            status = CustomerStatus(status)
        except ValueError:
            raise ValidationException("status", status, "unknown status")

    needle = text.strip()
    return [
        customer
        for customer in customers
        if (not needle or customer.matches(needle))
        and (status is None or customer.status == status)
    ]


def sort_customers(
    customers: Iterable[Customer],
    field: str = "created_at",
    descending: bool = True,
) -> List[Customer]:
    """Stable sort by one column; text columns compare case-insensitively."""
    if field not in SORTABLE_FIELDS:
        raise ValidationException("sort_by", field, "unknown sort field")

    def key(customer: Customer):
        value = getattr(customer, field)
        if isinstance(value, CustomerStatus):
            return value.value
        if isinstance(value, str):
            return value.lower()
        return value

    return sorted(customers, key=key, reverse=descending)


def count_by_status(customers: Iterable[Customer]) -> Dict[str, int]:
    counts = {status.value: 0 for status in CustomerStatus}
    for customer in customers:
        counts[customer.status.value] += 1
    return counts


def normalize_search_term(term: Optional[str]) -> str:
    """
    Strip a search term.

    Raises:
        ValidationException: If the term is empty or whitespace only
    """
    cleaned = (term or "").strip()
    if not cleaned:
        raise ValidationException("term", term, "search term must not be blank")
    return cleaned
