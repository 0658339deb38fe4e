"""
Customer endpoints.

Thin HTTP surface over the customer repository: listing with filter and
sort, create, update, delete, refresh and keyword search.
"""

import logging
from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ..dependencies import get_current_user, get_customer_repository
from ..domain.entities import Customer
from ..domain.exceptions import (
    CustomerTrackerException,
    RecordNotFoundException,
    ValidationException,
)
from ..models import (
    CustomerCreate,
    CustomerListResponse,
    CustomerUpdate,
    SearchResponse,
)
from ..repositories.customer_repository import CustomerRepository
from ..views import count_by_status, filter_customers, normalize_search_term, sort_customers

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/customers",
    tags=["Customers"],
    dependencies=[Depends(get_current_user)],
)


def _http_error(error: CustomerTrackerException) -> HTTPException:
    """Map a repository error result onto an HTTP error."""
    if isinstance(error, RecordNotFoundException):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.message)
    if isinstance(error, ValidationException):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=error.message
        )
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=error.message)


@router.get("", response_model=CustomerListResponse, summary="List customers")
async def list_customers(
    q: str = Query("", description="Substring of name, unique id or tracking number"),
    status_filter: Optional[str] = Query(None, alias="status"),
    sort_by: str = Query("created_at"),
    direction: Literal["asc", "desc"] = Query("desc"),
    repository: CustomerRepository = Depends(get_customer_repository),
):
    """Return the cached collection filtered and sorted for the table view."""
    snapshot = repository.items
    try:
        customers = filter_customers(snapshot, q, status_filter)
        customers = sort_customers(customers, sort_by, descending=direction == "desc")
    except ValidationException as e:
        raise _http_error(e)

    return CustomerListResponse(
        customers=customers,
        total=len(customers),
        counts=count_by_status(snapshot),
        is_loading=repository.is_loading,
    )


@router.post(
    "",
    response_model=Customer,
    status_code=status.HTTP_201_CREATED,
    summary="Create customer",
)
async def create_customer(
    customer_data: CustomerCreate,
    user: Dict[str, Any] = Depends(get_current_user),
    repository: CustomerRepository = Depends(get_customer_repository),
):
    customer, error = await repository.create(customer_data, created_by=user["id"])
    if error:
        raise _http_error(error)
    return customer


@router.get("/search", response_model=SearchResponse, summary="Search customers")
async def search_customers(
    term: str = Query(""),
    repository: CustomerRepository = Depends(get_customer_repository),
):
    """
    Keyword search straight against the remote store.

    Raises:
        HTTPException: 422 for a blank term, 502 if the remote query fails
    """
    try:
        cleaned = normalize_search_term(term)
    except ValidationException as e:
        raise _http_error(e)

    customers, error = await repository.search(cleaned)
    if error:
        raise _http_error(error)
    return SearchResponse(term=cleaned, customers=customers, total=len(customers))


@router.post("/refresh", response_model=CustomerListResponse, summary="Reload customers")
async def refresh_customers(
    repository: CustomerRepository = Depends(get_customer_repository),
):
    _, error = await repository.refresh()
    if error:
        raise _http_error(error)
    snapshot = repository.items
    return CustomerListResponse(
        customers=list(snapshot),
        total=len(snapshot),
        counts=count_by_status(snapshot),
        is_loading=repository.is_loading,
    )


@router.get("/{customer_id}", response_model=Customer, summary="Get customer")
async def get_customer(
    customer_id: str,
    repository: CustomerRepository = Depends(get_customer_repository),
):
    customer = repository.get(customer_id)
    if customer is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Customer not found: {customer_id}",
        )
    return customer


@router.patch("/{customer_id}", response_model=Customer, summary="Update customer")
async def update_customer(
    customer_id: str,
    changes: CustomerUpdate,
    repository: CustomerRepository = Depends(get_customer_repository),
):
    customer, error = await repository.update(customer_id, changes)
    if error:
        raise _http_error(error)
    return customer


@router.delete(
    "/{customer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete customer",
)
async def delete_customer(
    customer_id: str,
    repository: CustomerRepository = Depends(get_customer_repository),
):
    _, error = await repository.delete(customer_id)
    if error:
        raise _http_error(error)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
