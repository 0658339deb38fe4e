"""
Customer repository.

Holds the in-memory snapshot of the customer collection and keeps it in
step with the remote data service. Every operation returns a
RepositoryResult and never raises; the snapshot only changes after the
matching remote call succeeds.

Overlapping operations are not serialized: when two calls on the same
record are in flight, the cache reflects whichever response resolves last.
"""

from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Generic,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from pydantic import ValidationError

from ..domain.entities import SEARCHABLE_FIELDS, Customer
from ..domain.exceptions import (
    CustomerNotFoundException,
    CustomerTrackerException,
    RecordNotFoundException,
    RemoteServiceException,
    ValidationException,
)
from ..logging_config import get_logger
from ..models import CustomerCreate, CustomerUpdate
from .data_service import DataService

logger = get_logger(__name__)

T = TypeVar("T")

Listener = Callable[["CustomerRepository"], None]

ORDER_COLUMN = "created_at"


@dataclass(frozen=True)
class RepositoryResult(Generic[T]):
    """
    Outcome of a repository operation.

    Unpacks as a (data, error) pair:

        customer, error = await repository.create(data, user_id)
    """

    data: Optional[T] = None
    error: Optional[CustomerTrackerException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __iter__(self) -> Iterator[Any]:
        return iter((self.data, self.error))


def escape_like(term: str) -> str:
    """
    Escape LIKE wildcards so the term matches literally.

    PostgREST rewrites `*` to `%` before the pattern reaches Postgres, so a
    `*` cannot be escaped here; see CustomerRepository.search.
    """
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _coerce_input(model, data: Any, field: str):
    if isinstance(data, model):
        return data
    if not isinstance(data, Mapping):
        raise ValidationException(
            field, type(data).__name__, "expected a mapping of customer fields"
        )
    return model.model_validate(dict(data))


def _as_domain_error(operation: str, exc: Exception) -> CustomerTrackerException:
    if isinstance(exc, CustomerTrackerException):
        return exc
    return RemoteServiceException(operation, str(exc))


def _validation_error(exc: ValidationError) -> ValidationException:
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or "data"
    return ValidationException(field, first.get("input"), first["msg"])


def _dedupe(customers: List[Customer]) -> Tuple[Customer, ...]:
    seen = set()
    unique = []
    for customer in customers:
        if customer.id not in seen:
            seen.add(customer.id)
            unique.append(customer)
    return tuple(unique)


class CustomerRepository:
    """
    Store of customer records mirrored from the remote service.

    `items` is an immutable snapshot ordered newest first. Subscribers
    are called with the repository after every state change.
    """

    def __init__(self, data_service: DataService, table: str = "customers"):
        """
        Initialize repository.

        Args:
            data_service: Remote data service adapter
            table: Name of the customers table
        """
        self.data_service = data_service
        self.table = table
        self._items: Tuple[Customer, ...] = ()
        self._is_loading = True
        self._listeners: List[Listener] = []

    @property
    def items(self) -> Tuple[Customer, ...]:
        return self._items

    @property
    def is_loading(self) -> bool:
        """True until the first load has settled."""
        return self._is_loading

    def get(self, customer_id: str) -> Optional[Customer]:
        for customer in self._items:
            if customer.id == customer_id:
                return customer
        return None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for state changes.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Customer repository listener failed")

    async def load(self) -> RepositoryResult[List[Customer]]:
        """
        Fetch the full collection, newest first, replacing the snapshot.

        On failure the previous snapshot is kept. No retry is attempted.
        """
        try:
            rows = await self.data_service.list_rows(
                self.table, ORDER_COLUMN, descending=True
            )
            customers = _dedupe([Customer.from_row(row) for row in rows])
        except Exception as e:
            error = _as_domain_error("list", e)
            logger.error(f"Error fetching customers: {error.message}")
            self._is_loading = False
            self._notify()
            return RepositoryResult(error=error)

        self._items = customers
        self._is_loading = False
        logger.info(f"Loaded {len(customers)} customers")
        self._notify()
        return RepositoryResult(data=list(customers))

    async def refresh(self) -> RepositoryResult[List[Customer]]:
        """Reload the collection from the remote service."""
        return await self.load()

    async def create(
        self,
        data: Union[CustomerCreate, Mapping[str, Any]],
        created_by: str,
    ) -> RepositoryResult[Customer]:
        """
        Insert a customer owned by created_by and prepend it to the snapshot.

        Args:
            data: Customer fields; id and timestamps come from the server
            created_by: Id of the authenticated caller
        """
        try:
            data = _coerce_input(CustomerCreate, data, "data")
            row = await self.data_service.insert_row(self.table, data.to_row(created_by))
            customer = Customer.from_row(row)
        except ValidationError as e:
            error = _validation_error(e)
            logger.error(f"Error creating customer: {error.message}")
            return RepositoryResult(error=error)
        except Exception as e:
            error = _as_domain_error("insert", e)
            logger.error(f"Error creating customer: {error.message}")
            return RepositoryResult(error=error)

        self._items = (customer,) + tuple(c for c in self._items if c.id != customer.id)
        logger.info(f"Created customer {customer.id}")
        self._notify()
        return RepositoryResult(data=customer)

    async def update(
        self,
        customer_id: str,
        changes: Union[CustomerUpdate, Mapping[str, Any]],
    ) -> RepositoryResult[Customer]:
        """
        Apply a partial update and replace the cached entry in place.

        A customer id unknown to the remote service yields a
        CustomerNotFoundException result.
        """
        try:
            changes = _coerce_input(CustomerUpdate, changes, "changes")
            payload = changes.to_row()
            if not payload:
                raise ValidationException("changes", payload, "no fields to update")
            row = await self.data_service.update_row(self.table, customer_id, payload)
            customer = Customer.from_row(row)
        except ValidationError as e:
            error = _validation_error(e)
            logger.error(f"Error updating customer {customer_id}: {error.message}")
            return RepositoryResult(error=error)
        except RecordNotFoundException:
            error = CustomerNotFoundException(customer_id)
            logger.error(f"Error updating customer {customer_id}: {error.message}")
            return RepositoryResult(error=error)
        except Exception as e:
            error = _as_domain_error("update", e)
            logger.error(f"Error updating customer {customer_id}: {error.message}")
            return RepositoryResult(error=error)

        self._items = tuple(
            customer if c.id == customer_id else c for c in self._items
        )
        logger.info(f"Updated customer {customer_id}")
        self._notify()
        return RepositoryResult(data=customer)

    async def delete(self, customer_id: str) -> RepositoryResult[None]:
        """Delete a customer and drop it from the snapshot."""
        try:
            await self.data_service.delete_row(self.table, customer_id)
        except Exception as e:
            error = _as_domain_error("delete", e)
            logger.error(f"Error deleting customer {customer_id}: {error.message}")
            return RepositoryResult(error=error)

        self._items = tuple(c for c in self._items if c.id != customer_id)
        logger.info(f"Deleted customer {customer_id}")
        self._notify()
        return RepositoryResult()

    async def search(self, term: str) -> RepositoryResult[List[Customer]]:
        """
        Case-insensitive substring search on name, unique id and tracking number.

        Read-only: results come from the remote service and the
        snapshot is left untouched. Callers must not pass a blank term.
        """
        if not term or not term.strip():
            error = ValidationException("term", term, "search term must not be blank")
            logger.warning(error.message)
            return RepositoryResult(data=[], error=error)

        pattern = f"%{escape_like(term)}%"
        try:
            rows = await self.data_service.filter_or(
                self.table,
                [(field, pattern) for field in SEARCHABLE_FIELDS],
                ORDER_COLUMN,
                descending=True,
            )
            customers = [Customer.from_row(row) for row in rows]
        except Exception as e:
            error = _as_domain_error("search", e)
            logger.error(f"Error searching customers: {error.message}")
            return RepositoryResult(data=[], error=error)

        # The remote side treats `*` as a wildcard
        if "*" in term:
            customers = [customer for customer in customers if customer.matches(term)]

        logger.debug(f"Search for {term!r} returned {len(customers)} customers")
        return RepositoryResult(data=customers)
