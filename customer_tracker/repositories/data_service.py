"""
Remote data service interface (Abstract Base Class).

Defines the row-level contract the customer repository consumes,
independent of the hosted backend that implements it.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple

Row = Dict[str, Any]

# (field, ILIKE pattern) pairs combined with OR
IlikeClause = Tuple[str, str]


class DataService(ABC):
    """
    Abstract interface for table operations on the remote store.

    Implementations raise domain exceptions only: RemoteServiceException
    for transport or server failures, RecordNotFoundException when an
    update matches no row.
    """

    @abstractmethod
    async def list_rows(
        self, table: str, order_by: str, descending: bool = True
    ) -> List[Row]:
        """
        Fetch every row of a table.

        Args:
            table: Table name
            order_by: Column to order by
            descending: Sort direction

        Returns:
            Rows in the requested order
        """
        pass

    @abstractmethod
    async def get_row(self, table: str, record_id: str) -> Optional[Row]:
        """Fetch the row whose id is record_id, or None if there is none."""
        pass

    @abstractmethod
    async def insert_row(self, table: str, row: Row) -> Row:
        """
        Insert a row.

        Returns:
            The stored row including server-assigned columns
        """
        pass

    @abstractmethod
    async def upsert_row(self, table: str, row: Row, on_conflict: str = "id") -> Row:
        """
        Insert a row, or update the existing row sharing its on_conflict column.

        Returns:
            The stored row
        """
        pass

    @abstractmethod
    async def update_row(self, table: str, record_id: str, changes: Row) -> Row:
        """
        Update the row whose id is record_id.

        Returns:
            The stored row after the update
        """
        pass

    @abstractmethod
    async def delete_row(self, table: str, record_id: str) -> None:
        """Delete the row whose id is record_id."""
        pass

    @abstractmethod
    async def filter_or(
        self,
        table: str,
        clauses: Sequence[IlikeClause],
        order_by: str,
        descending: bool = True,
    ) -> List[Row]:
        """
        Fetch rows matching any of the ILIKE clauses.

        Args:
            table: Table name
            clauses: (field, pattern) pairs; a row matches when any
                field matches its pattern case-insensitively
            order_by: Column to order by
            descending: Sort direction

        Returns:
            Matching rows in the requested order
        """
        pass
