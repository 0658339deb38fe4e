"""
Supabase implementation of the remote data service.

Runs row operations against the project's PostgREST API and translates
PostgREST and transport errors into domain exceptions.

Each operation opens a PostgREST client carrying the current caller's
access token (the anon key outside a request), so row-level security
judges every call by the user who made it.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence

import httpx
from postgrest import AsyncPostgrestClient
from postgrest.constants import DEFAULT_POSTGREST_CLIENT_HEADERS
from postgrest.exceptions import APIError

from ..domain.exceptions import RecordNotFoundException, RemoteServiceException
from ..logging_config import get_logger
from ..supabase_client import get_access_token
from .data_service import DataService, IlikeClause, Row

logger = get_logger(__name__)

# Characters PostgREST treats as syntax inside an or=(...) filter
_RESERVED_FILTER_CHARS = frozenset(',.:()"\\')


def quote_filter_value(value: str) -> str:
    """
    Quote a value for use inside a PostgREST logical filter.

    Values without reserved characters are returned unchanged.

    Example:
        >>> quote_filter_value("%acme%")
        '%acme%'
        >>> quote_filter_value("%a,b%")
        '"%a,b%"'
    """
    if not any(char in _RESERVED_FILTER_CHARS for char in value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_or_filter(clauses: Sequence[IlikeClause]) -> str:
    """Render (field, pattern) pairs as a PostgREST or= expression."""
    return ",".join(
        f"{field}.ilike.{quote_filter_value(pattern)}" for field, pattern in clauses
    )


class SupabaseDataService(DataService):
    """Table operations backed by a Supabase project."""

    def __init__(self, rest_url: str, api_key: str, schema: str = "public"):
        """
        Initialize the data service.

        Args:
            rest_url: PostgREST base URL (https://<project>.supabase.co/rest/v1)
            api_key: Project anon key
            schema: Database schema holding the tables
        """
        self.rest_url = rest_url
        self.api_key = api_key
        self.schema = schema

    def headers(self) -> Dict[str, str]:
        """Request headers for the current caller."""
        token = get_access_token() or self.api_key
        return {
            **DEFAULT_POSTGREST_CLIENT_HEADERS,
            "apikey": self.api_key,
            "Authorization": f"Bearer {token}",
        }

    async def _execute(
        self, operation: str, table: str, build: Callable[[Any], Any]
    ) -> List[Row]:
        try:
            async with AsyncPostgrestClient(
                self.rest_url, schema=self.schema, headers=self.headers()
            ) as client:
                response = await build(client.table(table)).execute()
        except APIError as e:
            reason = e.message or str(e)
            logger.error(f"PostgREST error during {operation} on {table}: {reason}")
            raise RemoteServiceException(operation, reason)
        except httpx.HTTPError as e:
            logger.error(f"Transport error during {operation} on {table}: {e}")
            raise RemoteServiceException(operation, str(e))
        return response.data or []

    async def list_rows(
        self, table: str, order_by: str, descending: bool = True
    ) -> List[Row]:
        rows = await self._execute(
            "list", table, lambda t: t.select("*").order(order_by, desc=descending)
        )
        logger.debug(f"Fetched {len(rows)} rows from {table}")
        return rows

    async def get_row(self, table: str, record_id: str) -> Optional[Row]:
        rows = await self._execute(
            "get", table, lambda t: t.select("*").eq("id", record_id)
        )
        return rows[0] if rows else None

    async def insert_row(self, table: str, row: Row) -> Row:
        rows = await self._execute("insert", table, lambda t: t.insert(row))
        if not rows:
            raise RemoteServiceException("insert", "no row returned")
        return rows[0]

    async def upsert_row(self, table: str, row: Row, on_conflict: str = "id") -> Row:
        rows = await self._execute(
            "upsert", table, lambda t: t.upsert(row, on_conflict=on_conflict)
        )
        if not rows:
            raise RemoteServiceException("upsert", "no row returned")
        return rows[0]

    async def update_row(self, table: str, record_id: str, changes: Row) -> Row:
        rows = await self._execute(
            "update", table, lambda t: t.update(changes).eq("id", record_id)
        )
        if not rows:
            raise RecordNotFoundException(table, record_id)
        return rows[0]

    async def delete_row(self, table: str, record_id: str) -> None:
        await self._execute("delete", table, lambda t: t.delete().eq("id", record_id))

    async def filter_or(
        self,
        table: str,
        clauses: Sequence[IlikeClause],
        order_by: str,
        descending: bool = True,
    ) -> List[Row]:
        if not clauses:
            raise ValueError("filter_or requires at least one clause")
        or_filter = build_or_filter(clauses)
        return await self._execute(
            "search",
            table,
            lambda t: t.select("*").or_(or_filter).order(order_by, desc=descending),
        )
