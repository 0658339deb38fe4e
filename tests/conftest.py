# Test configuration
import os
import re
import sys
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set

import pytest

# Add project root to sys.path so 'customer_tracker' can be imported
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

# Set test environment variables BEFORE importing app modules
os.environ["SUPABASE_URL"] = "https://testproject.supabase.co"
os.environ["SUPABASE_ANON_KEY"] = "test-anon-key"
os.environ["LOG_LEVEL"] = "WARNING"

from customer_tracker.domain.exceptions import (  # noqa: E402
    RecordNotFoundException,
    RemoteServiceException,
)
from customer_tracker.repositories.customer_repository import (  # noqa: E402
    CustomerRepository,
)
from customer_tracker.repositories.data_service import DataService, Row  # noqa: E402
from customer_tracker.supabase_client import (  # noqa: E402
    clear_access_token,
    get_access_token,
)

TEST_USER_ID = "123e4567-e89b-12d3-a456-426614174000"
BASE_TIME = datetime(2025, 1, 1, 9, 0, 0, tzinfo=timezone.utc)


def like_to_regex(pattern: str) -> "re.Pattern[str]":
    """
    Translate an ILIKE pattern into a regex the way PostgREST reads it.

    Backslash escapes the next character; an unescaped `*` is a wildcard
    like `%`.
    """
    parts = []
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "\\" and i + 1 < len(pattern):
            parts.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        if char in "%*":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
        i += 1
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


class InMemoryDataService(DataService):
    """
    DataService stub holding rows in memory.

    Assigns ids and strictly increasing timestamps the way the hosted
    store does. Operations listed in `failing` raise RemoteServiceException.
    `tokens` records the caller access token each operation ran under.
    """

    def __init__(self) -> None:
        self.tables: Dict[str, Dict[str, Row]] = {}
        self.failing: Set[str] = set()
        self.calls: List[str] = []
        self.tokens: List[Optional[str]] = []
        self._tick = 0

    def _now(self) -> str:
        self._tick += 1
        return (BASE_TIME + timedelta(seconds=self._tick)).isoformat()

    def _check(self, operation: str) -> None:
        self.calls.append(operation)
        self.tokens.append(get_access_token())
        if operation in self.failing:
            raise RemoteServiceException(operation, "connection reset")

    def seed(self, table: str, **fields) -> Row:
        now = self._now()
        row = {
            "id": str(uuid.uuid4()),
            "status": "active",
            "notes": None,
            "created_at": now,
            "updated_at": now,
            "created_by": TEST_USER_ID,
            **fields,
        }
        self.tables.setdefault(table, {})[row["id"]] = row
        return dict(row)

    def _ordered(self, rows, order_by: str, descending: bool) -> List[Row]:
        return [dict(r) for r in sorted(rows, key=lambda r: r[order_by], reverse=descending)]

    async def list_rows(self, table: str, order_by: str, descending: bool = True) -> List[Row]:
        self._check("list")
        return self._ordered(self.tables.get(table, {}).values(), order_by, descending)

    async def get_row(self, table: str, record_id: str) -> Optional[Row]:
        self._check("get")
        row = self.tables.get(table, {}).get(record_id)
        return dict(row) if row is not None else None

    async def insert_row(self, table: str, row: Row) -> Row:
        self._check("insert")
        fields = {k: v for k, v in row.items() if k not in ("id", "created_at", "updated_at")}
        return self.seed(table, **fields)

    async def upsert_row(self, table: str, row: Row, on_conflict: str = "id") -> Row:
        self._check("upsert")
        rows = self.tables.setdefault(table, {})
        key = row[on_conflict]
        rows[key] = {**rows.get(key, {}), **row}
        return dict(rows[key])

    async def update_row(self, table: str, record_id: str, changes: Row) -> Row:
        self._check("update")
        rows = self.tables.get(table, {})
        if record_id not in rows:
            raise RecordNotFoundException(table, record_id)
        rows[record_id] = {**rows[record_id], **changes, "updated_at": self._now()}
        return dict(rows[record_id])

    async def delete_row(self, table: str, record_id: str) -> None:
        self._check("delete")
        self.tables.get(table, {}).pop(record_id, None)

    async def filter_or(
        self,
        table: str,
        clauses: Sequence,
        order_by: str,
        descending: bool = True,
    ) -> List[Row]:
        self._check("search")
        compiled = [(field, like_to_regex(pattern)) for field, pattern in clauses]
        matches = [
            row
            for row in self.tables.get(table, {}).values()
            if any(regex.fullmatch(row[field] or "") for field, regex in compiled)
        ]
        return self._ordered(matches, order_by, descending)


@pytest.fixture(autouse=True)
def no_caller_token():
    """Start every test outside any caller's request."""
    clear_access_token()
    yield
    clear_access_token()


@pytest.fixture
def data_service() -> InMemoryDataService:
    return InMemoryDataService()


@pytest.fixture
def repository(data_service) -> CustomerRepository:
    return CustomerRepository(data_service)


@pytest.fixture
def acme_data() -> Dict[str, Optional[str]]:
    return {
        "customer_name": "Acme Co",
        "unique_id": "U1",
        "tracking_number": "T1",
        "status": "active",
    }


@pytest.fixture
def seeded(data_service) -> List[Row]:
    """Three customers in the remote store; only the first mentions acme."""
    return [
        data_service.seed(
            "customers", customer_name="ACME Logistics", unique_id="CUST-001", tracking_number="1Z999"
        ),
        data_service.seed(
            "customers", customer_name="Globex", unique_id="CUST-002", tracking_number="TRK-42",
            status="pending",
        ),
        data_service.seed(
            "customers", customer_name="Initech", unique_id="CUST-003", tracking_number="TRK-43",
            status="completed",
        ),
    ]
