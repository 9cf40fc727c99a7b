"""
Shared fixtures.

FakeSupabase mimics the small part of the supabase-py query builder the
service uses (table/select/insert/update/delete, eq/lt/ilike/in_/contains,
order/limit, rpc) over in-memory lists.
"""

import os
import re
import uuid
from datetime import datetime, timezone

import pytest

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "service-role-key")
os.environ.setdefault("SUPABASE_ANON_KEY", "anon-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length")
os.environ.setdefault("OPENAI_API_KEY", "sk-test")

from postgrest.exceptions import APIError  # noqa: E402

from cortex.config import get_settings  # noqa: E402

USER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_USER_ID = "22222222-2222-2222-2222-222222222222"


def like_to_regex(pattern: str) -> re.Pattern:
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


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.limit_count = None

    # operations
    def select(self, columns="*"):
        self.op = "select"
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.op = "update"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    # filters
    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def lt(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row[column] < value)
        return self

    def ilike(self, column, pattern):
        regex = like_to_regex(pattern)
        self.filters.append(lambda row: regex.fullmatch(row.get(column) or "") is not None)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def contains(self, column, values):
        self.filters.append(lambda row: all(v in (row.get(column) or []) for v in values))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, count):
        self.limit_count = count
        return self

    def _matching(self):
        rows = self.db.tables.setdefault(self.table_name, [])
        return [row for row in rows if all(f(row) for f in self.filters)]

    def execute(self):
        self.db.calls.append((self.table_name, self.op))
        rows = self.db.tables.setdefault(self.table_name, [])

        error = self.db.errors.get((self.table_name, self.op))
        if error:
            raise error

        if self.op == "insert":
            payloads = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for payload in payloads:
                row = {"id": str(uuid.uuid4()), "created_at": datetime.now(timezone.utc).isoformat()}
                row.update(payload)
                rows.append(row)
                inserted.append(dict(row))
            return FakeResponse(inserted)

        matching = self._matching()

        if self.op == "update":
            for row in matching:
                row.update(self.payload)
            return FakeResponse([dict(r) for r in matching])

        if self.op == "delete":
            for row in matching:
                rows.remove(row)
            return FakeResponse([dict(r) for r in matching])

        if self.order_by:
            column, desc = self.order_by
            present = [r for r in matching if r.get(column) is not None]
            missing = [r for r in matching if r.get(column) is None]
            present.sort(key=lambda r: r[column], reverse=desc)
            matching = present + missing
        if self.limit_count is not None:
            matching = matching[:self.limit_count]
        return FakeResponse([dict(r) for r in matching])


class FakeRpc:
    def __init__(self, data):
        self.data = data

    def execute(self):
        return FakeResponse(self.data)


class FakeSupabase:
    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.errors: dict[tuple[str, str], APIError] = {}
        self.rpc_results: dict[str, list] = {}
        self.rpc_calls: list[tuple[str, dict]] = []
        self.calls: list[tuple[str, str]] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: dict) -> FakeRpc:
        self.rpc_calls.append((name, params))
        return FakeRpc(self.rpc_results.get(name, []))

    def fail(self, table: str, op: str, message: str = "database unavailable"):
        """Make every `op` on `table` raise an APIError."""
        self.errors[(table, op)] = APIError({"message": message})

    def add(self, table: str, **row) -> dict:
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        self.tables.setdefault(table, []).append(row)
        return row


@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def user_id():
    return USER_ID
