import re
import threading
import uuid
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from src.orderdesk.api.deps import get_propagation_dispatcher, get_store
from src.orderdesk.main import create_app
from src.orderdesk.models.domain import Identity
from src.orderdesk.persistence.query import format_timestamp
from src.orderdesk.services.propagation import PropagationDispatcher


class DummyResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


def _ilike_regex(pattern: str) -> re.Pattern:
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


class DummyQuery:
    """Just enough of the postgrest builder for the persistence layer."""

    def __init__(self, store: "FakeSupabase", table: str) -> None:
        self._store = store
        self._table = table
        self._action = "select"
        self._payload = None
        self._count = None
        self._filters = []
        self._orders = []
        self._range = None
        self._limit = None

    def select(self, *columns, count=None):
        self._action = "select"
        self._count = count
        return self

    def insert(self, payload):
        self._action = "insert"
        self._payload = payload
        return self

    def update(self, payload):
        self._action = "update"
        self._payload = payload
        return self

    def delete(self):
        self._action = "delete"
        return self

    def _filter(self, column, test):
        self._filters.append(lambda row: test(row.get(column)))
        return self

    def eq(self, column, value):
        return self._filter(column, lambda current: current == value)

    def neq(self, column, value):
        return self._filter(column, lambda current: current != value)

    def gt(self, column, value):
        return self._filter(column, lambda current: current is not None and current > value)

    def gte(self, column, value):
        return self._filter(column, lambda current: current is not None and current >= value)

    def lt(self, column, value):
        return self._filter(column, lambda current: current is not None and current < value)

    def lte(self, column, value):
        return self._filter(column, lambda current: current is not None and current <= value)

    def ilike(self, column, pattern):
        regex = _ilike_regex(pattern)
        return self._filter(column, lambda current: current is not None and regex.fullmatch(str(current)) is not None)

    def in_(self, column, values):
        allowed = set(values)
        return self._filter(column, lambda current: current in allowed)

    def order(self, column, desc=False):
        self._orders.append((column, desc))
        return self

    def range(self, start, end):
        self._range = (start, end)
        return self

    def limit(self, count):
        self._limit = count
        return self

    def _matches(self, row):
        return all(test(row) for test in self._filters)

    def execute(self):
        with self._store.lock:
            self._store.calls.append((self._table, self._action))
            rows = self._store.tables.setdefault(self._table, [])

            if self._action == "insert":
                records = self._payload if isinstance(self._payload, list) else [self._payload]
                inserted = [dict(record) for record in records]
                rows.extend(inserted)
                return DummyResponse([dict(row) for row in inserted])

            if self._action == "update":
                updated = []
                for row in rows:
                    if self._matches(row):
                        row.update(self._payload)
                        updated.append(dict(row))
                return DummyResponse(updated)

            if self._action == "delete":
                deleted = [row for row in rows if self._matches(row)]
                self._store.tables[self._table] = [row for row in rows if not self._matches(row)]
                return DummyResponse([dict(row) for row in deleted])

            matched = [dict(row) for row in rows if self._matches(row)]
            for column, desc in reversed(self._orders):
                matched.sort(
                    key=lambda row: (row.get(column) is None, row.get(column) or ""),
                    reverse=desc,
                )
            count = len(matched) if self._count else None
            if self._range is not None:
                start, end = self._range
                matched = matched[start:end + 1]
            if self._limit is not None:
                matched = matched[:self._limit]
            return DummyResponse(matched, count=count)


class FakeSupabase:
    """In-memory stand-in for the Supabase client."""

    def __init__(self) -> None:
        self.tables = {"routes": [], "users": [], "customers": [], "orders": []}
        self.calls = []
        self.lock = threading.RLock()

    def table(self, name: str) -> DummyQuery:
        return DummyQuery(self, name)


class Seeder:
    """Writes rows straight into the fake store, bypassing validation."""

    def __init__(self, store: FakeSupabase) -> None:
        self.store = store

    def route(self, name: str, is_active: bool = True) -> dict:
        row = {
            "id": str(uuid.uuid4()),
            "name": name,
            "is_active": is_active,
            "created_at": "2025-01-01T00:00:00.000",
        }
        self.store.tables["routes"].append(row)
        return row

    def user(self, username: str, display_name: str | None = None, role: str = "user") -> dict:
        row = {
            "id": f"u-{username}",
            "username": username,
            "display_name": display_name or username.title(),
            "role": role,
        }
        self.store.tables["users"].append(row)
        return row

    def customer(
        self,
        name: str,
        route: dict,
        sales_executive: str = "ravi",
        standard_unit_price: float = 10.0,
        premium_unit_price: float = 20.0,
        phone: str = "",
    ) -> dict:
        row = {
            "id": str(uuid.uuid4()),
            "name": name,
            "route_id": route["id"],
            "sales_executive": sales_executive,
            "standard_unit_price": standard_unit_price,
            "premium_unit_price": premium_unit_price,
            "phone": phone,
            "created_at": "2025-01-01T00:00:00.000",
            "updated_at": "2025-01-01T00:00:00.000",
        }
        self.store.tables["customers"].append(row)
        return row

    def order(
        self,
        customer: dict,
        when: datetime,
        standard_qty: int = 1,
        premium_qty: int = 0,
        vehicle: str = "A - (Ponnani / Valancheri)",
        created_at: datetime | None = None,
        created_by_username: str = "admin",
    ) -> dict:
        row = {
            "id": str(uuid.uuid4()),
            "date": format_timestamp(when),
            "customer_id": customer["id"],
            "route_id": customer["route_id"],
            "sales_executive": customer["sales_executive"],
            "vehicle": vehicle,
            "standard_qty": standard_qty,
            "premium_qty": premium_qty,
            "created_by": f"u-{created_by_username}",
            "created_by_username": created_by_username,
            "created_at": format_timestamp(created_at or when),
            "updated_at": format_timestamp(created_at or when),
        }
        self.store.tables["orders"].append(row)
        return row


@pytest.fixture
def store() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def seed(store: FakeSupabase) -> Seeder:
    return Seeder(store)


@pytest.fixture
def dispatcher():
    dispatcher = PropagationDispatcher(max_workers=1)
    yield dispatcher
    dispatcher.shutdown(wait_for_tasks=True)


@pytest.fixture
def admin() -> Identity:
    return Identity(id="u-admin", username="admin", role="admin")


@pytest.fixture
def ravi() -> Identity:
    return Identity(id="u-ravi", username="ravi", role="user")


@pytest.fixture
def api_client(store: FakeSupabase, dispatcher: PropagationDispatcher) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_propagation_dispatcher] = lambda: dispatcher
    return TestClient(app)
