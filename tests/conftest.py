import copy
import os
import uuid
from collections import defaultdict
from datetime import datetime, timedelta, timezone

import pytest

# Must be set before the app (and its limiter) is imported
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from fastapi.testclient import TestClient  # noqa: E402
from postgrest.exceptions import APIError  # noqa: E402

from emis_party.config import Settings  # noqa: E402
from emis_party.core.dependencies import get_settings  # noqa: E402
from emis_party.database.supabase_client import get_supabase  # noqa: E402
from emis_party.main import app  # noqa: E402

API = "/v1"

UNIQUE_KEYS = {
    "parties": [("type", "name", "phone", "email")],
    "roles": [("name",)],
    "permissions": [("resource", "action", "wildcard"), ("wildcard",)],
}


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    """Enough of the postgrest query builder for the services."""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.action = "select"
        self.columns = "*"
        self.count = None
        self.payload = None
        self.filters = []
        self.orders = []
        self.start = None
        self.end = None
        self.max_rows = None

    # Actions

    def select(self, columns="*", count=None):
        self.action, self.columns, self.count = "select", columns, count
        return self

    def insert(self, payload):
        self.action, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.action, self.payload = "update", payload
        return self

    def delete(self):
        self.action = "delete"
        return self

    # Filters and modifiers

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self.filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column, values):
        values = set(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def contains(self, column, values):
        self.filters.append(lambda row: set(values) <= set(row.get(column) or []))
        return self

    def or_(self, expression):
        clauses = []
        for part in expression.split(","):
            column, operator, pattern = part.split(".", 2)
            assert operator == "ilike"
            clauses.append((column, pattern.strip("%").lower()))
        self.filters.append(
            lambda row: any(term in str(row.get(column) or "").lower() for column, term in clauses)
        )
        return self

    def order(self, column, desc=False):
        self.orders.append((column, desc))
        return self

    def range(self, start, end):
        self.start, self.end = start, end
        return self

    def limit(self, size):
        self.max_rows = size
        return self

    # Execution

    def execute(self):
        if self.table in self.db.failures:
            raise self.db.failures[self.table]
        rows = self.db.tables[self.table]
        if self.action == "insert":
            payloads = self.payload if isinstance(self.payload, list) else [self.payload]
            created = []
            for payload in payloads:
                now = self.db.now()
                row = {"id": str(uuid.uuid4()), "created_at": now, "updated_at": now}
                row.update(copy.deepcopy(payload))
                self.db.check_unique(self.table, row)
                rows.append(row)
                created.append(copy.deepcopy(row))
            return FakeResponse(created)

        matched = [row for row in rows if all(f(row) for f in self.filters)]

        if self.action == "update":
            updated = []
            for row in matched:
                candidate = dict(row, **copy.deepcopy(self.payload))
                self.db.check_unique(self.table, candidate, exclude=row)
                row.update(candidate)
                updated.append(copy.deepcopy(row))
            return FakeResponse(updated)

        if self.action == "delete":
            self.db.tables[self.table] = [row for row in rows if row not in matched]
            return FakeResponse([copy.deepcopy(row) for row in matched])

        total = len(matched)
        for column, desc in reversed(self.orders):
            matched.sort(key=lambda row: (row.get(column) is None, row.get(column) or ""), reverse=desc)
        if self.start is not None:
            matched = matched[self.start:self.end + 1]
        if self.max_rows is not None:
            matched = matched[:self.max_rows]
        if self.columns != "*":
            names = [c.strip() for c in self.columns.split(",")]
            matched = [{c: row.get(c) for c in names if c in row} for row in matched]
        return FakeResponse(copy.deepcopy(matched), total if self.count else None)


class FakeSupabase:
    def __init__(self):
        self.tables = defaultdict(list)
        self.clock = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.failures = {}

    def table(self, name):
        return FakeQuery(self, name)

    def fail(self, table, error):
        """Make every later query on table raise error"""
        self.failures[table] = error

    def now(self):
        self.clock += timedelta(seconds=1)
        return self.clock.isoformat()

    def check_unique(self, table, candidate, exclude=None):
        for key in UNIQUE_KEYS.get(table, []):
            values = tuple(candidate.get(c) for c in key)
            for row in self.tables[table]:
                if row is not exclude and tuple(row.get(c) for c in key) == values:
                    raise APIError({
                        "code": "23505",
                        "message": f'duplicate key value violates unique constraint "{table}_{"_".join(key)}_key"',
                        "details": f"Key ({', '.join(key)})=({', '.join(map(str, values))}) already exists.",
                        "hint": None,
                    })


@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def client(supabase, settings):
    app.dependency_overrides[get_supabase] = lambda: supabase
    app.dependency_overrides[get_settings] = lambda: settings
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def create_permission(client):
    def create(**payload):
        body = {"resource": "parties", "action": "create", **payload}
        response = client.post(f"{API}/permissions", json=body)
        assert response.status_code == 201, response.text
        return response.json()
    return create


@pytest.fixture
def create_role(client):
    def create(**payload):
        body = {"name": "Ward Officer", **payload}
        response = client.post(f"{API}/roles", json=body)
        assert response.status_code == 201, response.text
        return response.json()
    return create


@pytest.fixture
def create_party(client):
    def create(**payload):
        body = {
            "name": "Bedfordshire",
            "phone": "(943) 902-6124",
            "email": "arely.kuvalis@gmail.com",
            **payload,
        }
        response = client.post(f"{API}/parties", json=body)
        assert response.status_code == 201, response.text
        return response.json()
    return create

