"""
Core test configuration

Storage is an in-memory stand-in for the supabase-py query builder, wired in
through FastAPI's dependency_overrides together with fakes for the AI and
media services. Bearer tokens are taken as user ids.
"""

import os

os.environ.setdefault("RATE_LIMIT", "100000/minute")
os.environ.setdefault("ENVIRONMENT", "test")

import copy
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from familyhub.core.errors import ExternalServiceFailure
from familyhub.database.supabase_client import get_supabase
from familyhub.integrations.cloudinary_storage import get_media_storage
from familyhub.integrations.gemini import get_gemini_client
from familyhub.main import app

# Columns storage fills in on insert, per table
TIMESTAMP_DEFAULTS = {
    "check_ins": ["timestamp"],
    "questions": ["timestamp"],
    "group_members": ["joined_at"],
    "kitchen_inventory": ["added_date"],
    "kitchen_meal_plans": ["created_date"],
}

UNIQUE_COLUMNS = {
    "group_invitations": ["short_code", "invite_token"],
}


def api_error(code: str, message: str) -> APIError:
    return APIError({"code": code, "message": message, "hint": None, "details": None})


def _comparable(value):
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return value


def _literal(value: str):
    return {"true": True, "false": False, "null": None}.get(value, value)


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.operation = "select"
        self.columns = "*"
        self.payload = None
        self.filters = []
        self.ordering = []
        self.row_limit = None

    # Operations

    def select(self, columns: str = "*", **kwargs):
        self.operation = "select"
        self.columns = columns
        return self

    def insert(self, rows, **kwargs):
        self.operation = "insert"
        self.payload = rows
        return self

    def update(self, values, **kwargs):
        self.operation = "update"
        self.payload = values
        return self

    def delete(self, **kwargs):
        self.operation = "delete"
        return self

    # Filters

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def is_(self, column, value):
        expected = _literal(value) if isinstance(value, str) else value
        self.filters.append(lambda row: row.get(column) is expected)
        return self

    def gt(self, column, value):
        self.filters.append(
            lambda row: row.get(column) is not None and _comparable(row.get(column)) > _comparable(value)
        )
        return self

    def gte(self, column, value):
        self.filters.append(
            lambda row: row.get(column) is not None and _comparable(row.get(column)) >= _comparable(value)
        )
        return self

    def lte(self, column, value):
        self.filters.append(
            lambda row: row.get(column) is not None and _comparable(row.get(column)) <= _comparable(value)
        )
        return self

    def or_(self, expression: str):
        conditions = []
        for part in expression.split(","):
            column, operator, value = part.split(".", 2)
            assert operator == "eq", f"unsupported or_ operator {operator}"
            conditions.append((column, _literal(value)))

        def matches(row):
            return any(
                row.get(column) == value or (isinstance(value, str) and str(row.get(column)) == value)
                for column, value in conditions
            )

        self.filters.append(matches)
        return self

    def order(self, column, desc: bool = False, **kwargs):
        self.ordering.append((column, desc))
        return self

    def limit(self, size: int, **kwargs):
        self.row_limit = size
        return self

    # Execution

    def _matching(self):
        return [row for row in self.db.rows(self.table_name) if all(f(row) for f in self.filters)]

    def _check_columns(self, columns):
        for column in columns:
            if (self.table_name, column) in self.db.missing_columns:
                raise api_error("42703", f'column {self.table_name}.{column} does not exist')

    def execute(self):
        self.db.calls.append((self.table_name, self.operation))
        self.db.raise_injected(self.table_name, self.operation)
        if self.table_name in self.db.missing_tables:
            raise api_error("42P01", f'relation "public.{self.table_name}" does not exist')

        if self.operation == "select":
            self._check_columns([c.strip() for c in self.columns.split(",") if c.strip() != "*"])
            rows = self._matching()
            for column, desc in reversed(self.ordering):
                rows.sort(
                    key=lambda row: (row.get(column) is None, _comparable(row.get(column))),
                    reverse=desc,
                )
            if self.row_limit is not None:
                rows = rows[:self.row_limit]
            return SimpleNamespace(data=copy.deepcopy(rows))

        if self.operation == "insert":
            rows = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = [self.db.add(self.table_name, row) for row in rows]
            return SimpleNamespace(data=copy.deepcopy(inserted))

        if self.operation == "update":
            self._check_columns(self.payload.keys())
            rows = self._matching()
            for row in rows:
                row.update(copy.deepcopy(self.payload))
            return SimpleNamespace(data=copy.deepcopy(rows))

        rows = self._matching()
        table = self.db.rows(self.table_name)
        for row in rows:
            table.remove(row)
        return SimpleNamespace(data=copy.deepcopy(rows))


class FakeAuth:
    def __init__(self):
        self.signed_up = []

    def get_user(self, jwt=None):
        if not jwt or jwt == "invalid-token":
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=SimpleNamespace(id=jwt, email=f"{jwt}@example.com", role="authenticated"))

    def sign_up(self, credentials):
        if any(u.email == credentials["email"] for u in self.signed_up):
            raise Exception("User already registered")
        user = SimpleNamespace(id=str(uuid.uuid4()), email=credentials["email"])
        self.signed_up.append(user)
        return SimpleNamespace(user=user)


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.calls = []
        self.missing_tables = set()
        self.missing_columns = set()
        self.injected = []
        self.auth = FakeAuth()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rows(self, table: str):
        return self.tables.setdefault(table, [])

    def add(self, table: str, row: dict) -> dict:
        row = copy.deepcopy(row)
        row.setdefault("id", str(uuid.uuid4()))
        now = datetime.now(timezone.utc).isoformat()
        row.setdefault("created_at", now)
        for column in TIMESTAMP_DEFAULTS.get(table, []):
            row.setdefault(column, now)
        for column in UNIQUE_COLUMNS.get(table, []):
            if row.get(column) is not None and any(r.get(column) == row[column] for r in self.rows(table)):
                raise api_error("23505", f'duplicate key value violates unique constraint "{table}_{column}_key"')
        self.rows(table).append(row)
        return row

    def seed(self, table: str, **row) -> dict:
        return copy.deepcopy(self.add(table, row))

    def fail_next(
        self, table: str, operation: str, code: str = "XX000", message: str = "storage unavailable", skip: int = 0
    ):
        """Make a future call fail; the first `skip` matching calls still succeed."""
        self.injected.append([table, operation, api_error(code, message), skip])

    def raise_injected(self, table: str, operation: str):
        for index, entry in enumerate(self.injected):
            if entry[0] == table and entry[1] == operation:
                if entry[3] > 0:
                    entry[3] -= 1
                    return
                del self.injected[index]
                raise entry[2]

    # Helpers for common fixtures

    def add_group(self, name="Smiths", admin="alice", members=(), inactive=()):
        group = self.seed("groups", name=name, privacy="private", created_by=admin)
        self.seed("group_members", group_id=group["id"], user_id=admin, role="Admin", is_active=True)
        for user_id in members:
            self.seed("group_members", group_id=group["id"], user_id=user_id, role="Member", is_active=True)
        for user_id in inactive:
            self.seed("group_members", group_id=group["id"], user_id=user_id, role="Member", is_active=False)
        return group


class FakeGemini:
    def __init__(self):
        self.photo_results = []
        self.meal_plan = {}
        self.recipe = {}
        self.plant = {}
        self.analysis = {"summary": "Well stocked"}
        self.tasks = []
        self.prompts = []

    def analyze_inventory_photo(self, image):
        result = self.photo_results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    def analyze_inventory(self, items):
        self.prompts.append(items)
        return self.analysis

    def generate_meal_plan(self, request):
        self.prompts.append(request)
        return copy.deepcopy(self.meal_plan)

    def generate_recipe(self, meal_idea, ingredients, dietary_preferences):
        self.prompts.append(meal_idea)
        return copy.deepcopy(self.recipe)

    def identify_plant(self, image):
        return copy.deepcopy(self.plant)

    def extract_tasks(self, title, content):
        self.prompts.append(content)
        return copy.deepcopy(self.tasks)


class FakeStorage:
    def __init__(self):
        self.uploads = []

    def upload(self, data_uri, folder, public_id, resource_type="image"):
        self.uploads.append({"data_uri": data_uri, "folder": folder, "public_id": public_id})
        return {
            "public_id": f"{folder}/{public_id}",
            "url": f"https://res.cloudinary.com/demo/{resource_type}/upload/{folder}/{public_id}",
            "format": "png",
            "width": 10,
            "height": 10,
            "bytes": len(data_uri),
            "resource_type": resource_type,
        }


def bearer(user_id: str) -> dict:
    return {"Authorization": f"Bearer {user_id}"}


def iso(delta: timedelta = timedelta()) -> str:
    return (datetime.now(timezone.utc) + delta).isoformat()


def failing_photo():
    return ExternalServiceFailure("AI service returned an unreadable response")


@pytest.fixture()
def db():
    return FakeSupabase()


@pytest.fixture()
def gemini():
    return FakeGemini()


@pytest.fixture()
def storage():
    return FakeStorage()


@pytest.fixture()
def client(db, gemini, storage):
    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_gemini_client] = lambda: gemini
    app.dependency_overrides[get_media_storage] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def group(db):
    """Group with alice (Admin), bob (Member) and carol (deactivated)"""
    return db.add_group(admin="alice", members=["bob"], inactive=["carol"])
