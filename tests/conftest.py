"""Shared fixtures: an in-memory stand-in for the Supabase client."""

import re
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from social_analytics.auth import ACCESS_TOKEN_COOKIE, get_auth_client, get_supabase_client
from social_analytics.config import get_settings
from social_analytics.main import create_app

ALICE_ID = "11111111-1111-1111-1111-111111111111"
BOB_ID = "22222222-2222-2222-2222-222222222222"
ALICE_TOKEN = "alice-token"
BOB_TOKEN = "bob-token"


class FakeResponse:
    def __init__(self, data: List[Dict[str, Any]]):
        self.data = data


def like_to_regex(pattern: str):
    """Case-insensitive regex for a SQL LIKE pattern with backslash escapes."""
    parts = []
    chars = iter(pattern)
    for char in chars:
        if char == "\\":
            parts.append(re.escape(next(chars, "\\")))
        elif char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


class FakeQuery:
    """Records the builder chain and evaluates it against the fake tables on execute()."""

    def __init__(self, db: "FakeDatabase", table: str):
        self.db = db
        self.table = table
        self.action = "select"
        self.columns = "*"
        self.payload: Any = None
        self.filters: List[tuple] = []
        self.order_by: Optional[tuple] = None
        self.limit_count: Optional[int] = None

    def select(self, columns: str = "*"):
        self.action = "select"
        self.columns = columns
        return self

    def insert(self, record):
        self.action = "insert"
        self.payload = record
        return self

    def update(self, record):
        self.action = "update"
        self.payload = record
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(("eq", column, value))
        return self

    def gte(self, column, value):
        self.filters.append(("gte", column, value))
        return self

    def lte(self, column, value):
        self.filters.append(("lte", column, value))
        return self

    def ilike(self, column, pattern):
        self.filters.append(("ilike", column, pattern))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, count):
        self.limit_count = count
        return self

    def eq_filters(self) -> Dict[str, Any]:
        return {column: value for op, column, value in self.filters if op == "eq"}

    def _matches(self, row: Dict[str, Any]) -> bool:
        for op, column, value in self.filters:
            current = row.get(column)
            if op == "eq" and current != value:
                return False
            if op == "gte" and (current is None or str(current) < str(value)):
                return False
            if op == "lte" and (current is None or str(current) > str(value)):
                return False
            if op == "ilike" and not like_to_regex(value).fullmatch(str(current or "")):
                return False
        return True

    def execute(self):
        self.db.executed.append(self)
        if self.db.error is not None:
            raise self.db.error

        rows = self.db.tables.setdefault(self.table, [])

        if self.action == "insert":
            record = dict(self.payload)
            record.setdefault("id", f"post-{len(rows) + 1}")
            rows.append(record)
            return FakeResponse([record])

        matched = [row for row in rows if self._matches(row)]

        if self.action == "update":
            for row in matched:
                row.update(self.payload)
            return FakeResponse([dict(row) for row in matched])

        if self.action == "delete":
            for row in matched:
                rows.remove(row)
            return FakeResponse(matched)

        if self.order_by:
            column, desc = self.order_by
            matched = sorted(matched, key=lambda row: (row.get(column) is None, row.get(column)), reverse=desc)
        if self.limit_count is not None:
            matched = matched[: self.limit_count]
        return FakeResponse([dict(row) for row in matched])


class FakeDatabase:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {"posts": [], "daily_metrics": []}
        self.executed: List[FakeQuery] = []
        self.error: Optional[Exception] = None


class FakeAdminAuth:
    def __init__(self, auth: "FakeAuth"):
        self.auth = auth

    def sign_out(self, jwt, scope="global"):
        self.auth.signed_out.append(jwt)
        if self.auth.sign_out_error is not None:
            raise self.auth.sign_out_error


class FakeAuth:
    def __init__(self):
        created = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.users = {
            ALICE_TOKEN: SimpleNamespace(id=ALICE_ID, email="alice@example.com", created_at=created),
            BOB_TOKEN: SimpleNamespace(id=BOB_ID, email="bob@example.com", created_at=created),
        }
        self.passwords = {"alice@example.com": ("secret123", ALICE_TOKEN)}
        self.get_user_error: Optional[Exception] = None
        self.sign_up_error: Optional[Exception] = None
        self.sign_up_session = True
        self.sign_out_error: Optional[Exception] = None
        self.signed_out: List[str] = []
        self.sign_up_calls: List[Dict[str, Any]] = []
        self.admin = FakeAdminAuth(self)

    def get_user(self, jwt=None):
        if self.get_user_error is not None:
            raise self.get_user_error
        user = self.users.get(jwt)
        if user is None:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=user)

    def sign_in_with_password(self, credentials):
        expected = self.passwords.get(credentials["email"])
        if not expected or expected[0] != credentials["password"]:
            raise Exception("Invalid login credentials")
        token = expected[1]
        session = SimpleNamespace(access_token=token, expires_in=3600, expires_at=1700003600)
        return SimpleNamespace(user=self.users[token], session=session)

    def sign_up(self, credentials):
        self.sign_up_calls.append(credentials)
        if self.sign_up_error is not None:
            raise self.sign_up_error
        user = SimpleNamespace(
            id="33333333-3333-3333-3333-333333333333",
            email=credentials["email"],
            created_at=datetime(2024, 6, 1, tzinfo=timezone.utc),
            email_confirmed_at=None,
        )
        session = None
        if self.sign_up_session:
            session = SimpleNamespace(access_token="new-token", expires_in=3600, expires_at=1700003600)
        return SimpleNamespace(user=user, session=session)


class FakePostgrest:
    def __init__(self):
        self.tokens: List[str] = []

    def auth(self, token):
        self.tokens.append(token)


class FakeSupabaseClient:
    def __init__(self, db: FakeDatabase):
        self.db = db
        self.auth = FakeAuth()
        self.postgrest = FakePostgrest()

    def table(self, name):
        return FakeQuery(self.db, name)


def make_post(post_id: str, user_id: str = ALICE_ID, **fields) -> Dict[str, Any]:
    post = {
        "id": post_id,
        "user_id": user_id,
        "platform": "instagram",
        "media_type": "image",
        "posted_at": "2024-06-01T12:00:00+00:00",
        "caption": f"caption {post_id}",
        "likes": 0,
        "comments": 0,
        "shares": 0,
        "saves": 0,
        "impressions": 0,
        "reach": 0,
        "engagement_rate": None,
    }
    post.update(fields)
    return post


def auth_headers(token: str = ALICE_TOKEN) -> Dict[str, str]:
    return {"Cookie": f"{ACCESS_TOKEN_COOKIE}={token}"}


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon-key-" + "x" * 32)
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("SESSION_COOKIE_SECURE", "true")
    monkeypatch.delenv("SITE_URL", raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def fake_client(fake_db):
    return FakeSupabaseClient(fake_db)


@pytest.fixture
def client(env, fake_client):
    app = create_app()
    app.dependency_overrides[get_supabase_client] = lambda: fake_client
    app.dependency_overrides[get_auth_client] = lambda: fake_client
    with TestClient(app) as test_client:
        yield test_client
