"""
Shared fixtures: an in-memory stand-in for the Supabase client (tables, storage
and auth) and a TestClient with the app's Supabase dependencies overridden.
"""
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace

import httpx
import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from app.core.dependencies import get_auth_client, get_auth_service, get_user_supabase
from app.core.rate_limit import limiter
from app.database.supabase_client import get_supabase
from app.main import app as fastapi_app
from app.modules.auth.service import AuthService
from app.modules.tricks.claude_client import ClaudeClient
from app.modules.tricks.routes import get_trick_service
from app.modules.tricks.service import TrickService

TEST_TOKEN = "test-access-token"
TEST_USER_ID = "11111111-1111-1111-1111-111111111111"
TEST_EMAIL = "magician@example.com"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.ordering = None
        self.mode = None

    def select(self, *columns):
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

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def single(self):
        self.mode = "single"
        return self

    def maybe_single(self):
        self.mode = "maybe_single"
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self):
        self.db.calls.append((self.table_name, self.op, self.payload, list(self.filters)))
        error = self.db.next_error(self.table_name, self.op)
        if error is not None:
            raise error

        rows = self.db.tables.setdefault(self.table_name, [])
        if self.op == "insert":
            new_rows = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for row in new_rows:
                stored = {"id": str(uuid.uuid4()), "created_at": _now_iso(), "updated_at": _now_iso()}
                stored.update(row)
                rows.append(stored)
                inserted.append(dict(stored))
            return SimpleNamespace(data=inserted)

        matched = [row for row in rows if self._matches(row)]
        if self.op == "update":
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=[dict(row) for row in matched])
        if self.op == "delete":
            self.db.tables[self.table_name] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=[dict(row) for row in matched])

        if self.ordering:
            column, desc = self.ordering
            matched = sorted(matched, key=lambda row: row.get(column) or "", reverse=desc)
        if self.mode == "single":
            if len(matched) != 1:
                raise APIError({
                    "code": "PGRST116",
                    "message": "JSON object requested, multiple (or no) rows returned",
                    "details": f"The result contains {len(matched)} rows",
                    "hint": None,
                })
            return SimpleNamespace(data=dict(matched[0]))
        if self.mode == "maybe_single":
            if not matched:
                return None
            return SimpleNamespace(data=dict(matched[0]))
        return SimpleNamespace(data=[dict(row) for row in matched])


class FakeBucket:
    def __init__(self, storage: "FakeStorage", bucket: str):
        self.storage = storage
        self.bucket = bucket

    def upload(self, path, file, file_options=None):
        if self.storage.upload_error:
            raise self.storage.upload_error
        self.storage.uploads.append((self.bucket, path, file_options))
        self.storage.objects.setdefault(self.bucket, {})[path] = file
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://test.supabase.co/storage/v1/object/public/{self.bucket}/{path}"

    def remove(self, paths):
        if self.storage.remove_error:
            raise self.storage.remove_error
        deleted = []
        bucket_objects = self.storage.objects.get(self.bucket, {})
        for path in paths:
            if path in bucket_objects:
                del bucket_objects[path]
                self.storage.removed.append((self.bucket, path))
                deleted.append({"name": path, "bucket_id": self.bucket})
        return deleted

    def list(self, folder):
        if self.storage.list_error:
            raise self.storage.list_error
        return list(self.storage.listings.get((self.bucket, folder), []))


class FakeStorage:
    def __init__(self):
        self.objects = {}
        self.listings = {}
        self.uploads = []
        self.removed = []
        self.upload_error = None
        self.remove_error = None
        self.list_error = None

    def from_(self, bucket):
        return FakeBucket(self, bucket)


def make_auth_user(user_id=TEST_USER_ID, email=TEST_EMAIL, metadata=None):
    return SimpleNamespace(
        id=user_id,
        email=email,
        user_metadata=metadata if metadata is not None else {"name": "Merlin", "bio": "Card tricks"},
        app_metadata={"provider": "email"},
        created_at="2024-01-01T00:00:00+00:00",
        updated_at="2024-01-01T00:00:00+00:00",
    )


class FakeAuthAdmin:
    def __init__(self, auth: "FakeAuth"):
        self.auth = auth

    def sign_out(self, jwt, scope="global"):
        if self.auth.sign_out_error:
            raise self.auth.sign_out_error
        self.auth.signed_out.append(jwt)


class FakeAuth:
    def __init__(self):
        self.tokens = {TEST_TOKEN: make_auth_user()}
        self.passwords = {TEST_EMAIL: "correct-horse"}
        self.sign_up_error = None
        self.sign_out_error = None
        self.signed_up = []
        self.signed_out = []
        self.get_user_calls = 0
        self.admin = FakeAuthAdmin(self)

    def sign_up(self, credentials):
        if self.sign_up_error:
            raise self.sign_up_error
        self.signed_up.append(credentials)
        user = make_auth_user(
            user_id=str(uuid.uuid4()),
            email=credentials["email"],
            metadata=credentials.get("options", {}).get("data", {}),
        )
        return SimpleNamespace(user=user, session=None)

    def sign_in_with_password(self, credentials):
        if self.passwords.get(credentials["email"]) != credentials["password"]:
            raise Exception("Invalid login credentials")
        user = next(u for u in self.tokens.values() if u.email == credentials["email"])
        session = SimpleNamespace(
            access_token=TEST_TOKEN,
            refresh_token="test-refresh-token",
            expires_at=4102444800,  # 2100-01-01
        )
        return SimpleNamespace(user=user, session=session)

    def get_user(self, jwt=None):
        self.get_user_calls += 1
        if jwt not in self.tokens:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=self.tokens[jwt])


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.errors = {}
        self.calls = []
        self.storage = FakeStorage()
        self.auth = FakeAuth()

    def table(self, name):
        return FakeQuery(self, name)

    def fail(self, table, op, *errors):
        """Queue errors raised by the next execute() calls of op on table"""
        self.errors.setdefault((table, op), []).extend(errors)

    def next_error(self, table, op):
        queue = self.errors.get((table, op))
        if queue:
            return queue.pop(0)
        return None


def claude_reply(text, status_code=200):
    """httpx transport answering every request with a Messages API reply"""
    def handler(request):
        return httpx.Response(status_code, json={"content": [{"type": "text", "text": text}]})
    return httpx.MockTransport(handler)


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def session_store():
    return {}


@pytest.fixture
def auth_service(fake_supabase, session_store):
    return AuthService(
        fake_supabase,
        user_client_factory=lambda token: fake_supabase,
        store=session_store,
    )


@pytest.fixture
def claude_transport():
    """Replace to change what the Claude API answers in route tests"""
    return claude_reply(
        '{"title": "Coin Through Cup", "description": "A coin passes through a cup.", '
        '"instructions": ["Show the coin", "Cover it", "Reveal it"], '
        '"difficulty": "Easy", "items": ["Coins", "Cups"]}'
    )


@pytest.fixture
def client(fake_supabase, auth_service, claude_transport):
    """TestClient with every Supabase-facing dependency pointed at the fake"""
    claude = ClaudeClient(api_key="test-key", http_client=httpx.Client(transport=claude_transport))

    fastapi_app.dependency_overrides[get_auth_client] = lambda: fake_supabase
    fastapi_app.dependency_overrides[get_auth_service] = lambda: auth_service
    fastapi_app.dependency_overrides[get_user_supabase] = lambda: fake_supabase
    fastapi_app.dependency_overrides[get_supabase] = lambda: fake_supabase
    fastapi_app.dependency_overrides[get_trick_service] = lambda: TrickService(fake_supabase, claude=claude)
    limiter.enabled = False

    yield TestClient(fastapi_app)

    fastapi_app.dependency_overrides.clear()
    limiter.enabled = True


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {TEST_TOKEN}"}
