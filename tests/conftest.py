import pytest
from fastapi.testclient import TestClient

from app.database.supabase_client import get_service_supabase, get_supabase
from app.main import app
from app.modules.auth import service as auth_service
from fakes import FakeSupabase

MEMBER_TOKEN = "member-token"
OTHER_MEMBER_TOKEN = "other-member-token"
ADMIN_TOKEN = "admin-token"


@pytest.fixture
def supabase():
    fake = FakeSupabase()
    fake.auth.add_user(MEMBER_TOKEN, "member-1", "member@example.com")
    fake.auth.add_user(OTHER_MEMBER_TOKEN, "member-2", "other@example.com")
    fake.auth.add_user(ADMIN_TOKEN, "admin-1", "admin@example.com")
    fake.seed("profiles", id="member-1", first_name="Ada", last_name="Lovelace", phone="555-0101", email="member@example.com")
    fake.seed("profiles", id="member-2", first_name="Alan", last_name="Turing", phone="555-0102", email="other@example.com")
    fake.seed("profiles", id="admin-1", first_name="Grace", last_name="Hopper", phone=None, email="admin@example.com")
    fake.seed("user_roles", user_id="admin-1", role="admin")
    return fake


@pytest.fixture
def client(supabase):
    auth_service._AUTH_USER_CACHE.clear()
    app.dependency_overrides[get_supabase] = lambda: supabase
    app.dependency_overrides[get_service_supabase] = lambda: supabase
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def member_headers():
    return {"Authorization": f"Bearer {MEMBER_TOKEN}"}


@pytest.fixture
def other_member_headers():
    return {"Authorization": f"Bearer {OTHER_MEMBER_TOKEN}"}


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def open_group(supabase):
    return supabase.seed("groups", group_number="IPR00001", status="open", total_members=0, max_members=25)
