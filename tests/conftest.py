import os
import tempfile

# Point the app at a throwaway SQLite database before anything imports app.*
_DB_DIR = tempfile.mkdtemp(prefix="internship-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_DB_DIR, "test.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import insert

from app.core.auth import hash_password, create_access_token
from app.db.postgres import engine, get_db_session
from app.db.tables import metadata, users
from app.main import app

PASSWORD = "password123"
_PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture(autouse=True)
def fresh_db():
    metadata.drop_all(engine)
    metadata.create_all(engine)
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user():
    """
    Insert a user directly and return {"id", "name", "email", "headers"}.
    Skips the bcrypt round-trip of /auth/login for speed.
    """
    counter = {"n": 0}

    def _make(role: str, name: str = None, email: str = None, phone: str = None):
        counter["n"] += 1
        name = name or f"{role.title()} {counter['n']}"
        email = email or f"{role}{counter['n']}@example.com"
        with get_db_session() as db:
            result = db.execute(
                insert(users).values(
                    email=email, password_hash=_PASSWORD_HASH, name=name, role=role, phone=phone
                )
            )
            user_id = result.inserted_primary_key[0]
        token = create_access_token({"sub": str(user_id), "role": role})
        return {
            "id": user_id,
            "name": name,
            "email": email,
            "headers": {"Authorization": f"Bearer {token}"},
        }

    return _make


@pytest.fixture
def coordinator(make_user):
    return make_user("coordinator", name="Carol Coordinator")


@pytest.fixture
def supervisor(make_user):
    return make_user("supervisor", name="John Smith", phone="555-0100")


@pytest.fixture
def create_program(client, coordinator, supervisor):
    """POST an internship program and return the response JSON."""

    def _create(student_ids, **overrides):
        payload = {
            "company": "Tech Corp",
            "supervisor_id": supervisor["id"],
            "position": "Software Developer",
            "department": "Engineering",
            "start_date": "2025-01-15",
            "end_date": "2025-04-15",
            "status": "active",
            "student_ids": student_ids,
        }
        payload.update(overrides)
        response = client.post("/api/internships", json=payload, headers=coordinator["headers"])
        assert response.status_code == 201, response.text
        return response.json()

    return _create
