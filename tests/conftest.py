"""
Shared test fixtures and utilities.

The MongoDB client is swapped for an in-memory mongomock client so the
suite needs no running database.
"""

import asyncio
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

# Must be set before the application settings are imported
TEST_JWT_SECRET = "test-secret-key-for-testing-only"
os.environ["JWT_SECRET_KEY"] = TEST_JWT_SECRET
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["MONGODB_DB_NAME"] = "taskhub_test"

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from main import app
from taskhub.services.database import MongoDB


@pytest.fixture(autouse=True)
def mongo():
    """Connect the app to a fresh in-memory database for every test."""
    asyncio.run(MongoDB.connect(client=AsyncMongoMockClient()))
    yield MongoDB.db
    MongoDB.client = None
    MongoDB.db = None


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def register_user(
    client: TestClient,
    name: str = "Alice",
    email: str = "alice@tasks.io",
    password: str = "secret123",
) -> Tuple[str, str]:
    """Register a user through the API and return (token, user_id)."""
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    data = response.json()["data"]
    return data["token"], data["user"]["id"]


def auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def seed_task(
    owner_id: str,
    title: str,
    created_at: Optional[datetime] = None,
    **fields: Any,
) -> str:
    """Insert a task document directly and return its id."""
    created_at = created_at or datetime.now(timezone.utc)
    doc = {
        "title": title,
        "description": None,
        "completed": False,
        "priority": "medium",
        "due_date": None,
        "created_by": ObjectId(owner_id),
        "created_at": created_at,
        "updated_at": created_at,
        **fields,
    }
    result = asyncio.run(MongoDB.db.tasks.insert_one(doc))
    return str(result.inserted_id)


def fetch_task(task_id: str) -> Optional[Dict[str, Any]]:
    return asyncio.run(MongoDB.db.tasks.find_one({"_id": ObjectId(task_id)}))


@pytest.fixture
def alice(client: TestClient) -> Tuple[str, str]:
    return register_user(client, name="Alice", email="alice@tasks.io")


@pytest.fixture
def bob(client: TestClient) -> Tuple[str, str]:
    return register_user(client, name="Bob", email="bob@tasks.io")


@pytest.fixture
def base_time() -> datetime:
    return datetime(2026, 1, 1, tzinfo=timezone.utc)


def minutes_after(base: datetime, minutes: int) -> datetime:
    return base + timedelta(minutes=minutes)
