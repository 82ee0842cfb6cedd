"""
Shared fixtures: an in-memory SQLite database seeded with one user, a
minimal-cost credential store, and a TestClient over the app.

Seed data:
    testuser / password  (Test User, test@test.com), favorited zpid 123
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from app.core.config import BCRYPT_MIN_ROUNDS
from app.core.database import Database
from app.core.security import CredentialStore, create_access_token
from app.main import create_app
from app.services.users import UserRepository

TEST_ZPIDS = [123, 456]


@pytest.fixture
def credentials() -> CredentialStore:
    return CredentialStore(work_factor=BCRYPT_MIN_ROUNDS)


@pytest.fixture
def db(credentials):
    database = Database("sqlite://").open()
    database.create_all()

    with database.session() as session:
        session.execute(
            text(
                """INSERT INTO users (username, password_hash, first_name, last_name, email)
                   VALUES ('testuser', :password_hash, 'Test', 'User', 'test@test.com')"""
            ),
            {"password_hash": credentials.hash("password")},
        )
        user_id = session.execute(
            text("SELECT id FROM users WHERE username = 'testuser'")
        ).scalar()
        session.execute(
            text(
                """INSERT INTO favorited_properties (user_id, property_zpid)
                   VALUES (:user_id, :zpid)"""
            ),
            {"user_id": user_id, "zpid": TEST_ZPIDS[0]},
        )

    yield database
    database.close()


@pytest.fixture
def test_user_id(db) -> int:
    with db.session() as session:
        return session.execute(text("SELECT id FROM users WHERE username = 'testuser'")).scalar()


@pytest.fixture
def repo(db, credentials) -> UserRepository:
    return UserRepository(db, credentials)


@pytest.fixture
def client(db, credentials) -> TestClient:
    return TestClient(create_app(database=db, credentials=credentials))


@pytest.fixture
def user_token() -> str:
    return create_access_token({"username": "testuser"})


@pytest.fixture
def user2_token() -> str:
    return create_access_token({"username": "testuser2"})


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def drop_tables(db: Database) -> None:
    """Break storage underneath the app so the next query fails."""
    with db.session() as session:
        session.execute(text("DROP TABLE favorited_properties"))
        session.execute(text("DROP TABLE users"))
