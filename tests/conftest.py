"""Pytest fixtures for testing"""

import pytest
from typing import Callable, Dict, Generator, Tuple
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from advance_gateway.api.main import create_app
from advance_gateway.config import Settings
from advance_gateway.infrastructure.database.models import User
from advance_gateway.infrastructure.database.repositories import UserRepository
from advance_gateway.infrastructure.database.session import Database
from advance_gateway.infrastructure.security import hash_password

TEST_PASSWORD = "correct-horse"


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from any .env file, with a per-test SQLite database"""
    return Settings(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        log_level="WARNING",
        auto_approve=True,
        ledger_webhook_url=None,
    )


@pytest.fixture
def manual_settings(settings: Settings) -> Settings:
    """Auto-approval off: applications wait in PENDING for an admin"""
    return settings.model_copy(update={"auto_approve": False})


@pytest.fixture
def database(settings: Settings) -> Generator[Database, None, None]:
    """Create test database"""
    database = Database(settings.database_url)
    database.create_all()
    try:
        yield database
    finally:
        database.drop_all()
        database.dispose()


@pytest.fixture
def db(database: Database) -> Generator[Session, None, None]:
    """Session on the test database"""
    db = database.session()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def user_factory(db: Session) -> Callable[..., User]:
    """Insert users directly, bypassing the auth service"""

    def make_user(email: str, is_admin: bool = False) -> User:
        user = UserRepository(db).create_user(
            email=email,
            password_hash=hash_password(TEST_PASSWORD, rounds=4),
            first_name="Test",
            last_name=email.split("@")[0].title(),
        )
        user.is_admin = is_admin
        db.commit()
        db.refresh(user)
        return user

    return make_user


@pytest.fixture
def client(settings: Settings, database: Database) -> TestClient:
    """Create FastAPI test client with test database"""
    return TestClient(create_app(settings, database=database))


@pytest.fixture
def manual_client(manual_settings: Settings, database: Database) -> TestClient:
    """Test client with auto-approval disabled"""
    return TestClient(create_app(manual_settings, database=database))


@pytest.fixture
def auth_headers() -> Callable[[str], Dict[str, str]]:
    """Bearer header builder"""

    def headers(token: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    return headers


@pytest.fixture
def register_user() -> Callable[..., Tuple[str, str]]:
    """Register through the API; returns (token, user id)"""

    def register(client: TestClient, email: str, password: str = TEST_PASSWORD) -> Tuple[str, str]:
        response = client.post(
            "/api/auth/register",
            json={"email": email, "password": password, "firstName": "Test", "lastName": "User"},
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return body["token"], body["data"]["user"]["id"]

    return register
