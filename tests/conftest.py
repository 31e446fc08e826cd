"""
Pytest configuration and fixtures.
Provides test database, client, users of every role and their tokens.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DISABLE_BOOTSTRAP_OWNER", "true")

from typing import Callable, Generator  # noqa: E402
from unittest.mock import MagicMock, patch  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

from taskerai.core.security import create_access_token  # noqa: E402
from taskerai.db.session import get_session  # noqa: E402
from taskerai.main import app  # noqa: E402
from taskerai.models.user import User, UserRole  # noqa: E402
from taskerai.schemas.user import UserCreate  # noqa: E402
from taskerai.services.user_service import UserService  # noqa: E402

TEST_PASSWORD = "Testpass123!"


@pytest.fixture(name="session")
def session_fixture() -> Generator[Session, None, None]:
    """
    Create a test database session.
    Uses an in-memory SQLite database for fast tests.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)

    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with dependency overrides.
    """

    def get_session_override() -> Generator[Session, None, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(name="mock_enqueue", autouse=True)
def mock_enqueue_fixture() -> Generator[MagicMock, None, None]:
    """Keep email jobs away from Redis."""
    with patch("taskerai.services.email_service.enqueue_task") as mock:
        mock.return_value = "test-job-id"
        yield mock


@pytest.fixture(name="make_user")
def make_user_fixture(session: Session) -> Callable[..., User]:
    """
    Factory for users in any role and lifecycle state.
    Users are verified and active unless told otherwise.
    """
    counter = {"n": 0}

    def _make_user(
        role: UserRole = UserRole.EMPLOYEE,
        email: str | None = None,
        first_name: str = "Test",
        active: bool = True,
        is_verified: bool = True,
    ) -> User:
        counter["n"] += 1
        user_in = UserCreate(
            email=email or f"{role.value.lower()}{counter['n']}@example.com",
            password=TEST_PASSWORD,
            first_name=first_name,
            last_name="User",
        )
        return UserService.create(session, user_in, role=role, is_verified=is_verified, active=active)

    return _make_user


@pytest.fixture(name="owner")
def owner_fixture(make_user: Callable[..., User]) -> User:
    return make_user(UserRole.OWNER, email="owner@example.com", first_name="Olivia")


@pytest.fixture(name="co_owner")
def co_owner_fixture(make_user: Callable[..., User]) -> User:
    return make_user(UserRole.CO_OWNER, first_name="Carmen")


@pytest.fixture(name="manager")
def manager_fixture(make_user: Callable[..., User]) -> User:
    return make_user(UserRole.MANAGER, first_name="Mateo")


@pytest.fixture(name="team_lead")
def team_lead_fixture(make_user: Callable[..., User]) -> User:
    return make_user(UserRole.TEAM_LEAD, first_name="Tariq")


@pytest.fixture(name="employee")
def employee_fixture(make_user: Callable[..., User]) -> User:
    return make_user(UserRole.EMPLOYEE, first_name="Emma")


@pytest.fixture(name="pending_user")
def pending_user_fixture(make_user: Callable[..., User]) -> User:
    return make_user(UserRole.EMPLOYEE, email="pending@example.com", active=False, is_verified=False)


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(subject=user.id)}"}


@pytest.fixture(name="owner_headers")
def owner_headers_fixture(owner: User) -> dict[str, str]:
    return auth_headers(owner)


@pytest.fixture(name="headers_for")
def headers_for_fixture() -> Callable[[User], dict[str, str]]:
    return auth_headers
