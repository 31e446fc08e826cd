"""
Tests for authentication endpoints: signup, verification, login and password reset.
"""

from datetime import timedelta
from typing import Callable
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlmodel import Session, select

from taskerai.core.config import settings
from taskerai.core.security import TokenPurpose, create_purpose_token, verify_password
from taskerai.models.notification import Notification, NotificationType
from taskerai.models.user import User
from taskerai.services.email_service import EmailService
from taskerai.services.pending_user_service import PendingUserService
from taskerai.services.user_service import UserService
from taskerai.workers.tasks import send_email_task

AUTH_URL = f"{settings.API_PREFIX}/auth"
NEW_PASSWORD = "N3w-password!"


def _signup(client: TestClient, email: str = "NewUser@Example.com", password: str = "Secret123!") -> dict:
    response = client.post(
        f"{AUTH_URL}/signup",
        json={
            "email": email,
            "password": password,
            "first_name": "New",
            "last_name": "User",
        },
    )
    return {"status": response.status_code, "json": response.json()}


def test_signup_creates_pending_employee(
    client: TestClient, session: Session, owner: User, mock_enqueue: MagicMock
) -> None:
    result = _signup(client)

    assert result["status"] == 201
    user = result["json"]["user"]
    assert user["email"] == "newuser@example.com"
    assert user["role"] == "EMPLOYEE"
    assert user["is_verified"] is False
    assert user["active"] is False
    assert "hashed_password" not in user

    requests = session.exec(
        select(Notification).where(Notification.receiver_id == owner.id)
    ).all()
    assert len(requests) == 1
    assert requests[0].type == NotificationType.NEW_USER_REQUEST
    assert requests[0].data["email"] == "newuser@example.com"
    assert requests[0].data["new_user_id"] == user["id"]

    mock_enqueue.assert_called_once()
    args, kwargs = mock_enqueue.call_args
    assert args[0] is send_email_task
    assert kwargs["to"] == "newuser@example.com"
    assert "/auth/verify?token=" in kwargs["body"]


def test_signup_without_owner_still_succeeds(client: TestClient) -> None:
    assert _signup(client)["status"] == 201


def test_signup_duplicate_email_is_case_insensitive(client: TestClient, owner: User) -> None:
    result = _signup(client, email="OWNER@example.com")
    assert result["status"] == 409
    assert result["json"]["code"] == "EMAIL_EXISTS"


def test_signup_rejects_weak_password(client: TestClient) -> None:
    result = _signup(client, password="password")
    assert result["status"] == 400
    assert "One uppercase letter" in result["json"]["detail"]


def test_signup_rejects_bad_email(client: TestClient) -> None:
    assert _signup(client, email="not-an-email")["status"] == 400


def test_verify_email(client: TestClient, session: Session, pending_user: User) -> None:
    token = PendingUserService.verification_token(pending_user)

    response = client.post(f"{AUTH_URL}/verify", json={"token": token})

    assert response.status_code == 200
    data = response.json()["user"]
    assert data["is_verified"] is True
    assert data["active"] is False
    welcome = session.exec(
        select(Notification).where(Notification.receiver_id == pending_user.id)
    ).all()
    assert [n.type for n in welcome] == [NotificationType.WELCOME]


def test_verify_rejects_other_purposes_and_garbage(client: TestClient, pending_user: User) -> None:
    reset_token = UserService.password_reset_token(pending_user)
    assert client.post(f"{AUTH_URL}/verify", json={"token": reset_token}).status_code == 400

    response = client.post(f"{AUTH_URL}/verify", json={"token": "garbage"})
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_TOKEN"


def test_verify_rejects_expired_token(client: TestClient, pending_user: User) -> None:
    token = create_purpose_token(
        TokenPurpose.VERIFY, {"sub": str(pending_user.id)}, timedelta(seconds=-1)
    )
    assert client.post(f"{AUTH_URL}/verify", json={"token": token}).status_code == 400


def test_verify_for_deleted_user(client: TestClient, session: Session, pending_user: User) -> None:
    token = PendingUserService.verification_token(pending_user)
    session.delete(pending_user)
    session.commit()
    assert client.post(f"{AUTH_URL}/verify", json={"token": token}).status_code == 404


def _login(client: TestClient, email: str, password: str = "Testpass123!") -> dict:
    response = client.post(f"{AUTH_URL}/login", data={"username": email, "password": password})
    return {"status": response.status_code, "json": response.json()}


def test_login_success(client: TestClient, owner: User) -> None:
    result = _login(client, "Owner@Example.com")
    assert result["status"] == 200
    assert result["json"]["token_type"] == "bearer"

    me = client.get(
        f"{settings.API_PREFIX}/users/me",
        headers={"Authorization": f"Bearer {result['json']['access_token']}"},
    )
    assert me.status_code == 200
    assert me.json()["role"] == "OWNER"


def test_login_wrong_password(client: TestClient, owner: User) -> None:
    assert _login(client, owner.email, "Wrong-pass1!")["status"] == 401


def test_login_nonexistent_user(client: TestClient) -> None:
    assert _login(client, "nobody@example.com")["status"] == 401


def test_login_requires_verification_then_approval(
    client: TestClient, make_user: Callable[..., User]
) -> None:
    unverified = make_user(active=False, is_verified=False)
    result = _login(client, unverified.email)
    assert result["status"] == 403
    assert "verify your email" in result["json"]["detail"]

    awaiting = make_user(active=False, is_verified=True)
    result = _login(client, awaiting.email)
    assert result["status"] == 403
    assert "pending approval" in result["json"]["detail"]


def test_purpose_token_is_not_an_access_token(client: TestClient, owner: User) -> None:
    token = UserService.password_reset_token(owner)
    response = client.get(
        f"{settings.API_PREFIX}/users/me", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401


def test_token_for_deactivated_user_is_refused(
    client: TestClient, session: Session, employee: User, headers_for: Callable[[User], dict]
) -> None:
    headers = headers_for(employee)
    employee.active = False
    session.add(employee)
    session.commit()
    assert client.get(f"{settings.API_PREFIX}/users/me", headers=headers).status_code == 403


def test_forgot_password_does_not_reveal_accounts(
    client: TestClient, employee: User, mock_enqueue: MagicMock
) -> None:
    unknown = client.post(f"{AUTH_URL}/forgot", json={"email": "ghost@example.com"})
    assert unknown.status_code == 200
    mock_enqueue.assert_not_called()

    known = client.post(f"{AUTH_URL}/forgot", json={"email": employee.email.upper()})
    assert known.status_code == 200
    assert known.json() == unknown.json()
    mock_enqueue.assert_called_once()
    assert "/auth/reset?token=" in mock_enqueue.call_args.kwargs["body"]


def test_reset_password(client: TestClient, session: Session, employee: User) -> None:
    token = UserService.password_reset_token(employee)

    response = client.post(f"{AUTH_URL}/reset", json={"token": token, "password": NEW_PASSWORD})

    assert response.status_code == 200
    session.refresh(employee)
    assert verify_password(NEW_PASSWORD, employee.hashed_password)
    assert _login(client, employee.email, NEW_PASSWORD)["status"] == 200


def test_reset_password_rejects_verify_token(client: TestClient, employee: User) -> None:
    token = PendingUserService.verification_token(employee)
    response = client.post(f"{AUTH_URL}/reset", json={"token": token, "password": NEW_PASSWORD})
    assert response.status_code == 400


def test_reset_password_rejects_weak_password(client: TestClient, employee: User) -> None:
    token = UserService.password_reset_token(employee)
    response = client.post(f"{AUTH_URL}/reset", json={"token": token, "password": "short"})
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_reset_token_works_only_once(client: TestClient, employee: User) -> None:
    token = UserService.password_reset_token(employee)

    first = client.post(f"{AUTH_URL}/reset", json={"token": token, "password": NEW_PASSWORD})
    assert first.status_code == 200

    again = client.post(f"{AUTH_URL}/reset", json={"token": token, "password": "An0ther-pass!"})
    assert again.status_code == 400
    assert again.json()["code"] == "INVALID_TOKEN"
    assert _login(client, employee.email, NEW_PASSWORD)["status"] == 200


def test_signup_falls_back_to_background_email_when_redis_is_down(
    client: TestClient, session: Session, mock_enqueue: MagicMock
) -> None:
    mock_enqueue.side_effect = RedisConnectionError("Connection refused")

    with patch("taskerai.services.email_service.send_email_task") as mock_send:
        result = _signup(client)

    assert result["status"] == 201
    assert UserService.get_by_email(session, "newuser@example.com") is not None
    mock_send.assert_called_once()
    assert mock_send.call_args.kwargs["to"] == "newuser@example.com"
    assert "/auth/verify?token=" in mock_send.call_args.kwargs["body"]


def test_forgot_password_survives_redis_outage(
    client: TestClient, employee: User, mock_enqueue: MagicMock
) -> None:
    mock_enqueue.side_effect = RedisConnectionError("Connection refused")

    with patch("taskerai.services.email_service.send_email_task") as mock_send:
        response = client.post(f"{AUTH_URL}/forgot", json={"email": employee.email})

    assert response.status_code == 200
    mock_send.assert_called_once()


def test_send_without_fallback_returns_none_when_redis_is_down(mock_enqueue: MagicMock) -> None:
    mock_enqueue.side_effect = RedisConnectionError("Connection refused")
    assert EmailService.send("a@example.com", "Hello", "<p>Hi</p>") is None
