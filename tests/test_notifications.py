"""
Tests for the notification inbox.
"""

from typing import Callable

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from taskerai.core.config import settings
from taskerai.core.exceptions import NotFoundError
from taskerai.models.notification import NotificationType
from taskerai.models.user import User
from taskerai.services.notification_service import NotificationService

NOTIFICATIONS_URL = f"{settings.API_PREFIX}/notifications"


def test_list_returns_only_own_notifications_newest_first(
    client: TestClient,
    session: Session,
    owner: User,
    employee: User,
    headers_for: Callable[[User], dict],
) -> None:
    first = NotificationService.create(session, employee.id, NotificationType.WELCOME)
    second = NotificationService.create(
        session, employee.id, NotificationType.ROLE_CHANGED, {"new_role": "MANAGER"}
    )
    NotificationService.create(session, owner.id, NotificationType.NEW_USER_REQUEST)

    response = client.get(NOTIFICATIONS_URL, headers=headers_for(employee))

    assert response.status_code == 200
    items = response.json()["notifications"]
    assert [n["id"] for n in items] == [second.id, first.id]
    assert items[0]["type"] == "ROLE_CHANGED"
    assert items[0]["data"] == {"new_role": "MANAGER"}
    assert items[1]["read"] is False


def test_mark_read(
    client: TestClient, session: Session, employee: User, headers_for: Callable[[User], dict]
) -> None:
    notification = NotificationService.create(session, employee.id, NotificationType.WELCOME)

    response = client.put(
        f"{NOTIFICATIONS_URL}/{notification.id}/read", headers=headers_for(employee)
    )

    assert response.status_code == 200
    assert response.json()["read"] is True


def test_cannot_read_someone_elses_notification(
    client: TestClient, session: Session, owner: User, employee: User, headers_for: Callable[[User], dict]
) -> None:
    notification = NotificationService.create(session, owner.id, NotificationType.NEW_USER_REQUEST)

    response = client.put(
        f"{NOTIFICATIONS_URL}/{notification.id}/read", headers=headers_for(employee)
    )
    assert response.status_code == 404

    with pytest.raises(NotFoundError):
        NotificationService.mark_read(session, 9999, employee.id)
