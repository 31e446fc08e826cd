"""
Background tasks using RQ (Redis Queue).
"""

from typing import Any

from sqlmodel import Session

from taskerai.core.config import settings
from taskerai.core.logging import get_logger
from taskerai.db.session import engine
from taskerai.services.pending_user_service import PendingUserService, clamp_sweep_minutes

logger = get_logger(__name__)


def send_email_task(to: str, subject: str, body: str) -> dict[str, Any]:
    """
    Deliver an email.
    Delivery is logged only; wire a provider (Mailjet, SES) in here.

    Args:
        to: Recipient email address
        subject: Email subject
        body: HTML body

    Returns:
        Task result dictionary
    """
    logger.info(f"Sending email to {to}: {subject}")
    logger.debug(f"Email body for {to}: {body}")
    return {
        "to": to,
        "subject": subject,
        "status": "sent",
    }


def sweep_pending_users_task(duration_minutes: int | None = None) -> dict[str, Any]:
    """
    Delete pending users older than the TTL.
    Meant to be enqueued by an external scheduler.

    Args:
        duration_minutes: TTL in minutes (defaults to PENDING_USER_TTL_MINUTES)

    Returns:
        Task result dictionary
    """
    duration = clamp_sweep_minutes(
        settings.PENDING_USER_TTL_MINUTES if duration_minutes is None else duration_minutes
    )
    with Session(engine) as session:
        deleted = PendingUserService.sweep(session, duration)
    return {
        "status": "completed",
        "deleted_count": deleted,
        "duration_minutes": duration,
    }
