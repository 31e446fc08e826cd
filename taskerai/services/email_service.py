"""
Transactional email composition.

Messages are rendered here and handed to the RQ worker, which owns delivery.
When Redis cannot be reached the message is delivered by a FastAPI background
task instead, so a committed signup never turns into a failed request.
"""

from typing import Optional
from urllib.parse import quote

from fastapi import BackgroundTasks
from redis.exceptions import RedisError

from taskerai.core.config import settings
from taskerai.core.logging import get_logger
from taskerai.workers.queue import enqueue_task
from taskerai.workers.tasks import send_email_task

logger = get_logger(__name__)


class EmailService:
    """Builds the account emails and enqueues them for delivery."""

    @staticmethod
    def link(path: str, token: str) -> str:
        return f"{settings.FRONTEND_BASE_URL}{path}?token={quote(token, safe='')}"

    @staticmethod
    def send(
        to: str,
        subject: str,
        body: str,
        background_tasks: Optional[BackgroundTasks] = None,
    ) -> Optional[str]:
        """
        Enqueue one email.

        Args:
            to: Recipient email address
            subject: Email subject
            body: HTML body
            background_tasks: Request background tasks used when the queue is down

        Returns:
            Job ID, or None if the queue was unavailable
        """
        try:
            return enqueue_task(send_email_task, to=to, subject=subject, body=body)
        except RedisError as e:
            if background_tasks is None:
                logger.error(f"Queue not available, email to {to} dropped: {e}")
                return None
            # Fallback to background tasks if queue is not available
            logger.warning(f"Queue not available, using FastAPI background tasks: {e}")
            background_tasks.add_task(send_email_task, to=to, subject=subject, body=body)
            return None

    @classmethod
    def send_verification(
        cls,
        to: str,
        first_name: str,
        token: str,
        background_tasks: Optional[BackgroundTasks] = None,
    ) -> Optional[str]:
        link = cls.link("/auth/verify", token)
        body = (
            f"<p>Hi {first_name},</p>"
            f"<p>Welcome to {settings.PROJECT_NAME}! Click the link below to verify your email address.</p>"
            f'<p><a href="{link}">Verify Email</a></p>'
            f"<p>This link expires in {settings.VERIFY_TOKEN_EXPIRE_HOURS} hours.</p>"
        )
        return cls.send(to, f"Verify your {settings.PROJECT_NAME} account", body, background_tasks)

    @classmethod
    def send_password_reset(
        cls,
        to: str,
        first_name: str,
        token: str,
        background_tasks: Optional[BackgroundTasks] = None,
    ) -> Optional[str]:
        link = cls.link("/auth/reset", token)
        body = (
            f"<p>Hi {first_name},</p>"
            "<p>Click the link below to reset your password. "
            f"This link expires in {settings.RESET_TOKEN_EXPIRE_HOURS} hour(s).</p>"
            f'<p><a href="{link}">Reset password</a></p>'
        )
        return cls.send(to, f"Reset your {settings.PROJECT_NAME} password", body, background_tasks)

    @classmethod
    def send_invite(
        cls,
        to: str,
        sender_name: str,
        token: str,
        background_tasks: Optional[BackgroundTasks] = None,
    ) -> Optional[str]:
        link = cls.link("/invite", token)
        body = (
            f"<p>{sender_name} invited you to join {settings.PROJECT_NAME}.</p>"
            f'<p><a href="{link}">Create your account</a></p>'
            f"<p>This link expires in {settings.INVITE_TOKEN_EXPIRE_HOURS} hours.</p>"
        )
        return cls.send(to, f"You've been invited to {settings.PROJECT_NAME}", body, background_tasks)
