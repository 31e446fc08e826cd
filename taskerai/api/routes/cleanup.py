"""
Pending-user cleanup routes.

These are meant for an external scheduler (cron, CI job) rather than people,
so they are guarded by the X-API-Key header instead of a user session.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from taskerai.api.deps import SessionDep, get_api_key
from taskerai.core.config import settings
from taskerai.schemas.notification import CleanupResult, PendingUsersInfo, PendingUserSummary
from taskerai.services.pending_user_service import PendingUserService, clamp_sweep_minutes

router = APIRouter(prefix="/cleanup", tags=["cleanup"], dependencies=[Depends(get_api_key)])


@router.post("/pending-users", response_model=CleanupResult)
def sweep_pending_users(
    session: SessionDep,
    duration: Optional[int] = Query(default=None, description="Age in minutes after which pending users are deleted"),
) -> CleanupResult:
    """
    Run the pending-user sweep now.

    Args:
        session: Database session
        duration: TTL in minutes; defaults to PENDING_USER_TTL_MINUTES and is
            clamped to between one minute and ten years

    Returns:
        Number of deleted users and the TTL used
    """
    minutes = clamp_sweep_minutes(
        duration if duration is not None else settings.PENDING_USER_TTL_MINUTES
    )
    deleted = PendingUserService.sweep(session, minutes)
    return CleanupResult(
        message=f"Deleted {deleted} pending users",
        deleted_count=deleted,
        duration_minutes=minutes,
    )


@router.get("/pending-users", response_model=PendingUsersInfo)
def pending_users_info(session: SessionDep) -> PendingUsersInfo:
    users = PendingUserService.pending_users(session)
    return PendingUsersInfo(
        pending_count=len(users),
        pending_users=[PendingUserSummary.model_validate(u) for u in users],
    )
