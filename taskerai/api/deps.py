"""
API dependencies for FastAPI dependency injection.
Provides reusable dependencies for authentication and authorization.
"""

from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlmodel import Session

from taskerai.core.config import settings
from taskerai.core.logging import get_logger
from taskerai.db.session import get_session
from taskerai.models.user import User
from taskerai.schemas.token import TokenPayload
from taskerai.services.user_service import UserService

logger = get_logger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/login")

SessionDep = Annotated[Session, Depends(get_session)]


def get_current_user(
    session: SessionDep,
    token: Annotated[str, Depends(oauth2_scheme)],
) -> User:
    """
    Dependency to get the current authenticated user from JWT token.

    Args:
        session: Database session
        token: JWT access token

    Returns:
        Current user

    Raises:
        HTTPException: 401 if the token is invalid or the user is gone,
            403 if the account is no longer active
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        if payload.get("purpose") is not None:
            logger.warning("Purpose token presented as access token")
            raise credentials_exception
        user_id: str | None = payload.get("sub")
        if user_id is None:
            logger.warning("Token missing subject claim")
            raise credentials_exception
        token_data = TokenPayload(sub=int(user_id))
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise credentials_exception
    except ValueError:
        logger.warning("Invalid user ID in token")
        raise credentials_exception

    user = UserService.get_by_id(session, user_id=token_data.sub)  # type: ignore
    if user is None:
        logger.warning(f"User {token_data.sub} not found")
        raise credentials_exception
    if not user.active:
        logger.warning(f"Inactive user {user.id} attempted access")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Inactive user")

    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


def get_api_key(
    x_api_key: Optional[str] = Header(None),
) -> str:
    """
    Dependency to validate API key from X-API-Key header.
    Used by scheduler-facing endpoints that run without a user session.

    Raises:
        HTTPException: If API key is invalid or missing
    """
    expected_api_key = settings.API_KEY

    # If no API key is configured, skip validation (for development)
    if not expected_api_key:
        logger.debug("API key validation skipped (not configured)")
        return "no-api-key-configured"

    if not x_api_key:
        logger.warning("Missing API key in request")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing API key. Please provide X-API-Key header",
        )

    if x_api_key != expected_api_key:
        logger.warning(f"Invalid API key attempt: {x_api_key[:8]}...")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
        )

    return x_api_key
