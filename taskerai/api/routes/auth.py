"""
Authentication routes: signup, email verification, login and password reset.
"""

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from taskerai.api.deps import SessionDep
from taskerai.core.logging import get_logger
from taskerai.core.security import create_access_token
from taskerai.schemas.token import Token
from taskerai.schemas.user import (
    ForgotPasswordRequest,
    MessageResponse,
    PasswordReset,
    SignupResponse,
    UserCreate,
    UserMessageResponse,
    UserResponse,
    VerifyEmailRequest,
)
from taskerai.services.email_service import EmailService
from taskerai.services.pending_user_service import PendingUserService
from taskerai.services.user_service import UserService

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
def signup(
    user_in: UserCreate, session: SessionDep, background_tasks: BackgroundTasks
) -> SignupResponse:
    """
    Register a new user.
    The account starts as an unverified, inactive EMPLOYEE; a verification
    email goes out and the OWNER is notified.
    """
    user = PendingUserService.signup(session, user_in)
    EmailService.send_verification(
        user.email,
        user.first_name,
        PendingUserService.verification_token(user),
        background_tasks,
    )
    return SignupResponse(
        message="Signup successful. Check your email, then wait for admin approval.",
        user=UserResponse.model_validate(user),
    )


@router.post("/verify", response_model=UserMessageResponse)
def verify_email(body: VerifyEmailRequest, session: SessionDep) -> UserMessageResponse:
    """Redeem the email verification token."""
    user = PendingUserService.verify_email(session, body.token)
    return UserMessageResponse(
        user=UserResponse.model_validate(user),
        message="Email verified successfully",
    )


@router.post("/login", response_model=Token)
def login(
    session: SessionDep,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
) -> Token:
    """
    OAuth2 compatible token login.

    Raises:
        HTTPException: 401 on bad credentials, 403 while the account is
            unverified or awaiting approval
    """
    user = UserService.authenticate(session, email=form_data.username, password=form_data.password)
    if not user:
        logger.warning(f"Failed login attempt for email: {form_data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    if not user.is_verified:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Please verify your email before logging in. Check your inbox for a verification link.",
        )
    if not user.active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Your account is pending approval from an administrator. Please wait for approval.",
        )

    access_token = create_access_token(subject=user.id)
    logger.info(f"User logged in: {user.email} (ID: {user.id})")
    return Token(access_token=access_token)


@router.post("/forgot", response_model=MessageResponse)
def forgot_password(
    body: ForgotPasswordRequest, session: SessionDep, background_tasks: BackgroundTasks
) -> MessageResponse:
    """
    Send a password reset link.
    The answer is the same whether or not the address is registered.
    """
    user = UserService.get_by_email(session, body.email)
    if user is not None:
        EmailService.send_password_reset(
            user.email,
            user.first_name,
            UserService.password_reset_token(user),
            background_tasks,
        )
    else:
        logger.info("Password reset requested for unknown email")
    return MessageResponse(message="If the account exists, a reset link has been sent.")


@router.post("/reset", response_model=MessageResponse)
def reset_password(body: PasswordReset, session: SessionDep) -> MessageResponse:
    UserService.reset_password(session, body.token, body.password)
    return MessageResponse(message="Password updated")
