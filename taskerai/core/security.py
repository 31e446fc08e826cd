"""
Security utilities for password hashing and JWT token management.

Default hashing uses ``pbkdf2_sha256`` for stable cross-platform behavior in
tests and local development. ``bcrypt`` verification is still supported for
hashes imported from older deployments.

Besides session access tokens, short-lived purpose tokens are issued for email
verification, password reset and invitations. Each carries a ``purpose`` claim
so that one kind can never be redeemed as another.
"""

import re
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from taskerai.core.config import settings
from taskerai.core.exceptions import BadRequestError

# Prefer pbkdf2 for new hashes while still verifying legacy bcrypt hashes.
pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")

PASSWORD_RULES: list[tuple[str, str]] = [
    (r".{8,}", "At least 8 characters"),
    (r"[A-Z]", "One uppercase letter"),
    (r"[a-z]", "One lowercase letter"),
    (r"[0-9]", "One number"),
    (r"[!@#$%^&*(),.?\"{}|<>]", "One special character"),
]


class TokenPurpose(str, Enum):
    """Kinds of single-purpose tokens sent by email."""

    VERIFY = "verify"
    RESET = "reset"
    INVITE = "invite"


def create_access_token(subject: str | Any, expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT access token.

    Args:
        subject: The subject (typically user ID) to encode in the token
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {"exp": expire, "sub": str(subject)}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_purpose_token(
    purpose: TokenPurpose,
    claims: dict[str, Any],
    expires_delta: timedelta,
) -> str:
    """
    Create a signed, time-limited token for a single purpose.

    Args:
        purpose: What the token may be redeemed for
        claims: Extra claims (user id or email)
        expires_delta: Lifetime of the token

    Returns:
        Encoded JWT token string
    """
    to_encode = dict(claims)
    to_encode["purpose"] = purpose.value
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_purpose_token(token: str, purpose: TokenPurpose) -> dict[str, Any]:
    """
    Decode a purpose token and check that it matches the expected purpose.

    Raises:
        BadRequestError: If the token is malformed, expired or of another purpose
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise BadRequestError("Invalid or expired token", code="INVALID_TOKEN")
    if payload.get("purpose") != purpose.value:
        raise BadRequestError("Invalid or expired token", code="INVALID_TOKEN")
    return payload


def password_problems(password: str) -> list[str]:
    """Return the labels of the password rules the given password fails."""
    return [label for pattern, label in PASSWORD_RULES if not re.search(pattern, password)]


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password: The plain text password
        hashed_password: The hashed password to compare against

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password using the configured default scheme."""
    return pwd_context.hash(password)
