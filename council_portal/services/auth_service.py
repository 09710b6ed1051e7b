# council_portal/services/auth_service.py
import hashlib
import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional, Tuple

from fastapi import status
from sqlalchemy.orm import Session

from council_portal.config import settings
from council_portal.models import User
from council_portal.services.email_service import send_password_reset_email
from council_portal.services.registration_service import MIN_PASSWORD_LENGTH
from council_portal.utils.forms import api_error, clean_value
from council_portal.utils.hash import hash_password, verify_password
from council_portal.utils.jwt_handler import create_access_token

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."
INVALID_RESET_TOKEN_MESSAGE = "Invalid or expired token."


def _utcnow() -> datetime:
    return datetime.utcnow()


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def login(db: Session, email: Optional[str], password: Optional[str]) -> Tuple[User, str]:
    """
    Check credentials and issue an auth token.

    Unknown email and wrong password produce the same error so the
    response never reveals which accounts exist.
    """
    email = clean_value(email)
    if not email or not password:
        raise api_error(status.HTTP_400_BAD_REQUEST, "MISSING_FIELD", "Email and password are required.")

    user = db.query(User).filter(User.email == email.lower()).first()
    if not user or not verify_password(password, user.password_hash):
        logger.warning(f"Failed login attempt for {email}")
        raise api_error(status.HTTP_400_BAD_REQUEST, "INVALID_CREDENTIALS", INVALID_CREDENTIALS_MESSAGE)

    logger.info(f"User logged in: {user.email}")
    return user, create_access_token(user.id)


async def request_password_reset(db: Session, email: Optional[str], base_url: str) -> str:
    """
    Store a hashed reset token and email the plaintext link.

    Returns the reset URL. When the email cannot be sent the pending token
    is cleared again so no unusable reset stays behind.
    """
    email = clean_value(email)
    user = db.query(User).filter(User.email == email.lower()).first() if email else None
    if not user:
        raise api_error(status.HTTP_404_NOT_FOUND, "NOT_FOUND", "User not found.")

    reset_token = secrets.token_hex(20)
    user.reset_password_token = hash_reset_token(reset_token)
    user.reset_password_expires = _utcnow() + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
    db.commit()

    reset_url = f"{base_url.rstrip('/')}/api/users/reset-password/{reset_token}"
    sent = await send_password_reset_email(
        to_email=user.email,
        name=user.f_name,
        reset_url=reset_url,
        expires_minutes=settings.RESET_TOKEN_EXPIRE_MINUTES
    )

    if not sent:
        user.reset_password_token = None
        user.reset_password_expires = None
        db.commit()
        logger.error(f"Password reset email to {user.email} failed; pending token cleared")
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "NOTIFICATION_FAILURE", "Failed to send reset email.")

    logger.info(f"Password reset requested for {user.email}")
    return reset_url


def reset_password(db: Session, token: str, new_password: Optional[str]) -> Tuple[User, str]:
    """Consume a reset token, set the new password and issue a fresh auth token."""
    user = db.query(User).filter(
        User.reset_password_token == hash_reset_token(token),
        User.reset_password_expires > _utcnow()
    ).first()

    if not user:
        raise api_error(status.HTTP_400_BAD_REQUEST, "INVALID_OR_EXPIRED_TOKEN", INVALID_RESET_TOKEN_MESSAGE)

    if not new_password or len(new_password) < MIN_PASSWORD_LENGTH:
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            "WEAK_CREDENTIAL",
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
        )

    user.password_hash = hash_password(new_password)
    user.reset_password_token = None
    user.reset_password_expires = None
    db.commit()

    logger.info(f"Password reset completed for {user.email}")
    return user, create_access_token(user.id)
