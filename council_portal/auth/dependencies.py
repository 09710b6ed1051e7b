# council_portal/auth/dependencies.py
from typing import Optional
import logging
import uuid

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from council_portal.database import get_db
from council_portal.models import User
from council_portal.utils.jwt_handler import decode_access_token

logger = logging.getLogger(__name__)

AUTH_COOKIE_NAME = "token"

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthenticated() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": "NOT_AUTHENTICATED", "message": "Not authorized, please log in."},
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the user from the auth cookie, falling back to a Bearer header."""
    token = request.cookies.get(AUTH_COOKIE_NAME)
    if not token and credentials:
        token = credentials.credentials
    if not token:
        raise _unauthenticated()

    payload = decode_access_token(token)
    if not payload or not payload.get("sub"):
        raise _unauthenticated()

    try:
        user_id = uuid.UUID(payload["sub"])
    except ValueError:
        logger.warning(f"Token subject is not a user id: {payload['sub']}")
        raise _unauthenticated()

    user = db.get(User, user_id)
    if not user:
        logger.warning(f"Token for unknown user {user_id}")
        raise _unauthenticated()
    return user
