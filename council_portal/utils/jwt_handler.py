# council_portal/utils/jwt_handler.py
from datetime import datetime, timedelta
from typing import Optional
import logging

from jose import JWTError, jwt

from council_portal.config import settings

logger = logging.getLogger(__name__)


def create_access_token(user_id, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed JWT whose subject is the user's id
    """
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(days=settings.JWT_EXPIRE_DAYS)

    to_encode = {
        "sub": str(user_id),
        "exp": expire,
        "iat": datetime.utcnow(),
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """
    Verify signature and expiry; None when the token is unusable
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT verification failed: {str(e)}")
        return None
