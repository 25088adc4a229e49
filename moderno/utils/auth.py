import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from moderno.config import settings
from moderno.models.users import User

logger = logging.getLogger(__name__)

SESSION_TOKEN_TYPE = "session"

if settings.SESSION_SECRET_KEY == "moderno_secret_key_change_this_in_production":
    logger.warning("SESSION_SECRET_KEY not provided, using the development default")


def get_password_hash(password: str) -> str:
    """Hash a password with bcrypt"""
    salt = bcrypt.gensalt(rounds=12)
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify if the plain password matches the stored bcrypt hash"""
    try:
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    except ValueError as e:
        logger.error(f"Unreadable password hash: {str(e)}")
        return False


def create_session_token(user_id: int, role: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create the signed token stored in the session cookie

    Args:
        user_id: ID of the logged-in user
        role: Role at login time (informative; permissions are re-read from the user row)
        expires_delta: Optional lifetime, defaults to SESSION_EXPIRE_DAYS

    Returns:
        JWT token string
    """
    expire = datetime.utcnow() + (expires_delta or timedelta(days=settings.SESSION_EXPIRE_DAYS))
    payload = {
        "sub": str(user_id),
        "role": role,
        "exp": expire,
        "iat": datetime.utcnow(),
        "type": SESSION_TOKEN_TYPE
    }
    return jwt.encode(payload, settings.SESSION_SECRET_KEY, algorithm=settings.SESSION_ALGORITHM)


def decode_session_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode and verify a session token.

    Returns:
        The token payload, or None when the token is invalid, expired or
        not a session token
    """
    try:
        payload = jwt.decode(token, settings.SESSION_SECRET_KEY, algorithms=[settings.SESSION_ALGORITHM])
    except JWTError as e:
        logger.warning(f"Rejected session token: {str(e)}")
        return None

    if payload.get("type") != SESSION_TOKEN_TYPE or payload.get("sub") is None:
        return None
    return payload


def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    """
    Return the active user matching the credentials, or None
    """
    user = db.query(User).filter(User.username == username).first()
    if user is None or not user.is_active:
        logger.warning(f"Failed login for '{username}'")
        return None
    if not verify_password(password, user.password_hash):
        logger.warning(f"Failed login for '{username}'")
        return None

    user.last_login_at = datetime.utcnow()
    db.commit()
    db.refresh(user)
    return user
