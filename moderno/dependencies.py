from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from typing import Optional

from moderno.config import settings
from moderno.database import get_db
from moderno.models.users import User
from moderno.utils.auth import decode_session_token
from moderno.utils.permissions import Permission, has_permission

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
):
    """
    Resolve the logged-in user from the session cookie or a Bearer token
    """
    not_authenticated = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
    )

    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token and credentials is not None:
        token = credentials.credentials
    if not token:
        raise not_authenticated

    payload = decode_session_token(token)
    if payload is None:
        raise not_authenticated

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise not_authenticated

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise not_authenticated

    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user)
):
    """
    Get the current active user (checks if account is active)
    """
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is not active"
        )
    return current_user


def require_permission(permission: Permission):
    """
    Build a dependency that lets the request through only when the
    current user's role grants ``permission``
    """
    def check_permission(
        current_user: User = Depends(get_current_active_user)
    ):
        if not has_permission(current_user.role, permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not enough permissions"
            )
        return current_user

    return check_permission
