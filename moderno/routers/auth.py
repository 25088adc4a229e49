from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from moderno.config import settings
from moderno.database import get_db
from moderno.models.users import User
from moderno.schemas.auth import LoginRequest, UserResponse
from moderno.utils.auth import authenticate_user, create_session_token
from moderno.utils.permissions import permission_names
from moderno.dependencies import get_current_active_user

router = APIRouter()


def _user_payload(user: User) -> UserResponse:
    response = UserResponse.model_validate(user)
    response.permissions = permission_names(user.role)
    return response


@router.post("/login", response_model=UserResponse)
async def login(
    login_data: LoginRequest,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Check credentials and open a session cookie
    """
    user = authenticate_user(db, login_data.username, login_data.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    token = create_session_token(user.id, user.role)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        path="/"
    )

    return _user_payload(user)

@router.post("/logout")
async def logout(response: Response):
    """
    Close the session by clearing its cookie
    """
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME, path="/")
    return {"message": "Logged out successfully"}

@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_active_user)):
    """
    Get the logged-in user
    """
    return _user_payload(current_user)
