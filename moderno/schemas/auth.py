from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from moderno.schemas.base import CamelModel


# Schema for login with username and password
class LoginRequest(BaseModel):
    username: str
    password: str


# Schema for returning the logged-in user (never includes the hash)
class UserResponse(CamelModel):
    id: int
    username: str
    full_name: Optional[str] = None
    role: str
    is_active: bool
    permissions: List[str] = []
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
