from pydantic import Field
from typing import Optional
from datetime import datetime
from enum import Enum

from moderno.schemas.base import CamelModel


class InteractionType(str, Enum):
    CALL = "call"
    EMAIL = "email"
    MEETING = "meeting"
    SITE_VISIT = "site_visit"
    NOTE = "note"


class InteractionBase(CamelModel):
    client_id: int
    type: InteractionType
    subject: str = Field(..., min_length=1)
    description: Optional[str] = None
    interaction_date: Optional[datetime] = None


class InteractionCreate(InteractionBase):
    pass


class InteractionUpdate(CamelModel):
    client_id: Optional[int] = None
    type: Optional[InteractionType] = None
    subject: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    interaction_date: Optional[datetime] = None


class InteractionResponse(InteractionBase):
    id: int
    created_at: Optional[datetime] = None
