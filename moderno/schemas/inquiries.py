from pydantic import EmailStr, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from moderno.schemas.base import CamelModel


class InquiryStatus(str, Enum):
    NEW = "new"
    REVIEWED = "reviewed"
    CONTACTED = "contacted"
    CONVERTED = "converted"


# Schema for the public contact form
class InquiryCreate(CamelModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    project_type: str = Field(..., min_length=1)
    budget: Optional[str] = None
    message: str = Field(..., min_length=1)


class InquiryUpdate(CamelModel):
    status: Optional[InquiryStatus] = None
    budget: Optional[str] = None
    project_type: Optional[str] = Field(None, min_length=1)


class InquiryResponse(InquiryCreate):
    id: int
    status: InquiryStatus
    client_id: Optional[int] = None
    created_at: Optional[datetime] = None
