from pydantic import Field
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

from moderno.schemas.base import CamelModel
from moderno.schemas.clients import ClientStage


class DealBase(CamelModel):
    client_id: int
    title: str = Field(..., min_length=1)
    value: Decimal = Field(Decimal("0"), ge=0, max_digits=14, decimal_places=2)
    stage: ClientStage = ClientStage.LEAD
    expected_close_date: Optional[date] = None
    notes: Optional[str] = None


class DealCreate(DealBase):
    pass


class DealUpdate(CamelModel):
    client_id: Optional[int] = None
    title: Optional[str] = Field(None, min_length=1)
    value: Optional[Decimal] = Field(None, ge=0, max_digits=14, decimal_places=2)
    stage: Optional[ClientStage] = None
    expected_close_date: Optional[date] = None
    notes: Optional[str] = None


class DealResponse(DealBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
