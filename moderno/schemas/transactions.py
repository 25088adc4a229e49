from pydantic import Field
from typing import Optional
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from moderno.schemas.base import CamelModel


class TransactionType(str, Enum):
    PAYMENT = "payment"
    REFUND = "refund"
    COMMISSION = "commission"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Base Transaction schema with common attributes
class TransactionBase(CamelModel):
    client_id: int
    amount: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2)
    type: TransactionType
    status: TransactionStatus = TransactionStatus.COMPLETED
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    payment_date: date
    notes: Optional[str] = None


# Schema for creating a new transaction
class TransactionCreate(TransactionBase):
    pass


# Schema for updating a transaction
class TransactionUpdate(CamelModel):
    client_id: Optional[int] = None
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=14, decimal_places=2)
    type: Optional[TransactionType] = None
    status: Optional[TransactionStatus] = None
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    payment_date: Optional[date] = None
    notes: Optional[str] = None


# Schema for returning a transaction
class TransactionResponse(TransactionBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
