from pydantic import EmailStr, Field, field_validator
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from moderno.schemas.base import CamelModel


class ClientStage(str, Enum):
    LEAD = "lead"
    PROSPECT = "prospect"
    CONTRACT = "contract"
    DELIVERY = "delivery"
    AFTERCARE = "aftercare"


class ClientStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ARCHIVED = "archived"


class ClientTier(str, Enum):
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"
    VIP = "vip"


class WarrantyStatus(str, Enum):
    NONE = "none"
    ACTIVE = "active"
    EXPIRED = "expired"


def _unique_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return None
    seen = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


# Base Client schema with common attributes
class ClientBase(CamelModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    company: Optional[str] = None
    address: Optional[str] = None
    stage: ClientStage = ClientStage.LEAD
    status: ClientStatus = ClientStatus.ACTIVE
    referred_by_id: Optional[int] = None
    warranty_status: WarrantyStatus = WarrantyStatus.NONE
    warranty_expiry: Optional[date] = None
    tags: List[str] = Field(default_factory=list)
    notes: Optional[str] = None

    @field_validator("tags")
    def dedupe_tags(cls, v):
        return _unique_tags(v)


# Schema for creating a new client.
# Financial fields are derived from transactions and never accepted here;
# tier is only honoured as a manual "vip" override.
class ClientCreate(ClientBase):
    tier: Optional[ClientTier] = Field(
        None,
        description=(
            'Only "vip" is kept. Any other value is replaced by the tier '
            "derived from spending and referrals, which is silver for a new client."
        ),
    )


# Schema for updating a client
class ClientUpdate(CamelModel):
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    address: Optional[str] = None
    stage: Optional[ClientStage] = None
    status: Optional[ClientStatus] = None
    tier: Optional[ClientTier] = None
    referred_by_id: Optional[int] = None
    warranty_status: Optional[WarrantyStatus] = None
    warranty_expiry: Optional[date] = None
    tags: Optional[List[str]] = None
    notes: Optional[str] = None

    @field_validator("tags")
    def dedupe_tags(cls, v):
        return _unique_tags(v)


# Schema for returning a client
class ClientResponse(ClientBase):
    id: int
    tier: ClientTier
    total_spending: Decimal
    refund_amount: Decimal
    commission: Decimal
    order_count: int
    referral_revenue: Decimal
    referral_count: int
    tags: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("tags", mode="before")
    def tags_or_empty(cls, v):
        return v or []
