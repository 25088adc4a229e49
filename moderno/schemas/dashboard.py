from typing import Dict
from decimal import Decimal

from moderno.schemas.base import CamelModel


class DashboardStats(CamelModel):
    total_clients: int
    active_clients: int
    new_inquiries: int
    open_deals: int
    revenue: Decimal
    tier_breakdown: Dict[str, int]
