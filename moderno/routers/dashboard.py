from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func
from decimal import Decimal

from moderno.database import get_db
from moderno.models.users import User
from moderno.models.clients import Client
from moderno.models.deals import Deal
from moderno.models.inquiries import Inquiry
from moderno.models.transactions import Transaction
from moderno.schemas.dashboard import DashboardStats
from moderno.dependencies import require_permission
from moderno.utils.finance import to_decimal
from moderno.utils.permissions import Permission

router = APIRouter()

@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    current_user: User = Depends(require_permission(Permission.DASHBOARD_VIEW)),
    db: Session = Depends(get_db)
):
    """
    Headline numbers for the admin dashboard
    """
    total_clients = db.query(Client).count()
    active_clients = db.query(Client).filter(Client.status == "active").count()
    new_inquiries = db.query(Inquiry).filter(Inquiry.status == "new").count()
    open_deals = db.query(Deal).filter(Deal.stage != "aftercare").count()

    def completed_total(transaction_type: str) -> Decimal:
        total = db.query(func.sum(Transaction.amount)).filter(
            Transaction.type == transaction_type,
            Transaction.status == "completed"
        ).scalar()
        return to_decimal(total)

    revenue = completed_total("payment") - completed_total("refund")

    tier_breakdown = {tier: 0 for tier in ("silver", "gold", "platinum", "vip")}
    for tier, count in db.query(Client.tier, func.count(Client.id)).group_by(Client.tier).all():
        tier_breakdown[tier] = count

    return {
        "total_clients": total_clients,
        "active_clients": active_clients,
        "new_inquiries": new_inquiries,
        "open_deals": open_deals,
        "revenue": revenue,
        "tier_breakdown": tier_breakdown
    }
