import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.orm import Session

from moderno.config import settings
from moderno.errors import NotFoundError
from moderno.models.clients import Client
from moderno.models.transactions import Transaction

logger = logging.getLogger(__name__)

ZERO = Decimal('0')

# Client columns owned by the aggregation below
FINANCIAL_FIELDS = (
    "total_spending",
    "refund_amount",
    "commission",
    "order_count",
    "referral_revenue",
    "referral_count",
)


def to_decimal(value: Any) -> Decimal:
    """Convert a stored amount to Decimal without going through float"""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def aggregate_transactions(transactions: Iterable[Any]) -> Dict[str, Any]:
    """
    Compute a client's derived financial fields from its transactions

    Only completed transactions count. Pending and cancelled ones are
    ignored entirely.

    Args:
        transactions: Transaction rows (or objects with amount/type/status)

    Returns:
        Dictionary keyed by the Client column names in FINANCIAL_FIELDS
    """
    total_spending = ZERO
    refund_amount = ZERO
    total_commission = ZERO
    commission_count = 0
    order_count = 0

    for transaction in transactions:
        if transaction.status != "completed":
            continue
        amount = to_decimal(transaction.amount)
        if transaction.type == "payment":
            total_spending += amount
            order_count += 1
        elif transaction.type == "refund":
            refund_amount += amount
        elif transaction.type == "commission":
            total_commission += amount
            commission_count += 1

    # Referral revenue and count mirror the client's own commission
    # transactions, not the spending of the clients it referred.
    return {
        "total_spending": total_spending,
        "refund_amount": refund_amount,
        "commission": total_commission,
        "order_count": order_count,
        "referral_revenue": total_commission,
        "referral_count": commission_count,
    }


def classify_tier(total_spending: Any, referral_count: int, current_tier: Optional[str] = None) -> str:
    """
    Map spending and referral count to a tier label

    First match wins: vip (enough referrals, or already vip), then
    platinum, gold and silver by inclusive spending thresholds.
    """
    if (referral_count or 0) >= settings.TIER_VIP_REFERRALS or current_tier == "vip":
        return "vip"

    spending = to_decimal(total_spending)
    if spending >= Decimal(settings.TIER_PLATINUM_THRESHOLD):
        return "platinum"
    if spending >= Decimal(settings.TIER_GOLD_THRESHOLD):
        return "gold"
    return "silver"


def lock_client(db: Session, client_id: int) -> Client:
    """
    Load a client row with a row lock held until the caller commits.

    Every recompute for a client goes through this lock, so two requests
    writing transactions for the same client run their
    read-aggregate-write cycles one after the other.
    """
    client = db.query(Client).filter(Client.id == client_id).with_for_update().first()
    if client is None:
        raise NotFoundError("Client", client_id)
    return client


def assign_client_tier(db: Session, client_id: int) -> Client:
    """
    Recompute and store the tier of a client from its current totals
    """
    client = lock_client(db, client_id)
    new_tier = classify_tier(client.total_spending, client.referral_count, client.tier)

    if new_tier != client.tier:
        logger.info(f"Client {client_id} tier changed: {client.tier} -> {new_tier}")
        client.tier = new_tier

    db.flush()
    return client


def recalculate_client_financials(db: Session, client_id: int) -> Client:
    """
    Rebuild a client's financial fields from all of its completed
    transactions, then reassign its tier.

    Always recomputes from scratch. Nothing is committed here: the caller
    owns the database transaction so the triggering write, the new totals
    and the tier land together.

    Raises:
        NotFoundError: the client does not exist
    """
    client = lock_client(db, client_id)

    transactions = db.query(Transaction).filter(
        Transaction.client_id == client_id,
        Transaction.status == "completed"
    ).all()

    totals = aggregate_transactions(transactions)
    for field, value in totals.items():
        setattr(client, field, value)
    db.flush()

    return assign_client_tier(db, client_id)


def recalculate_quietly(db: Session, client_id: Optional[int]) -> Optional[Client]:
    """
    Recompute a client's financials after a transaction write.

    A missing client is logged and skipped so the triggering write still
    succeeds; the next client list sweep repairs anything left stale.
    """
    if client_id is None:
        return None
    try:
        return recalculate_client_financials(db, client_id)
    except NotFoundError:
        logger.warning(f"Skipping financial recompute: client {client_id} no longer exists")
        return None
