import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from moderno.errors import NotFoundError, ValidationError
from moderno.models.clients import Client
from moderno.models.transactions import Transaction
from moderno.utils.finance import assign_client_tier, recalculate_client_financials
from moderno.utils.warranty import resolve_warranty_status

logger = logging.getLogger(__name__)


def _fetch_client(db: Session, client_id: int) -> Client:
    client = db.query(Client).filter(Client.id == client_id).first()
    if client is None:
        raise NotFoundError("Client", client_id)
    return client


def get_client_by_email(db: Session, email: str) -> Optional[Client]:
    return db.query(Client).filter(Client.email == email).first()


def get_client(db: Session, client_id: int) -> Client:
    """
    Fetch one client with its warranty status brought up to date.

    Financial fields are trusted as written by the transaction triggers.
    """
    client = resolve_warranty_status(db, _fetch_client(db, client_id))
    db.commit()
    return client


def list_clients(db: Session, status: Optional[str] = None) -> List[Client]:
    """
    List clients newest first, repairing each one on the way out.

    Every client gets its warranty resolved and its financials and tier
    recomputed from scratch, one client per database transaction. This
    catches totals left stale by a recompute that failed after its
    triggering write.
    """
    query = db.query(Client)
    if status:
        query = query.filter(Client.status == status)
    client_ids = [row.id for row in query.order_by(Client.created_at.desc(), Client.id.desc()).all()]

    clients = []
    for client_id in client_ids:
        try:
            client = resolve_warranty_status(db, _fetch_client(db, client_id))
            recalculate_client_financials(db, client.id)
        except NotFoundError:
            # Deleted while the list was being built
            db.rollback()
            continue
        db.commit()
        db.refresh(client)
        clients.append(client)
    return clients


def _check_email_available(db: Session, email: str, client_id: Optional[int] = None):
    existing = get_client_by_email(db, email)
    if existing is not None and existing.id != client_id:
        raise ValidationError(
            "Client with this email already exists",
            [{"loc": ["email"], "msg": "Email already registered"}]
        )


def _check_referrer(db: Session, referred_by_id: Optional[int], client_id: Optional[int] = None):
    if referred_by_id is None:
        return
    if referred_by_id == client_id:
        raise ValidationError(
            "A client cannot refer itself",
            [{"loc": ["referredById"], "msg": "Must reference another client"}]
        )
    _fetch_client(db, referred_by_id)


def create_client(db: Session, data: Dict[str, Any]) -> Client:
    """
    Create a client. Only a "vip" tier survives from the input; every
    other tier is derived.

    Raises:
        ValidationError: the email is already used by another client
        NotFoundError: ``referred_by_id`` does not exist
    """
    _check_email_available(db, data["email"])
    _check_referrer(db, data.get("referred_by_id"))

    tier = data.pop("tier", None)
    client = Client(**data, tier=tier or "silver")
    db.add(client)
    db.flush()

    assign_client_tier(db, client.id)
    resolve_warranty_status(db, client)
    db.commit()
    db.refresh(client)

    logger.info(f"Client {client.id} created ({client.email})")
    return client


def update_client(db: Session, client_id: int, data: Dict[str, Any]) -> Client:
    """
    Apply a partial update of identity and CRM fields.

    The tier is reassigned right after, so a manual tier only sticks when
    it is "vip" or already matches the client's spending.
    """
    client = _fetch_client(db, client_id)

    if data.get("email"):
        _check_email_available(db, data["email"], client_id)
    if "referred_by_id" in data:
        _check_referrer(db, data["referred_by_id"], client_id)

    for key, value in data.items():
        if value is None and key in ("first_name", "last_name", "email", "stage", "status", "tier", "warranty_status"):
            continue
        setattr(client, key, value)
    db.flush()

    assign_client_tier(db, client_id)
    resolve_warranty_status(db, client)
    db.commit()
    db.refresh(client)

    logger.info(f"Client {client_id} updated: {sorted(data.keys())}")
    return client


def delete_client(db: Session, client_id: int) -> None:
    """
    Delete a client together with its deals and interactions.

    Clients that still own transactions cannot be deleted; their
    transactions must be removed first so no transaction is ever left
    without an owner.
    """
    client = _fetch_client(db, client_id)

    transaction_count = db.query(Transaction).filter(Transaction.client_id == client_id).count()
    if transaction_count > 0:
        raise ValidationError(
            "Cannot delete client with associated transactions",
            [{"loc": ["id"], "msg": f"Client owns {transaction_count} transaction(s)"}]
        )

    db.delete(client)
    db.commit()
    logger.info(f"Client {client_id} deleted")


def get_client_referrals(db: Session, client_id: int) -> List[Client]:
    """Clients that were referred by ``client_id``"""
    _fetch_client(db, client_id)
    referrals = db.query(Client).filter(
        Client.referred_by_id == client_id
    ).order_by(Client.created_at.desc(), Client.id.desc()).all()

    for referral in referrals:
        resolve_warranty_status(db, referral)
    db.commit()
    return referrals


def update_client_tier(db: Session, client_id: int) -> Client:
    client = assign_client_tier(db, client_id)
    resolve_warranty_status(db, client)
    db.commit()
    db.refresh(client)
    return client


def refresh_client_financials(db: Session, client_id: int) -> Client:
    client = recalculate_client_financials(db, client_id)
    resolve_warranty_status(db, client)
    db.commit()
    db.refresh(client)
    return client


def find_or_create_client(db: Session, first_name: str, last_name: str, email: str,
                          phone: Optional[str] = None) -> Client:
    """
    Return the client owning ``email``, creating a new lead if there is none.

    A concurrent request may insert the same email between the lookup and
    the insert; the unique constraint then fails and the winner's row is
    returned instead.
    """
    client = get_client_by_email(db, email)
    if client is not None:
        return client

    client = Client(
        first_name=first_name,
        last_name=last_name,
        email=email,
        phone=phone,
        stage="lead",
        status="active",
        tier="silver",
    )
    db.add(client)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        existing = get_client_by_email(db, email)
        if existing is None:
            raise
        logger.info(f"Client for {email} was created concurrently, linking to {existing.id}")
        return existing

    logger.info(f"Client {client.id} created from inquiry ({email})")
    return client
