import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from moderno.models.clients import Client

logger = logging.getLogger(__name__)


def effective_warranty_status(stored_status: str, expiry: Optional[date], today: Optional[date] = None) -> str:
    """Return the warranty status a client should report on ``today``"""
    today = today or date.today()
    if stored_status == "active" and expiry is not None and expiry < today:
        return "expired"
    return stored_status


def resolve_warranty_status(db: Session, client: Client, today: Optional[date] = None) -> Client:
    """
    Flip a stale "active" warranty to "expired" on read.

    The change is flushed, not committed; read paths commit once they are
    done with the client. Records that are already correct are returned
    untouched.
    """
    status = effective_warranty_status(client.warranty_status, client.warranty_expiry, today)
    if status != client.warranty_status:
        logger.info(f"Client {client.id} warranty expired on {client.warranty_expiry}")
        client.warranty_status = status
        db.flush()
    return client
