import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from moderno.errors import NotFoundError, ValidationError
from moderno.models.transactions import Transaction
from moderno.utils.finance import lock_client, recalculate_quietly

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("client_id", "amount", "type", "status", "title", "payment_date")


def get_transaction(db: Session, transaction_id: int) -> Transaction:
    transaction = db.query(Transaction).filter(Transaction.id == transaction_id).first()
    if transaction is None:
        raise NotFoundError("Transaction", transaction_id)
    return transaction


def list_transactions(db: Session, client_id: Optional[int] = None) -> List[Transaction]:
    """
    List transactions newest first, optionally for a single client
    """
    query = db.query(Transaction)
    if client_id is not None:
        query = query.filter(Transaction.client_id == client_id)
    return query.order_by(Transaction.created_at.desc(), Transaction.id.desc()).all()


def create_transaction(db: Session, data: Dict[str, Any]) -> Transaction:
    """
    Record a transaction and refresh the owning client's totals and tier.

    The client row is locked before the insert, so the write and the
    recompute commit together.

    Raises:
        NotFoundError: ``client_id`` does not reference an existing client
    """
    lock_client(db, data["client_id"])

    transaction = Transaction(**data)
    db.add(transaction)
    db.flush()

    recalculate_quietly(db, transaction.client_id)
    db.commit()
    db.refresh(transaction)

    logger.info(
        f"Transaction {transaction.id} created for client {transaction.client_id}: "
        f"{transaction.type} {transaction.amount} ({transaction.status})"
    )
    return transaction


def update_transaction(db: Session, transaction_id: int, data: Dict[str, Any]) -> Transaction:
    """
    Apply a partial update, then recompute every client the change touches.

    Moving a transaction to another client recomputes both the previous
    and the new owner.

    Raises:
        NotFoundError: unknown transaction, or unknown new ``client_id``
        ValidationError: a required field is set to null
    """
    missing = [field for field in REQUIRED_FIELDS if field in data and data[field] is None]
    if missing:
        raise ValidationError(
            "Validation error",
            [{"loc": [field], "msg": "Field cannot be null"} for field in missing]
        )

    transaction = get_transaction(db, transaction_id)
    previous_client_id = transaction.client_id
    new_client_id = data.get("client_id", previous_client_id)

    # Lock every affected client before the mutation, lowest id first
    affected_client_ids = sorted({previous_client_id, new_client_id})
    for client_id in affected_client_ids:
        lock_client(db, client_id)

    for key, value in data.items():
        setattr(transaction, key, value)
    db.flush()

    for client_id in affected_client_ids:
        recalculate_quietly(db, client_id)

    db.commit()
    db.refresh(transaction)

    logger.info(f"Transaction {transaction_id} updated: {sorted(data.keys())}")
    return transaction


def delete_transaction(db: Session, transaction_id: int) -> int:
    """
    Delete a transaction and recompute its former owner.

    Returns:
        The id of the client that owned the transaction
    """
    transaction = get_transaction(db, transaction_id)
    client_id = transaction.client_id

    db.delete(transaction)
    db.flush()

    recalculate_quietly(db, client_id)
    db.commit()

    logger.info(f"Transaction {transaction_id} deleted from client {client_id}")
    return client_id
