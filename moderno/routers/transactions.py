from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional

from moderno.database import get_db
from moderno.models.users import User
from moderno.schemas.transactions import TransactionCreate, TransactionUpdate, TransactionResponse
from moderno.dependencies import require_permission
from moderno.utils import transactions as transaction_store
from moderno.utils.permissions import Permission

router = APIRouter()

@router.get("", response_model=List[TransactionResponse])
async def get_transactions(
    client_id: Optional[int] = Query(None, alias="clientId"),
    current_user: User = Depends(require_permission(Permission.TRANSACTIONS_VIEW)),
    db: Session = Depends(get_db)
):
    """
    List transactions newest first, optionally for one client
    """
    return transaction_store.list_transactions(db, client_id)

@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: int,
    current_user: User = Depends(require_permission(Permission.TRANSACTIONS_VIEW)),
    db: Session = Depends(get_db)
):
    """
    Get transaction by ID
    """
    return transaction_store.get_transaction(db, transaction_id)

@router.post("", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    transaction_data: TransactionCreate,
    current_user: User = Depends(require_permission(Permission.TRANSACTIONS_EDIT)),
    db: Session = Depends(get_db)
):
    """
    Record a transaction; the client's totals and tier follow
    """
    return transaction_store.create_transaction(db, transaction_data.model_dump())

@router.put("/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    transaction_id: int,
    transaction_data: TransactionUpdate,
    current_user: User = Depends(require_permission(Permission.TRANSACTIONS_EDIT)),
    db: Session = Depends(get_db)
):
    """
    Update a transaction; affected clients are recomputed
    """
    return transaction_store.update_transaction(
        db, transaction_id, transaction_data.model_dump(exclude_unset=True)
    )

@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    transaction_id: int,
    current_user: User = Depends(require_permission(Permission.TRANSACTIONS_EDIT)),
    db: Session = Depends(get_db)
):
    """
    Delete a transaction; its client is recomputed
    """
    transaction_store.delete_transaction(db, transaction_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
