from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional

from moderno.database import get_db
from moderno.models.users import User
from moderno.schemas.clients import ClientCreate, ClientUpdate, ClientResponse, ClientStatus
from moderno.dependencies import require_permission
from moderno.utils import clients as client_store
from moderno.utils.permissions import Permission

router = APIRouter()

@router.get("", response_model=List[ClientResponse])
async def get_clients(
    status: Optional[ClientStatus] = None,
    current_user: User = Depends(require_permission(Permission.CLIENTS_VIEW)),
    db: Session = Depends(get_db)
):
    """
    List clients, refreshing warranty, totals and tier for each one
    """
    return client_store.list_clients(db, status.value if status else None)

@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: int,
    current_user: User = Depends(require_permission(Permission.CLIENTS_VIEW)),
    db: Session = Depends(get_db)
):
    """
    Get client by ID
    """
    return client_store.get_client(db, client_id)

@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    client_data: ClientCreate,
    current_user: User = Depends(require_permission(Permission.CLIENTS_EDIT)),
    db: Session = Depends(get_db)
):
    """
    Create a new client
    """
    return client_store.create_client(db, client_data.model_dump())

@router.put("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: int,
    client_data: ClientUpdate,
    current_user: User = Depends(require_permission(Permission.CLIENTS_EDIT)),
    db: Session = Depends(get_db)
):
    """
    Update client identity and CRM fields
    """
    return client_store.update_client(db, client_id, client_data.model_dump(exclude_unset=True))

@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: int,
    current_user: User = Depends(require_permission(Permission.CLIENTS_DELETE)),
    db: Session = Depends(get_db)
):
    """
    Delete client (refused while it still owns transactions)
    """
    client_store.delete_client(db, client_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/{client_id}/referrals", response_model=List[ClientResponse])
async def get_client_referrals(
    client_id: int,
    current_user: User = Depends(require_permission(Permission.CLIENTS_VIEW)),
    db: Session = Depends(get_db)
):
    """
    Get the clients referred by this client
    """
    return client_store.get_client_referrals(db, client_id)

@router.post("/{client_id}/update-tier", response_model=ClientResponse)
async def update_client_tier(
    client_id: int,
    current_user: User = Depends(require_permission(Permission.CLIENTS_EDIT)),
    db: Session = Depends(get_db)
):
    """
    Re-run tier assignment for a client
    """
    return client_store.update_client_tier(db, client_id)

@router.get("/{client_id}/financials", response_model=ClientResponse)
async def get_client_financials(
    client_id: int,
    current_user: User = Depends(require_permission(Permission.CLIENTS_VIEW)),
    db: Session = Depends(get_db)
):
    """
    Recompute a client's totals from its transactions and return the client
    """
    return client_store.refresh_client_financials(db, client_id)
