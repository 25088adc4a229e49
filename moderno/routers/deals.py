from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional

from moderno.database import get_db
from moderno.models.users import User
from moderno.models.clients import Client
from moderno.models.deals import Deal
from moderno.schemas.clients import ClientStage
from moderno.schemas.deals import DealCreate, DealUpdate, DealResponse
from moderno.dependencies import require_permission
from moderno.utils.permissions import Permission

router = APIRouter()


def _get_deal_or_404(db: Session, deal_id: int) -> Deal:
    deal = db.query(Deal).filter(Deal.id == deal_id).first()
    if not deal:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Deal not found"
        )
    return deal


def _check_client_exists(db: Session, client_id: int):
    if not db.query(Client.id).filter(Client.id == client_id).first():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client not found"
        )


@router.get("", response_model=List[DealResponse])
async def get_deals(
    client_id: Optional[int] = Query(None, alias="clientId"),
    stage: Optional[ClientStage] = None,
    current_user: User = Depends(require_permission(Permission.DEALS_VIEW)),
    db: Session = Depends(get_db)
):
    """
    Get list of deals, optionally filtered by client and stage
    """
    query = db.query(Deal)
    if client_id is not None:
        query = query.filter(Deal.client_id == client_id)
    if stage:
        query = query.filter(Deal.stage == stage.value)
    return query.order_by(Deal.created_at.desc(), Deal.id.desc()).all()

@router.get("/{deal_id}", response_model=DealResponse)
async def get_deal(
    deal_id: int,
    current_user: User = Depends(require_permission(Permission.DEALS_VIEW)),
    db: Session = Depends(get_db)
):
    """
    Get deal by ID
    """
    return _get_deal_or_404(db, deal_id)

@router.post("", response_model=DealResponse, status_code=status.HTTP_201_CREATED)
async def create_deal(
    deal_data: DealCreate,
    current_user: User = Depends(require_permission(Permission.DEALS_EDIT)),
    db: Session = Depends(get_db)
):
    """
    Create a new deal for an existing client
    """
    _check_client_exists(db, deal_data.client_id)

    new_deal = Deal(**deal_data.model_dump())
    db.add(new_deal)
    db.commit()
    db.refresh(new_deal)

    return new_deal

@router.put("/{deal_id}", response_model=DealResponse)
async def update_deal(
    deal_id: int,
    deal_data: DealUpdate,
    current_user: User = Depends(require_permission(Permission.DEALS_EDIT)),
    db: Session = Depends(get_db)
):
    """
    Update deal information
    """
    deal = _get_deal_or_404(db, deal_id)

    updates = deal_data.model_dump(exclude_unset=True)
    if updates.get("client_id") is not None:
        _check_client_exists(db, updates["client_id"])

    for key, value in updates.items():
        if value is None and key in ("client_id", "title", "stage"):
            continue
        setattr(deal, key, value)

    db.commit()
    db.refresh(deal)

    return deal

@router.delete("/{deal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_deal(
    deal_id: int,
    current_user: User = Depends(require_permission(Permission.DEALS_EDIT)),
    db: Session = Depends(get_db)
):
    """
    Delete deal
    """
    deal = _get_deal_or_404(db, deal_id)
    db.delete(deal)
    db.commit()

    return Response(status_code=status.HTTP_204_NO_CONTENT)
