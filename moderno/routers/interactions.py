from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional

from moderno.database import get_db
from moderno.models.users import User
from moderno.models.clients import Client
from moderno.models.interactions import Interaction
from moderno.schemas.interactions import InteractionCreate, InteractionUpdate, InteractionResponse
from moderno.dependencies import require_permission
from moderno.utils.permissions import Permission

router = APIRouter()


def _get_interaction_or_404(db: Session, interaction_id: int) -> Interaction:
    interaction = db.query(Interaction).filter(Interaction.id == interaction_id).first()
    if not interaction:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Interaction not found"
        )
    return interaction


@router.get("", response_model=List[InteractionResponse])
async def get_interactions(
    client_id: Optional[int] = Query(None, alias="clientId"),
    current_user: User = Depends(require_permission(Permission.INTERACTIONS_VIEW)),
    db: Session = Depends(get_db)
):
    """
    Get the interaction log, newest first
    """
    query = db.query(Interaction)
    if client_id is not None:
        query = query.filter(Interaction.client_id == client_id)
    return query.order_by(Interaction.interaction_date.desc(), Interaction.id.desc()).all()

@router.get("/{interaction_id}", response_model=InteractionResponse)
async def get_interaction(
    interaction_id: int,
    current_user: User = Depends(require_permission(Permission.INTERACTIONS_VIEW)),
    db: Session = Depends(get_db)
):
    """
    Get interaction by ID
    """
    return _get_interaction_or_404(db, interaction_id)

@router.post("", response_model=InteractionResponse, status_code=status.HTTP_201_CREATED)
async def create_interaction(
    interaction_data: InteractionCreate,
    current_user: User = Depends(require_permission(Permission.INTERACTIONS_EDIT)),
    db: Session = Depends(get_db)
):
    """
    Log a call, email, meeting, site visit or note against a client
    """
    if not db.query(Client.id).filter(Client.id == interaction_data.client_id).first():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client not found"
        )

    # interaction_date falls back to the server default when omitted
    new_interaction = Interaction(**interaction_data.model_dump(exclude_none=True))
    db.add(new_interaction)
    db.commit()
    db.refresh(new_interaction)

    return new_interaction

@router.put("/{interaction_id}", response_model=InteractionResponse)
async def update_interaction(
    interaction_id: int,
    interaction_data: InteractionUpdate,
    current_user: User = Depends(require_permission(Permission.INTERACTIONS_EDIT)),
    db: Session = Depends(get_db)
):
    """
    Update an interaction
    """
    interaction = _get_interaction_or_404(db, interaction_id)

    updates = interaction_data.model_dump(exclude_unset=True)
    if updates.get("client_id") is not None:
        if not db.query(Client.id).filter(Client.id == updates["client_id"]).first():
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Client not found"
            )

    for key, value in updates.items():
        if value is None and key in ("client_id", "type", "subject", "interaction_date"):
            continue
        setattr(interaction, key, value)

    db.commit()
    db.refresh(interaction)

    return interaction

@router.delete("/{interaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_interaction(
    interaction_id: int,
    current_user: User = Depends(require_permission(Permission.INTERACTIONS_EDIT)),
    db: Session = Depends(get_db)
):
    """
    Delete interaction
    """
    interaction = _get_interaction_or_404(db, interaction_id)
    db.delete(interaction)
    db.commit()

    return Response(status_code=status.HTTP_204_NO_CONTENT)
