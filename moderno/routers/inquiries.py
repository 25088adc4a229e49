from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from moderno.database import get_db
from moderno.models.users import User
from moderno.models.inquiries import Inquiry
from moderno.schemas.inquiries import InquiryCreate, InquiryUpdate, InquiryResponse, InquiryStatus
from moderno.dependencies import require_permission
from moderno.utils.clients import find_or_create_client
from moderno.utils.permissions import Permission

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("", response_model=InquiryResponse, status_code=status.HTTP_201_CREATED)
async def create_inquiry(
    inquiry_data: InquiryCreate,
    db: Session = Depends(get_db)
):
    """
    Public contact form. Links the inquiry to the client with the same
    email, creating a new lead when there is none.
    """
    client = find_or_create_client(
        db,
        first_name=inquiry_data.first_name,
        last_name=inquiry_data.last_name,
        email=inquiry_data.email,
        phone=inquiry_data.phone
    )

    new_inquiry = Inquiry(**inquiry_data.model_dump(), client_id=client.id)
    db.add(new_inquiry)
    db.commit()
    db.refresh(new_inquiry)

    logger.info(f"Inquiry {new_inquiry.id} received from {new_inquiry.email}")
    return new_inquiry

@router.get("", response_model=List[InquiryResponse])
async def get_inquiries(
    status: Optional[InquiryStatus] = None,
    current_user: User = Depends(require_permission(Permission.INQUIRIES_VIEW)),
    db: Session = Depends(get_db)
):
    """
    Get list of inquiries, newest first
    """
    query = db.query(Inquiry)
    if status:
        query = query.filter(Inquiry.status == status.value)
    return query.order_by(Inquiry.created_at.desc(), Inquiry.id.desc()).all()

@router.get("/{inquiry_id}", response_model=InquiryResponse)
async def get_inquiry(
    inquiry_id: int,
    current_user: User = Depends(require_permission(Permission.INQUIRIES_VIEW)),
    db: Session = Depends(get_db)
):
    """
    Get inquiry by ID
    """
    inquiry = db.query(Inquiry).filter(Inquiry.id == inquiry_id).first()
    if not inquiry:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Inquiry not found"
        )
    return inquiry

@router.put("/{inquiry_id}", response_model=InquiryResponse)
async def update_inquiry(
    inquiry_id: int,
    inquiry_data: InquiryUpdate,
    current_user: User = Depends(require_permission(Permission.INQUIRIES_EDIT)),
    db: Session = Depends(get_db)
):
    """
    Update inquiry status (new, reviewed, contacted, converted)
    """
    inquiry = db.query(Inquiry).filter(Inquiry.id == inquiry_id).first()
    if not inquiry:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Inquiry not found"
        )

    for key, value in inquiry_data.model_dump(exclude_unset=True).items():
        if value is None and key in ("status", "project_type"):
            continue
        setattr(inquiry, key, value)

    db.commit()
    db.refresh(inquiry)

    return inquiry
