from sqlalchemy import Column, Integer, String, Text, DateTime, Date, Numeric, ForeignKey, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from moderno.database import Base

class Client(Base):
    __tablename__ = "clients"
    
    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(32))
    company = Column(String(255))
    address = Column(Text)

    # CRM classification
    stage = Column(String(20), nullable=False, default="lead")
    status = Column(String(20), nullable=False, default="active")
    tier = Column(String(20), nullable=False, default="silver")

    # Derived from completed transactions, see moderno.utils.finance
    total_spending = Column(Numeric(14, 2), nullable=False, default=0)
    refund_amount = Column(Numeric(14, 2), nullable=False, default=0)
    commission = Column(Numeric(14, 2), nullable=False, default=0)
    order_count = Column(Integer, nullable=False, default=0)
    referral_revenue = Column(Numeric(14, 2), nullable=False, default=0)
    referral_count = Column(Integer, nullable=False, default=0)

    referred_by_id = Column(Integer, ForeignKey("clients.id", ondelete="SET NULL"), nullable=True)

    warranty_status = Column(String(20), nullable=False, default="none")
    warranty_expiry = Column(Date, nullable=True)

    tags = Column(JSON, default=list)
    notes = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    
    # Relationships
    referred_by = relationship("Client", remote_side=[id], back_populates="referrals")
    referrals = relationship("Client", back_populates="referred_by")
    transactions = relationship("Transaction", back_populates="client")
    deals = relationship("Deal", back_populates="client", cascade="all, delete-orphan")
    interactions = relationship("Interaction", back_populates="client", cascade="all, delete-orphan")
    inquiries = relationship("Inquiry", back_populates="client")
