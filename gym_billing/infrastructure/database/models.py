"""SQLAlchemy ORM models for members, membership plans and payments"""

import uuid
from sqlalchemy import Column, String, Integer, Numeric, DateTime, Date, ForeignKey, Text, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class MembershipPlan(Base):
    """Priced membership offering (e.g. monthly, quarterly)"""

    __tablename__ = "membership_plan"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    duration_days = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    members = relationship("Member", back_populates="membership_plan")


class Member(Base):
    """Gym member with current membership period and installment plan"""

    __tablename__ = "member"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    full_name = Column(Text, nullable=False)
    phone = Column(String(32), nullable=True)
    membership_plan_id = Column(UUID(as_uuid=True), ForeignKey("membership_plan.id"), nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    status = Column(Text, nullable=False, default="active")
    # Validated through InstallmentPlanRecord on every read and write
    installment_plan = Column(JSON(none_as_null=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    membership_plan = relationship("MembershipPlan", back_populates="members")
    payments = relationship("Payment", back_populates="member", cascade="all, delete-orphan")


class Payment(Base):
    """Money received from a member"""

    __tablename__ = "payment"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    member_id = Column(UUID(as_uuid=True), ForeignKey("member.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    payment_date = Column(Date, nullable=False)
    method = Column(Text, nullable=False, default="cash")
    installment_number = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    member = relationship("Member", back_populates="payments")
