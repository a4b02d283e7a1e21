"""Data access layer for gym billing entities"""

import uuid
from datetime import date
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from gym_billing.infrastructure.database.models import Member, MembershipPlan, Payment
from gym_billing.infrastructure.database.records import dump_plan, load_plan
from gym_billing.domain.models import InstallmentPlan


class MembershipPlanRepository:
    """Repository for membership plans"""

    def __init__(self, db: Session):
        self.db = db

    def create_plan(self, name: str, price: Decimal, duration_days: int) -> MembershipPlan:
        db_plan = MembershipPlan(name=name, price=price, duration_days=duration_days)
        self.db.add(db_plan)
        self.db.flush()
        return db_plan

    def get_plan_by_id(self, plan_id: uuid.UUID) -> Optional[MembershipPlan]:
        return self.db.get(MembershipPlan, plan_id)


class MemberRepository:
    """Repository for members and their stored installment plans"""

    def __init__(self, db: Session):
        self.db = db

    def create_member(
        self,
        full_name: str,
        phone: Optional[str] = None,
        membership_plan_id: Optional[uuid.UUID] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Member:
        db_member = Member(
            full_name=full_name,
            phone=phone,
            membership_plan_id=membership_plan_id,
            start_date=start_date,
            end_date=end_date,
            status="active",
        )
        self.db.add(db_member)
        self.db.flush()  # Get ID without committing
        return db_member

    def get_member_by_id(self, member_id: uuid.UUID) -> Optional[Member]:
        return self.db.get(Member, member_id)

    def get_members_with_installments(self) -> List[Member]:
        """Members that have any stored installment plan"""
        return (
            self.db.query(Member)
            .filter(Member.installment_plan.isnot(None))
            .order_by(Member.full_name)
            .all()
        )

    def get_installment_plan(self, member: Member) -> Optional[InstallmentPlan]:
        return load_plan(member.installment_plan)

    def save_installment_plan(self, member: Member, plan: Optional[InstallmentPlan]) -> None:
        """Replace the stored plan; assigning a new dict marks the JSON column dirty"""
        member.installment_plan = dump_plan(plan)
        self.db.flush()

    def renew_membership(
        self,
        member: Member,
        membership_plan_id: uuid.UUID,
        start_date: date,
        end_date: date,
        plan: Optional[InstallmentPlan],
    ) -> Member:
        member.membership_plan_id = membership_plan_id
        member.start_date = start_date
        member.end_date = end_date
        member.status = "active"
        member.installment_plan = dump_plan(plan)
        self.db.flush()
        return member


class PaymentRepository:
    """Repository for member payments"""

    def __init__(self, db: Session):
        self.db = db

    def create_payment(
        self,
        member_id: uuid.UUID,
        amount: Decimal,
        payment_date: date,
        method: str,
        installment_number: Optional[int] = None,
    ) -> Payment:
        db_payment = Payment(
            member_id=member_id,
            amount=amount,
            payment_date=payment_date,
            method=method,
            installment_number=installment_number,
        )
        self.db.add(db_payment)
        self.db.flush()
        return db_payment

    def get_payments_by_member(self, member_id: uuid.UUID, limit: int = 20) -> List[Payment]:
        """Most recent payments first"""
        return (
            self.db.query(Payment)
            .filter(Payment.member_id == member_id)
            .order_by(Payment.payment_date.desc(), Payment.created_at.desc())
            .limit(limit)
            .all()
        )
