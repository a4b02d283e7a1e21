"""Members and membership plans"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from gym_billing.api.dependencies import get_member_or_404, parse_uuid
from gym_billing.api.v1.schemas import (
    InstallmentPlanSchema,
    MemberCreate,
    MemberResponse,
    MembershipPlanCreate,
    MembershipPlanResponse,
)
from gym_billing.infrastructure.database.models import Member, MembershipPlan
from gym_billing.infrastructure.database.repositories import MemberRepository, MembershipPlanRepository
from gym_billing.infrastructure.database.session import get_db

router = APIRouter()


def member_response(member: Member, member_repo: MemberRepository) -> MemberResponse:
    plan = member_repo.get_installment_plan(member)
    return MemberResponse(
        id=str(member.id),
        full_name=member.full_name,
        phone=member.phone,
        membership_plan_id=str(member.membership_plan_id) if member.membership_plan_id else None,
        start_date=member.start_date,
        end_date=member.end_date,
        status=member.status,
        installment_plan=InstallmentPlanSchema.from_domain(plan) if plan else None,
    )


def membership_plan_response(plan: MembershipPlan) -> MembershipPlanResponse:
    return MembershipPlanResponse(
        id=str(plan.id),
        name=plan.name,
        price=plan.price,
        duration_days=plan.duration_days,
    )


@router.post("/membership-plans", response_model=MembershipPlanResponse, status_code=201)
def create_membership_plan(request_body: MembershipPlanCreate, db: Session = Depends(get_db)):
    plan = MembershipPlanRepository(db).create_plan(
        name=request_body.name,
        price=request_body.price,
        duration_days=request_body.duration_days,
    )
    db.commit()
    return membership_plan_response(plan)


@router.get("/membership-plans/{plan_id}", response_model=MembershipPlanResponse)
def get_membership_plan(plan_id: str, db: Session = Depends(get_db)):
    plan = MembershipPlanRepository(db).get_plan_by_id(parse_uuid(plan_id, "plan"))
    if not plan:
        raise HTTPException(status_code=404, detail="Membership plan not found")
    return membership_plan_response(plan)


@router.post("/members", response_model=MemberResponse, status_code=201)
def create_member(request_body: MemberCreate, db: Session = Depends(get_db)):
    membership_plan_id = None
    if request_body.membership_plan_id:
        membership_plan_id = parse_uuid(request_body.membership_plan_id, "plan")
        if not MembershipPlanRepository(db).get_plan_by_id(membership_plan_id):
            raise HTTPException(status_code=404, detail="Membership plan not found")

    member_repo = MemberRepository(db)
    member = member_repo.create_member(
        full_name=request_body.full_name,
        phone=request_body.phone,
        membership_plan_id=membership_plan_id,
        start_date=request_body.start_date,
        end_date=request_body.end_date,
    )
    db.commit()
    return member_response(member, member_repo)


@router.get("/members/{member_id}", response_model=MemberResponse)
def get_member(member: Member = Depends(get_member_or_404), db: Session = Depends(get_db)):
    return member_response(member, MemberRepository(db))
