"""/v1/members/{member_id}/installment-plan - confirm, fetch and clear a member's plan"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from gym_billing.api.dependencies import get_member_or_404, get_request_id
from gym_billing.api.v1.schedule import imbalance_exception
from gym_billing.api.v1.schemas import InstallmentPlanSchema, MemberPlanResponse, PlanSummarySchema
from gym_billing.config import settings
from gym_billing.domain.exceptions import ScheduleImbalanceError
from gym_billing.domain.installments import summarize_plan, validate_schedule
from gym_billing.domain.models import InstallmentPlan
from gym_billing.infrastructure.database.models import Member
from gym_billing.infrastructure.database.repositories import MemberRepository
from gym_billing.infrastructure.database.session import get_db
from gym_billing.infrastructure.observability.logging import log_plan_saved
from gym_billing.infrastructure.observability.metrics import plan_saved_counter, schedule_rejected_counter

router = APIRouter()


def plan_response(member: Member, plan: InstallmentPlan) -> MemberPlanResponse:
    return MemberPlanResponse(
        member_id=str(member.id),
        plan=InstallmentPlanSchema.from_domain(plan),
        summary=PlanSummarySchema.from_domain(summarize_plan(plan)),
    )


@router.put("/members/{member_id}/installment-plan", response_model=MemberPlanResponse)
def save_installment_plan(
    request_body: InstallmentPlanSchema,
    request: Request,
    member: Member = Depends(get_member_or_404),
    db: Session = Depends(get_db),
):
    """
    Persist a confirmed installment plan for a member.

    The schedule is checked against the total first; on imbalance nothing is
    written and the discrepancy is returned with a 422.
    """
    request_id = get_request_id(request)
    plan = request_body.to_domain()

    try:
        validate_schedule(plan.total_amount, plan.installments, settings.balance_tolerance)
    except ScheduleImbalanceError as e:
        schedule_rejected_counter.inc()
        logging.warning(f"Installment plan rejected: {e}", extra={"request_id": request_id})
        raise imbalance_exception(e)

    MemberRepository(db).save_installment_plan(member, plan)
    db.commit()

    plan_saved_counter.labels(source="setup").inc()
    log_plan_saved(request_id, str(member.id), plan.total_amount, plan.num_installments, plan.down_payment)

    return plan_response(member, plan)


@router.get("/members/{member_id}/installment-plan", response_model=MemberPlanResponse)
def get_installment_plan(
    member: Member = Depends(get_member_or_404),
    db: Session = Depends(get_db),
):
    """Stored plan with paid/remaining totals, next due and overdue installments"""
    plan = MemberRepository(db).get_installment_plan(member)
    if plan is None or not plan.enabled:
        raise HTTPException(status_code=404, detail="Member has no installment plan")

    return plan_response(member, plan)


@router.delete("/members/{member_id}/installment-plan", status_code=204)
def clear_installment_plan(
    member: Member = Depends(get_member_or_404),
    db: Session = Depends(get_db),
):
    MemberRepository(db).save_installment_plan(member, None)
    db.commit()
