"""Draft installment schedules, the pre-save balance check and due reminders"""

from datetime import date
from decimal import Decimal
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from gym_billing.api.v1.schemas import (
    AlertSchema,
    AlertsResponse,
    InstallmentSchema,
    ScheduleRequest,
    ScheduleResponse,
    ValidateScheduleRequest,
    ValidateScheduleResponse,
)
from gym_billing.config import settings
from gym_billing.domain.exceptions import InvalidScheduleRequestError, ScheduleImbalanceError
from gym_billing.domain.installments import (
    compute_installment_schedule,
    down_payment_applies,
    installment_alerts,
    validate_schedule,
)
from gym_billing.infrastructure.database.repositories import MemberRepository
from gym_billing.infrastructure.database.session import get_db
from gym_billing.infrastructure.observability.metrics import record_schedule, schedule_rejected_counter

router = APIRouter()


def imbalance_exception(e: ScheduleImbalanceError) -> HTTPException:
    """422 carrying the expected total, the actual sum and the gap between them"""
    return HTTPException(
        status_code=422,
        detail={
            "message": str(e),
            "expected_total": str(e.expected),
            "installments_total": str(e.actual),
            "difference": str(e.difference),
        },
    )


@router.post("/installments/schedule", response_model=ScheduleResponse)
def compute_schedule(request_body: ScheduleRequest):
    """
    Compute a draft installment schedule.

    Called on every change to amount, count, start date or down payment; the
    whole schedule is regenerated each time. A down payment that is not
    strictly between 0 and the total is dropped and an equal split returned,
    with down_payment_applied=false.
    """
    try:
        installments = compute_installment_schedule(
            request_body.total_amount,
            request_body.num_installments,
            start_date=request_body.start_date,
            down_payment=request_body.down_payment,
        )
    except InvalidScheduleRequestError as e:
        raise HTTPException(status_code=422, detail=str(e))

    applied = down_payment_applies(
        request_body.total_amount, request_body.num_installments, request_body.down_payment
    )
    record_schedule(applied)

    return ScheduleResponse(
        total_amount=request_body.total_amount,
        num_installments=request_body.num_installments,
        down_payment_applied=applied,
        down_payment=request_body.down_payment if applied else Decimal(0),
        installments_total=sum((inst.amount for inst in installments), Decimal(0)),
        installments=[InstallmentSchema.from_domain(inst) for inst in installments],
    )


@router.post("/installments/validate", response_model=ValidateScheduleResponse)
def validate(request_body: ValidateScheduleRequest):
    """Check a (possibly hand-edited) schedule adds up to the total"""
    installments = [inst.to_domain() for inst in request_body.installments]

    try:
        validate_schedule(request_body.total_amount, installments, settings.balance_tolerance)
    except ScheduleImbalanceError as e:
        schedule_rejected_counter.inc()
        raise imbalance_exception(e)

    return ValidateScheduleResponse(
        valid=True,
        total_amount=request_body.total_amount,
        installments_total=sum((inst.amount for inst in installments), Decimal(0)),
    )


@router.get("/installments/alerts", response_model=AlertsResponse)
def get_alerts(
    today: Optional[date] = Query(None, description="Reference day, defaults to today"),
    db: Session = Depends(get_db),
):
    """Overdue and due-soon installments across all members"""
    today = today or date.today()
    member_repo = MemberRepository(db)

    alerts = []
    for member in member_repo.get_members_with_installments():
        plan = member_repo.get_installment_plan(member)
        if plan is None:
            continue
        for alert in installment_alerts(plan, today, settings.due_soon_days):
            alerts.append(AlertSchema.from_domain(alert, str(member.id), member.full_name, member.phone))

    return AlertsResponse(today=today, alerts=alerts)
