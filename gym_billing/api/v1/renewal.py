"""POST /v1/members/{member_id}/renew - renew a membership, optionally in installments"""

import logging
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from gym_billing.api.dependencies import get_member_or_404, get_request_id, parse_uuid
from gym_billing.api.v1.members import member_response
from gym_billing.api.v1.schemas import MemberResponse, RenewRequest
from gym_billing.domain.exceptions import InvalidScheduleRequestError
from gym_billing.domain.installments import build_installment_plan
from gym_billing.domain.memberships import renewal_period
from gym_billing.infrastructure.database.models import Member
from gym_billing.infrastructure.database.repositories import MemberRepository, MembershipPlanRepository
from gym_billing.infrastructure.database.session import get_db
from gym_billing.infrastructure.observability.logging import log_plan_saved
from gym_billing.infrastructure.observability.metrics import plan_saved_counter, record_schedule

router = APIRouter()


@router.post("/members/{member_id}/renew", response_model=MemberResponse)
def renew_membership(
    request_body: RenewRequest,
    request: Request,
    member: Member = Depends(get_member_or_404),
    db: Session = Depends(get_db),
):
    """
    Renew a member onto a membership plan.

    Days left on a still-active membership carry over into the new end date.
    With installments enabled, the plan price is scheduled from today using
    the same calculator as plan setup; otherwise any existing installment
    plan is cleared.
    """
    request_id = get_request_id(request)
    today = request_body.today or date.today()

    membership_plan = MembershipPlanRepository(db).get_plan_by_id(
        parse_uuid(request_body.membership_plan_id, "plan")
    )
    if not membership_plan:
        raise HTTPException(status_code=404, detail="Membership plan not found")

    start_date, end_date = renewal_period(member.end_date, membership_plan.duration_days, today)

    installment_plan = None
    if request_body.enable_installments:
        try:
            installment_plan = build_installment_plan(
                membership_plan.price,
                request_body.num_installments,
                start_date=today,
                down_payment=request_body.down_payment,
            )
        except InvalidScheduleRequestError as e:
            raise HTTPException(status_code=422, detail=str(e))

    member_repo = MemberRepository(db)
    member_repo.renew_membership(member, membership_plan.id, start_date, end_date, installment_plan)
    db.commit()

    if installment_plan is not None:
        record_schedule(installment_plan.down_payment > 0)
        plan_saved_counter.labels(source="renewal").inc()
        log_plan_saved(
            request_id,
            str(member.id),
            installment_plan.total_amount,
            installment_plan.num_installments,
            installment_plan.down_payment,
        )

    logging.info(
        "Membership renewed",
        extra={"request_id": request_id, "member_id": str(member.id), "end_date": end_date.isoformat()},
    )
    return member_response(member, member_repo)
