"""/v1/members/{member_id}/payments - record payments against the installment plan and list them"""

import logging
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from gym_billing.api.dependencies import get_member_or_404, get_request_id
from gym_billing.api.v1.schemas import PaymentCreate, PaymentListResponse, PaymentResponse
from gym_billing.config import settings
from gym_billing.domain.exceptions import DomainException
from gym_billing.domain.installments import record_installment_payment
from gym_billing.infrastructure.database.models import Member
from gym_billing.infrastructure.database.repositories import MemberRepository, PaymentRepository
from gym_billing.infrastructure.database.session import get_db
from gym_billing.infrastructure.observability.logging import log_installment_payment
from gym_billing.infrastructure.observability import metrics

router = APIRouter()


@router.post("/members/{member_id}/payments", response_model=PaymentResponse, status_code=201)
def create_payment(
    request_body: PaymentCreate,
    request: Request,
    member: Member = Depends(get_member_or_404),
    db: Session = Depends(get_db),
):
    """
    Record a payment and, when the member pays in installments, settle the next one.

    Flow:
    1. Find the next unpaid installment (if the member has an enabled plan)
    2. Persist the payment linked to that installment number
    3. Mark the installment paid with the actual amount; an off-plan amount
       is carried to the following unpaid installment
    4. Store the updated plan
    """
    request_id = get_request_id(request)
    payment_date = request_body.payment_date or date.today()
    member_repo = MemberRepository(db)

    try:
        plan = member_repo.get_installment_plan(member)
        pending = None
        if plan is not None and plan.enabled:
            pending = next((inst for inst in plan.installments if not inst.paid), None)

        payment = PaymentRepository(db).create_payment(
            member_id=member.id,
            amount=request_body.amount,
            payment_date=payment_date,
            method=request_body.method,
            installment_number=pending.number if pending else None,
        )

        applied = None
        if pending is not None:
            applied = record_installment_payment(
                plan,
                request_body.amount,
                paid_date=payment_date,
                payment_id=str(payment.id),
                adjustment_threshold=settings.payment_adjustment_threshold,
            )
            member_repo.save_installment_plan(member, applied.plan)

        db.commit()

    except DomainException as e:
        db.rollback()
        logging.warning(f"Payment not applied: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    if applied is not None:
        metrics.record_installment_payment(applied.difference_carried, applied.adjusted_number)
        log_installment_payment(
            request_id,
            str(member.id),
            applied.installment_number,
            request_body.amount,
            applied.adjusted_number,
        )

    return PaymentResponse(
        payment_id=str(payment.id),
        member_id=str(member.id),
        amount=payment.amount,
        payment_date=payment.payment_date,
        method=payment.method,
        installment_number=payment.installment_number,
        adjusted_installment_number=applied.adjusted_number if applied else None,
    )


@router.get("/members/{member_id}/payments", response_model=PaymentListResponse)
def list_payments(
    limit: int = Query(20, ge=1, le=100),
    member: Member = Depends(get_member_or_404),
    db: Session = Depends(get_db),
):
    """Most recent payments first"""
    payments = PaymentRepository(db).get_payments_by_member(member.id, limit=limit)

    return PaymentListResponse(
        member_id=str(member.id),
        payments=[
            PaymentResponse(
                payment_id=str(p.id),
                member_id=str(p.member_id),
                amount=p.amount,
                payment_date=p.payment_date,
                method=p.method,
                installment_number=p.installment_number,
            )
            for p in payments
        ],
    )
