"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field, model_validator
from datetime import date
from decimal import Decimal
from typing import List, Optional

from gym_billing.config import settings
from gym_billing.domain.models import Installment, InstallmentAlert, InstallmentPlan, PlanSummary
from gym_billing.infrastructure.database.records import check_installment_structure


class InstallmentSchema(BaseModel):
    """Single installment in a plan"""

    number: int = Field(..., ge=1)
    amount: Decimal = Field(..., ge=0)
    due_date: date
    paid: bool = False
    paid_date: Optional[date] = None
    payment_id: Optional[str] = None
    paid_amount: Optional[Decimal] = None

    @classmethod
    def from_domain(cls, inst: Installment) -> "InstallmentSchema":
        return cls(
            number=inst.number,
            amount=inst.amount,
            due_date=inst.due_date,
            paid=inst.paid,
            paid_date=inst.paid_date,
            payment_id=inst.payment_id,
            paid_amount=inst.paid_amount,
        )

    def to_domain(self) -> Installment:
        return Installment(**self.model_dump())


class ScheduleRequest(BaseModel):
    """Request body for POST /v1/installments/schedule"""

    total_amount: Decimal = Field(..., gt=0, description="Full amount to collect")
    num_installments: int = Field(
        settings.default_num_installments,
        ge=settings.min_installments,
        le=settings.max_installments,
    )
    start_date: Optional[date] = Field(None, description="First due date, defaults to today")
    down_payment: Optional[Decimal] = Field(None, ge=0)


class ScheduleResponse(BaseModel):
    """Draft schedule for POST /v1/installments/schedule"""

    total_amount: Decimal
    num_installments: int
    down_payment_applied: bool
    down_payment: Decimal
    installments_total: Decimal
    installments: List[InstallmentSchema]


class ValidateScheduleRequest(BaseModel):
    """Request body for POST /v1/installments/validate"""

    total_amount: Decimal = Field(..., gt=0)
    installments: List[InstallmentSchema] = Field(..., min_length=1)


class ValidateScheduleResponse(BaseModel):
    valid: bool
    total_amount: Decimal
    installments_total: Decimal


class InstallmentPlanSchema(BaseModel):
    """Installment plan as confirmed by the user"""

    enabled: bool = True
    total_amount: Decimal = Field(..., gt=0)
    num_installments: int = Field(..., ge=settings.min_installments, le=settings.max_installments)
    down_payment: Decimal = Field(Decimal(0), ge=0)
    installments: List[InstallmentSchema] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_structure(self) -> "InstallmentPlanSchema":
        check_installment_structure(self.num_installments, [inst.number for inst in self.installments])
        return self

    @classmethod
    def from_domain(cls, plan: InstallmentPlan) -> "InstallmentPlanSchema":
        return cls(
            enabled=plan.enabled,
            total_amount=plan.total_amount,
            num_installments=plan.num_installments,
            down_payment=plan.down_payment,
            installments=[InstallmentSchema.from_domain(inst) for inst in plan.installments],
        )

    def to_domain(self) -> InstallmentPlan:
        return InstallmentPlan(
            enabled=self.enabled,
            total_amount=self.total_amount,
            num_installments=self.num_installments,
            down_payment=self.down_payment,
            installments=[inst.to_domain() for inst in self.installments],
        )


class PlanSummarySchema(BaseModel):
    """Progress of an installment plan"""

    paid_count: int
    total_count: int
    paid_amount: Decimal
    remaining_amount: Decimal
    progress_percent: float
    next_due: Optional[InstallmentSchema] = None
    overdue: List[InstallmentSchema]
    all_paid: bool

    @classmethod
    def from_domain(cls, summary: PlanSummary) -> "PlanSummarySchema":
        return cls(
            paid_count=summary.paid_count,
            total_count=summary.total_count,
            paid_amount=summary.paid_amount,
            remaining_amount=summary.remaining_amount,
            progress_percent=summary.progress_percent,
            next_due=InstallmentSchema.from_domain(summary.next_due) if summary.next_due else None,
            overdue=[InstallmentSchema.from_domain(inst) for inst in summary.overdue],
            all_paid=summary.all_paid,
        )


class MemberPlanResponse(BaseModel):
    """Response for GET/PUT /v1/members/{member_id}/installment-plan"""

    member_id: str
    plan: InstallmentPlanSchema
    summary: PlanSummarySchema


class MembershipPlanCreate(BaseModel):
    """Request body for POST /v1/membership-plans"""

    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., gt=0)
    duration_days: int = Field(..., gt=0)


class MembershipPlanResponse(BaseModel):
    id: str
    name: str
    price: Decimal
    duration_days: int


class MemberCreate(BaseModel):
    """Request body for POST /v1/members"""

    full_name: str = Field(..., min_length=1)
    phone: Optional[str] = None
    membership_plan_id: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class MemberResponse(BaseModel):
    id: str
    full_name: str
    phone: Optional[str] = None
    membership_plan_id: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: str
    installment_plan: Optional[InstallmentPlanSchema] = None


class PaymentCreate(BaseModel):
    """Request body for POST /v1/members/{member_id}/payments"""

    amount: Decimal = Field(..., gt=0)
    payment_date: Optional[date] = None
    method: str = "cash"


class PaymentResponse(BaseModel):
    payment_id: str
    member_id: str
    amount: Decimal
    payment_date: date
    method: str
    installment_number: Optional[int] = None
    adjusted_installment_number: Optional[int] = None


class PaymentListResponse(BaseModel):
    """Response for GET /v1/members/{member_id}/payments"""

    member_id: str
    payments: List[PaymentResponse]


class RenewRequest(BaseModel):
    """Request body for POST /v1/members/{member_id}/renew"""

    membership_plan_id: str
    enable_installments: bool = False
    num_installments: int = Field(
        settings.default_num_installments,
        ge=settings.min_installments,
        le=settings.max_installments,
    )
    down_payment: Optional[Decimal] = Field(None, ge=0)
    today: Optional[date] = None


class AlertSchema(BaseModel):
    """Installment reminder for a member"""

    member_id: str
    member_name: str
    phone: Optional[str] = None
    kind: str
    priority: str
    installment_number: int
    amount: Decimal
    due_date: date
    days_until_due: int

    @classmethod
    def from_domain(cls, alert: InstallmentAlert, member_id: str, member_name: str, phone: Optional[str]) -> "AlertSchema":
        return cls(
            member_id=member_id,
            member_name=member_name,
            phone=phone,
            kind=alert.kind,
            priority=alert.priority,
            installment_number=alert.installment_number,
            amount=alert.amount,
            due_date=alert.due_date,
            days_until_due=alert.days_until_due,
        )


class AlertsResponse(BaseModel):
    """Response for GET /v1/installments/alerts"""

    today: date
    alerts: List[AlertSchema]
