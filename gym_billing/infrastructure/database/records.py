"""Explicit records for JSON blobs stored on ORM rows"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, model_validator

from gym_billing.domain.models import Installment, InstallmentPlan


def check_installment_structure(num_installments: int, numbers: List[int]) -> None:
    """One installment per number, and as many installments as the plan declares"""
    if len(set(numbers)) != len(numbers):
        raise ValueError("Installment numbers must be unique")
    if len(numbers) != num_installments:
        raise ValueError(
            f"Plan declares {num_installments} installments but lists {len(numbers)}"
        )


class InstallmentRecord(BaseModel):
    """Stored form of a single installment"""

    number: int = Field(..., ge=1)
    amount: Decimal = Field(..., ge=0)
    due_date: date
    paid: bool = False
    paid_date: Optional[date] = None
    payment_id: Optional[str] = None
    paid_amount: Optional[Decimal] = None


class InstallmentPlanRecord(BaseModel):
    """Stored form of member.installment_plan"""

    enabled: bool
    total_amount: Decimal = Field(..., gt=0)
    num_installments: int = Field(..., ge=1)
    down_payment: Decimal = Decimal(0)
    installments: List[InstallmentRecord]

    @model_validator(mode="after")
    def check_structure(self) -> "InstallmentPlanRecord":
        check_installment_structure(self.num_installments, [inst.number for inst in self.installments])
        return self

    @classmethod
    def from_domain(cls, plan: InstallmentPlan) -> "InstallmentPlanRecord":
        return cls(
            enabled=plan.enabled,
            total_amount=plan.total_amount,
            num_installments=plan.num_installments,
            down_payment=plan.down_payment,
            installments=[
                InstallmentRecord(
                    number=inst.number,
                    amount=inst.amount,
                    due_date=inst.due_date,
                    paid=inst.paid,
                    paid_date=inst.paid_date,
                    payment_id=inst.payment_id,
                    paid_amount=inst.paid_amount,
                )
                for inst in plan.installments
            ],
        )

    def to_domain(self) -> InstallmentPlan:
        return InstallmentPlan(
            enabled=self.enabled,
            total_amount=self.total_amount,
            num_installments=self.num_installments,
            down_payment=self.down_payment,
            installments=[Installment(**inst.model_dump()) for inst in self.installments],
        )


def dump_plan(plan: Optional[InstallmentPlan]) -> Optional[Dict[str, Any]]:
    """Domain plan -> JSON-safe dict (decimals as strings, ISO dates)"""
    if plan is None:
        return None
    return InstallmentPlanRecord.from_domain(plan).model_dump(mode="json")


def load_plan(data: Optional[Dict[str, Any]]) -> Optional[InstallmentPlan]:
    """Stored JSON -> validated domain plan"""
    if not data:
        return None
    return InstallmentPlanRecord.model_validate(data).to_domain()
