"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional


@dataclass(frozen=True)
class Installment:
    """Single payment in an installment plan"""

    number: int
    amount: Decimal
    due_date: date
    paid: bool = False
    paid_date: Optional[date] = None
    payment_id: Optional[str] = None
    paid_amount: Optional[Decimal] = None  # Actual amount collected, may differ from amount


@dataclass(frozen=True)
class InstallmentPlan:
    """Installment plan attached to a member's membership"""

    enabled: bool
    total_amount: Decimal
    num_installments: int
    down_payment: Decimal
    installments: List[Installment] = field(default_factory=list)


@dataclass
class AppliedPayment:
    """Outcome of applying a payment to an installment plan"""

    plan: InstallmentPlan
    installment_number: int
    difference_carried: bool  # paid amount was off-plan by more than the threshold
    adjusted_number: Optional[int] = None  # None when nothing was left to absorb it


@dataclass
class PlanSummary:
    """Progress of an installment plan as of a given day"""

    paid_count: int
    total_count: int
    paid_amount: Decimal
    remaining_amount: Decimal
    progress_percent: float
    next_due: Optional[Installment]
    overdue: List[Installment]
    all_paid: bool


@dataclass
class InstallmentAlert:
    """Reminder for an unpaid installment that is due soon or overdue"""

    kind: str  # "overdue" or "due_soon"
    priority: str  # "high" or "medium"
    installment_number: int
    amount: Decimal
    due_date: date
    days_until_due: int  # negative when overdue
