"""Installment plan generation and tracking for membership payments"""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import List, Optional, Union

from gym_billing.domain.exceptions import (
    InstallmentNotFoundError,
    InvalidScheduleRequestError,
    NoPendingInstallmentError,
    ScheduleImbalanceError,
)
from gym_billing.domain.models import (
    AppliedPayment,
    Installment,
    InstallmentAlert,
    InstallmentPlan,
    PlanSummary,
)
from gym_billing.utils.date_utils import add_months, days_until

Money = Union[Decimal, int, str]


def _to_decimal(value: Money) -> Decimal:
    # str() first so floats keep their printed value instead of binary noise
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _split_equally(
    amount: Decimal,
    count: int,
    start_date: date,
    first_number: int,
    first_month_offset: int,
) -> List[Installment]:
    """Whole-unit equal split where the last installment absorbs the remainder"""
    base_amount = amount // count
    remainder = amount - base_amount * count

    installments = []
    for i in range(count):
        installments.append(
            Installment(
                number=first_number + i,
                amount=base_amount + (remainder if i == count - 1 else 0),
                due_date=add_months(start_date, first_month_offset + i),
            )
        )
    return installments


def down_payment_applies(
    total_amount: Money, num_installments: int, down_payment: Optional[Money]
) -> bool:
    """A down payment is used only if it is positive, below the total, and leaves at least one installment"""
    if down_payment is None:
        return False
    down = _to_decimal(down_payment)
    return Decimal(0) < down < _to_decimal(total_amount) and num_installments - 1 >= 1


def compute_installment_schedule(
    total_amount: Money,
    num_installments: int,
    start_date: Optional[date] = None,
    down_payment: Optional[Money] = None,
) -> List[Installment]:
    """
    Split a membership amount into monthly installments.

    Without a down payment the total is divided into num_installments
    whole-unit amounts due monthly from start_date. With a valid down payment
    it becomes installment #1 due on start_date and the rest is divided over
    the remaining installments due one month apart after it. An invalid down
    payment is ignored and the equal split is used instead.

    The last installment absorbs the division remainder so the amounts always
    sum exactly to total_amount.

    Example:
        1000 over 3 from 2024-01-15 -> 333 (01-15), 333 (02-15), 334 (03-15)
        1000 over 3 with 400 down  -> 400 (01-15), 300 (02-15), 300 (03-15)

    Raises:
        InvalidScheduleRequestError: total_amount <= 0 or fewer than 2 installments
    """
    total = _to_decimal(total_amount)
    if total <= 0:
        raise InvalidScheduleRequestError("Total amount must be positive")
    if num_installments < 2:
        raise InvalidScheduleRequestError("An installment plan needs at least 2 installments")

    if start_date is None:
        start_date = date.today()

    if not down_payment_applies(total, num_installments, down_payment):
        return _split_equally(total, num_installments, start_date, first_number=1, first_month_offset=0)

    down = _to_decimal(down_payment)
    first = Installment(number=1, amount=down, due_date=start_date)
    rest = _split_equally(
        total - down, num_installments - 1, start_date, first_number=2, first_month_offset=1
    )
    return [first] + rest


def build_installment_plan(
    total_amount: Money,
    num_installments: int,
    start_date: Optional[date] = None,
    down_payment: Optional[Money] = None,
) -> InstallmentPlan:
    """Compute a schedule and wrap it in the persisted plan shape"""
    total = _to_decimal(total_amount)
    installments = compute_installment_schedule(total, num_installments, start_date, down_payment)
    applied = down_payment_applies(total, num_installments, down_payment)

    return InstallmentPlan(
        enabled=True,
        total_amount=total,
        num_installments=num_installments,
        down_payment=_to_decimal(down_payment) if applied else Decimal(0),
        installments=installments,
    )


def edit_installment(
    installments: List[Installment],
    number: int,
    amount: Optional[Money] = None,
    due_date: Optional[date] = None,
) -> List[Installment]:
    """Override one installment's amount and/or due date; siblings are left untouched"""
    if not any(inst.number == number for inst in installments):
        raise InstallmentNotFoundError(f"Installment #{number} not found")

    changes = {}
    if amount is not None:
        changes["amount"] = _to_decimal(amount)
    if due_date is not None:
        changes["due_date"] = due_date

    return [replace(inst, **changes) if inst.number == number else inst for inst in installments]


def validate_schedule(
    total_amount: Money,
    installments: List[Installment],
    tolerance: Money = Decimal("1"),
) -> None:
    """
    Pre-save gate: installment amounts must add up to the plan total.

    Raises:
        ScheduleImbalanceError: |sum - total| >= tolerance
    """
    total = _to_decimal(total_amount)
    actual = sum((inst.amount for inst in installments), Decimal(0))

    if abs(actual - total) >= _to_decimal(tolerance):
        raise ScheduleImbalanceError(expected=total, actual=actual)


def record_installment_payment(
    plan: InstallmentPlan,
    amount: Money,
    paid_date: date,
    payment_id: str,
    adjustment_threshold: Money = Decimal("0.5"),
) -> AppliedPayment:
    """
    Apply a payment to the next unpaid installment.

    The installment is marked paid with the amount actually collected. When
    that differs from the planned amount by more than adjustment_threshold,
    the following unpaid installment absorbs the difference (never going
    below zero).

    Returns:
        Updated plan, the installment settled, whether a difference was
        carried and the number of the installment that absorbed it

    Raises:
        NoPendingInstallmentError: plan disabled or fully paid
    """
    if not plan.enabled:
        raise NoPendingInstallmentError("Installment plan is not enabled")

    current = next((inst for inst in plan.installments if not inst.paid), None)
    if current is None:
        raise NoPendingInstallmentError("All installments are already paid")

    paid_amount = _to_decimal(amount)
    difference = paid_amount - current.amount

    carried = abs(difference) > _to_decimal(adjustment_threshold)
    following = None
    if carried:
        following = next(
            (inst for inst in plan.installments if not inst.paid and inst.number > current.number),
            None,
        )

    updated = []
    for inst in plan.installments:
        if inst.number == current.number:
            inst = replace(
                inst,
                paid=True,
                paid_date=paid_date,
                payment_id=payment_id,
                paid_amount=paid_amount,
            )
        elif following is not None and inst.number == following.number:
            inst = replace(inst, amount=max(Decimal(0), inst.amount - difference))
        updated.append(inst)

    return AppliedPayment(
        plan=replace(plan, installments=updated),
        installment_number=current.number,
        difference_carried=carried,
        adjusted_number=following.number if following is not None else None,
    )


def summarize_plan(plan: InstallmentPlan, today: Optional[date] = None) -> PlanSummary:
    """Paid/remaining totals, progress and the next or overdue installments"""
    if today is None:
        today = date.today()

    paid = [inst for inst in plan.installments if inst.paid]
    pending = [inst for inst in plan.installments if not inst.paid]

    paid_amount = sum(
        (inst.paid_amount if inst.paid_amount is not None else inst.amount for inst in paid),
        Decimal(0),
    )
    total_count = len(plan.installments)
    progress = len(paid) / total_count * 100 if total_count else 0.0

    return PlanSummary(
        paid_count=len(paid),
        total_count=total_count,
        paid_amount=paid_amount,
        remaining_amount=plan.total_amount - paid_amount,
        progress_percent=progress,
        next_due=min(pending, key=lambda inst: inst.due_date) if pending else None,
        overdue=[inst for inst in pending if inst.due_date < today],
        all_paid=total_count > 0 and not pending,
    )


def installment_alerts(
    plan: InstallmentPlan,
    today: Optional[date] = None,
    due_soon_days: int = 3,
) -> List[InstallmentAlert]:
    """Overdue and due-soon reminders for the unpaid installments of a plan"""
    if not plan.enabled:
        return []
    if today is None:
        today = date.today()

    alerts = []
    for inst in plan.installments:
        if inst.paid:
            continue

        days = days_until(inst.due_date, today)
        if days < 0:
            kind, priority = "overdue", "high"
        elif days <= due_soon_days:
            kind, priority = "due_soon", "medium"
        else:
            continue

        alerts.append(
            InstallmentAlert(
                kind=kind,
                priority=priority,
                installment_number=inst.number,
                amount=inst.amount,
                due_date=inst.due_date,
                days_until_due=days,
            )
        )

    return alerts
