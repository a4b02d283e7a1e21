"""Unit tests for installment payments, plan progress and due reminders"""

import pytest
from dataclasses import replace
from datetime import date
from decimal import Decimal
from gym_billing.domain.installments import (
    build_installment_plan,
    installment_alerts,
    record_installment_payment,
    summarize_plan,
)
from gym_billing.domain.exceptions import NoPendingInstallmentError


@pytest.fixture
def plan():
    """1000 over 3 from 2024-01-15 -> 333, 333, 334"""
    return build_installment_plan(Decimal("1000"), 3, start_date=date(2024, 1, 15))


def test_exact_payment_marks_next_unpaid(plan):
    applied = record_installment_payment(plan, Decimal("333"), date(2024, 1, 15), "pay-1")

    first = applied.plan.installments[0]
    assert first.paid is True
    assert first.paid_date == date(2024, 1, 15)
    assert first.payment_id == "pay-1"
    assert first.paid_amount == Decimal("333")
    assert applied.installment_number == 1
    assert applied.difference_carried is False
    assert applied.adjusted_number is None
    assert applied.plan.installments[1:] == plan.installments[1:]


def test_overpayment_reduces_following_installment(plan):
    applied = record_installment_payment(plan, Decimal("400"), date(2024, 1, 15), "pay-1")

    assert applied.difference_carried is True
    assert applied.adjusted_number == 2
    assert applied.plan.installments[1].amount == Decimal("266")
    assert applied.plan.installments[2].amount == Decimal("334")


def test_underpayment_increases_following_installment(plan):
    applied = record_installment_payment(plan, Decimal("300"), date(2024, 1, 15), "pay-1")

    assert applied.adjusted_number == 2
    assert applied.plan.installments[0].paid_amount == Decimal("300")
    assert applied.plan.installments[1].amount == Decimal("366")


def test_small_difference_not_carried(plan):
    applied = record_installment_payment(plan, Decimal("333.40"), date(2024, 1, 15), "pay-1")

    assert applied.difference_carried is False
    assert applied.adjusted_number is None
    assert applied.plan.installments[1].amount == Decimal("333")


def test_large_overpayment_floors_following_at_zero(plan):
    applied = record_installment_payment(plan, Decimal("900"), date(2024, 1, 15), "pay-1")

    assert applied.adjusted_number == 2
    assert applied.plan.installments[1].amount == Decimal("0")


def test_payments_walk_the_schedule(plan):
    plan = record_installment_payment(plan, Decimal("333"), date(2024, 1, 15), "pay-1").plan
    plan = record_installment_payment(plan, Decimal("333"), date(2024, 2, 15), "pay-2").plan

    assert [inst.paid for inst in plan.installments] == [True, True, False]
    assert plan.installments[1].payment_id == "pay-2"


def test_difference_on_last_installment_has_nowhere_to_go(plan):
    plan = record_installment_payment(plan, Decimal("333"), date(2024, 1, 15), "pay-1").plan
    plan = record_installment_payment(plan, Decimal("333"), date(2024, 2, 15), "pay-2").plan
    applied = record_installment_payment(plan, Decimal("300"), date(2024, 3, 15), "pay-3")

    assert applied.difference_carried is True
    assert applied.adjusted_number is None
    assert applied.plan.installments[2].paid_amount == Decimal("300")


def test_fully_paid_plan_rejects_payment(plan):
    for i, inst in enumerate(plan.installments):
        plan = record_installment_payment(plan, inst.amount, inst.due_date, f"pay-{i}").plan

    with pytest.raises(NoPendingInstallmentError):
        record_installment_payment(plan, Decimal("10"), date(2024, 4, 1), "pay-x")


def test_disabled_plan_rejects_payment(plan):
    with pytest.raises(NoPendingInstallmentError):
        record_installment_payment(replace(plan, enabled=False), Decimal("333"), date(2024, 1, 15), "pay-1")


def test_summary_fresh_plan(plan):
    summary = summarize_plan(plan, today=date(2024, 1, 1))

    assert summary.paid_count == 0
    assert summary.total_count == 3
    assert summary.paid_amount == Decimal("0")
    assert summary.remaining_amount == Decimal("1000")
    assert summary.progress_percent == 0
    assert summary.next_due.number == 1
    assert summary.overdue == []
    assert summary.all_paid is False


def test_summary_uses_actual_paid_amount(plan):
    plan = record_installment_payment(plan, Decimal("400"), date(2024, 1, 15), "pay-1").plan

    summary = summarize_plan(plan, today=date(2024, 3, 1))

    assert summary.paid_count == 1
    assert summary.paid_amount == Decimal("400")
    assert summary.remaining_amount == Decimal("600")
    assert summary.progress_percent == pytest.approx(100 / 3)
    assert summary.next_due.number == 2
    assert [inst.number for inst in summary.overdue] == [2]


def test_summary_all_paid(plan):
    for i, inst in enumerate(plan.installments):
        plan = record_installment_payment(plan, inst.amount, inst.due_date, f"pay-{i}").plan

    summary = summarize_plan(plan, today=date(2024, 6, 1))

    assert summary.all_paid is True
    assert summary.next_due is None
    assert summary.remaining_amount == Decimal("0")
    assert summary.progress_percent == 100


def test_alerts_overdue_and_due_soon(plan):
    # #1 due 01-15 (overdue), #2 due 02-15 (in 2 days), #3 due 03-15 (not yet)
    alerts = installment_alerts(plan, today=date(2024, 2, 13), due_soon_days=3)

    assert [(a.installment_number, a.kind, a.priority) for a in alerts] == [
        (1, "overdue", "high"),
        (2, "due_soon", "medium"),
    ]
    assert alerts[0].days_until_due == -29
    assert alerts[1].days_until_due == 2
    assert alerts[1].amount == Decimal("333")


def test_alerts_due_today_is_due_soon(plan):
    alerts = installment_alerts(plan, today=date(2024, 1, 15))

    assert len(alerts) == 1
    assert alerts[0].kind == "due_soon"
    assert alerts[0].days_until_due == 0


def test_alerts_skip_paid_installments(plan):
    plan = record_installment_payment(plan, Decimal("333"), date(2024, 1, 15), "pay-1").plan

    alerts = installment_alerts(plan, today=date(2024, 1, 20))

    assert alerts == []


def test_alerts_disabled_plan(plan):
    assert installment_alerts(replace(plan, enabled=False), today=date(2024, 6, 1)) == []
