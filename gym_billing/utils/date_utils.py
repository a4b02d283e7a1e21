"""Date manipulation utilities"""

from datetime import date
from dateutil.relativedelta import relativedelta


def add_months(from_date: date, months: int) -> date:
    """Add calendar months, clamping to the last day of shorter months"""
    return from_date + relativedelta(months=months)


def days_until(target: date, today: date) -> int:
    """Whole days from today to target (negative when target is in the past)"""
    return (target - today).days
