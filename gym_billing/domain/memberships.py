"""Membership renewal rules"""

from datetime import date, timedelta
from typing import Optional, Tuple


def renewal_period(
    current_end_date: Optional[date],
    duration_days: int,
    today: Optional[date] = None,
) -> Tuple[date, date]:
    """
    Compute the (start_date, end_date) of a renewed membership.

    The new period starts today. Remaining days of an active membership are
    kept: the end date extends from the current end date when it is still in
    the future, otherwise from today.
    """
    if today is None:
        today = date.today()

    extend_from = current_end_date if current_end_date and current_end_date > today else today
    return today, extend_from + timedelta(days=duration_days)
