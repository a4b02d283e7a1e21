"""Prometheus metrics for installment schedules, plan saves and payments"""

from prometheus_client import Counter, Histogram

# Schedule metrics
schedule_counter = Counter(
    "gym_installment_schedule_total",
    "Installment schedules computed",
    ["mode"],  # equal_split | down_payment
)

schedule_rejected_counter = Counter(
    "gym_installment_schedule_rejected_total",
    "Schedules refused because amounts do not add up to the total",
)

plan_saved_counter = Counter(
    "gym_installment_plan_saved_total",
    "Installment plans persisted",
    ["source"],  # setup | renewal
)

# Payment metrics
installment_payment_counter = Counter(
    "gym_installment_payment_total",
    "Payments applied to installments",
    ["adjustment"],  # exact | adjusted | unabsorbed
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_schedule(down_payment_applied: bool) -> None:
    mode = "down_payment" if down_payment_applied else "equal_split"
    schedule_counter.labels(mode=mode).inc()


def record_installment_payment(difference_carried: bool, adjusted_number: int | None) -> None:
    """Bucket payments by whether a difference was carried to a later installment"""
    if not difference_carried:
        adjustment = "exact"
    elif adjusted_number is not None:
        adjustment = "adjusted"
    else:
        # Off-plan amount on the last unpaid installment, nothing left to absorb it
        adjustment = "unabsorbed"

    installment_payment_counter.labels(adjustment=adjustment).inc()
