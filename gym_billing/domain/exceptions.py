"""Domain-specific exceptions"""

from decimal import Decimal


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidScheduleRequestError(DomainException):
    """Schedule inputs are outside what the calculator accepts"""

    pass


class ScheduleImbalanceError(DomainException):
    """Installment amounts do not add up to the plan total"""

    def __init__(self, expected: Decimal, actual: Decimal):
        self.expected = expected
        self.actual = actual
        self.difference = actual - expected
        super().__init__(
            f"Total of installments ({actual}) must equal the plan amount ({expected})"
        )


class InstallmentNotFoundError(DomainException):
    """No installment with the given number exists in the schedule"""

    pass


class NoPendingInstallmentError(DomainException):
    """Plan is disabled or every installment is already paid"""

    pass
