from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ...core.constants import DEFAULT_PAYROLL_DAILY_DIVISOR
from .base import PayrollCalculator

CENT = Decimal("0.01")


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: daily salary = basic / 30, whatever the month length."""

    def __init__(self, daily_divisor: int = DEFAULT_PAYROLL_DAILY_DIVISOR):
        if int(daily_divisor) <= 0:
            raise ValueError("daily_divisor must be positive")
        self._daily_divisor = Decimal(int(daily_divisor))

    def leave_deduction(self, basic: Decimal, leave_days: int) -> Decimal:
        daily_salary = Decimal(basic) / self._daily_divisor
        return (daily_salary * int(leave_days)).quantize(CENT, rounding=ROUND_HALF_UP)
