from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Iterable

from ...common.datetime_utils import overlap_days
from ...leave.model import LeaveRequest
from ..model import SalaryComponents


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    def unpaid_leave_days(self, leaves: Iterable[LeaveRequest], month_start: date, month_end: date) -> int:
        """Sum of inclusive overlap days between each leave and the pay month."""
        return sum(overlap_days(lv.start_date, lv.end_date, month_start, month_end) for lv in leaves)

    @abstractmethod
    def leave_deduction(self, basic: Decimal, leave_days: int) -> Decimal:
        raise NotImplementedError

    def gross(self, c: SalaryComponents) -> Decimal:
        return c.basic + c.hra + c.da + c.allowances

    def net(self, c: SalaryComponents, leave_deduction: Decimal) -> Decimal:
        # Not clamped: a negative net salary points at bad upstream data.
        return self.gross(c) - (c.pf + c.tax + c.other_deductions + leave_deduction)
