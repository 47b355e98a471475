from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import SalaryStatus
from .model import SalaryComponents, SalaryRecord


class SalaryRepository(Protocol):
    def create(
        self,
        *,
        emp_code: str,
        month: str,
        year: int,
        components: SalaryComponents,
        leave_deduction: Decimal,
        gross_salary: Decimal,
        net_salary: Decimal,
    ) -> int:
        """Raises DuplicateRecordError if (emp_code, month, year) exists."""

        raise NotImplementedError

    def get(self, *, salary_id: int) -> Optional[SalaryRecord]:
        raise NotImplementedError

    def find_for_period(self, *, emp_code: str, month: str, year: int) -> Optional[SalaryRecord]:
        raise NotImplementedError

    def list_records(self, *, emp_code: Optional[str] = None) -> Sequence[SalaryRecord]:
        """All records when emp_code is None; otherwise only that employee's (even for "")."""

        raise NotImplementedError

    def update_amounts(
        self,
        *,
        salary_id: int,
        components: SalaryComponents,
        gross_salary: Decimal,
        net_salary: Decimal,
    ) -> bool:
        raise NotImplementedError

    def set_payslip(self, *, salary_id: int, payslip_path: str, status: SalaryStatus) -> bool:
        raise NotImplementedError

    def delete(self, *, salary_id: int) -> bool:
        raise NotImplementedError
