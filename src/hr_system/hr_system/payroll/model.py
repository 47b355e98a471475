from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import SalaryStatus


@dataclass(frozen=True)
class SalaryComponents:
    """Static earnings and deductions entered by HR."""

    basic: Decimal
    hra: Decimal = Decimal("0")
    da: Decimal = Decimal("0")
    allowances: Decimal = Decimal("0")
    pf: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    other_deductions: Decimal = Decimal("0")

    @classmethod
    def field_names(cls) -> tuple:
        return tuple(f.name for f in fields(cls))

    def with_changes(self, **changes: Decimal) -> "SalaryComponents":
        return replace(self, **changes)


@dataclass(frozen=True)
class SalaryRecord:
    salary_id: int
    emp_code: str
    month: str
    year: int
    components: SalaryComponents
    leave_deduction: Decimal
    gross_salary: Decimal
    net_salary: Decimal
    status: SalaryStatus
    created_at: datetime
    payslip_path: Optional[str] = None

    def to_dict(self) -> dict:
        c = self.components
        return {
            "salary_id": self.salary_id,
            "emp_code": self.emp_code,
            "month": self.month,
            "year": self.year,
            "basic": str(c.basic),
            "hra": str(c.hra),
            "da": str(c.da),
            "allowances": str(c.allowances),
            "pf": str(c.pf),
            "tax": str(c.tax),
            "other_deductions": str(c.other_deductions),
            "leave_deduction": str(self.leave_deduction),
            "gross_salary": str(self.gross_salary),
            "net_salary": str(self.net_salary),
            "status": self.status.value,
            "payslip_path": self.payslip_path or "",
            "created_at": self.created_at.strftime("%Y-%m-%d %H:%M"),
        }
