from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from ..core.enums import LeaveType, Role


@dataclass(frozen=True)
class LeaveBalance:
    """Remaining days per ledger-backed leave type (unpaid has none)."""

    casual: float
    sick: float
    paid: float

    def get(self, leave_type: LeaveType) -> float:
        return float(getattr(self, leave_type.value))

    def with_value(self, leave_type: LeaveType, days: float) -> "LeaveBalance":
        return replace(self, **{leave_type.value: float(days)})

    def as_dict(self) -> dict:
        return {"casual": self.casual, "sick": self.sick, "paid": self.paid}


@dataclass(frozen=True)
class Employee:
    """Thực thể miền (domain): Employee.

    ``manager_id`` is a weak reference used only for authorization scoping.
    """

    employee_id: int
    emp_code: str
    full_name: str
    email: str
    role: Role
    manager_id: Optional[int]
    leave_balance: Optional[LeaveBalance] = None
    is_active: bool = True

    def reports_to(self, manager_id: int) -> bool:
        return self.manager_id is not None and int(self.manager_id) == int(manager_id)
