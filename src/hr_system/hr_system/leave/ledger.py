"""Balance ledger: remaining leave days per employee and leave type.

Two figures exist side by side:

* the stored ledger on the employee row, decremented (clamped at zero) when a
  request is finally approved;
* the available figure, ``grant - sum(approved total_days)``, recomputed from
  approved requests. This one is authoritative for filing checks and
  dashboards and may go negative when approvals overlap.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from ..core.constants import DEFAULT_LEAVE_GRANTS
from ..core.enums import BALANCE_LEAVE_TYPES, LeaveType
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import LeaveBalance
from ..employees.repository import EmployeeRepository
from .repository import LeaveRepository


@dataclass(frozen=True)
class LeavePolicy:
    """Entitlement (grant) per ledger-backed leave type."""

    grants: Mapping[LeaveType, float] = field(
        default_factory=lambda: {LeaveType(k): float(v) for k, v in DEFAULT_LEAVE_GRANTS.items()}
    )

    @classmethod
    def from_config(cls, grants: Optional[Mapping[str, float]]) -> "LeavePolicy":
        merged = dict(DEFAULT_LEAVE_GRANTS)
        merged.update(grants or {})
        return cls(grants={LeaveType(k): float(v) for k, v in merged.items()})

    def grant_for(self, leave_type: LeaveType) -> float:
        return float(self.grants[leave_type])

    def default_balance(self) -> LeaveBalance:
        return LeaveBalance(
            casual=self.grant_for(LeaveType.CASUAL),
            sick=self.grant_for(LeaveType.SICK),
            paid=self.grant_for(LeaveType.PAID),
        )


def deduct(balance: LeaveBalance, leave_type: LeaveType, days: float) -> LeaveBalance:
    """new = max(0, old - days); unpaid leave leaves the ledger untouched."""
    if not leave_type.has_balance:
        return balance
    return balance.with_value(leave_type, max(0.0, balance.get(leave_type) - float(days)))


class BalanceLedger:
    def __init__(self, employees: EmployeeRepository, leaves: LeaveRepository, policy: Optional[LeavePolicy] = None):
        self._employees = employees
        self._leaves = leaves
        self._policy = policy or LeavePolicy()

    @property
    def policy(self) -> LeavePolicy:
        return self._policy

    def get_balance(self, employee_id: int) -> LeaveBalance:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Nhân viên không tồn tại")
        return employee.leave_balance or self._policy.default_balance()

    def compute_available(self, employee_id: int, leave_type: LeaveType) -> float:
        if not leave_type.has_balance:
            raise ValidationError("Nghỉ không lương không có số dư phép")
        used = self._leaves.sum_approved_days(employee_id=int(employee_id))
        return self._policy.grant_for(leave_type) - float(used.get(leave_type, 0.0))

    def summary(self, employee_id: int) -> Dict[str, float]:
        used = self._leaves.sum_approved_days(employee_id=int(employee_id))
        return {
            t.value: self._policy.grant_for(t) - float(used.get(t, 0.0))
            for t in BALANCE_LEAVE_TYPES
        }
