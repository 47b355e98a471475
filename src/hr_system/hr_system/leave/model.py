from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType
from ..employees.model import LeaveBalance
from .state import LeaveStage


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    total_days: float
    reason: str
    stage: LeaveStage
    applied_at: datetime
    # Ledger values at filing time, for audit/display only.
    balance_snapshot: LeaveBalance
    manager_approver_id: Optional[int] = None
    hr_approver_id: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    emp_code: Optional[str] = None
    full_name: Optional[str] = None

    @property
    def status(self) -> LeaveStatus:
        return self.stage.status

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "employee_id": self.employee_id,
            "emp_code": self.emp_code,
            "full_name": self.full_name,
            "leave_type": self.leave_type.value,
            "start_date": self.start_date.strftime("%Y-%m-%d"),
            "end_date": self.end_date.strftime("%Y-%m-%d"),
            "total_days": self.total_days,
            "reason": self.reason,
            "status": self.status.value,
            "stage": self.stage.value,
            "manager_approver_id": self.manager_approver_id,
            "hr_approver_id": self.hr_approver_id,
            "approved_at": self.approved_at.strftime("%Y-%m-%d %H:%M") if self.approved_at else None,
            "rejection_reason": self.rejection_reason or "",
            "applied_at": self.applied_at.strftime("%Y-%m-%d %H:%M"),
            "leave_balance": self.balance_snapshot.as_dict(),
        }
