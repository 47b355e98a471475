from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Vai trò người dùng dùng cho phân quyền."""

    EMPLOYEE = "employee"
    MANAGER = "manager"
    HR = "hr"
    ADMIN = "admin"
    SUBADMIN = "subadmin"

    @property
    def has_final_authority(self) -> bool:
        """HR/Admin/Subadmin can finalize leave and run payroll."""
        return self in FINAL_AUTHORITY_ROLES


FINAL_AUTHORITY_ROLES = frozenset({Role.HR, Role.ADMIN, Role.SUBADMIN})


class LeaveType(str, Enum):
    CASUAL = "casual"
    SICK = "sick"
    PAID = "paid"
    UNPAID = "unpaid"

    @property
    def has_balance(self) -> bool:
        """Unpaid leave is unlimited and deducted from salary instead."""
        return self is not LeaveType.UNPAID


BALANCE_LEAVE_TYPES = (LeaveType.CASUAL, LeaveType.SICK, LeaveType.PAID)


class LeaveStatus(str, Enum):
    """Trạng thái công khai của đơn nghỉ phép."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class SalaryStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    PAID = "paid"


class NotificationType(str, Enum):
    LEAVE_SUBMITTED = "leave_submitted"
    LEAVE_APPROVED = "leave_approved"
    LEAVE_REJECTED = "leave_rejected"
    PAYROLL_GENERATED = "payroll_generated"
