from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee, LeaveBalance


class EmployeeRepository(Protocol):
    """Employee directory used by the leave and payroll services.

    Lưu ý (DIP): tầng service phụ thuộc vào interface này, không phụ thuộc trực tiếp DB cụ thể.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_code(self, emp_code: str) -> Optional[Employee]:
        raise NotImplementedError

    def find_team_member_ids(self, manager_id: int) -> Sequence[int]:
        """Direct reports only (one hop)."""

        raise NotImplementedError

    def get_leave_balance(self, employee_id: int) -> Optional[LeaveBalance]:
        raise NotImplementedError

    def set_leave_balance(self, employee_id: int, balance: LeaveBalance) -> bool:
        raise NotImplementedError
