from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..common.validators import require_enum
from ..core.constants import DASHBOARD_RECENT_LIMIT, LEAVE_LIST_LIMIT
from ..core.enums import LeaveStatus, LeaveType, Role
from ..core.exceptions import ForbiddenError, NotFoundError
from ..core.identity import Actor
from ..employees.repository import EmployeeRepository
from .ledger import BalanceLedger
from .model import LeaveRequest
from .repository import LeaveRepository


@dataclass(frozen=True)
class LeaveDashboard:
    balance: Dict[str, float]
    recent_requests: List[LeaveRequest]
    pending_count: int

    def to_dict(self) -> dict:
        return {
            "balance": self.balance,
            "recent_requests": [r.to_dict() for r in self.recent_requests],
            "pending_count": self.pending_count,
        }


class LeaveQueryService:
    """Read side: scoped listings, balance summary and dashboard."""

    def __init__(self, leaves: LeaveRepository, employees: EmployeeRepository, ledger: BalanceLedger):
        self._leaves = leaves
        self._employees = employees
        self._ledger = ledger

    def scope_employee_ids(self, actor: Actor) -> Optional[Sequence[int]]:
        """Employees whose requests the actor may see; None means everyone."""
        if actor.has_final_authority:
            return None
        if actor.role == Role.MANAGER:
            return list(self._employees.find_team_member_ids(actor.employee_id))
        return [actor.employee_id]

    def balance_summary(self, *, actor: Actor) -> Dict[str, float]:
        return self._ledger.summary(actor.employee_id)

    def list_requests(
        self,
        *,
        actor: Actor,
        status: Optional[str] = None,
        leave_type: Optional[str] = None,
    ) -> Sequence[LeaveRequest]:
        return self._leaves.list_requests(
            employee_ids=self.scope_employee_ids(actor),
            status=require_enum(LeaveStatus, status, "Trạng thái") if status else None,
            leave_type=require_enum(LeaveType, leave_type, "Loại nghỉ phép") if leave_type else None,
            limit=LEAVE_LIST_LIMIT,
        )

    def list_pending(self, *, actor: Actor) -> Sequence[LeaveRequest]:
        """Approval queue for managers (team) and HR/admin (everyone)."""
        if actor.role == Role.EMPLOYEE:
            raise ForbiddenError("Bạn không có quyền xem danh sách chờ duyệt")
        return self._leaves.list_requests(
            employee_ids=self.scope_employee_ids(actor),
            status=LeaveStatus.PENDING,
            limit=LEAVE_LIST_LIMIT,
        )

    def get_request(self, *, actor: Actor, request_id: int) -> LeaveRequest:
        req = self._leaves.get(request_id=int(request_id))
        if not req:
            raise NotFoundError("Đơn nghỉ phép không tồn tại")
        scope = self.scope_employee_ids(actor)
        if scope is not None and req.employee_id not in scope and req.employee_id != actor.employee_id:
            raise ForbiddenError("Bạn không có quyền xem đơn này")
        return req

    def dashboard(self, *, actor: Actor) -> LeaveDashboard:
        scope = self.scope_employee_ids(actor)
        recent = self._leaves.list_requests(employee_ids=scope, limit=DASHBOARD_RECENT_LIMIT)

        # A plain employee already sees their own pending items in the list.
        pending_count = 0
        if actor.role != Role.EMPLOYEE:
            pending_count = self._leaves.count_requests(employee_ids=scope, status=LeaveStatus.PENDING)

        return LeaveDashboard(
            balance=self._ledger.summary(actor.employee_id),
            recent_requests=list(recent),
            pending_count=pending_count,
        )
