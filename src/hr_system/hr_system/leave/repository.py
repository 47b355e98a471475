from __future__ import annotations

from datetime import date, datetime
from typing import Dict, Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..employees.model import LeaveBalance
from .model import LeaveRequest
from .state import LeaveStage


class LeaveRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        total_days: float,
        reason: str,
        balance_snapshot: LeaveBalance,
    ) -> int:
        raise NotImplementedError

    def get(self, *, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        employee_ids: Optional[Sequence[int]] = None,
        status: Optional[LeaveStatus] = None,
        leave_type: Optional[LeaveType] = None,
        limit: int = 100,
    ) -> Sequence[LeaveRequest]:
        """Newest first. ``employee_ids=None`` means every employee."""

        raise NotImplementedError

    def count_requests(
        self,
        *,
        employee_ids: Optional[Sequence[int]] = None,
        status: Optional[LeaveStatus] = None,
    ) -> int:
        raise NotImplementedError

    def sum_approved_days(self, *, employee_id: int) -> Dict[LeaveType, float]:
        raise NotImplementedError

    def list_approved_overlapping(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start: date,
        end: date,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def record_manager_approval(self, *, request_id: int, manager_id: int) -> bool:
        """AWAITING_MANAGER -> AWAITING_HR; False if the request moved meanwhile."""

        raise NotImplementedError

    def finalize_approval(
        self,
        *,
        request_id: int,
        approver_id: int,
        approved_at: datetime,
    ) -> Optional[LeaveBalance]:
        """Approve and deduct the ledger in one transaction.

        Returns the employee's ledger after deduction, or None when the request
        was no longer pending (nothing is deducted in that case).
        """

        raise NotImplementedError

    def close(
        self,
        *,
        request_id: int,
        stage: LeaveStage,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        """Move a pending request to REJECTED/CANCELLED."""

        raise NotImplementedError
