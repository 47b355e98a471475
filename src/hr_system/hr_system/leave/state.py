"""Explicit lifecycle of a leave request.

A request is pending while it sits in either awaiting stage; the manager's
signature only moves it from AWAITING_MANAGER to AWAITING_HR. HR/admin can
finalize from either awaiting stage.
"""

from __future__ import annotations

from enum import Enum
from typing import Tuple

from ..core.enums import LeaveStatus
from ..core.exceptions import InvalidStateError


class LeaveStage(str, Enum):
    AWAITING_MANAGER = "AWAITING_MANAGER"
    AWAITING_HR = "AWAITING_HR"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"

    @property
    def status(self) -> LeaveStatus:
        return _STATUS_BY_STAGE[self]

    @property
    def is_pending(self) -> bool:
        return self in PENDING_STAGES

    @property
    def is_terminal(self) -> bool:
        return not self.is_pending

    @property
    def manager_signed(self) -> bool:
        return self == LeaveStage.AWAITING_HR

    @classmethod
    def for_status(cls, status: LeaveStatus) -> Tuple["LeaveStage", ...]:
        return tuple(stage for stage in cls if stage.status == status)


class LeaveAction(str, Enum):
    MANAGER_SIGN = "manager_sign"
    FINAL_APPROVE = "final_approve"
    REJECT = "reject"
    CANCEL = "cancel"


PENDING_STAGES = (LeaveStage.AWAITING_MANAGER, LeaveStage.AWAITING_HR)

_STATUS_BY_STAGE = {
    LeaveStage.AWAITING_MANAGER: LeaveStatus.PENDING,
    LeaveStage.AWAITING_HR: LeaveStatus.PENDING,
    LeaveStage.APPROVED: LeaveStatus.APPROVED,
    LeaveStage.REJECTED: LeaveStatus.REJECTED,
    LeaveStage.CANCELLED: LeaveStatus.CANCELLED,
}

_TRANSITIONS = {
    LeaveStage.AWAITING_MANAGER: {
        LeaveAction.MANAGER_SIGN: LeaveStage.AWAITING_HR,
        LeaveAction.FINAL_APPROVE: LeaveStage.APPROVED,
        LeaveAction.REJECT: LeaveStage.REJECTED,
        LeaveAction.CANCEL: LeaveStage.CANCELLED,
    },
    LeaveStage.AWAITING_HR: {
        LeaveAction.FINAL_APPROVE: LeaveStage.APPROVED,
        LeaveAction.REJECT: LeaveStage.REJECTED,
        LeaveAction.CANCEL: LeaveStage.CANCELLED,
    },
}


def next_stage(stage: LeaveStage, action: LeaveAction) -> LeaveStage:
    target = _TRANSITIONS.get(stage, {}).get(action)
    if target is None:
        if stage.is_terminal:
            raise InvalidStateError(f"Đơn nghỉ phép đã được xử lý ({stage.status.value})")
        raise InvalidStateError("Quản lý đã ký duyệt đơn này, không thể ký lại; đơn vẫn đang chờ HR duyệt")
    return target
