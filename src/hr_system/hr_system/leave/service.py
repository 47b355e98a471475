from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable

from ..common.datetime_utils import inclusive_day_span, now_local
from ..common.validators import require_enum, require_non_empty
from ..core.constants import MIN_LEAVE_DAYS
from ..core.enums import LeaveType, NotificationType, Role
from ..core.exceptions import (
    ForbiddenError,
    InsufficientBalanceError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from ..core.identity import Actor
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..notifications.service import Notifier
from .ledger import BalanceLedger
from .model import LeaveRequest
from .repository import LeaveRepository
from .state import LeaveAction, LeaveStage, next_stage

logger = logging.getLogger(__name__)

APPLICANT_ROLES = frozenset({Role.EMPLOYEE, Role.MANAGER})
APPROVER_ROLES = frozenset({Role.MANAGER, Role.HR, Role.ADMIN, Role.SUBADMIN})


class LeaveService:
    """Leave lifecycle: submit, two-stage approval, reject, cancel."""

    def __init__(
        self,
        leaves: LeaveRepository,
        employees: EmployeeRepository,
        ledger: BalanceLedger,
        notifier: Notifier,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._leaves = leaves
        self._employees = employees
        self._ledger = ledger
        self._notifier = notifier
        self._clock = clock

    def submit(
        self,
        *,
        actor: Actor,
        leave_type: str,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> LeaveRequest:
        if actor.role not in APPLICANT_ROLES:
            raise ForbiddenError("Chỉ nhân viên mới được gửi đơn nghỉ phép")

        ltype = require_enum(LeaveType, leave_type, "Loại nghỉ phép")
        if end_date < start_date:
            raise ValidationError("Ngày kết thúc phải >= ngày bắt đầu")
        reason = require_non_empty(reason, "Lý do")

        employee = self._require_employee(actor.employee_id)
        total_days = float(inclusive_day_span(start_date, end_date))
        if total_days < MIN_LEAVE_DAYS:
            raise ValidationError(f"Số ngày nghỉ tối thiểu {MIN_LEAVE_DAYS}")

        if ltype.has_balance:
            available = self._ledger.compute_available(employee.employee_id, ltype)
            if available < total_days:
                raise InsufficientBalanceError(
                    f"Không đủ số ngày phép. Còn lại: {available:g} ngày",
                    available=available,
                    requested=total_days,
                )

        request_id = self._leaves.create(
            employee_id=employee.employee_id,
            leave_type=ltype,
            start_date=start_date,
            end_date=end_date,
            total_days=total_days,
            reason=reason,
            balance_snapshot=self._ledger.get_balance(employee.employee_id),
        )
        logger.info(
            "leave %s submitted: employee=%s type=%s days=%g",
            request_id, employee.emp_code, ltype.value, total_days,
        )

        if employee.manager_id is not None:
            self._notifier.send(
                employee.manager_id,
                NotificationType.LEAVE_SUBMITTED,
                "Đơn nghỉ phép chờ duyệt",
                f"{employee.full_name} xin nghỉ {total_days:g} ngày ({ltype.value})",
                related_id=request_id,
                related_type="leave",
            )

        return self._require_request(request_id)

    def approve(self, *, actor: Actor, request_id: int) -> LeaveRequest:
        if actor.role not in APPROVER_ROLES:
            raise ForbiddenError("Bạn không có quyền duyệt đơn nghỉ phép")

        req = self._require_request(request_id)

        if actor.role == Role.MANAGER:
            return self._manager_sign(actor, req)
        return self._final_approve(actor, req)

    def _manager_sign(self, actor: Actor, req: LeaveRequest) -> LeaveRequest:
        next_stage(req.stage, LeaveAction.MANAGER_SIGN)
        self._require_direct_report(actor, req)

        if not self._leaves.record_manager_approval(request_id=req.request_id, manager_id=actor.employee_id):
            logger.warning("leave %s: manager sign-off lost a race", req.request_id)
            raise InvalidStateError("Đơn nghỉ phép đã được xử lý")
        logger.info("leave %s signed by manager %s, awaiting HR", req.request_id, actor.employee_id)

        self._notifier.send(
            req.employee_id,
            NotificationType.LEAVE_APPROVED,
            "Quản lý đã duyệt đơn nghỉ phép",
            f"Đơn nghỉ {req.leave_type.value} của bạn đã được quản lý duyệt, đang chờ HR duyệt",
            related_id=req.request_id,
            related_type="leave",
        )
        return self._require_request(req.request_id)

    def _final_approve(self, actor: Actor, req: LeaveRequest) -> LeaveRequest:
        next_stage(req.stage, LeaveAction.FINAL_APPROVE)

        ledger_after = self._leaves.finalize_approval(
            request_id=req.request_id,
            approver_id=actor.employee_id,
            approved_at=self._clock(),
        )
        if ledger_after is None:
            logger.warning("leave %s: final approval lost a race", req.request_id)
            raise InvalidStateError("Đơn nghỉ phép đã được xử lý")
        logger.info(
            "leave %s approved by %s (%s): ledger=%s",
            req.request_id, actor.employee_id, actor.role.value, ledger_after.as_dict(),
        )

        self._notifier.send(
            req.employee_id,
            NotificationType.LEAVE_APPROVED,
            "Đơn nghỉ phép đã được duyệt",
            f"Đơn nghỉ {req.leave_type.value} của bạn đã được duyệt",
            related_id=req.request_id,
            related_type="leave",
        )
        return self._require_request(req.request_id)

    def reject(self, *, actor: Actor, request_id: int, reason: str = "") -> LeaveRequest:
        if actor.role not in APPROVER_ROLES:
            raise ForbiddenError("Bạn không có quyền từ chối đơn nghỉ phép")

        req = self._require_request(request_id)
        next_stage(req.stage, LeaveAction.REJECT)
        if actor.role == Role.MANAGER:
            self._require_direct_report(actor, req)

        reason = (reason or "").strip()
        if not self._leaves.close(request_id=req.request_id, stage=LeaveStage.REJECTED, rejection_reason=reason):
            logger.warning("leave %s: rejection lost a race", req.request_id)
            raise InvalidStateError("Đơn nghỉ phép đã được xử lý")
        logger.info("leave %s rejected by %s", req.request_id, actor.employee_id)

        self._notifier.send(
            req.employee_id,
            NotificationType.LEAVE_REJECTED,
            "Đơn nghỉ phép bị từ chối",
            f"Đơn nghỉ phép của bạn bị từ chối. Lý do: {reason or 'Không có lý do'}",
            related_id=req.request_id,
            related_type="leave",
        )
        return self._require_request(req.request_id)

    def cancel(self, *, actor: Actor, request_id: int) -> LeaveRequest:
        req = self._require_request(request_id)
        if req.employee_id != actor.employee_id:
            raise ForbiddenError("Chỉ người gửi đơn mới được hủy")
        next_stage(req.stage, LeaveAction.CANCEL)

        if not self._leaves.close(request_id=req.request_id, stage=LeaveStage.CANCELLED):
            logger.warning("leave %s: cancellation lost a race", req.request_id)
            raise InvalidStateError("Chỉ hủy được đơn đang chờ duyệt")
        logger.info("leave %s cancelled by owner", req.request_id)
        return self._require_request(req.request_id)

    def _require_direct_report(self, actor: Actor, req: LeaveRequest) -> None:
        employee = self._require_employee(req.employee_id)
        if not employee.reports_to(actor.employee_id):
            raise ForbiddenError("Bạn chỉ được xử lý đơn của nhân viên thuộc nhóm mình")

    def _require_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Nhân viên không tồn tại")
        return employee

    def _require_request(self, request_id: int) -> LeaveRequest:
        req = self._leaves.get(request_id=int(request_id))
        if not req:
            raise NotFoundError("Đơn nghỉ phép không tồn tại")
        return req
