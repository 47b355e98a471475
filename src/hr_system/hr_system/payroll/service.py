from __future__ import annotations

import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Tuple

from ..common.datetime_utils import month_bounds, month_number
from ..common.validators import require_amount, require_non_empty, require_year
from ..core.constants import MONTH_NAMES
from ..core.enums import LeaveType, NotificationType, Role, SalaryStatus
from ..core.exceptions import DuplicateRecordError, ForbiddenError, NotFoundError, ValidationError
from ..core.identity import Actor
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..leave.repository import LeaveRepository
from ..notifications.service import Notifier
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import SalaryComponents, SalaryRecord
from .payslip import DocumentGenerator
from .repository import SalaryRepository

logger = logging.getLogger(__name__)

PAYROLL_ROLES = frozenset({Role.ADMIN, Role.HR, Role.SUBADMIN})
PAYROLL_EDIT_ROLES = frozenset({Role.ADMIN, Role.HR})


class PayrollService:
    """Salary records: creation with unpaid-leave deduction, recompute, payslips.

    ``leave_deduction`` is fixed when the record is created. Later updates to
    earnings/deductions recompute gross/net with the stored deduction and do
    not look at leave data again.
    """

    def __init__(
        self,
        salaries: SalaryRepository,
        employees: EmployeeRepository,
        leaves: LeaveRepository,
        notifier: Notifier,
        *,
        calculator: Optional[PayrollCalculator] = None,
        documents: Optional[DocumentGenerator] = None,
    ):
        self._salaries = salaries
        self._employees = employees
        self._leaves = leaves
        self._notifier = notifier
        self._calculator = calculator or StandardPayrollCalculator()
        self._documents = documents

    @staticmethod
    def _parse_components(data: Mapping[str, Any], *, base: Optional[SalaryComponents] = None) -> SalaryComponents:
        values = {}
        for name in SalaryComponents.field_names():
            raw = data.get(name)
            if raw is None:
                if base is not None:
                    values[name] = getattr(base, name)
                elif name == "basic":
                    raise ValidationError("Lương cơ bản là bắt buộc")
                else:
                    values[name] = Decimal("0")
                continue
            values[name] = require_amount(raw, name, positive=(name == "basic"))
        return SalaryComponents(**values)

    def create_salary_record(
        self,
        *,
        actor: Actor,
        emp_code: str,
        month: str,
        year: Any,
        amounts: Mapping[str, Any],
    ) -> SalaryRecord:
        if actor.role not in PAYROLL_ROLES:
            raise ForbiddenError("Bạn không có quyền")

        emp_code = require_non_empty(emp_code, "Mã nhân viên")
        month = MONTH_NAMES[month_number(month) - 1]
        year = require_year(year)
        components = self._parse_components(amounts)

        employee = self._employees.get_by_code(emp_code)
        if not employee:
            raise NotFoundError("Nhân viên không tồn tại")

        if self._salaries.find_for_period(emp_code=emp_code, month=month, year=year):
            raise DuplicateRecordError(f"Bảng lương {month}/{year} của {emp_code} đã tồn tại")

        month_start, month_end = month_bounds(month, year)
        unpaid = self._leaves.list_approved_overlapping(
            employee_id=employee.employee_id,
            leave_type=LeaveType.UNPAID,
            start=month_start,
            end=month_end,
        )
        leave_days = self._calculator.unpaid_leave_days(unpaid, month_start, month_end)
        leave_deduction = self._calculator.leave_deduction(components.basic, leave_days)
        gross = self._calculator.gross(components)
        net = self._calculator.net(components, leave_deduction)

        salary_id = self._salaries.create(
            emp_code=emp_code,
            month=month,
            year=year,
            components=components,
            leave_deduction=leave_deduction,
            gross_salary=gross,
            net_salary=net,
        )
        logger.info(
            "salary %s created: %s %s/%s unpaid_days=%s gross=%s net=%s",
            salary_id, emp_code, month, year, leave_days, gross, net,
        )
        return self._require_record(salary_id)

    def update_salary_record(self, *, actor: Actor, salary_id: int, amounts: Mapping[str, Any]) -> SalaryRecord:
        if actor.role not in PAYROLL_EDIT_ROLES:
            raise ForbiddenError("Bạn không có quyền")

        unknown = set(amounts) - set(SalaryComponents.field_names())
        if unknown:
            raise ValidationError("Không được sửa trường: " + ", ".join(sorted(unknown)))

        record = self._require_record(salary_id)
        components = self._parse_components(amounts, base=record.components)
        gross = self._calculator.gross(components)
        net = self._calculator.net(components, record.leave_deduction)

        if not self._salaries.update_amounts(
            salary_id=record.salary_id,
            components=components,
            gross_salary=gross,
            net_salary=net,
        ):
            raise NotFoundError("Bảng lương không tồn tại")
        logger.info("salary %s updated: gross=%s net=%s", record.salary_id, gross, net)
        return self._require_record(record.salary_id)

    def get_salary_record(self, *, actor: Actor, salary_id: int) -> SalaryRecord:
        record = self._require_record(salary_id)
        self._require_visible(actor, record)
        return record

    def list_salary_records(self, *, actor: Actor) -> Sequence[SalaryRecord]:
        if actor.role in PAYROLL_ROLES:
            return self._salaries.list_records()
        return self._salaries.list_records(emp_code=self._own_emp_code(actor))

    def payslip_info(self, *, actor: Actor, salary_id: int) -> Tuple[SalaryRecord, Optional[Employee]]:
        """Salary record plus the employee it belongs to (None if the account is gone)."""
        record = self.get_salary_record(actor=actor, salary_id=salary_id)
        return record, self._employees.get_by_code(record.emp_code)

    def download_payslip(self, *, actor: Actor, salary_id: int) -> Path:
        record = self.get_salary_record(actor=actor, salary_id=salary_id)
        if not record.payslip_path:
            raise NotFoundError("Phiếu lương chưa được tạo")

        path = Path(record.payslip_path).resolve()
        if not path.is_file():
            logger.warning("payslip file for salary %s missing: %s", record.salary_id, path)
            raise NotFoundError("Không tìm thấy tệp phiếu lương")
        return path

    def delete_salary_record(self, *, actor: Actor, salary_id: int) -> None:
        if actor.role not in PAYROLL_ROLES:
            raise ForbiddenError("Bạn không có quyền")
        if not self._salaries.delete(salary_id=int(salary_id)):
            raise NotFoundError("Bảng lương không tồn tại")
        logger.info("salary %s deleted by %s", salary_id, actor.employee_id)

    def generate_payslip(self, *, actor: Actor, salary_id: int) -> SalaryRecord:
        if actor.role not in PAYROLL_ROLES:
            raise ForbiddenError("Bạn không có quyền")
        if self._documents is None:
            raise ValidationError("Chưa cấu hình trình tạo phiếu lương")

        record = self._require_record(salary_id)
        employee = self._require_employee(record.emp_code)

        path = self._documents.render_payslip(record, employee)
        self._salaries.set_payslip(salary_id=record.salary_id, payslip_path=path, status=SalaryStatus.APPROVED)
        logger.info("payslip generated for salary %s: %s", record.salary_id, path)

        self._notifier.send(
            employee.employee_id,
            NotificationType.PAYROLL_GENERATED,
            "Phiếu lương đã sẵn sàng",
            f"Phiếu lương tháng {record.month}/{record.year} của bạn đã được tạo",
            related_id=record.salary_id,
            related_type="salary",
        )
        return self._require_record(record.salary_id)

    def _own_emp_code(self, actor: Actor) -> str:
        # The session may not carry emp_code; the directory is authoritative.
        employee = self._employees.get_by_id(int(actor.employee_id))
        if not employee:
            raise NotFoundError("Nhân viên không tồn tại")
        return employee.emp_code

    def _require_visible(self, actor: Actor, record: SalaryRecord) -> None:
        if actor.role in PAYROLL_ROLES:
            return
        if record.emp_code != self._own_emp_code(actor):
            raise ForbiddenError("Bạn không có quyền xem bảng lương này")

    def _require_employee(self, emp_code: str) -> Employee:
        employee = self._employees.get_by_code(emp_code)
        if not employee:
            raise NotFoundError("Nhân viên không tồn tại")
        return employee

    def _require_record(self, salary_id: int) -> SalaryRecord:
        record = self._salaries.get(salary_id=int(salary_id))
        if not record:
            raise NotFoundError("Bảng lương không tồn tại")
        return record
