from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .core.constants import DEFAULT_PAYROLL_DAILY_DIVISOR
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .leave.ledger import BalanceLedger, LeavePolicy
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.query import LeaveQueryService
from .leave.repository import LeaveRepository
from .leave.service import LeaveService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationSink
from .notifications.service import Notifier
from .payroll.calculator.base import PayrollCalculator
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.mysql_salary_repository import MySQLSalaryRepository
from .payroll.payslip import DocumentGenerator, HtmlPayslipGenerator
from .payroll.repository import SalaryRepository
from .payroll.service import PayrollService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    employees_repo: EmployeeRepository
    leave_repo: LeaveRepository
    salary_repo: SalaryRepository
    notification_sink: NotificationSink

    ledger: BalanceLedger
    leave_service: LeaveService
    leave_query_service: LeaveQueryService
    payroll_service: PayrollService


def wire_services(
    *,
    employees_repo: EmployeeRepository,
    leave_repo: LeaveRepository,
    salary_repo: SalaryRepository,
    notification_sink: NotificationSink,
    policy: Optional[LeavePolicy] = None,
    calculator: Optional[PayrollCalculator] = None,
    documents: Optional[DocumentGenerator] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    notifier = Notifier(notification_sink)
    ledger = BalanceLedger(employees_repo, leave_repo, policy)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        leave_repo=leave_repo,
        salary_repo=salary_repo,
        notification_sink=notification_sink,
        ledger=ledger,
        leave_service=LeaveService(leave_repo, employees_repo, ledger, notifier),
        leave_query_service=LeaveQueryService(leave_repo, employees_repo, ledger),
        payroll_service=PayrollService(
            salary_repo,
            employees_repo,
            leave_repo,
            notifier,
            calculator=calculator,
            documents=documents,
        ),
    )


def build_container(*, db_config: dict, settings: Any = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_services(
        employees_repo=MySQLEmployeeRepository(conn),
        leave_repo=MySQLLeaveRepository(conn),
        salary_repo=MySQLSalaryRepository(conn),
        notification_sink=MySQLNotificationRepository(conn),
        policy=LeavePolicy.from_config(getattr(settings, "LEAVE_GRANTS", None)),
        calculator=StandardPayrollCalculator(
            int(getattr(settings, "PAYROLL_DAILY_DIVISOR", DEFAULT_PAYROLL_DAILY_DIVISOR))
        ),
        documents=HtmlPayslipGenerator(getattr(settings, "PAYSLIP_DIR", "payslips")),
        conn=conn,
    )
