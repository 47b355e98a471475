"""In-memory repositories shared by the service and controller tests.

Imported as ``fakes``: pytest puts this directory on sys.path for conftest.py.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta
from typing import Optional

from hr_system.container import wire_services
from hr_system.core.enums import LeaveType, Role, SalaryStatus
from hr_system.core.exceptions import DuplicateRecordError
from hr_system.core.identity import Actor
from hr_system.employees.model import Employee, LeaveBalance
from hr_system.leave.ledger import LeavePolicy, deduct
from hr_system.leave.model import LeaveRequest
from hr_system.leave.state import PENDING_STAGES, LeaveStage
from hr_system.payroll.model import SalaryRecord

BASE_TIME = datetime(2024, 1, 1, 9, 0, 0)


def make_employee(employee_id, role=Role.EMPLOYEE, manager_id=None, balance=None, emp_code=None):
    return Employee(
        employee_id=employee_id,
        emp_code=emp_code or f"EMP{employee_id:03d}",
        full_name=f"Employee {employee_id}",
        email=f"emp{employee_id}@example.com",
        role=role,
        manager_id=manager_id,
        leave_balance=balance if balance is not None else LeaveBalance(casual=12, sick=10, paid=15),
    )


def actor_for(employee: Employee) -> Actor:
    return Actor(employee_id=employee.employee_id, role=employee.role, emp_code=employee.emp_code)


class InMemoryEmployees:
    def __init__(self, employees=()):
        self.by_id = {e.employee_id: e for e in employees}

    def add(self, employee: Employee) -> Employee:
        self.by_id[employee.employee_id] = employee
        return employee

    def get_by_id(self, employee_id):
        return self.by_id.get(int(employee_id))

    def get_by_code(self, emp_code):
        return next((e for e in self.by_id.values() if e.emp_code == emp_code), None)

    def find_team_member_ids(self, manager_id):
        return [e.employee_id for e in self.by_id.values() if e.manager_id == int(manager_id)]

    def get_leave_balance(self, employee_id):
        e = self.by_id.get(int(employee_id))
        return e.leave_balance if e else None

    def set_leave_balance(self, employee_id, balance):
        e = self.by_id.get(int(employee_id))
        if not e:
            return False
        self.by_id[e.employee_id] = replace(e, leave_balance=balance)
        return True


class InMemoryLeaves:
    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self._next_id = 1
        self.items: dict[int, LeaveRequest] = {}

    def create(self, *, employee_id, leave_type, start_date, end_date, total_days, reason, balance_snapshot):
        rid = self._next_id
        self._next_id += 1
        self.items[rid] = LeaveRequest(
            request_id=rid,
            employee_id=int(employee_id),
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            total_days=float(total_days),
            reason=reason,
            stage=LeaveStage.AWAITING_MANAGER,
            applied_at=BASE_TIME + timedelta(minutes=rid),
            balance_snapshot=balance_snapshot,
        )
        return rid

    def get(self, *, request_id):
        return self.items.get(int(request_id))

    def _matching(self, employee_ids=None, status=None, leave_type=None):
        out = []
        for r in self.items.values():
            if employee_ids is not None and r.employee_id not in employee_ids:
                continue
            if status is not None and r.status != status:
                continue
            if leave_type is not None and r.leave_type != leave_type:
                continue
            out.append(r)
        return out

    def list_requests(self, *, employee_ids=None, status=None, leave_type=None, limit=100):
        rows = self._matching(employee_ids, status, leave_type)
        rows.sort(key=lambda r: r.applied_at, reverse=True)
        return rows[:limit]

    def count_requests(self, *, employee_ids=None, status=None):
        return len(self._matching(employee_ids, status))

    def sum_approved_days(self, *, employee_id):
        totals = {}
        for r in self.items.values():
            if r.employee_id == int(employee_id) and r.stage == LeaveStage.APPROVED:
                totals[r.leave_type] = totals.get(r.leave_type, 0.0) + r.total_days
        return totals

    def list_approved_overlapping(self, *, employee_id, leave_type, start, end):
        return [
            r
            for r in self.items.values()
            if r.employee_id == int(employee_id)
            and r.leave_type == leave_type
            and r.stage == LeaveStage.APPROVED
            and r.start_date <= end
            and r.end_date >= start
        ]

    def record_manager_approval(self, *, request_id, manager_id):
        r = self.items.get(int(request_id))
        if not r or r.stage != LeaveStage.AWAITING_MANAGER:
            return False
        self.items[r.request_id] = replace(r, stage=LeaveStage.AWAITING_HR, manager_approver_id=int(manager_id))
        return True

    def finalize_approval(self, *, request_id, approver_id, approved_at):
        r = self.items.get(int(request_id))
        if not r or r.stage not in PENDING_STAGES:
            return None
        self.items[r.request_id] = replace(
            r,
            stage=LeaveStage.APPROVED,
            hr_approver_id=int(approver_id),
            manager_approver_id=r.manager_approver_id if r.manager_approver_id is not None else int(approver_id),
            approved_at=approved_at,
        )
        before = self._employees.get_leave_balance(r.employee_id)
        after = deduct(before, r.leave_type, r.total_days)
        self._employees.set_leave_balance(r.employee_id, after)
        return after

    def close(self, *, request_id, stage, rejection_reason=None):
        r = self.items.get(int(request_id))
        if not r or r.stage not in PENDING_STAGES:
            return False
        self.items[r.request_id] = replace(r, stage=stage, rejection_reason=rejection_reason)
        return True

    def add_approved(self, employee_id, leave_type: LeaveType, start_date, end_date, total_days=None):
        """Shortcut for payroll tests: store an already approved request."""
        rid = self.create(
            employee_id=employee_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            total_days=total_days if total_days is not None else (end_date - start_date).days + 1,
            reason="seed",
            balance_snapshot=LeaveBalance(casual=12, sick=10, paid=15),
        )
        self.items[rid] = replace(self.items[rid], stage=LeaveStage.APPROVED)
        return rid


class InMemorySalaries:
    def __init__(self):
        self._next_id = 1
        self.items: dict[int, SalaryRecord] = {}

    def create(self, *, emp_code, month, year, components, leave_deduction, gross_salary, net_salary):
        if self.find_for_period(emp_code=emp_code, month=month, year=year):
            raise DuplicateRecordError("duplicate")
        sid = self._next_id
        self._next_id += 1
        self.items[sid] = SalaryRecord(
            salary_id=sid,
            emp_code=emp_code,
            month=month,
            year=int(year),
            components=components,
            leave_deduction=leave_deduction,
            gross_salary=gross_salary,
            net_salary=net_salary,
            status=SalaryStatus.PENDING,
            created_at=BASE_TIME + timedelta(minutes=sid),
        )
        return sid

    def get(self, *, salary_id):
        return self.items.get(int(salary_id))

    def find_for_period(self, *, emp_code, month, year):
        return next(
            (r for r in self.items.values() if (r.emp_code, r.month, r.year) == (emp_code, month, int(year))),
            None,
        )

    def list_records(self, *, emp_code=None):
        rows = [r for r in self.items.values() if emp_code is None or r.emp_code == emp_code]
        return sorted(rows, key=lambda r: r.salary_id, reverse=True)

    def update_amounts(self, *, salary_id, components, gross_salary, net_salary):
        r = self.items.get(int(salary_id))
        if not r:
            return False
        self.items[r.salary_id] = replace(r, components=components, gross_salary=gross_salary, net_salary=net_salary)
        return True

    def set_payslip(self, *, salary_id, payslip_path, status):
        r = self.items.get(int(salary_id))
        if not r:
            return False
        self.items[r.salary_id] = replace(r, payslip_path=payslip_path, status=status)
        return True

    def delete(self, *, salary_id):
        return self.items.pop(int(salary_id), None) is not None


class RecordingSink:
    def __init__(self):
        self.sent: list[dict] = []

    def notify(self, *, employee_id, type, title, message, related_id=None, related_type=None):
        self.sent.append(
            {
                "employee_id": employee_id,
                "type": type,
                "title": title,
                "message": message,
                "related_id": related_id,
                "related_type": related_type,
            }
        )


class FailingSink:
    def notify(self, **kwargs):
        raise ConnectionError("notification store unavailable")


class FakeDocuments:
    def __init__(self):
        self.rendered = []

    def render_payslip(self, record, employee):
        self.rendered.append((record.salary_id, employee.emp_code))
        return f"payslips/{record.emp_code}_{record.month}_{record.year}.html"


def build_world(*, policy: Optional[LeavePolicy] = None, sink=None, documents=None):
    """Admin(1), HR(2), Manager(3), two reports (4, 5), an outsider (6) under manager 7."""
    employees = InMemoryEmployees(
        [
            make_employee(1, Role.ADMIN, emp_code="ADM001"),
            make_employee(2, Role.HR, emp_code="HR001"),
            make_employee(3, Role.MANAGER, emp_code="MGR001"),
            make_employee(4, Role.EMPLOYEE, manager_id=3, emp_code="EMP004"),
            make_employee(5, Role.EMPLOYEE, manager_id=3, emp_code="EMP005"),
            make_employee(6, Role.EMPLOYEE, manager_id=7, emp_code="EMP006"),
            make_employee(7, Role.MANAGER, emp_code="MGR007"),
        ]
    )
    leaves = InMemoryLeaves(employees)
    salaries = InMemorySalaries()
    sink = sink if sink is not None else RecordingSink()
    container = wire_services(
        employees_repo=employees,
        leave_repo=leaves,
        salary_repo=salaries,
        notification_sink=sink,
        policy=policy,
        documents=documents if documents is not None else FakeDocuments(),
    )
    return container, employees, leaves, salaries, sink
