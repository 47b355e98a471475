from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone
from .model import Employee, LeaveBalance
from .repository import EmployeeRepository

_EMPLOYEE_COLUMNS = """
    employee_id, emp_code, full_name, email, role, manager_id,
    leave_casual, leave_sick, leave_paid, is_active
"""


def row_to_balance(row: dict) -> LeaveBalance:
    return LeaveBalance(
        casual=as_float(row.get("leave_casual")),
        sick=as_float(row.get("leave_sick")),
        paid=as_float(row.get("leave_paid")),
    )


def _row_to_employee(row: dict) -> Employee:
    return Employee(
        employee_id=int(row["employee_id"]),
        emp_code=row["emp_code"],
        full_name=row["full_name"],
        email=row["email"],
        role=Role(row["role"]),
        manager_id=int(row["manager_id"]) if row.get("manager_id") is not None else None,
        leave_balance=row_to_balance(row),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def get_by_code(self, emp_code: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE emp_code=%s", (emp_code,))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def find_team_member_ids(self, manager_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT employee_id FROM employees WHERE manager_id=%s", (int(manager_id),))
            return [int(r["employee_id"]) for r in fetchall(cur)]

    def get_leave_balance(self, employee_id: int) -> Optional[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT leave_casual, leave_sick, leave_paid FROM employees WHERE employee_id=%s",
                (int(employee_id),),
            )
            row = fetchone(cur)
            return row_to_balance(row) if row else None

    def set_leave_balance(self, employee_id: int, balance: LeaveBalance) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET leave_casual=%s, leave_sick=%s, leave_paid=%s
                WHERE employee_id=%s
                """,
                (balance.casual, balance.sick, balance.paid, int(employee_id)),
            )
            return cur.rowcount > 0
