from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

import mysql.connector

from ..core.constants import MONTH_NAMES
from ..core.enums import SalaryStatus
from ..core.exceptions import DuplicateRecordError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone, is_duplicate_key
from .model import SalaryComponents, SalaryRecord
from .repository import SalaryRepository

_SELECT = """
    SELECT salary_id, emp_code, month, year, basic, hra, da, allowances,
           pf, tax, other_deductions, leave_deduction, gross_salary, net_salary,
           status, payslip_path, created_at
    FROM salary_records
"""

# Calendar order for "newest period first" (month is stored by name).
_MONTH_ORDER = "FIELD(month, {})".format(",".join(f"'{m}'" for m in MONTH_NAMES))


def _row_to_record(r: dict) -> SalaryRecord:
    return SalaryRecord(
        salary_id=int(r["salary_id"]),
        emp_code=r["emp_code"],
        month=r["month"],
        year=int(r["year"]),
        components=SalaryComponents(
            basic=as_decimal(r["basic"]),
            hra=as_decimal(r["hra"]),
            da=as_decimal(r["da"]),
            allowances=as_decimal(r["allowances"]),
            pf=as_decimal(r["pf"]),
            tax=as_decimal(r["tax"]),
            other_deductions=as_decimal(r["other_deductions"]),
        ),
        leave_deduction=as_decimal(r["leave_deduction"]),
        gross_salary=as_decimal(r["gross_salary"]),
        net_salary=as_decimal(r["net_salary"]),
        status=SalaryStatus(r["status"]),
        created_at=r["created_at"],
        payslip_path=r.get("payslip_path"),
    )


class MySQLSalaryRepository(SalaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        emp_code: str,
        month: str,
        year: int,
        components: SalaryComponents,
        leave_deduction: Decimal,
        gross_salary: Decimal,
        net_salary: Decimal,
    ) -> int:
        c = components
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO salary_records(
                        emp_code, month, year, basic, hra, da, allowances,
                        pf, tax, other_deductions, leave_deduction, gross_salary, net_salary, status
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        emp_code,
                        month,
                        int(year),
                        c.basic,
                        c.hra,
                        c.da,
                        c.allowances,
                        c.pf,
                        c.tax,
                        c.other_deductions,
                        leave_deduction,
                        gross_salary,
                        net_salary,
                        SalaryStatus.PENDING.value,
                    ),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateRecordError(f"Bảng lương {month}/{year} của {emp_code} đã tồn tại") from e
            raise

    def get(self, *, salary_id: int) -> Optional[SalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE salary_id=%s", (int(salary_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def find_for_period(self, *, emp_code: str, month: str, year: int) -> Optional[SalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE emp_code=%s AND month=%s AND year=%s",
                (emp_code, month, int(year)),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def list_records(self, *, emp_code: Optional[str] = None) -> Sequence[SalaryRecord]:
        where, params = ("WHERE emp_code=%s", (emp_code,)) if emp_code is not None else ("", ())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} {where} ORDER BY year DESC, {_MONTH_ORDER} DESC, salary_id DESC", params)
            return [_row_to_record(r) for r in fetchall(cur)]

    def update_amounts(
        self,
        *,
        salary_id: int,
        components: SalaryComponents,
        gross_salary: Decimal,
        net_salary: Decimal,
    ) -> bool:
        c = components
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE salary_records
                SET basic=%s, hra=%s, da=%s, allowances=%s, pf=%s, tax=%s, other_deductions=%s,
                    gross_salary=%s, net_salary=%s
                WHERE salary_id=%s
                """,
                (
                    c.basic,
                    c.hra,
                    c.da,
                    c.allowances,
                    c.pf,
                    c.tax,
                    c.other_deductions,
                    gross_salary,
                    net_salary,
                    int(salary_id),
                ),
            )
            return cur.rowcount > 0

    def set_payslip(self, *, salary_id: int, payslip_path: str, status: SalaryStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE salary_records SET payslip_path=%s, status=%s WHERE salary_id=%s",
                (payslip_path, status.value, int(salary_id)),
            )
            return cur.rowcount > 0

    def delete(self, *, salary_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM salary_records WHERE salary_id=%s", (int(salary_id),))
            return cur.rowcount > 0
