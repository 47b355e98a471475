from __future__ import annotations

from datetime import date, datetime
from typing import Dict, Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone, in_clause
from ..employees.model import LeaveBalance
from ..employees.mysql_employee_repository import row_to_balance
from .ledger import deduct
from .model import LeaveRequest
from .repository import LeaveRepository
from .state import PENDING_STAGES, LeaveStage


_SELECT = """
    SELECT r.request_id, r.employee_id, r.leave_type, r.start_date, r.end_date,
           r.total_days, r.reason, r.stage, r.manager_approver_id, r.hr_approver_id,
           r.approved_at, r.rejection_reason, r.applied_at,
           r.balance_casual, r.balance_sick, r.balance_paid,
           e.emp_code, e.full_name
    FROM leave_requests r
    JOIN employees e ON e.employee_id = r.employee_id
"""

_PENDING = tuple(s.value for s in PENDING_STAGES)


def _row_to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        total_days=as_float(r["total_days"]),
        reason=r["reason"],
        stage=LeaveStage(r["stage"]),
        applied_at=r["applied_at"],
        balance_snapshot=LeaveBalance(
            casual=as_float(r["balance_casual"]),
            sick=as_float(r["balance_sick"]),
            paid=as_float(r["balance_paid"]),
        ),
        manager_approver_id=r.get("manager_approver_id"),
        hr_approver_id=r.get("hr_approver_id"),
        approved_at=r.get("approved_at"),
        rejection_reason=r.get("rejection_reason"),
        emp_code=r.get("emp_code"),
        full_name=r.get("full_name"),
    )


def _where(employee_ids, status, leave_type) -> tuple[str, list]:
    clauses = ["1=1"]
    params: list[object] = []

    if employee_ids is not None:
        if not employee_ids:
            clauses.append("1=0")
        else:
            clauses.append(f"r.employee_id IN ({in_clause(employee_ids)})")
            params.extend(int(i) for i in employee_ids)
    if status is not None:
        stages = [s.value for s in LeaveStage.for_status(status)]
        clauses.append(f"r.stage IN ({in_clause(stages)})")
        params.extend(stages)
    if leave_type is not None:
        clauses.append("r.leave_type=%s")
        params.append(leave_type.value)

    return " AND ".join(clauses), params


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    employee_id, leave_type, start_date, end_date, total_days, reason, stage,
                    balance_casual, balance_sick, balance_paid
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    leave_type.value,
                    start_date,
                    end_date,
                    float(total_days),
                    reason,
                    LeaveStage.AWAITING_MANAGER.value,
                    balance_snapshot.casual,
                    balance_snapshot.sick,
                    balance_snapshot.paid,
                ),
            )
            return int(cur.lastrowid)

    def get(self, *, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE r.request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _row_to_request(r) if r else None

    def list_requests(
        self,
        *,
        employee_ids: Optional[Sequence[int]] = None,
        status: Optional[LeaveStatus] = None,
        leave_type: Optional[LeaveType] = None,
        limit: int = 100,
    ) -> Sequence[LeaveRequest]:
        where, params = _where(employee_ids, status, leave_type)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE {where} ORDER BY r.applied_at DESC, r.request_id DESC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [_row_to_request(r) for r in fetchall(cur)]

    def count_requests(
        self,
        *,
        employee_ids: Optional[Sequence[int]] = None,
        status: Optional[LeaveStatus] = None,
    ) -> int:
        where, params = _where(employee_ids, status, None)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM leave_requests r WHERE {where}", tuple(params))
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def sum_approved_days(self, *, employee_id: int) -> Dict[LeaveType, float]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT leave_type, SUM(total_days) AS total
                FROM leave_requests
                WHERE employee_id=%s AND stage=%s
                GROUP BY leave_type
                """,
                (int(employee_id), LeaveStage.APPROVED.value),
            )
            return {LeaveType(r["leave_type"]): as_float(r["total"]) for r in fetchall(cur)}

    def list_approved_overlapping(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start: date,
        end: date,
    ) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                WHERE r.employee_id=%s AND r.leave_type=%s AND r.stage=%s
                  AND r.start_date <= %s AND r.end_date >= %s
                ORDER BY r.start_date
                """,
                (int(employee_id), leave_type.value, LeaveStage.APPROVED.value, end, start),
            )
            return [_row_to_request(r) for r in fetchall(cur)]

    def record_manager_approval(self, *, request_id: int, manager_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET stage=%s, manager_approver_id=%s
                WHERE request_id=%s AND stage=%s
                """,
                (
                    LeaveStage.AWAITING_HR.value,
                    int(manager_id),
                    int(request_id),
                    LeaveStage.AWAITING_MANAGER.value,
                ),
            )
            return cur.rowcount > 0

    def finalize_approval(
        self,
        *,
        request_id: int,
        approver_id: int,
        approved_at: datetime,
    ) -> Optional[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            # Row lock serializes concurrent approvals of the same request.
            cur.execute(
                f"""
                SELECT employee_id, leave_type, total_days
                FROM leave_requests
                WHERE request_id=%s AND stage IN ({in_clause(_PENDING)})
                FOR UPDATE
                """,
                (int(request_id), *_PENDING),
            )
            req = fetchone(cur)
            if not req:
                return None

            cur.execute(
                """
                UPDATE leave_requests
                SET stage=%s,
                    hr_approver_id=%s,
                    manager_approver_id=COALESCE(manager_approver_id, %s),
                    approved_at=%s
                WHERE request_id=%s
                """,
                (
                    LeaveStage.APPROVED.value,
                    int(approver_id),
                    int(approver_id),
                    approved_at,
                    int(request_id),
                ),
            )

            cur.execute(
                """
                SELECT leave_casual, leave_sick, leave_paid
                FROM employees
                WHERE employee_id=%s
                FOR UPDATE
                """,
                (int(req["employee_id"]),),
            )
            before = row_to_balance(fetchone(cur) or {})
            after = deduct(before, LeaveType(req["leave_type"]), as_float(req["total_days"]))
            if after != before:
                cur.execute(
                    """
                    UPDATE employees
                    SET leave_casual=%s, leave_sick=%s, leave_paid=%s
                    WHERE employee_id=%s
                    """,
                    (after.casual, after.sick, after.paid, int(req["employee_id"])),
                )
            return after

    def close(
        self,
        *,
        request_id: int,
        stage: LeaveStage,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE leave_requests
                SET stage=%s, rejection_reason=%s
                WHERE request_id=%s AND stage IN ({in_clause(_PENDING)})
                """,
                (stage.value, rejection_reason, int(request_id), *_PENDING),
            )
            return cur.rowcount > 0
