from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes and -- comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for line in sql.splitlines(keepends=True):
        if not in_single and not in_double and line.lstrip().startswith("--"):
            continue
        for ch in line:
            if escape:
                buf.append(ch)
                escape = False
                continue

            if ch == "\\":
                buf.append(ch)
                escape = True
                continue

            if ch == "'" and not in_double:
                in_single = not in_single
            elif ch == '"' and not in_single:
                in_double = not in_double
            elif ch == ";" and not in_single and not in_double:
                stmt = "".join(buf).strip()
                buf.clear()
                if stmt:
                    yield stmt
                continue

            buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{conn_factory.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)

    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("schema applied from %s", schema_path)


DEMO_ACCOUNTS = (
    # emp_code, full_name, email, password, role, manager emp_code
    ("ADM001", "Admin Demo", "admin@example.com", "admin123", "admin", None),
    ("HR001", "HR Demo", "hr@example.com", "hr12345", "hr", None),
    ("MGR001", "Manager Demo", "manager@example.com", "manager123", "manager", None),
    ("EMP001", "Employee Demo", "employee@example.com", "employee123", "employee", "MGR001"),
)


def ensure_demo_employees(db_config: dict) -> None:
    """Upsert demo accounts (one per role) so a fresh DB is usable."""
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)

        for emp_code, full_name, email, password, role, manager_code in DEMO_ACCOUNTS:
            manager_id = None
            if manager_code:
                cur.execute("SELECT employee_id FROM employees WHERE emp_code=%s", (manager_code,))
                row = cur.fetchone()
                if not row:
                    raise RuntimeError(f"Missing manager row for emp_code={manager_code}")
                manager_id = int(row["employee_id"])

            password_hash = generate_password_hash(password)
            cur.execute("SELECT employee_id FROM employees WHERE emp_code=%s", (emp_code,))
            if cur.fetchone():
                cur.execute(
                    """
                    UPDATE employees
                    SET full_name=%s, email=%s, password_hash=%s, role=%s, manager_id=%s, is_active=1
                    WHERE emp_code=%s
                    """,
                    (full_name, email, password_hash, role, manager_id, emp_code),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO employees (emp_code, full_name, email, password_hash, role, manager_id)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    """,
                    (emp_code, full_name, email, password_hash, role, manager_id),
                )

        conn.commit()
    finally:
        conn.close()
    logger.info("demo accounts ready (%d)", len(DEMO_ACCOUNTS))


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
