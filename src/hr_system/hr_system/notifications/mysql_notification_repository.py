from __future__ import annotations

from typing import Optional

from ..core.enums import NotificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .repository import NotificationSink


class MySQLNotificationRepository(NotificationSink):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def notify(
        self,
        *,
        employee_id: int,
        type: NotificationType,
        title: str,
        message: str,
        related_id: Optional[int] = None,
        related_type: Optional[str] = None,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(employee_id, type, title, message, related_id, related_type)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(employee_id), type.value, title, message, related_id, related_type),
            )
