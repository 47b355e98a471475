from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import NotificationType


class NotificationSink(Protocol):
    """Append-only notification log owned by the notification collaborator."""

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
        raise NotImplementedError
