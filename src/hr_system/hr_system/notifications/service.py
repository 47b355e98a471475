from __future__ import annotations

import logging
from typing import Optional

from ..core.enums import NotificationType
from .repository import NotificationSink

logger = logging.getLogger(__name__)


class Notifier:
    """Fire-and-forget wrapper: a failed delivery is logged, never raised.

    State changes are already committed when this runs, so losing a
    notification must not turn a successful request into an error.
    """

    def __init__(self, sink: NotificationSink):
        self._sink = sink

    def send(
        self,
        employee_id: int,
        type: NotificationType,
        title: str,
        message: str,
        *,
        related_id: Optional[int] = None,
        related_type: Optional[str] = None,
    ) -> None:
        try:
            self._sink.notify(
                employee_id=int(employee_id),
                type=type,
                title=title,
                message=message,
                related_id=related_id,
                related_type=related_type,
            )
        except Exception:
            logger.exception("notification %s to employee %s dropped", type.value, employee_id)
