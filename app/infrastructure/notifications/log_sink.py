from __future__ import annotations

import logging

from app.application.ports.notification_sink import NotificationSinkPort
from app.domain.entities.notification import Notification


class LoggingNotificationSink(NotificationSinkPort):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def send(self, notification: Notification) -> None:
        self._logger.info(
            "Mock notification",
            extra={
                "actor_id": notification.user_id,
                "booking_id": notification.related_booking_id,
                "reason": notification.title,
            },
        )
