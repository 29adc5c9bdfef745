from __future__ import annotations

import logging

import httpx

from app.application.exceptions import NotificationDeliveryError
from app.application.ports.notification_sink import NotificationSinkPort
from app.domain.entities.notification import Notification


class WebhookNotificationSink(NotificationSinkPort):
    """Posts notifications as JSON to an external notification service."""

    def __init__(self, endpoint: str, timeout: float = 5.0, client: httpx.Client | None = None) -> None:
        self._endpoint = endpoint
        self._client = client or httpx.Client(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def send(self, notification: Notification) -> None:
        payload = {
            "userId": notification.user_id,
            "type": notification.type,
            "title": notification.title,
            "message": notification.message,
            "relatedBookingId": notification.related_booking_id,
        }
        try:
            resp = self._client.post(self._endpoint, json=payload)
        except httpx.HTTPError as e:
            raise NotificationDeliveryError(f"Notification endpoint unreachable: {e}") from e

        if resp.status_code >= 400:
            self._logger.error(
                "Notification send failed",
                extra={
                    "status": resp.status_code,
                    "actor_id": notification.user_id,
                    "booking_id": notification.related_booking_id,
                    "error": resp.text[:200],
                },
            )
            raise NotificationDeliveryError(f"Notification endpoint returned {resp.status_code}")
