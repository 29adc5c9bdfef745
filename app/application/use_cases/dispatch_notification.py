from __future__ import annotations

import logging
from concurrent.futures import Executor, Future

from app.application.ports.notification_sink import NotificationSinkPort
from app.domain.entities.notification import Notification


class NotificationDispatcher:
    """Fire-and-forget delivery: failures are logged, never raised to the caller."""

    def __init__(self, sink: NotificationSinkPort, executor: Executor | None = None) -> None:
        self._sink = sink
        self._executor = executor
        self._logger = logging.getLogger(__name__)

    def dispatch(self, notification: Notification) -> None:
        if self._executor is None:
            self._deliver(notification)
            return
        try:
            future = self._executor.submit(self._deliver, notification)
        except RuntimeError as e:
            # executor already shut down
            self._logger.error(
                "Notification not scheduled",
                extra={"booking_id": notification.related_booking_id, "error": str(e)},
            )
            return
        future.add_done_callback(self._log_unexpected)

    def _deliver(self, notification: Notification) -> None:
        try:
            self._sink.send(notification)
        except Exception as e:
            self._logger.warning(
                "Notification delivery failed",
                extra={
                    "actor_id": notification.user_id,
                    "booking_id": notification.related_booking_id,
                    "error": str(e),
                },
            )

    def _log_unexpected(self, future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            self._logger.error("Notification worker crashed", extra={"error": str(error)})

    def shutdown(self, wait: bool = True) -> None:
        """Stop the worker pool, by default after queued notifications are delivered."""
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
