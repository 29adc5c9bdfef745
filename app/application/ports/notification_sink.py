from abc import ABC, abstractmethod

from app.domain.entities.notification import Notification


class NotificationSinkPort(ABC):
    @abstractmethod
    def send(self, notification: Notification) -> None:
        raise NotImplementedError
