from dataclasses import dataclass


@dataclass(frozen=True)
class Notification:
    user_id: str
    type: str
    title: str
    message: str
    related_booking_id: str | None = None
