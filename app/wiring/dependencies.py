from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache
import logging

from app.core.config import settings
from app.application.ports.availability_store import AvailabilityStorePort
from app.application.ports.booking_store import BookingStorePort
from app.application.ports.doctor_directory import DoctorDirectoryPort
from app.application.ports.notification_sink import NotificationSinkPort
from app.application.use_cases.calendar_projector import CalendarProjector
from app.application.use_cases.dispatch_notification import NotificationDispatcher
from app.application.use_cases.scheduling_engine import SchedulingEngine, SchedulingPolicy
from app.domain.entities.time_range import TimeRange
from app.infrastructure.directory.doctor_directory import load_doctor_directory
from app.infrastructure.notifications.log_sink import LoggingNotificationSink
from app.infrastructure.notifications.webhook_sink import WebhookNotificationSink
from app.infrastructure.store.json_store import JsonAvailabilityStore, JsonBookingStore
from app.infrastructure.store.memory_store import MemoryAvailabilityStore, MemoryBookingStore


def _store_provider() -> str:
    if settings.STORE_PROVIDER:
        return settings.STORE_PROVIDER.lower()
    return "json" if settings.ENV.lower() in {"dev", "local"} else "memory"


@lru_cache
def get_availability_store() -> AvailabilityStorePort:
    if _store_provider() == "json":
        return JsonAvailabilityStore(data_dir=settings.DATA_DIR)
    return MemoryAvailabilityStore()


@lru_cache
def get_booking_store() -> BookingStorePort:
    if _store_provider() == "json":
        return JsonBookingStore(data_dir=settings.DATA_DIR)
    return MemoryBookingStore()


@lru_cache
def get_doctor_directory() -> DoctorDirectoryPort:
    return load_doctor_directory(settings.DOCTORS_FILE)


def get_notification_sink() -> NotificationSinkPort:
    logger = logging.getLogger(__name__)
    if not settings.NOTIFICATION_WEBHOOK_URL:
        if settings.ENV.lower() not in {"dev", "local"}:
            logger.warning("NOTIFICATION_WEBHOOK_URL missing, notifications will only be logged")
        return LoggingNotificationSink()
    logger.info("Using webhook notification sink")
    return WebhookNotificationSink(
        endpoint=settings.NOTIFICATION_WEBHOOK_URL,
        timeout=settings.NOTIFICATION_TIMEOUT_SECONDS,
    )


@lru_cache
def get_notification_dispatcher() -> NotificationDispatcher:
    executor = ThreadPoolExecutor(
        max_workers=settings.NOTIFICATION_WORKERS,
        thread_name_prefix="notifications",
    )
    return NotificationDispatcher(sink=get_notification_sink(), executor=executor)


def get_business_hours() -> TimeRange:
    return TimeRange.from_times(settings.BUSINESS_OPEN_TIME, settings.BUSINESS_CLOSE_TIME)


@lru_cache
def get_scheduling_engine() -> SchedulingEngine:
    return SchedulingEngine(
        availability=get_availability_store(),
        bookings=get_booking_store(),
        doctors=get_doctor_directory(),
        notifier=get_notification_dispatcher(),
        policy=SchedulingPolicy(
            business_hours=get_business_hours(),
            max_days_ahead=settings.MAX_DAYS_AHEAD,
            allowed_durations=frozenset(settings.ALLOWED_DURATIONS),
        ),
    )


@lru_cache
def get_calendar_projector() -> CalendarProjector:
    return CalendarProjector(
        availability=get_availability_store(),
        bookings=get_booking_store(),
        business_hours=get_business_hours(),
        slot_minutes=settings.SLOT_MINUTES,
    )


def shutdown_notifications() -> None:
    # only a dispatcher that was actually built owns a worker pool
    if get_notification_dispatcher.cache_info().currsize:
        get_notification_dispatcher().shutdown(wait=True)
