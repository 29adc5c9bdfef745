class SchedulingError(Exception):
    """Base class for every error the scheduling core reports to its callers."""

    default_message = "Scheduling request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return type(self).__name__


# Validation errors: malformed input, never retried.


class ValidationError(SchedulingError):
    pass


class InvalidTimeFormatError(ValidationError):
    default_message = "Time must be in HH:MM 24-hour format"


class InvalidDateFormatError(ValidationError):
    default_message = "Date must be in YYYY-MM-DD format"


class InvalidRangeError(ValidationError):
    default_message = "Start must be before end"


class InvalidDurationError(ValidationError):
    default_message = "Duration must be 60 or 120 minutes"


# Business-rule conflicts: depend on current state, surfaced verbatim.


class BusinessRuleError(SchedulingError):
    pass


class PastDateError(BusinessRuleError):
    default_message = "Cannot schedule on a past date"


class DateTooFarError(BusinessRuleError):
    default_message = "Date is too far in the future"


class OutOfBusinessHoursError(BusinessRuleError):
    default_message = "Availability must be between 08:00 and 20:00"


class OverlapError(BusinessRuleError):
    default_message = "Availability conflicts with existing availability"


class DoctorUnavailableError(BusinessRuleError):
    default_message = "Selected doctor is not available for booking"


class DuplicateBookingError(BusinessRuleError):
    default_message = "You already have a booking with this doctor on this date"


class NoAvailabilityError(BusinessRuleError):
    default_message = "No availability found for this doctor on the selected date"


class OutsideAvailabilityError(BusinessRuleError):
    default_message = "Booking time does not fit within doctor availability"


class SlotConflictError(BusinessRuleError):
    default_message = "Time slot already booked"


# Authorization and state errors.


class AuthorizationError(SchedulingError):
    pass


class ForbiddenError(AuthorizationError):
    default_message = "You are not authorized to perform this action"


class StateError(SchedulingError):
    pass


class NotFoundError(StateError):
    default_message = "Resource not found"


class InvalidStateTransitionError(StateError):
    default_message = "Booking status does not allow this transition"
