class NotificationDeliveryError(RuntimeError):
    """Raised when a notification sink fails to deliver (network errors, non-2xx responses)."""
    pass
