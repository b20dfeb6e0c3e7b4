"""
Domain errors raised by the order service and record store.

Each carries the HTTP status code the API layer reports it with, so the
routing layer can translate any ``OrderError`` into a
``{"success": false, "message": ...}`` response without a lookup table.
"""


class OrderError(Exception):
    """Base class for all purchase order errors."""
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(OrderError):
    """Client supplied missing or invalid fields. Never retried."""
    status_code = 400


class NotFoundError(OrderError):
    """No order exists with the requested id."""
    status_code = 404

    def __init__(self, order_id: str, message: str = "Order not found") -> None:
        super().__init__(message)
        self.order_id = order_id


class StorageError(OrderError):
    """The backing file could not be written. Reads never raise this."""
    status_code = 500
