"""
Booking error taxonomy.

Every failure the reservation core can report has its own class so callers
can tell them apart. The HTTP layer maps `kind` and `status_code` onto the
error response body.
"""


class BookingError(Exception):
    kind = "BookingError"
    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidRequestError(BookingError):
    """Requested seat count is not a positive integer."""

    kind = "InvalidRequest"
    status_code = 400


class InsufficientCapacityError(BookingError):
    """Not enough available seats anywhere in the map."""

    kind = "InsufficientCapacity"
    status_code = 409

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Not enough seats. Requested: {requested}, Available: {available}"
        )


class TransientUnavailableError(BookingError):
    """Store could not be reached or locked in time. Safe to retry."""

    kind = "TransientUnavailable"
    status_code = 503
