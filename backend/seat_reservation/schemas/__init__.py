from seat_reservation.schemas.seat import (
    SeatResponse, BookingRequest, BookingResponse, ResetResponse, ErrorResponse,
)

__all__ = [
    "SeatResponse", "BookingRequest", "BookingResponse", "ResetResponse", "ErrorResponse",
]
