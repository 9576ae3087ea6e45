"""
Pydantic schemas for seat listing and booking request/response validation.
Seat numbers in these schemas are 1-based; the store works with 0-based indices.
"""

from pydantic import BaseModel, StrictInt

from seat_reservation.models.seat import Seat, SeatState


class SeatResponse(BaseModel):
    index: int
    status: SeatState

    @classmethod
    def from_seat(cls, seat: Seat) -> "SeatResponse":
        return cls(index=seat.index + 1, status=seat.state)


class BookingRequest(BaseModel):
    # Positivity is checked by the allocator so every bad count gets the same error body
    count: StrictInt


class BookingResponse(BaseModel):
    assigned: list[int]

    @classmethod
    def from_indices(cls, indices: list[int]) -> "BookingResponse":
        return cls(assigned=[index + 1 for index in indices])


class ResetResponse(BaseModel):
    ok: bool = True


class ErrorResponse(BaseModel):
    error: str
    detail: str
