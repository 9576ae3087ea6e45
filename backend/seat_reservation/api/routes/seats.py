"""
Seat endpoints: list, book and reset.
Seat planning happens server-side inside the store; clients only send a count.
"""

from fastapi import APIRouter, Depends, status

from seat_reservation.schemas.seat import (
    BookingRequest,
    BookingResponse,
    ErrorResponse,
    ResetResponse,
    SeatResponse,
)
from seat_reservation.services.reservation_store import ReservationStore, get_reservation_store
from seat_reservation.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(tags=["Seats"])


@router.get("/seats", response_model=list[SeatResponse])
async def list_seats(store: ReservationStore = Depends(get_reservation_store)):
    """Every seat in the venue with its 1-based number and status."""
    seats = await store.list_seats()
    return [SeatResponse.from_seat(seat) for seat in seats]


@router.post(
    "/book",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def book_seats(
    booking_data: BookingRequest,
    store: ReservationStore = Depends(get_reservation_store),
):
    """
    Book `count` seats.

    The whole party goes into the lowest row with room for it; otherwise
    seats are filled row by row from the front. Either every requested seat
    is assigned or none is.
    """
    indices = await store.book(booking_data.count)
    return BookingResponse.from_indices(indices)


@router.post(
    "/reset",
    response_model=ResetResponse,
    responses={503: {"model": ErrorResponse}},
)
async def reset_seats(store: ReservationStore = Depends(get_reservation_store)):
    """Release every booking."""
    await store.reset()
    return ResetResponse(ok=True)
