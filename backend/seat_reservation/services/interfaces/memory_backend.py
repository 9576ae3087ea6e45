"""
In-memory seat backend - the default.
Seat states live in a SeatMap owned by this process.
"""

from typing import Iterable

from seat_reservation.models.seat import SeatLayout, SeatMap, SeatState
from seat_reservation.services.interfaces.seat_backend import SeatBackend


class InMemorySeatBackend(SeatBackend):
    """
    Process-local storage.

    Use when:
    - Single API worker
    - Tests and local development
    - Losing bookings on restart is acceptable

    None of the methods await, so every call runs to completion before
    another coroutine can observe the map.
    """

    def __init__(self, layout: SeatLayout):
        super().__init__(layout)
        self.seat_map = SeatMap(layout)

    async def load(self) -> list[SeatState]:
        return list(self.seat_map.snapshot())

    async def mark_booked(self, indices: Iterable[int]):
        self.seat_map.mark_booked(indices)

    async def clear(self):
        self.seat_map.clear()
