"""
Seat backend interface.
Lets the reservation store keep seat states in memory or in Redis
without changing the booking logic.
"""

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable

from seat_reservation.models.seat import SeatLayout, SeatState


class SeatBackend(ABC):
    """
    Interface for seat state storage.

    Implementations:
    - InMemorySeatBackend: process-local seat map
    - RedisSeatBackend: booked seats kept in a Redis set, shared by workers

    Each of load, mark_booked and clear must be atomic on its own: a load
    sees either all or none of a concurrent write. Serializing the
    read-decide-write sequence is the caller's job.
    """

    def __init__(self, layout: SeatLayout):
        self.layout = layout

    @abstractmethod
    async def load(self) -> list[SeatState]:
        """
        Read every seat state, ordered by seat index.

        Returns:
            List of length layout.total
        """
        pass

    @abstractmethod
    async def mark_booked(self, indices: Iterable[int]):
        """
        Mark seats as booked in one atomic write.

        Args:
            indices: 0-based seat indices, all currently available
        """
        pass

    @abstractmethod
    async def clear(self):
        """Set every seat back to available."""
        pass

    @asynccontextmanager
    async def exclusive(self) -> AsyncIterator[None]:
        """
        Cross-process guard around a critical section.
        Process-local backends need nothing beyond the store's own lock.
        """
        yield

    async def ping(self) -> bool:
        return True

    async def close(self):
        pass
