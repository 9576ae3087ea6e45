"""
Reservation store: the single owner of seat state.

CONCURRENCY STRATEGY: Decide-and-Commit Under One Lock
======================================================

Problem:
  Two clients each read the seat map, each plan seats 1-3, each submit.
  Both see the seats as available when they planned. Result: double booking.

Solution:
  The plan is computed inside the same critical section that writes it.

  1. Acquire the store lock (bounded wait, else TransientUnavailable)
  2. Enter the backend's exclusive section (a Redis lock for shared storage)
  3. Load a snapshot, run the allocator, write the chosen seats
  4. Release

  The allocator never sees a snapshot that can go stale before the commit,
  so no returned seat can already be booked. Failures raise before the
  write, leaving the map untouched.

  Reads skip the lock. Backends make each load/write atomic, so a reader
  sees the map either before or after a booking, never halfway.

  No retries happen here. A rejected request is returned once; the client
  decides whether to ask again with a fresh request.
"""

import asyncio
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from seat_reservation.core.config import get_settings
from seat_reservation.core.exceptions import (
    InsufficientCapacityError,
    InvalidRequestError,
    TransientUnavailableError,
)
from seat_reservation.core.logging import get_logger
from seat_reservation.core.metrics import (
    booking_latency,
    lock_wait,
    record_booking_attempt,
    record_seats_available,
    seat_resets,
    seats_assigned,
)
from seat_reservation.models.seat import Seat, SeatLayout, SeatState
from seat_reservation.services.allocator import plan_allocation, validate_count
from seat_reservation.services.backend_factory import get_seat_backend
from seat_reservation.services.interfaces.seat_backend import SeatBackend
from seat_reservation.services.interfaces.memory_backend import InMemorySeatBackend

logger = get_logger(__name__)

DEFAULT_LOCK_TIMEOUT = 2.0


class ReservationStore:
    def __init__(
        self,
        layout: SeatLayout,
        backend: Optional[SeatBackend] = None,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
    ):
        self.layout = layout
        self.backend = backend if backend is not None else InMemorySeatBackend(layout)
        self.lock_timeout = lock_timeout
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def _critical_section(self, operation: str) -> AsyncIterator[None]:
        start = time.perf_counter()
        try:
            # Cancellation inside Lock.acquire never leaves the lock held
            async with asyncio.timeout(self.lock_timeout):
                await self._lock.acquire()
        except TimeoutError:
            logger.warning(
                "lock_acquire_timeout",
                operation=operation,
                timeout=self.lock_timeout,
            )
            raise TransientUnavailableError("Reservation store is busy, please retry")
        lock_wait.observe(time.perf_counter() - start)

        try:
            async with self.backend.exclusive():
                yield
        finally:
            self._lock.release()

    async def list_seats(self) -> list[Seat]:
        """Snapshot of every seat, ordered by index."""
        states = await self.backend.load()
        return self.layout.seats(states)

    async def availability(self) -> dict:
        states = await self.backend.load()
        available = sum(1 for state in states if state is SeatState.AVAILABLE)
        return {
            "total": self.layout.total,
            "available": available,
            "booked": self.layout.total - available,
        }

    async def book(self, count: int) -> list[int]:
        """
        Reserve `count` seats and return their 0-based indices.

        Raises InvalidRequestError, InsufficientCapacityError or
        TransientUnavailableError. On any error no seat changes state.
        """
        try:
            validate_count(count)
        except InvalidRequestError:
            record_booking_attempt("invalid_request")
            logger.warning("booking_rejected", reason="invalid_request", requested=count)
            raise

        start = time.perf_counter()
        try:
            async with self._critical_section("book"):
                states = await self.backend.load()
                plan = plan_allocation(states, self.layout, count)
                await self.backend.mark_booked(plan)
                available = sum(1 for state in states if state is SeatState.AVAILABLE) - len(plan)
        except InsufficientCapacityError as e:
            record_booking_attempt("insufficient_capacity")
            logger.warning(
                "booking_rejected",
                reason="insufficient_capacity",
                requested=e.requested,
                available=e.available,
            )
            raise
        except TransientUnavailableError:
            record_booking_attempt("unavailable")
            raise
        finally:
            booking_latency.observe(time.perf_counter() - start)

        record_booking_attempt("success")
        seats_assigned.inc(len(plan))
        record_seats_available(available)
        logger.info(
            "seats_booked",
            requested=count,
            seats=[index + 1 for index in plan],
            available=available,
        )
        return plan

    async def reset(self) -> None:
        """Release every booking. Idempotent."""
        async with self._critical_section("reset"):
            await self.backend.clear()

        seat_resets.inc()
        record_seats_available(self.layout.total)
        logger.info("seats_reset", total=self.layout.total)

    async def ping(self) -> bool:
        return await self.backend.ping()

    async def close(self) -> None:
        await self.backend.close()


def create_store(settings=None) -> ReservationStore:
    """Build a store from settings: layout, backend and lock timeout."""
    settings = settings or get_settings()
    layout = SeatLayout(rows=settings.SEAT_ROWS, seats_per_row=settings.SEATS_PER_ROW)
    return ReservationStore(
        layout,
        backend=get_seat_backend(layout, settings),
        lock_timeout=settings.LOCK_TIMEOUT_SECONDS,
    )


# Singleton instance
_store: Optional[ReservationStore] = None


def get_reservation_store() -> ReservationStore:
    """Get reservation store singleton. Used as a FastAPI dependency."""
    global _store
    if _store is None:
        _store = create_store()
    return _store


async def close_reservation_store() -> None:
    global _store
    if _store is not None:
        await _store.close()
        _store = None
