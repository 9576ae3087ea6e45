"""
Tests for the reservation store, including concurrency scenarios.
"""

import asyncio

import pytest

from seat_reservation.core.config import Settings
from seat_reservation.core.exceptions import (
    InsufficientCapacityError,
    InvalidRequestError,
    TransientUnavailableError,
)
from seat_reservation.models.seat import SeatLayout, SeatState
from seat_reservation.services.backend_factory import get_seat_backend
from seat_reservation.services.interfaces.memory_backend import InMemorySeatBackend
from seat_reservation.services.reservation_store import ReservationStore, create_store


@pytest.mark.asyncio
async def test_initial_map_all_available(store):
    seats = await store.list_seats()
    assert len(seats) == 77
    assert all(seat.state is SeatState.AVAILABLE for seat in seats)
    assert [seat.index for seat in seats] == list(range(77))


@pytest.mark.asyncio
async def test_book_marks_seats(store):
    assigned = await store.book(3)
    assert assigned == [0, 1, 2]

    seats = await store.list_seats()
    assert [seat.index for seat in seats if not seat.is_available] == [0, 1, 2]


@pytest.mark.asyncio
async def test_reference_sequence(store):
    """Book 3, book 7, then an oversized request fails and changes nothing."""
    assert await store.book(3) == [0, 1, 2]
    assert await store.book(7) == [7, 8, 9, 10, 11, 12, 13]

    before = await store.list_seats()
    with pytest.raises(InsufficientCapacityError):
        await store.book(100)
    assert await store.list_seats() == before


@pytest.mark.asyncio
async def test_row_preference(store):
    """Rows 0 and 1 have 2 seats left; row 2 is the lowest that fits 4."""
    store.backend.seat_map.mark_booked([0, 1, 2, 3, 4, 7, 8, 9, 10, 11])
    assert await store.book(4) == [14, 15, 16, 17]


@pytest.mark.asyncio
async def test_spill_when_no_row_fits(store):
    """Every row keeps 2 free seats, so 5 seats spill over three rows."""
    booked = [i for row in range(11) for i in list(store.layout.row_range(row))[:5]]
    store.backend.seat_map.mark_booked(booked)

    assert await store.book(5) == [5, 6, 12, 13, 19]


@pytest.mark.asyncio
@pytest.mark.parametrize("count", [0, -3, 1.5, "2", True])
async def test_invalid_request_leaves_map_unchanged(store, count):
    await store.book(2)
    before = await store.list_seats()

    with pytest.raises(InvalidRequestError):
        await store.book(count)
    assert await store.list_seats() == before


@pytest.mark.asyncio
async def test_insufficient_capacity_leaves_map_unchanged(store):
    await store.book(70)
    before = await store.list_seats()

    with pytest.raises(InsufficientCapacityError) as excinfo:
        await store.book(8)
    assert excinfo.value.available == 7
    assert await store.list_seats() == before


@pytest.mark.asyncio
async def test_last_seats_can_be_booked(store):
    await store.book(70)
    assigned = await store.book(7)
    assert len(assigned) == 7
    assert (await store.availability())["available"] == 0


@pytest.mark.asyncio
async def test_reset_is_idempotent(store):
    await store.book(10)
    await store.book(20)

    await store.reset()
    once = await store.list_seats()
    await store.reset()
    twice = await store.list_seats()

    assert once == twice
    assert all(seat.is_available for seat in twice)


@pytest.mark.asyncio
async def test_booking_after_reset_starts_from_front(store):
    await store.book(10)
    await store.reset()
    assert await store.book(2) == [0, 1]


@pytest.mark.asyncio
async def test_availability_counts(store):
    await store.book(5)
    assert await store.availability() == {"total": 77, "available": 72, "booked": 5}


@pytest.mark.asyncio
async def test_concurrent_bookings_never_overlap(yielding_store):
    """40 parties of 3 race for 77 seats: 25 get seats, no seat twice."""
    results = await asyncio.gather(
        *(yielding_store.book(3) for _ in range(40)),
        return_exceptions=True,
    )

    successes = [r for r in results if isinstance(r, list)]
    failures = [r for r in results if isinstance(r, Exception)]

    assert len(successes) == 25
    assert all(isinstance(f, InsufficientCapacityError) for f in failures)

    assigned = [index for plan in successes for index in plan]
    assert len(assigned) == len(set(assigned)) == 75
    assert (await yielding_store.availability())["available"] == 2


@pytest.mark.asyncio
async def test_concurrent_mixed_sizes_never_overlap(yielding_store):
    sizes = [1, 2, 3, 4, 5, 6, 7] * 4
    results = await asyncio.gather(
        *(yielding_store.book(n) for n in sizes),
        return_exceptions=True,
    )

    assigned = [index for r in results if isinstance(r, list) for index in r]
    assert len(assigned) == len(set(assigned))

    seats = await yielding_store.list_seats()
    booked = {seat.index for seat in seats if not seat.is_available}
    assert booked == set(assigned)


@pytest.mark.asyncio
async def test_reads_during_bookings_are_consistent(yielding_store):
    """A snapshot taken while bookings run always holds whole plans."""

    async def reader():
        snapshots = []
        for _ in range(20):
            seats = await yielding_store.list_seats()
            snapshots.append(sum(1 for seat in seats if not seat.is_available))
            await asyncio.sleep(0)
        return snapshots

    results = await asyncio.gather(
        reader(),
        *(yielding_store.book(4) for _ in range(10)),
    )
    # Every booking takes 4 seats, so any consistent read is a multiple of 4
    assert all(booked % 4 == 0 for booked in results[0])


@pytest.mark.asyncio
async def test_lock_timeout_is_transient(layout):
    store = ReservationStore(layout, backend=InMemorySeatBackend(layout), lock_timeout=0.05)
    await store._lock.acquire()
    try:
        with pytest.raises(TransientUnavailableError):
            await store.book(1)
        with pytest.raises(TransientUnavailableError):
            await store.reset()
    finally:
        store._lock.release()

    assert await store.book(1) == [0]


@pytest.mark.asyncio
async def test_timed_out_waiters_never_leak_the_lock(layout):
    store = ReservationStore(layout, backend=InMemorySeatBackend(layout), lock_timeout=0.05)
    await store._lock.acquire()
    # Hand the lock over right as the waiters give up
    asyncio.get_running_loop().call_later(0.05, store._lock.release)

    results = await asyncio.gather(*(store.book(1) for _ in range(8)), return_exceptions=True)

    booked = [r for r in results if isinstance(r, list)]
    assert all(isinstance(r, (list, TransientUnavailableError)) for r in results)
    assert not store._lock.locked()
    assert (await store.availability())["booked"] == len(booked)
    assert len(await store.book(1)) == 1


def test_create_store_from_settings():
    settings = Settings(SEAT_ROWS=4, SEATS_PER_ROW=5, LOCK_TIMEOUT_SECONDS=0.5)
    store = create_store(settings)
    assert store.layout == SeatLayout(rows=4, seats_per_row=5)
    assert isinstance(store.backend, InMemorySeatBackend)
    assert store.lock_timeout == 0.5


def test_unknown_backend_rejected(layout):
    with pytest.raises(ValueError):
        get_seat_backend(layout, Settings(STORE_BACKEND="postgres"))
