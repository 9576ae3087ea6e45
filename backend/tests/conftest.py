"""
Pytest fixtures for the reservation store and the HTTP client.

Every test gets a fresh in-memory store so bookings never leak between tests.
"""

import asyncio
from typing import AsyncGenerator, Iterable

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from seat_reservation.main import app
from seat_reservation.models.seat import SeatLayout, SeatState
from seat_reservation.services.interfaces.memory_backend import InMemorySeatBackend
from seat_reservation.services.reservation_store import ReservationStore, get_reservation_store


class YieldingSeatBackend(InMemorySeatBackend):
    """In-memory backend that hands control back to the event loop on every
    read and write, so concurrent bookings really interleave."""

    async def load(self) -> list[SeatState]:
        states = await super().load()
        await asyncio.sleep(0)
        return states

    async def mark_booked(self, indices: Iterable[int]):
        await asyncio.sleep(0)
        await super().mark_booked(indices)


@pytest.fixture
def layout() -> SeatLayout:
    """Reference venue: 11 rows of 7 seats."""
    return SeatLayout(rows=11, seats_per_row=7)


@pytest.fixture
def store(layout: SeatLayout) -> ReservationStore:
    return ReservationStore(layout, backend=InMemorySeatBackend(layout))


@pytest.fixture
def yielding_store(layout: SeatLayout) -> ReservationStore:
    return ReservationStore(layout, backend=YieldingSeatBackend(layout))


@pytest_asyncio.fixture(scope="function")
async def client(store: ReservationStore) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the store dependency with the test store."""
    app.dependency_overrides[get_reservation_store] = lambda: store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
