"""
Seat backend factory.
Configures which storage backend the reservation store uses.
"""

from seat_reservation.core.config import Settings, get_settings
from seat_reservation.models.seat import SeatLayout
from seat_reservation.services.interfaces.seat_backend import SeatBackend
from seat_reservation.services.interfaces.memory_backend import InMemorySeatBackend
from seat_reservation.services.redis_backend import RedisSeatBackend


def get_seat_backend(layout: SeatLayout, settings: Settings = None) -> SeatBackend:
    """
    Build the configured seat backend.

    Selection via STORE_BACKEND:
    - memory: InMemorySeatBackend (single worker, default)
    - redis: RedisSeatBackend (shared across workers)
    """
    settings = settings or get_settings()
    backend = settings.STORE_BACKEND.lower()

    if backend == "redis":
        return RedisSeatBackend(
            layout,
            key_prefix=settings.REDIS_KEY_PREFIX,
            lock_ttl=settings.REDIS_LOCK_TTL_SECONDS,
            lock_wait=settings.LOCK_TIMEOUT_SECONDS,
        )
    if backend == "memory":
        return InMemorySeatBackend(layout)

    raise ValueError(f"Unknown STORE_BACKEND {settings.STORE_BACKEND!r}, expected 'memory' or 'redis'")
