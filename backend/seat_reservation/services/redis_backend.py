"""
Redis seat backend for multi-worker deployments.
Implements SeatBackend interface using Redis.

Storage layout:
  {prefix}:booked  SET of booked seat indices (0-based)
  {prefix}:lock    Redis lock serializing book/reset across workers

  Every seat not in the set is available, so a reset is a single DEL.
  A booking runs BOOK_SEATS_SCRIPT: it checks every seat with SISMEMBER
  and only then SADDs them, all in one atomic script. If the lock TTL
  ran out and another worker took one of the seats first, nothing is
  written and the booking fails as TransientUnavailable. Each command
  is atomic on the Redis side, which is what lets readers skip the lock.

Failure handling:
  Unlike a cache, this backend is authoritative. A Redis outage is not
  papered over: it surfaces as TransientUnavailableError so the caller
  can retry later.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, Optional

import redis.asyncio as redis
from redis.exceptions import LockError, RedisError

from seat_reservation.core.exceptions import TransientUnavailableError
from seat_reservation.core.logging import get_logger
from seat_reservation.infrastructure.redis_client import get_redis, close_redis
from seat_reservation.models.seat import SeatLayout, SeatState
from seat_reservation.services.interfaces.seat_backend import SeatBackend

logger = get_logger(__name__)

# KEYS[1] = booked set, ARGV = seat indices. Returns 1 when written, 0 on conflict.
BOOK_SEATS_SCRIPT = """
for _, seat in ipairs(ARGV) do
    if redis.call("SISMEMBER", KEYS[1], seat) == 1 then
        return 0
    end
end
redis.call("SADD", KEYS[1], unpack(ARGV))
return 1
"""


class RedisSeatBackend(SeatBackend):
    """
    Redis-based seat storage.

    Use when:
    - Several API workers serve the same venue
    - Bookings must survive an API restart
    """

    def __init__(
        self,
        layout: SeatLayout,
        client: Optional[redis.Redis] = None,
        key_prefix: str = "seats",
        lock_ttl: float = 5,
        lock_wait: float = 2.0,
    ):
        super().__init__(layout)
        self._owns_client = client is None
        self.redis = client if client is not None else get_redis()
        self.booked_key = f"{key_prefix}:booked"
        self.lock_key = f"{key_prefix}:lock"
        self.lock_ttl = lock_ttl
        self.lock_wait = lock_wait
        self.book_script = self.redis.register_script(BOOK_SEATS_SCRIPT)

    async def load(self) -> list[SeatState]:
        try:
            members = await self.redis.smembers(self.booked_key)
        except RedisError as e:
            logger.error("redis_load_failed", key=self.booked_key, error=str(e))
            raise TransientUnavailableError("Seat store is unreachable") from e

        booked = {int(member) for member in members}
        return [
            SeatState.BOOKED if index in booked else SeatState.AVAILABLE
            for index in range(self.layout.total)
        ]

    async def mark_booked(self, indices: Iterable[int]):
        indices = list(indices)
        if not indices:
            return
        try:
            written = await self.book_script(keys=[self.booked_key], args=indices)
        except RedisError as e:
            logger.error("redis_write_failed", key=self.booked_key, error=str(e))
            raise TransientUnavailableError("Seat store is unreachable") from e

        if not written:
            logger.warning("redis_seat_conflict", key=self.booked_key, seats=indices)
            raise TransientUnavailableError("Seats were taken concurrently, please retry")

    async def clear(self):
        try:
            await self.redis.delete(self.booked_key)
        except RedisError as e:
            logger.error("redis_clear_failed", key=self.booked_key, error=str(e))
            raise TransientUnavailableError("Seat store is unreachable") from e

    @asynccontextmanager
    async def exclusive(self) -> AsyncIterator[None]:
        lock = self.redis.lock(
            self.lock_key,
            timeout=self.lock_ttl,
            blocking_timeout=self.lock_wait,
        )
        try:
            acquired = await lock.acquire()
        except RedisError as e:
            logger.error("redis_lock_failed", key=self.lock_key, error=str(e))
            raise TransientUnavailableError("Seat store is unreachable") from e

        if not acquired:
            logger.warning("redis_lock_timeout", key=self.lock_key, wait=self.lock_wait)
            raise TransientUnavailableError("Seat store is busy, please retry")

        try:
            yield
        finally:
            try:
                await lock.release()
            except LockError as e:
                # Writes are still guarded by BOOK_SEATS_SCRIPT
                logger.warning("redis_lock_expired", key=self.lock_key, error=str(e))

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except RedisError as e:
            logger.error("redis_ping_failed", error=str(e))
            return False

    async def close(self):
        if self._owns_client:
            await close_redis()
