"""Seat-slot locks held around the booking check-and-write sequence.

Two lockers share one interface:

- ``RedisSeatLocker`` takes one Redis lock per requested seat of the showing,
  so API processes on different hosts serialize on the same seats.
- ``LocalSeatLocker`` takes one asyncio lock per showing, for a single
  process.

Either way the storage layer still rejects a double booking on insert; the
lock only keeps competing requests from racing to that point.
"""

import asyncio
import logging
import uuid
from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import AsyncGenerator

import redis.asyncio as redis

from cinema.config import Settings, get_settings
from cinema.errors import InternalError
from cinema.redis_client import get_redis

logger = logging.getLogger(__name__)


class DistributedLockError(Exception):
    """Exception raised when lock acquisition fails."""

    pass


class LockUnavailable(InternalError):
    """Seat locks could not be acquired in time."""

    status_code = 503


class DistributedLock:
    """
    Redis-based lock on a single key.

    Uses SET NX EX for atomic acquisition with expiration and a Lua script to
    release only a lock we still own.
    """

    RELEASE_SCRIPT = """
    if redis.call("get", KEYS[1]) == ARGV[1] then
        return redis.call("del", KEYS[1])
    else
        return 0
    end
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        key: str,
        timeout_seconds: int,
        retry_delay_ms: int,
        max_retries: int,
    ):
        self.redis = redis_client
        self.key = f"lock:{key}"
        self.timeout_seconds = timeout_seconds
        self.retry_delay_ms = retry_delay_ms
        self.max_retries = max_retries
        self.token: str | None = None
        self._release_script = self.redis.register_script(self.RELEASE_SCRIPT)

    async def acquire(self, blocking: bool = True) -> bool:
        """
        Acquire the lock.

        Args:
            blocking: If True, retry until acquired or max retries reached.

        Returns:
            True if lock was acquired, False otherwise.
        """
        token = str(uuid.uuid4())
        retries = 0

        while True:
            acquired = await self.redis.set(
                self.key,
                token,
                nx=True,
                ex=self.timeout_seconds,
            )
            if acquired:
                self.token = token
                return True

            if not blocking or retries >= self.max_retries:
                return False

            retries += 1
            await asyncio.sleep(self.retry_delay_ms / 1000)

    async def release(self) -> bool:
        """Release the lock; False if we no longer owned it."""
        if self.token is None:
            return False

        result = await self._release_script(keys=[self.key], args=[self.token])
        self.token = None
        return bool(result)


class MultiLock:
    """
    Acquire several Redis locks as a group.

    Keys are taken in sorted order so that two requests for overlapping
    seats cannot deadlock.
    """

    def __init__(self, redis_client: redis.Redis, keys: list[str], settings: Settings):
        self.redis = redis_client
        self.settings = settings
        self.sorted_keys = sorted(set(keys))
        self.locks: list[DistributedLock] = []

    async def acquire(self, blocking: bool = True) -> bool:
        """Acquire all locks in sorted order; release everything on failure."""
        for key in self.sorted_keys:
            lock = DistributedLock(
                self.redis,
                key,
                timeout_seconds=self.settings.LOCK_TIMEOUT_SECONDS,
                retry_delay_ms=self.settings.LOCK_RETRY_DELAY_MS,
                max_retries=self.settings.LOCK_MAX_RETRIES,
            )
            if await lock.acquire(blocking=blocking):
                self.locks.append(lock)
            else:
                await self.release()
                return False
        return True

    async def release(self) -> None:
        """Release all locks in reverse order."""
        for lock in reversed(self.locks):
            await lock.release()
        self.locks.clear()


@asynccontextmanager
async def multi_lock(
    redis_client: redis.Redis,
    keys: list[str],
    settings: Settings | None = None,
    blocking: bool = True,
) -> AsyncGenerator[MultiLock, None]:
    """
    Context manager for holding several Redis locks.

    Raises:
        DistributedLockError: If the locks cannot be acquired
    """
    mlock = MultiLock(redis_client, keys, settings or get_settings())
    if not await mlock.acquire(blocking=blocking):
        raise DistributedLockError(f"Failed to acquire locks for keys: {keys}")

    try:
        yield mlock
    finally:
        await mlock.release()


def showing_key(movie_title: str, show_date: str, show_time: str) -> str:
    """Key naming one showing."""
    return f"showing:{movie_title}:{show_date}:{show_time}"


class SeatLocker(ABC):
    """Serializes booking writers that target the same seats of a showing."""

    @abstractmethod
    def hold(
        self, movie_title: str, show_date: str, show_time: str, seats: list[str]
    ) -> AbstractAsyncContextManager[None]:
        """Hold the given seats of a showing for the duration of the block."""


class LocalSeatLocker(SeatLocker):
    """One asyncio lock per showing, for single-process deployments."""

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        # Holders plus waiters per showing; a lock is dropped when this hits zero
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(
        self, movie_title: str, show_date: str, show_time: str, seats: list[str]
    ) -> AsyncGenerator[None, None]:
        key = showing_key(movie_title, show_date, show_time)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]


class RedisSeatLocker(SeatLocker):
    """One Redis lock per seat of the showing."""

    def __init__(self, redis_client: redis.Redis, settings: Settings | None = None):
        self.redis = redis_client
        self.settings = settings or get_settings()

    @asynccontextmanager
    async def hold(
        self, movie_title: str, show_date: str, show_time: str, seats: list[str]
    ) -> AsyncGenerator[None, None]:
        prefix = showing_key(movie_title, show_date, show_time)
        lock_keys = [f"{prefix}:seat:{seat}" for seat in seats]

        try:
            async with multi_lock(self.redis, lock_keys, self.settings):
                yield
        except DistributedLockError:
            logger.warning("Seat locks busy for %s: %s", prefix, seats)
            raise LockUnavailable(
                "Unable to acquire locks for seats. Please try again."
            )


async def build_seat_locker(settings: Settings) -> SeatLocker:
    """Create the seat locker named by SEAT_LOCK_BACKEND."""
    backend = settings.SEAT_LOCK_BACKEND.lower()
    if backend == "local":
        return LocalSeatLocker()
    if backend == "redis":
        return RedisSeatLocker(await get_redis(), settings)
    raise ValueError(f"Unknown SEAT_LOCK_BACKEND: {settings.SEAT_LOCK_BACKEND!r}")
