import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import date

from redis.exceptions import LockError

from .config import LOCK_TIMEOUT_SECONDS
from .errors import LockTimeoutError
from .redis_client import redis_client

logger = logging.getLogger(__name__)


def calendar_key(dj_id: str, day: date) -> str:
    return f"{dj_id}:{day.isoformat()}"


class KeyedLock:
    """
    In-process mutual exclusion per key.

    A lock object lives only while someone holds or waits for it, so the
    registry does not grow with every date ever touched.
    """

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def acquire(self, key: str):
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def held_keys(self) -> list[str]:
        return sorted(self._locks)


class RedisKeyedLock:
    """
    Redis-backed lock per key (shared across service instances).

    timeout bounds how long a crashed holder can block the key;
    blocking_timeout bounds how long a caller waits before giving up.
    """

    def __init__(self, client, timeout: float = LOCK_TIMEOUT_SECONDS, blocking_timeout: float = LOCK_TIMEOUT_SECONDS):
        self._client = client
        self.timeout = timeout
        self.blocking_timeout = blocking_timeout

    def _name(self, key: str) -> str:
        return f"lock:calendar:{key}"

    @asynccontextmanager
    async def acquire(self, key: str):
        lock = self._client.lock(self._name(key), timeout=self.timeout, blocking_timeout=self.blocking_timeout)
        acquired = await lock.acquire()
        if not acquired:
            logger.warning(f"Could not acquire calendar lock {key} within {self.blocking_timeout}s")
            raise LockTimeoutError("This date is being updated right now. Please try again.")
        try:
            yield
        finally:
            try:
                await lock.release()
            except LockError as e:
                # expired while held; the transaction already finished
                logger.warning(f"Calendar lock {key} released after expiry: {e}")


def build_keyed_lock():
    if redis_client is not None:
        return RedisKeyedLock(redis_client)
    return KeyedLock()


calendar_locks = build_keyed_lock()
