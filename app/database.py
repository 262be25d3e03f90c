"""
Storage backends for pastes: Redis, with an in-memory fallback for development.
Each backend writes new records with an atomic create-if-absent step and runs
the consuming read as one atomic check-and-increment.
"""
import enum
import logging
import threading
from dataclasses import replace
from typing import Dict, Optional, Tuple

from redis import Redis
from redis.exceptions import RedisError

from app.config import Settings
from app.exceptions import StorageError
from app.paste import Paste, is_available, from_epoch_ms

logger = logging.getLogger(__name__)


class ConsumeStatus(enum.IntEnum):
    """Outcome of an atomic check-and-increment. Values match the Lua script."""

    MISSING = 0
    UNAVAILABLE = 1
    CONSUMED = 2


ConsumeResult = Tuple[ConsumeStatus, Optional[Paste]]

# KEYS[1] = paste key; ARGV = flattened field/value pairs
CREATE_PASTE_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 1 then
    return 0
end
redis.call('HSET', KEYS[1], unpack(ARGV))
return 1
"""

# KEYS[1] = paste key; ARGV[1] = now in epoch milliseconds
CONSUME_PASTE_SCRIPT = """
local fields = redis.call('HMGET', KEYS[1],
    'content', 'created_at', 'expires_at', 'max_views', 'view_count')
if not fields[1] then
    return {0}
end
local now_ms = tonumber(ARGV[1])
local expires_at = fields[3]
local max_views = fields[4]
local view_count = tonumber(fields[5]) or 0
if expires_at and now_ms >= tonumber(expires_at) then
    return {1}
end
if max_views and view_count >= tonumber(max_views) then
    return {1}
end
view_count = redis.call('HINCRBY', KEYS[1], 'view_count', 1)
return {2, fields[1], fields[2], expires_at or '', max_views or '', view_count}
"""


class RedisBackend:
    """Paste records as Redis hashes, mutated only through Lua scripts."""

    name = "redis"

    def __init__(self, client: Redis, key_prefix: str = "paste:"):
        self.redis = client
        self.key_prefix = key_prefix
        self._create_script = client.register_script(CREATE_PASTE_SCRIPT)
        self._consume_script = client.register_script(CONSUME_PASTE_SCRIPT)

    def _key(self, paste_id: str) -> str:
        return f"{self.key_prefix}{paste_id}"

    def ping(self) -> bool:
        try:
            return bool(self.redis.ping())
        except RedisError as e:
            raise StorageError("Redis ping failed") from e

    def insert(self, paste: Paste) -> bool:
        """
        Write a new paste unless its key is already taken.

        Returns:
            True if written, False on id collision
        """
        args = []
        for field, value in paste.to_record().items():
            args.extend((field, value))
        try:
            created = self._create_script(keys=[self._key(paste.id)], args=args)
        except RedisError as e:
            logger.error(f"Error saving paste {paste.id}: {type(e).__name__}")
            raise StorageError("Failed to save paste") from e
        return bool(created)

    def load(self, paste_id: str) -> Optional[Paste]:
        """
        Read a paste without consuming a view.

        For inspection only (tests, debugging); serving always goes through consume().
        """
        try:
            record = self.redis.hgetall(self._key(paste_id))
        except RedisError as e:
            logger.error(f"Error loading paste {paste_id}: {type(e).__name__}")
            raise StorageError("Failed to load paste") from e
        if not record:
            return None
        return Paste.from_record(paste_id, record)

    def consume(self, paste_id: str, now_ms: int) -> ConsumeResult:
        try:
            reply = self._consume_script(keys=[self._key(paste_id)], args=[now_ms])
        except RedisError as e:
            logger.error(f"Error consuming paste {paste_id}: {type(e).__name__}")
            raise StorageError("Failed to read paste") from e

        status = ConsumeStatus(int(reply[0]))
        if status is not ConsumeStatus.CONSUMED:
            return status, None

        _, content, created_at, expires_at, max_views, view_count = reply
        paste = Paste.from_record(
            paste_id,
            {
                "content": content,
                "created_at": created_at,
                "expires_at": expires_at,
                "max_views": max_views,
                "view_count": view_count,
            },
        )
        return status, paste


class InMemoryBackend:
    """In-process store for development/testing (when Redis unavailable)."""

    name = "memory"

    def __init__(self):
        self.store: Dict[str, Dict[str, str]] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def ping(self) -> bool:
        return True

    def insert(self, paste: Paste) -> bool:
        with self._registry_lock:
            if paste.id in self.store:
                return False
            # Record first: a registered lock always has a record behind it
            self.store[paste.id] = paste.to_record()
            self._locks[paste.id] = threading.Lock()
        return True

    def load(self, paste_id: str) -> Optional[Paste]:
        """Read a paste without consuming a view. For inspection only."""
        record = self.store.get(paste_id)
        if record is None:
            return None
        return Paste.from_record(paste_id, dict(record))

    def consume(self, paste_id: str, now_ms: int) -> ConsumeResult:
        lock = self._locks.get(paste_id)
        if lock is None:
            return ConsumeStatus.MISSING, None

        # Serializes check-and-increment for this handle only
        with lock:
            record = self.store.get(paste_id)
            if record is None:
                return ConsumeStatus.MISSING, None
            paste = Paste.from_record(paste_id, record)
            if not is_available(paste, from_epoch_ms(now_ms)):
                return ConsumeStatus.UNAVAILABLE, None
            paste = replace(paste, view_count=paste.view_count + 1)
            record["view_count"] = str(paste.view_count)
        return ConsumeStatus.CONSUMED, paste


def connect_backend(settings: Settings):
    """
    Build the storage backend: Redis if reachable, otherwise in-memory.

    Args:
        settings: Application settings (REDIS_URL, USE_IN_MEMORY, PASTE_KEY_PREFIX)

    Returns:
        A RedisBackend or InMemoryBackend
    """
    if settings.USE_IN_MEMORY:
        logger.info("USE_IN_MEMORY set, using in-memory paste storage")
        return InMemoryBackend()

    try:
        logger.info(f"Attempting to connect to Redis: {settings.REDIS_URL[:30]}...")
        client = Redis.from_url(settings.REDIS_URL, decode_responses=True)
        client.ping()
        logger.info("Redis connected successfully")
        return RedisBackend(client, key_prefix=settings.PASTE_KEY_PREFIX)
    except (RedisError, ValueError) as e:
        # ValueError: malformed REDIS_URL
        logger.error(f"Error connecting to Redis: {type(e).__name__}: {str(e)}")
        logger.warning("Using in-memory fallback for development. Data will NOT persist across restarts.")
        return InMemoryBackend()
