"""Key-value persistence for the session snapshot.

The snapshot is three entries: the serialized user, an ``"true"``
authenticated flag and the bearer token. Backends:

- ``JsonFileStore``: a local JSON file (default).
- ``RedisStore``: Redis, shared between app processes. Redis being
  unavailable is handled gracefully: reads return nothing, writes are dropped.
- ``InMemoryStore``: process memory only.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import redis.asyncio as aioredis
from pydantic import ValidationError as SchemaError

from memo_app.config import Settings
from memo_app.metrics import SESSION_TEARDOWNS
from memo_app.models import User

logger = logging.getLogger(__name__)

USER_KEY = "user"
AUTH_FLAG_KEY = "isAuthenticated"
TOKEN_KEY = "token"
SNAPSHOT_KEYS = (USER_KEY, AUTH_FLAG_KEY, TOKEN_KEY)

REDIS_PREFIX = "memo_session:"


class KeyValueStore(ABC):
    """Async string key-value store."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value or None."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store a value."""

    @abstractmethod
    async def delete(self, *keys: str) -> None:
        """Remove keys; missing keys are ignored."""


class InMemoryStore(KeyValueStore):
    """Dict-backed store, lost on restart."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, *keys: str) -> None:
        for key in keys:
            self._data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """Persists entries as a flat JSON object in a local file."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._data: dict[str, str] = {}
        self._load()

    def _load(self) -> None:
        """Load entries from disk. A corrupt file is treated as empty."""
        if not self._path.exists():
            return
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            if not isinstance(raw, dict):
                raise ValueError(f"expected an object, got {type(raw).__name__}")
            self._data = {str(k): str(v) for k, v in raw.items()}
        except (OSError, ValueError) as exc:
            logger.error(
                "Failed to load snapshot %s: %s, starting fresh", self._path, exc
            )
            self._data = {}

    def _persist(self) -> None:
        """Write current state to disk; a failed write is logged and skipped."""
        try:
            self._path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Failed to write snapshot %s: %s", self._path, e)

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._persist()

    async def delete(self, *keys: str) -> None:
        changed = False
        for key in keys:
            if self._data.pop(key, None) is not None:
                changed = True
        if changed or self._path.exists():
            self._persist()


class RedisStore(KeyValueStore):
    """Redis-backed store. Non-fatal when Redis is unavailable."""

    def __init__(self, redis_url: str, prefix: str = REDIS_PREFIX) -> None:
        self._redis_url = redis_url
        self._prefix = prefix
        self._client: Optional[aioredis.Redis] = None

    @property
    def available(self) -> bool:
        """Whether the Redis connection is active."""
        return self._client is not None

    async def connect(self) -> None:
        """Connect to Redis. Non-fatal if Redis is unavailable."""
        try:
            self._client = aioredis.from_url(self._redis_url, decode_responses=True)
            await self._client.ping()
            logger.info("Redis snapshot store connected: %s", self._redis_url)
        except Exception as e:
            logger.warning("Redis unavailable, session will not persist: %s", e)
            self._client = None

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get(self, key: str) -> Optional[str]:
        if not self._client:
            return None
        try:
            return await self._client.get(self._prefix + key)
        except Exception as e:
            logger.warning("Redis get failed: %s", e)
            return None

    async def set(self, key: str, value: str) -> None:
        if not self._client:
            return
        try:
            await self._client.set(self._prefix + key, value)
        except Exception as e:
            logger.warning("Redis set failed: %s", e)

    async def delete(self, *keys: str) -> None:
        if not self._client or not keys:
            return
        try:
            await self._client.delete(*(self._prefix + k for k in keys))
        except Exception as e:
            logger.warning("Redis delete failed: %s", e)


async def create_store(settings: Settings) -> KeyValueStore:
    """Build the snapshot backend selected in settings."""
    if settings.snapshot_backend == "redis":
        store = RedisStore(settings.redis_url)
        await store.connect()
        return store
    if settings.snapshot_backend == "memory":
        return InMemoryStore()
    return JsonFileStore(settings.snapshot_path)


class SessionSnapshot:
    """The persisted identity: user record, authenticated flag and token."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    async def save(self, user: User, token: str) -> None:
        await self._store.set(USER_KEY, user.model_dump_json(by_alias=True))
        await self._store.set(AUTH_FLAG_KEY, "true")
        await self._store.set(TOKEN_KEY, token)

    async def load(self) -> Optional[tuple[User, str]]:
        """Return (user, token), or None after clearing an invalid snapshot.

        All three entries must be present and the user must parse; anything
        else removes every snapshot key.
        """
        raw_user = await self._store.get(USER_KEY)
        flag = await self._store.get(AUTH_FLAG_KEY)
        token = await self._store.get(TOKEN_KEY)

        if raw_user is None and flag is None and token is None:
            return None

        if raw_user is None or flag != "true" or not token:
            logger.warning("Incomplete session snapshot, discarding")
            await self._discard()
            return None

        try:
            user = User.model_validate_json(raw_user)
        except SchemaError as exc:
            logger.error("Corrupt session snapshot, discarding: %s", exc)
            await self._discard()
            return None

        return user, token

    async def token(self) -> Optional[str]:
        return await self._store.get(TOKEN_KEY)

    async def user(self) -> Optional[User]:
        """The persisted user, or None when absent or unparseable."""
        raw_user = await self._store.get(USER_KEY)
        if raw_user is None:
            return None
        try:
            return User.model_validate_json(raw_user)
        except SchemaError:
            return None

    async def clear(self) -> None:
        await self._store.delete(*SNAPSHOT_KEYS)

    async def _discard(self) -> None:
        SESSION_TEARDOWNS.labels(reason="corrupt_snapshot").inc()
        await self.clear()
