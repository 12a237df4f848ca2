"""Session credential issuance and refresh-token storage."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Protocol

import redis

from app.core.config import settings
from app.core.security import create_access_token, create_refresh_token
from app.models.models import Member

logger = logging.getLogger(__name__)


class BaseKeyValueStore(Protocol):
    """Minimal key-value interface used for refresh tokens."""

    def set(self, key: str, value: str, ttl_seconds: int) -> None:  # pragma: no cover - protocol stub
        ...

    def get(self, key: str) -> str | None:  # pragma: no cover - protocol stub
        ...


class RedisStore(BaseKeyValueStore):
    """Redis-backed store; values expire through ``SETEX``."""

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._client.setex(key, ttl_seconds, value)

    def get(self, key: str) -> str | None:
        return self._client.get(key)


class InMemoryStore(BaseKeyValueStore):
    """In-process store used by tests and by dev when Redis is unavailable."""

    def __init__(self) -> None:
        self._data: dict[str, tuple[str, float]] = {}

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        now = time.time()
        self._prune(now)
        self._data[key] = (value, now + ttl_seconds)

    def _prune(self, now: float) -> None:
        expired = [key for key, (_, expires_at) in self._data.items() if now > expires_at]
        for key in expired:
            del self._data[key]

    def __len__(self) -> int:
        return len(self._data)

    def get(self, key: str) -> str | None:
        entry = self._data.get(key)
        if not entry:
            return None
        value, expires_at = entry
        if time.time() > expires_at:
            self._data.pop(key, None)
            return None
        return value

    def ttl(self, key: str) -> float | None:
        entry = self._data.get(key)
        if not entry:
            return None
        return entry[1] - time.time()


_SHARED_STORE: BaseKeyValueStore | None = None


def get_token_store() -> BaseKeyValueStore:
    global _SHARED_STORE
    if _SHARED_STORE is not None:
        return _SHARED_STORE
    try:
        from app.db.redis_client import get_redis_client

        _SHARED_STORE = RedisStore(get_redis_client())
    except (redis.RedisError, RuntimeError) as exc:
        if settings.ENV.lower() == "prod":
            raise
        logger.warning("Falling back to in-memory refresh token store: %s", exc)
        _SHARED_STORE = InMemoryStore()
    return _SHARED_STORE


@dataclass
class TokenBundle:
    access_token: str
    refresh_token: str
    member_id: int


class SessionIssuer:
    """Mints session credentials for a member and persists the refresh credential."""

    def __init__(self, store: BaseKeyValueStore, refresh_ttl_days: int | None = None):
        self._store = store
        self.refresh_ttl = timedelta(days=refresh_ttl_days or settings.REFRESH_TOKEN_TTL_DAYS)

    def issue(self, member: Member) -> TokenBundle:
        return TokenBundle(
            access_token=create_access_token(member.email),
            refresh_token=create_refresh_token(member.email, expires_days=self.refresh_ttl.days),
            member_id=member.id,
        )

    def store_refresh(self, email: str, refresh_token: str) -> None:
        self._store.set(email, refresh_token, int(self.refresh_ttl.total_seconds()))
        logger.info("Stored refresh token for %s (ttl=%ss)", email, int(self.refresh_ttl.total_seconds()))
