"""
Storage Module - Black Box Interface

Purpose: Share sessions and revocations across service instances
Interface: StorageModule.connect(), RedisSessionStore, RedisRevokedSessionStore
Hidden: Redis key layout, serialization, TTL handling

Drop-in replacement for the in-memory stores in rauth.modules.session.
"""

import json
import logging
import math
import os
from datetime import datetime
from typing import Any, Dict, Optional

import redis.asyncio as redis

from ..session.errors import SessionExpired, SessionNotFound
from ..session.models import RevokedSession, Session
from ..session.ttl import Clock, utcnow

logger = logging.getLogger(__name__)


class StorageModule:
    """Black box storage abstraction."""

    def __init__(self, connection_url: str = None):
        """Initialize storage with connection URL."""
        self.url = connection_url or os.getenv("REDIS_URL", "redis://localhost:6379/0")
        self._client = None

    async def connect(self) -> redis.Redis:
        """Get storage connection."""
        if not self._client:
            self._client = redis.from_url(self.url, decode_responses=True)
        return self._client

    async def disconnect(self):
        """Close storage connection."""
        if self._client:
            await self._client.aclose()
            self._client = None


class _RedisRecordStore:
    """JSON records under ``{prefix}:{token}``, expired by Redis itself."""

    record_type: Any = None
    key_prefix = ""

    def __init__(self, redis_client, clock: Optional[Clock] = None):
        """
        Args:
            redis_client: Async Redis client (decode_responses=True)
            clock: Time source used to compute key TTLs
        """
        self.redis = redis_client
        self._clock = clock or utcnow

    def _key(self, token: str) -> str:
        return f"{self.key_prefix}:{token}"

    async def put(self, record) -> None:
        ttl = math.ceil((record.expires_at - self._clock()).total_seconds())
        if ttl <= 0:
            await self.redis.delete(self._key(record.token))
            return
        await self.redis.setex(self._key(record.token), ttl, json.dumps(record.to_dict()))

    async def _get(self, token: str):
        key = self._key(token)
        data = await self.redis.get(key)
        if not data:
            raise SessionNotFound(token)

        record = self.record_type.from_dict(json.loads(data))
        if record.is_expired(self._clock()):
            # Key TTL is rounded up to whole seconds
            await self.redis.delete(key)
            return None
        return record

    async def sweep(self, now: Optional[datetime] = None) -> int:
        """Redis evicts expired keys on its own; nothing to sweep."""
        return 0

    async def _stats(self, prefix: str) -> Dict[str, Any]:
        total = 0
        async for _ in self.redis.scan_iter(match=f"{self.key_prefix}:*"):
            total += 1
        return {f"total_{prefix}": total, f"active_{prefix}": total, f"expired_{prefix}": 0}


class RedisSessionStore(_RedisRecordStore):
    """Session repository on Redis."""

    record_type = Session
    key_prefix = "rauth:session"

    async def get(self, token: str) -> Session:
        session = await self._get(token)
        if session is None:
            raise SessionExpired(token)
        return session

    async def delete(self, token: str) -> None:
        await self.redis.delete(self._key(token))

    async def stats(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        return await self._stats("sessions")


class RedisRevokedSessionStore(_RedisRecordStore):
    """Revocation repository on Redis, shared by every instance behind the webhook."""

    record_type = RevokedSession
    key_prefix = "rauth:revoked"

    async def get(self, token: str) -> RevokedSession:
        revoked_session = await self._get(token)
        if revoked_session is None:
            raise SessionNotFound(token)
        return revoked_session

    async def stats(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        return await self._stats("revoked_sessions")


__all__ = ["StorageModule", "RedisSessionStore", "RedisRevokedSessionStore"]
