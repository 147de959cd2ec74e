"""
In-memory session and revocation stores.

Each store owns a plain dict guarded by its own asyncio.Lock. Reads that
find an expired record delete it inside the same critical section, so a
concurrent put() can never be lost to a stale delete.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from .errors import SessionExpired, SessionNotFound
from .models import RevokedSession, Session
from .ttl import Clock, utcnow

logger = logging.getLogger(__name__)


class _ExpiringStore:
    """Token-keyed map of records that carry an ``expires_at`` instant."""

    def __init__(self, clock: Optional[Clock] = None):
        self._records: Dict[str, Any] = {}
        self._lock = asyncio.Lock()
        self._clock = clock or utcnow

    def __len__(self) -> int:
        return len(self._records)

    async def put(self, record) -> None:
        async with self._lock:
            self._records[record.token] = record

    async def _get(self, token: str):
        async with self._lock:
            record = self._records.get(token)
            if record is None:
                raise SessionNotFound(token)

            if record.is_expired(self._clock()):
                del self._records[token]
                return None

            return record

    async def sweep(self, now: Optional[datetime] = None) -> int:
        """
        Remove every record whose expiry instant is at or before ``now``.

        Args:
            now: Reference instant (defaults to the store clock)

        Returns:
            Number of records removed
        """
        now = now or self._clock()
        async with self._lock:
            expired = [token for token, record in self._records.items() if record.expires_at <= now]
            for token in expired:
                del self._records[token]
        return len(expired)

    async def _stats(self, now: Optional[datetime], prefix: str) -> Dict[str, int]:
        now = now or self._clock()
        async with self._lock:
            total = len(self._records)
            expired = sum(1 for record in self._records.values() if record.is_expired(now))

        return {
            f"total_{prefix}": total,
            f"active_{prefix}": total - expired,
            f"expired_{prefix}": expired,
        }


class SessionStore(_ExpiringStore):
    """Active sessions keyed by token."""

    async def get(self, token: str) -> Session:
        session = await self._get(token)
        if session is None:
            logger.debug("Session expired on read")
            raise SessionExpired(token)
        return session

    async def delete(self, token: str) -> None:
        async with self._lock:
            self._records.pop(token, None)

    async def stats(self, now: Optional[datetime] = None) -> Dict[str, int]:
        return await self._stats(now, "sessions")


class RevokedSessionStore(_ExpiringStore):
    """Revocation records keyed by token. Records only leave by expiry."""

    async def get(self, token: str) -> RevokedSession:
        revoked_session = await self._get(token)
        if revoked_session is None:
            raise SessionNotFound(token)
        return revoked_session

    async def stats(self, now: Optional[datetime] = None) -> Dict[str, int]:
        return await self._stats(now, "revoked_sessions")
