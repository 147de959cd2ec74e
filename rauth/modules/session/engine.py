"""
Session cache engine.

Composes the session store, the revocation store and the remote verifier.
The engine owns no record data; it only decides which store to consult and
in which order.

Per-token states:
    Unknown      no record in either store
    Cached-Valid live session record, no live revocation
    Revoked      live revocation record (always wins over Cached-Valid)
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from ..remote.interfaces import RemoteVerifier
from .errors import IdentityMismatch, SessionNotFound, SessionRevoked, ValidationError
from .interfaces import RevokedSessionRepository, SessionRepository
from .models import RevokedSession, Session
from .ttl import Clock, utcnow

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL = 900
DEFAULT_REVOKED_TTL = 3600


class SessionCacheEngine:
    """Cache-first session verification with webhook-driven revocation."""

    def __init__(
        self,
        session_store: SessionRepository,
        revoked_store: RevokedSessionRepository,
        verifier: RemoteVerifier,
        session_ttl: int = DEFAULT_SESSION_TTL,
        revoked_ttl: int = DEFAULT_REVOKED_TTL,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize the engine.

        Args:
            session_store: Store for verified sessions
            revoked_store: Store for revocation records
            verifier: Remote verifier consulted on cache misses
            session_ttl: Lifetime of a cached session in seconds
            revoked_ttl: Lifetime of a revocation record in seconds
            clock: Time source (defaults to UTC wall clock)
        """
        self.session_store = session_store
        self.revoked_store = revoked_store
        self.verifier = verifier
        self.session_ttl = session_ttl
        self.revoked_ttl = revoked_ttl
        self._clock = clock or utcnow

    async def verify_session(self, session_token: str, user_phone: str) -> bool:
        """
        Decide whether a session is valid for a phone number.

        Args:
            session_token: Session token presented by the client
            user_phone: Phone number the session must be bound to

        Returns:
            True if valid, False if the remote API says it is not verified

        Raises:
            ValidationError: Empty token or phone
            SessionRevoked: A live revocation exists for the token
            IdentityMismatch: The cached session belongs to another phone
            RemoteError: The remote API could not be consulted on a cache miss

        Logic:
        1. Revocation store first
        2. Session store; a hit compares phones and never falls through
        3. Remote verifier on miss; only positive answers are cached
        4. Re-check revocation right before answering True
        """
        if not session_token:
            raise ValidationError("session_token", "session token is required")
        if not user_phone:
            raise ValidationError("user_phone", "user phone is required")

        await self._ensure_not_revoked(session_token)

        try:
            session = await self.session_store.get(session_token)
        except SessionNotFound:
            session = None

        if session is not None:
            if session.user_phone != user_phone:
                raise IdentityMismatch(session_token)
            await self._ensure_not_revoked(session_token)
            return True

        logger.debug("Session cache miss, consulting Rauth API")
        verified = await self.verifier.verify_session(session_token, user_phone)
        if not verified:
            return False

        # A revocation may have landed while the remote call was in flight
        await self._ensure_not_revoked(session_token)

        await self.session_store.put(
            Session.issue(session_token, user_phone, self._clock(), self.session_ttl)
        )

        # revoke_session writes its record before deleting the session, so a
        # revocation that raced the put above is visible here
        if await self.is_session_revoked(session_token):
            await self.session_store.delete(session_token)
            raise SessionRevoked(session_token)
        return True

    async def is_session_revoked(self, session_token: str) -> bool:
        """
        Check the local revocation store.

        This never calls the remote API: only revocations already delivered
        through revoke_session() are visible here.
        """
        try:
            await self.revoked_store.get(session_token)
        except SessionNotFound:
            return False
        return True

    async def revoke_session(self, session_token: str) -> None:
        """
        Revoke a session.

        Writes a fresh revocation record, then drops any cached session.
        Revoking an already revoked token restarts its revocation window.
        """
        if not session_token:
            raise ValidationError("session_token", "session token is required")

        await self.revoked_store.put(
            RevokedSession.issue(session_token, self._clock(), self.revoked_ttl)
        )
        await self.session_store.delete(session_token)
        logger.info("Session revoked")

    async def cleanup(self, now: Optional[datetime] = None) -> Dict[str, Optional[int]]:
        """
        Sweep expired records from both stores.

        A failing sweep is logged and does not prevent the other one from
        running. Lazy expiry on read already keeps stale records out of
        answers, so cleanup only bounds memory.

        Returns:
            Removed counts per store, None for a sweep that failed
        """
        now = now or self._clock()
        removed: Dict[str, Optional[int]] = {"sessions": None, "revoked_sessions": None}

        try:
            removed["sessions"] = await self.session_store.sweep(now)
        except Exception as e:
            logger.error(f"Session sweep failed: {e}")

        try:
            removed["revoked_sessions"] = await self.revoked_store.sweep(now)
        except Exception as e:
            logger.error(f"Revoked session sweep failed: {e}")

        if removed["sessions"] or removed["revoked_sessions"]:
            logger.info(
                f"Cleanup removed {removed['sessions']} sessions "
                f"and {removed['revoked_sessions']} revoked sessions"
            )
        return removed

    async def check_api_health(self) -> bool:
        return await self.verifier.check_health()

    async def stats(self) -> Dict[str, Any]:
        now = self._clock()
        return {
            "sessions": await self.session_store.stats(now),
            "revoked_sessions": await self.revoked_store.stats(now),
        }

    async def _ensure_not_revoked(self, session_token: str) -> None:
        if await self.is_session_revoked(session_token):
            raise SessionRevoked(session_token)
