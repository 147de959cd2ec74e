"""Store interfaces following Black Box Design principles."""
from datetime import datetime
from typing import Any, Dict, Optional, Protocol

from .models import RevokedSession, Session


class SessionRepository(Protocol):
    """Protocol for active-session storage - allows swappable backends."""

    async def put(self, session: Session) -> None:
        """Insert or replace the session stored under its token."""
        ...

    async def get(self, token: str) -> Session:
        """
        Get a live session.

        Raises:
            SessionNotFound: If absent
            SessionExpired: If present but expired (the record is removed)
        """
        ...

    async def delete(self, token: str) -> None:
        """Remove the session; no error if absent."""
        ...

    async def sweep(self, now: Optional[datetime] = None) -> int:
        """Remove expired sessions and return how many were removed."""
        ...

    async def stats(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        ...


class RevokedSessionRepository(Protocol):
    """Protocol for revocation storage."""

    async def put(self, revoked_session: RevokedSession) -> None:
        ...

    async def get(self, token: str) -> RevokedSession:
        """
        Get a live revocation.

        Raises:
            SessionNotFound: If absent or expired
        """
        ...

    async def sweep(self, now: Optional[datetime] = None) -> int:
        ...

    async def stats(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        ...
