"""Remote verifier interface following Black Box Design principles."""
from typing import Protocol


class RemoteVerifier(Protocol):
    """Protocol for the remote Rauth API - allows swappable implementations."""

    async def verify_session(self, session_token: str, user_phone: str) -> bool:
        """
        Ask the remote API whether a session is verified for a phone number.

        Args:
            session_token: Session token presented by the client
            user_phone: Phone number the session is expected to belong to

        Returns:
            True if verified, False if the API says it is not

        Raises:
            RemoteUnavailable: Network or transport failure
            RemoteRejected: Non-2xx status or unreadable response
        """
        ...

    async def check_health(self) -> bool:
        """Return True if the remote API reports itself healthy."""
        ...
