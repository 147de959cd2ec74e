"""
HTTP client for the Rauth session API.

The client is a thin translation layer: HTTP outcomes become a boolean,
a RemoteRejected, or a RemoteUnavailable. It does not retry.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ..session.errors import RemoteRejected, RemoteUnavailable

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.rauth.io/session"
DEFAULT_TIMEOUT_SECONDS = 30.0
USER_AGENT = "rauth-session-cache/1.0"


class RauthAPIClient:
    """Remote verifier backed by the Rauth REST API."""

    def __init__(
        self,
        api_key: str,
        app_id: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the API client.

        Args:
            api_key: Rauth API key (sent as a bearer token)
            app_id: Rauth application identifier
            base_url: Session API base URL
            timeout: Request timeout in seconds
            http_client: Optional pre-built client (tests inject a MockTransport here)
        """
        self.api_key = api_key
        self.app_id = app_id
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "X-App-ID": self.app_id,
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        }

    async def verify_session(self, session_token: str, user_phone: str) -> bool:
        try:
            resp = await self._client.post(
                f"{self.base_url}/status",
                json={"session_token": session_token},
                headers=self._headers(),
            )
        except httpx.TransportError as e:
            logger.warning(f"Rauth API unreachable during verification: {e}")
            raise RemoteUnavailable(f"failed to make request: {e}") from e

        if resp.status_code == 404:
            return False

        if resp.status_code == 403:
            raise RemoteRejected(
                resp.status_code,
                "Access denied. Check the API key and app ID.",
            )

        if resp.status_code != 200:
            raise RemoteRejected(resp.status_code, resp.text)

        try:
            details: Dict[str, Any] = resp.json()
        except ValueError as e:
            raise RemoteRejected(resp.status_code, f"failed to decode response: {e}") from e

        if not isinstance(details, dict) or details.get("status") != "verified":
            return False

        # The API may echo the phone the session was verified with
        phone = details.get("phone")
        if user_phone and isinstance(phone, str) and phone != user_phone:
            return False

        return True

    async def check_health(self) -> bool:
        try:
            resp = await self._client.get(f"{self.base_url}/health", headers=self._headers())
        except httpx.TransportError as e:
            raise RemoteUnavailable(f"health check failed: {e}") from e

        return resp.status_code == 200

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "RauthAPIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
