"""
Session Auth Dependency Module - Black Box Interface

Purpose: Protect FastAPI routes with Rauth session verification
Interface: SessionAuth(provider) used as Depends(...), SessionContext
Hidden: Header extraction, error-to-status mapping

Can be used by any FastAPI app or sub-app that needs session authentication.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, Request

from ..session.errors import (
    IdentityMismatch,
    NotInitialized,
    RemoteError,
    SessionRevoked,
    ValidationError,
)

logger = logging.getLogger(__name__)


@dataclass
class SessionContext:
    """Verified session attached to a request."""
    session_token: str
    user_phone: str


class SessionAuth:
    """
    FastAPI dependency that verifies the caller's Rauth session.

    The session token is read from ``Authorization: Bearer <token>`` and the
    phone number from the ``X-User-Phone`` header or ``user_phone`` query
    parameter.

    Usage:
        require_session = SessionAuth(provider)

        @app.get("/me")
        async def me(session: SessionContext = Depends(require_session)):
            ...
    """

    def __init__(
        self,
        provider,
        optional: bool = False,
        phone_header: str = "X-User-Phone",
        phone_query_param: str = "user_phone",
    ):
        """
        Args:
            provider: Object exposing ``verify_session(token, phone)``
            optional: Yield None instead of raising when authentication fails
            phone_header: Header carrying the phone number
            phone_query_param: Query parameter fallback for the phone number
        """
        self.provider = provider
        self.optional = optional
        self.phone_header = phone_header
        self.phone_query_param = phone_query_param

    def extract_token(self, request: Request) -> Optional[str]:
        authorization = request.headers.get("Authorization")
        if not authorization:
            return None
        if not authorization.startswith("Bearer "):
            raise HTTPException(401, "Invalid authorization header format")
        return authorization[7:].strip() or None

    def extract_phone(self, request: Request) -> Optional[str]:
        return request.headers.get(self.phone_header) or request.query_params.get(
            self.phone_query_param
        )

    async def __call__(self, request: Request) -> Optional[SessionContext]:
        try:
            return await self._authenticate(request)
        except HTTPException:
            if self.optional:
                return None
            raise

    async def _authenticate(self, request: Request) -> SessionContext:
        session_token = self.extract_token(request)
        if not session_token:
            raise HTTPException(401, "Missing authorization header")

        user_phone = self.extract_phone(request)
        if not user_phone:
            raise HTTPException(400, "Missing user phone")

        try:
            verified = await self.provider.verify_session(session_token, user_phone)
        except NotInitialized:
            raise HTTPException(503, "Service not initialized")
        except SessionRevoked:
            raise HTTPException(401, "Session revoked")
        except IdentityMismatch:
            raise HTTPException(401, "Session verification failed")
        except ValidationError as e:
            raise HTTPException(400, e.message)
        except RemoteError as e:
            logger.warning(f"Session could not be verified: {e}")
            raise HTTPException(503, "Session verification unavailable")

        if not verified:
            raise HTTPException(401, "Invalid session")

        return SessionContext(session_token=session_token, user_phone=user_phone)


__all__ = ["SessionAuth", "SessionContext"]
