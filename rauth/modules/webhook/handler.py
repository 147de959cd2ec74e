"""
Webhook ingestion.

Only session_revoked changes cache state. Verified/created events are
acknowledged without action; unknown kinds are logged and ignored.
Delivery authentication belongs to the transport in front of this handler.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Union

from fastapi import APIRouter, HTTPException
from pydantic import ValidationError as PydanticValidationError

from ..session.engine import SessionCacheEngine
from ..session.errors import NotInitialized
from .models import WebhookAck, WebhookEvent, WebhookEventKind

logger = logging.getLogger(__name__)


class WebhookHandler:
    """Translates webhook events into engine calls."""

    def __init__(self, engine: SessionCacheEngine):
        self.engine = engine

    async def process(self, event: Union[WebhookEvent, Dict[str, Any]]) -> bool:
        """
        Apply a webhook event.

        Args:
            event: Decoded event or raw JSON payload

        Returns:
            True if the event kind was recognized

        Raises:
            pydantic.ValidationError: If a raw payload is malformed
        """
        if not isinstance(event, WebhookEvent):
            event = WebhookEvent.model_validate(event)

        if event.event_kind == WebhookEventKind.SESSION_REVOKED.value:
            await self.engine.revoke_session(event.session_token)
            return True

        if event.event_kind in (
            WebhookEventKind.SESSION_VERIFIED.value,
            WebhookEventKind.SESSION_CREATED.value,
        ):
            # Verification is cached on demand by verify_session
            logger.debug(f"Webhook event {event.event_kind} acknowledged")
            return True

        logger.warning(f"Ignoring unknown webhook event type: {event.event_kind}")
        return False


def create_webhook_router(
    process: Callable[[Dict[str, Any]], Awaitable[bool]],
    path: str = "/webhooks/rauth",
) -> APIRouter:
    """
    Create the webhook router.

    Args:
        process: Coroutine applying a raw payload, e.g. WebhookHandler.process
            or RauthProvider.handle_webhook
        path: Route path to mount the endpoint on

    Returns:
        Router exposing POST ``path``
    """
    router = APIRouter()

    @router.post(path, response_model=WebhookAck)
    async def receive_webhook(payload: Dict[str, Any]) -> WebhookAck:
        try:
            handled = await process(payload)
        except PydanticValidationError as e:
            raise HTTPException(400, f"Failed to parse webhook event: {e.error_count()} errors")
        except NotInitialized:
            raise HTTPException(503, "Service not initialized")
        return WebhookAck(handled=handled)

    return router
