"""
Webhook Module - Black Box Interface

Purpose: Apply Rauth webhook events to the session cache
Interface: WebhookHandler.process(), create_webhook_router()
Hidden: Event vocabulary differences between API revisions
"""

from .handler import WebhookHandler, create_webhook_router
from .models import WebhookAck, WebhookEvent, WebhookEventKind

__all__ = [
    "WebhookAck",
    "WebhookEvent",
    "WebhookEventKind",
    "WebhookHandler",
    "create_webhook_router",
]
