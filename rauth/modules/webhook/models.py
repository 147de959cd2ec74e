"""Webhook event models."""

from enum import Enum
from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class WebhookEventKind(str, Enum):
    """Event kinds observed from the Rauth webhook."""

    SESSION_REVOKED = "session_revoked"
    SESSION_VERIFIED = "session_verified"
    SESSION_CREATED = "session_created"


class WebhookEvent(BaseModel):
    """
    Decoded webhook delivery.

    Rauth has sent the event kind under both ``type`` and ``event``; either
    is accepted.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    event_kind: str = Field(
        ...,
        validation_alias=AliasChoices("event_kind", "type", "event"),
        description="Event kind, e.g. session_revoked",
        min_length=1,
    )
    session_token: str = Field(..., description="Token the event refers to", min_length=1)
    # Informational only; any scalar format is accepted
    user_phone: Optional[Union[str, int]] = Field(None, description="Phone number, when provided")
    timestamp: Optional[Union[int, float, str]] = Field(
        None, description="Unix timestamp or ISO-8601 string of the event"
    )


class WebhookAck(BaseModel):
    """Response body for a processed webhook."""

    success: bool = True
    handled: bool = Field(..., description="Whether the event kind was recognized")
