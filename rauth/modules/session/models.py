"""Session and revocation records."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict

from .ttl import expires_at


@dataclass(frozen=True)
class Session:
    """A cached, remotely verified session bound to a phone number."""

    token: str
    user_phone: str
    created_at: datetime
    expires_at: datetime

    def __post_init__(self):
        if self.expires_at <= self.created_at:
            raise ValueError("expires_at must be later than created_at")

    @classmethod
    def issue(cls, token: str, user_phone: str, now: datetime, ttl_seconds: int) -> "Session":
        """Create a session that lives ``ttl_seconds`` from ``now``."""
        return cls(
            token=token,
            user_phone=user_phone,
            created_at=now,
            expires_at=expires_at(now, ttl_seconds),
        )

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            "token": self.token,
            "user_phone": self.user_phone,
            "created_at": self.created_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Session":
        return cls(
            token=data["token"],
            user_phone=data["user_phone"],
            created_at=datetime.fromisoformat(data["created_at"]),
            expires_at=datetime.fromisoformat(data["expires_at"]),
        )


@dataclass(frozen=True)
class RevokedSession:
    """Proof that a token must be rejected until ``expires_at``."""

    token: str
    revoked_at: datetime
    expires_at: datetime

    def __post_init__(self):
        if self.expires_at <= self.revoked_at:
            raise ValueError("expires_at must be later than revoked_at")

    @classmethod
    def issue(cls, token: str, now: datetime, ttl_seconds: int) -> "RevokedSession":
        """Create a revocation that lives ``ttl_seconds`` from ``now``."""
        return cls(token=token, revoked_at=now, expires_at=expires_at(now, ttl_seconds))

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            "token": self.token,
            "revoked_at": self.revoked_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RevokedSession":
        return cls(
            token=data["token"],
            revoked_at=datetime.fromisoformat(data["revoked_at"]),
            expires_at=datetime.fromisoformat(data["expires_at"]),
        )
