"""
Session Module - Black Box Interface

Purpose: Cache verified sessions and track revocations
Interface: verify_session(), is_session_revoked(), revoke_session(), cleanup()
Hidden: Store layout, lock discipline, TTL arithmetic, lookup order

Stores are replaceable with any backend implementing the repository protocols
(see rauth.modules.storage for Redis).
"""

from .cleanup import CleanupTask
from .engine import SessionCacheEngine
from .errors import (
    ConfigError,
    IdentityMismatch,
    InvalidConfig,
    NotInitialized,
    RauthError,
    RemoteError,
    RemoteRejected,
    RemoteUnavailable,
    SessionExpired,
    SessionNotFound,
    SessionRevoked,
    ValidationError,
)
from .models import RevokedSession, Session
from .store import RevokedSessionStore, SessionStore

__all__ = [
    "CleanupTask",
    "ConfigError",
    "IdentityMismatch",
    "InvalidConfig",
    "NotInitialized",
    "RauthError",
    "RemoteError",
    "RemoteRejected",
    "RemoteUnavailable",
    "RevokedSession",
    "RevokedSessionStore",
    "Session",
    "SessionCacheEngine",
    "SessionExpired",
    "SessionNotFound",
    "SessionRevoked",
    "SessionStore",
    "ValidationError",
]
