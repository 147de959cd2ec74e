"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass, replace
from typing import Optional, Protocol

from ..modules.remote.client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS
from ..modules.session.cleanup import DEFAULT_CLEANUP_INTERVAL
from ..modules.session.engine import DEFAULT_REVOKED_TTL, DEFAULT_SESSION_TTL
from ..modules.session.errors import ConfigError


@dataclass
class RauthConfig:
    """Session cache configuration."""
    api_key: str
    app_id: str
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    session_ttl_seconds: int = DEFAULT_SESSION_TTL
    revoked_ttl_seconds: int = DEFAULT_REVOKED_TTL
    cleanup_interval_seconds: int = DEFAULT_CLEANUP_INTERVAL
    redis_url: Optional[str] = None

    def validate(self) -> None:
        """
        Check required fields and value ranges.

        Raises:
            ConfigError: On the first invalid field
        """
        if not self.api_key:
            raise ConfigError("api_key", "rauth API key is required")
        if not self.app_id:
            raise ConfigError("app_id", "app ID is required")
        for field in ("session_ttl_seconds", "revoked_ttl_seconds", "cleanup_interval_seconds"):
            if getattr(self, field) < 0:
                raise ConfigError(field, "must be a positive number of seconds")
        if self.timeout_seconds <= 0:
            raise ConfigError("timeout_seconds", "must be positive")

    def with_defaults(self) -> "RauthConfig":
        """Return a copy where zero TTL/interval values are replaced by defaults."""
        return replace(
            self,
            session_ttl_seconds=self.session_ttl_seconds or DEFAULT_SESSION_TTL,
            revoked_ttl_seconds=self.revoked_ttl_seconds or DEFAULT_REVOKED_TTL,
            cleanup_interval_seconds=self.cleanup_interval_seconds or DEFAULT_CLEANUP_INTERVAL,
        )


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_rauth_config(self) -> RauthConfig:
        """Get session cache configuration."""
        ...


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigError(name, f"expected an integer, got {value!r}")


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_rauth_config(self) -> RauthConfig:
        """Get session cache configuration from environment variables."""
        timeout = os.getenv("RAUTH_TIMEOUT_SECONDS")
        try:
            timeout_seconds = float(timeout) if timeout else DEFAULT_TIMEOUT_SECONDS
        except ValueError:
            raise ConfigError("RAUTH_TIMEOUT_SECONDS", f"expected a number, got {timeout!r}")

        return RauthConfig(
            api_key=os.getenv("RAUTH_API_KEY", ""),
            app_id=os.getenv("RAUTH_APP_ID", ""),
            base_url=os.getenv("RAUTH_BASE_URL") or DEFAULT_BASE_URL,
            timeout_seconds=timeout_seconds,
            session_ttl_seconds=_int_env("SESSION_TTL_SECONDS", DEFAULT_SESSION_TTL),
            revoked_ttl_seconds=_int_env("REVOKED_TTL_SECONDS", DEFAULT_REVOKED_TTL),
            cleanup_interval_seconds=_int_env("CLEANUP_INTERVAL_SECONDS", DEFAULT_CLEANUP_INTERVAL),
            redis_url=os.getenv("REDIS_URL") or None,
        )
