"""Error taxonomy for the session cache."""

from typing import Optional


class RauthError(Exception):
    """Base class for every error raised by this package."""


class NotInitialized(RauthError):
    """Provider used before init()."""

    def __init__(self, message: str = "rauth provider not initialized"):
        super().__init__(message)


class InvalidConfig(RauthError):
    """Configuration is missing required fields or has invalid values."""


class ConfigError(InvalidConfig):
    """Configuration error attributed to a single field."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"config error in field '{field}': {message}")


class ValidationError(RauthError):
    """Caller input rejected before any lookup."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"validation error in field '{field}': {message}")


class SessionNotFound(RauthError):
    """No record for the token in a local store."""

    def __init__(self, token: str, message: str = "session not found"):
        self.token = token
        super().__init__(message)


class SessionExpired(SessionNotFound):
    """A record existed but its expiry instant has passed; it was removed."""

    def __init__(self, token: str):
        super().__init__(token, "session expired")


class SessionRevoked(RauthError):
    """The token has a live revocation record."""

    def __init__(self, token: str):
        self.token = token
        super().__init__("session revoked")


class IdentityMismatch(RauthError):
    """A cached session is bound to a different phone number."""

    def __init__(self, token: str):
        self.token = token
        super().__init__("session is bound to a different phone number")


class RemoteError(RauthError):
    """The remote verifier could not produce an answer."""


class RemoteUnavailable(RemoteError):
    """Network or transport failure talking to the Rauth API."""


class RemoteRejected(RemoteError):
    """The Rauth API answered with a non-2xx status or an unreadable body."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        self.message = message or ""
        super().__init__(f"API error (status {status_code}): {self.message}")
