"""Clock and TTL policy shared by every store."""

from datetime import UTC, datetime, timedelta
from typing import Callable

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Default clock: timezone-aware current UTC time."""
    return datetime.now(UTC)


def expires_at(base: datetime, seconds: int) -> datetime:
    """
    Compute the expiry instant for a record created at ``base``.

    Args:
        base: Creation instant
        seconds: Time-to-live in seconds, must be positive

    Returns:
        ``base + seconds``

    Raises:
        ValueError: If ``seconds`` is not positive
    """
    if seconds <= 0:
        raise ValueError(f"TTL must be positive, got {seconds}")
    return base + timedelta(seconds=seconds)
