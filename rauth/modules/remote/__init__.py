"""
Remote Module - Black Box Interface

Purpose: Ask the Rauth API whether a session is verified
Interface: verify_session(), check_health()
Hidden: HTTP transport, headers, response schema

Any object satisfying RemoteVerifier can replace the HTTP client.
"""

from .client import RauthAPIClient
from .interfaces import RemoteVerifier

__all__ = ["RauthAPIClient", "RemoteVerifier"]
