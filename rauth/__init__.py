"""
Rauth Session Cache - Session verification in front of the Rauth API

A local cache and revocation tracker that answers "is this session valid
for this phone number" without calling the remote API on every request.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- No module knows the internals of another
- All communication through defined interfaces

Modules:
- session: Session and revocation stores, cache engine, cleanup task
- storage: Redis-backed store implementations
- remote: Rauth API client
- webhook: Webhook event ingestion
- middleware: FastAPI session dependency
"""

from .provider import RauthProvider

__version__ = "1.0.0"

__all__ = ["RauthProvider", "__version__"]
