"""
Rauth provider - composition root.

Builds the stores, the remote client, the engine, the webhook handler and
the cleanup task from a RauthConfig, and exposes them behind one object.
The provider is an explicit value: construct it at startup and pass it to
whatever needs it.
"""

import logging
from typing import Any, Dict, Optional, Union

from .config.provider import RauthConfig
from .modules.remote.client import RauthAPIClient
from .modules.remote.interfaces import RemoteVerifier
from .modules.session.cleanup import CleanupTask
from .modules.session.engine import SessionCacheEngine
from .modules.session.errors import NotInitialized
from .modules.session.store import RevokedSessionStore, SessionStore
from .modules.session.ttl import Clock
from .modules.storage import RedisRevokedSessionStore, RedisSessionStore, StorageModule
from .modules.webhook.handler import WebhookHandler
from .modules.webhook.models import WebhookEvent

logger = logging.getLogger(__name__)


class RauthProvider:
    """
    Session verification provider.

    Usage:
        provider = RauthProvider()
        await provider.init(EnvConfigProvider().get_rauth_config())
        ok = await provider.verify_session(token, phone)
        ...
        await provider.shutdown()
    """

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock
        self.config: Optional[RauthConfig] = None
        self._engine: Optional[SessionCacheEngine] = None
        self._webhook_handler: Optional[WebhookHandler] = None
        self._cleanup: Optional[CleanupTask] = None
        self._api_client: Optional[RauthAPIClient] = None
        self._storage: Optional[StorageModule] = None

    @property
    def initialized(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> SessionCacheEngine:
        if self._engine is None:
            raise NotInitialized()
        return self._engine

    async def init(
        self,
        config: RauthConfig,
        verifier: Optional[RemoteVerifier] = None,
        redis_client: Optional[Any] = None,
        start_cleanup: bool = True,
    ) -> None:
        """
        Validate configuration and build the component stack.

        Args:
            config: Session cache configuration
            verifier: Remote verifier override (defaults to RauthAPIClient)
            redis_client: Async Redis client; when given, or when config.redis_url
                is set, sessions and revocations are kept in Redis
            start_cleanup: Start the periodic cleanup task

        Raises:
            ConfigError: If the configuration is invalid
        """
        config.validate()
        config = config.with_defaults()

        if self.initialized:
            await self.shutdown()

        if redis_client is None and config.redis_url:
            self._storage = StorageModule(config.redis_url)
            redis_client = await self._storage.connect()

        if redis_client is not None:
            logger.info("Building session cache on Redis")
            session_store = RedisSessionStore(redis_client, clock=self._clock)
            revoked_store = RedisRevokedSessionStore(redis_client, clock=self._clock)
        else:
            logger.info("Building in-memory session cache")
            session_store = SessionStore(clock=self._clock)
            revoked_store = RevokedSessionStore(clock=self._clock)

        if verifier is None:
            self._api_client = RauthAPIClient(
                api_key=config.api_key,
                app_id=config.app_id,
                base_url=config.base_url,
                timeout=config.timeout_seconds,
            )
            verifier = self._api_client

        engine = SessionCacheEngine(
            session_store,
            revoked_store,
            verifier,
            session_ttl=config.session_ttl_seconds,
            revoked_ttl=config.revoked_ttl_seconds,
            clock=self._clock,
        )

        self.config = config
        self._engine = engine
        self._webhook_handler = WebhookHandler(engine)
        self._cleanup = CleanupTask(engine, interval=config.cleanup_interval_seconds)
        if start_cleanup:
            self._cleanup.start()

        logger.info(f"Rauth provider initialized for app {config.app_id}")

    async def shutdown(self) -> None:
        """
        Stop the cleanup task and release owned connections.

        Every release runs even if an earlier one raises. The provider is
        uninitialized before any release starts, so a failing release still
        propagates but never leaves a half shut down provider behind.
        """
        cleanup, api_client, storage = self._cleanup, self._api_client, self._storage
        self._engine = None
        self._webhook_handler = None
        self._cleanup = None
        self._api_client = None
        self._storage = None

        try:
            if cleanup is not None:
                await cleanup.stop()
        finally:
            try:
                if api_client is not None:
                    await api_client.aclose()
            finally:
                if storage is not None:
                    await storage.disconnect()
                logger.info("Rauth provider shut down")

    async def verify_session(self, session_token: str, user_phone: str) -> bool:
        return await self.engine.verify_session(session_token, user_phone)

    async def is_session_revoked(self, session_token: str) -> bool:
        return await self.engine.is_session_revoked(session_token)

    async def revoke_session(self, session_token: str) -> None:
        await self.engine.revoke_session(session_token)

    async def check_api_health(self) -> bool:
        return await self.engine.check_api_health()

    async def handle_webhook(self, event: Union[WebhookEvent, Dict[str, Any]]) -> bool:
        if self._webhook_handler is None:
            raise NotInitialized()
        return await self._webhook_handler.process(event)

    async def get_stats(self) -> Dict[str, Any]:
        """Provider statistics; reports initialized=False instead of raising."""
        if self._engine is None:
            return {"initialized": False}

        return {
            "initialized": True,
            "config": {
                "app_id": self.config.app_id,
                "session_ttl_seconds": self.config.session_ttl_seconds,
                "revoked_ttl_seconds": self.config.revoked_ttl_seconds,
                "cleanup_interval_seconds": self.config.cleanup_interval_seconds,
            },
            "cleanup_running": self._cleanup is not None and self._cleanup.running,
            **await self._engine.stats(),
        }
