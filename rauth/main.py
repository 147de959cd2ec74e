#!/usr/bin/env python3
"""
Rauth Session Cache - Example Service Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Initializes the provider
3. Serves the webhook, health and a session-protected route

All session logic is in the modules.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI

from rauth.config.provider import ConfigProvider, EnvConfigProvider
from rauth.logging_config import configure_logging, get_logging_config
from rauth.modules.middleware import SessionAuth, SessionContext
from rauth.modules.session.errors import RemoteError
from rauth.modules.webhook import create_webhook_router
from rauth.provider import RauthProvider

logger = logging.getLogger(__name__)


def create_app(
    provider: Optional[RauthProvider] = None,
    config_provider: Optional[ConfigProvider] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        provider: Provider to serve (a fresh one by default)
        config_provider: Source of RauthConfig; None skips init at startup,
            for callers that initialize the provider themselves

    Returns:
        Configured FastAPI app
    """
    provider = provider or RauthProvider()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Rauth session cache...")
        if config_provider is not None:
            await provider.init(config_provider.get_rauth_config())
        yield
        logger.info("Shutting down Rauth session cache...")
        await provider.shutdown()

    app = FastAPI(
        title="Rauth Session Cache",
        description="Session verification cache in front of the Rauth API",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.provider = provider

    app.include_router(create_webhook_router(provider.handle_webhook), tags=["webhooks"])

    require_session = SessionAuth(provider)

    @app.get("/health")
    async def health():
        """Report local and upstream health."""
        upstream: Optional[bool]
        try:
            upstream = await provider.check_api_health() if provider.initialized else None
        except RemoteError as e:
            logger.warning(f"Rauth API health check failed: {e}")
            upstream = False
        return {"status": "ok", "initialized": provider.initialized, "rauth_api": upstream}

    @app.get("/stats")
    async def stats():
        return await provider.get_stats()

    @app.get("/me")
    async def me(session: SessionContext = Depends(require_session)):
        """Example route protected by session verification."""
        return {"user_phone": session.user_phone}

    return app


app = create_app(config_provider=EnvConfigProvider())


if __name__ == "__main__":
    log_level = os.getenv("LOG_LEVEL", "INFO")
    configure_logging(log_level)
    uvicorn.run(
        app,
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=int(os.getenv("API_PORT", "8080")),
        log_level=log_level.lower(),
        log_config=get_logging_config(log_level),
    )
