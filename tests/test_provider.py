"""
Tests for the provider composition root.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import StubVerifier
from rauth.config.provider import RauthConfig
from rauth.modules.remote.client import RauthAPIClient
from rauth.modules.session.errors import ConfigError, NotInitialized, SessionRevoked
from rauth.modules.session.store import SessionStore
from rauth.modules.storage import RedisSessionStore
from rauth.provider import RauthProvider


@pytest.fixture
def config():
    return RauthConfig(api_key="test-api-key", app_id="test-app-id")


@pytest.mark.asyncio
async def test_calls_before_init_raise_not_initialized():
    provider = RauthProvider()

    with pytest.raises(NotInitialized):
        await provider.verify_session("tok", "+1")
    with pytest.raises(NotInitialized):
        await provider.is_session_revoked("tok")
    with pytest.raises(NotInitialized):
        await provider.revoke_session("tok")
    with pytest.raises(NotInitialized):
        await provider.check_api_health()
    with pytest.raises(NotInitialized):
        await provider.handle_webhook({"type": "session_revoked", "session_token": "tok"})

    assert await provider.get_stats() == {"initialized": False}


@pytest.mark.asyncio
async def test_init_rejects_invalid_config():
    provider = RauthProvider()

    with pytest.raises(ConfigError):
        await provider.init(RauthConfig(api_key="", app_id="app"))

    assert not provider.initialized


@pytest.mark.asyncio
async def test_full_flow(config, clock):
    """Test verify, webhook revocation and stats through the provider."""
    verifier = StubVerifier()
    provider = RauthProvider(clock=clock)
    await provider.init(config, verifier=verifier)
    try:
        assert await provider.verify_session("tok", "+15550001") is True
        assert await provider.handle_webhook({"type": "session_revoked", "session_token": "tok"})
        assert await provider.is_session_revoked("tok") is True
        with pytest.raises(SessionRevoked):
            await provider.verify_session("tok", "+15550001")

        stats = await provider.get_stats()
        assert stats["initialized"] is True
        assert stats["cleanup_running"] is True
        assert stats["config"]["session_ttl_seconds"] == 900
        assert stats["revoked_sessions"]["active_revoked_sessions"] == 1
        assert stats["sessions"]["total_sessions"] == 0
    finally:
        await provider.shutdown()

    assert not provider.initialized


@pytest.mark.asyncio
async def test_init_applies_defaults(clock):
    provider = RauthProvider(clock=clock)
    await provider.init(
        RauthConfig(api_key="k", app_id="a", session_ttl_seconds=0), verifier=StubVerifier(),
        start_cleanup=False,
    )

    assert provider.config.session_ttl_seconds == 900
    assert provider.engine.session_ttl == 900
    assert (await provider.get_stats())["cleanup_running"] is False
    await provider.shutdown()


@pytest.mark.asyncio
async def test_default_verifier_is_api_client(config):
    provider = RauthProvider()
    await provider.init(config, start_cleanup=False)

    assert isinstance(provider.engine.verifier, RauthAPIClient)
    assert isinstance(provider.engine.session_store, SessionStore)
    await provider.shutdown()


@pytest.mark.asyncio
async def test_redis_client_selects_redis_stores(config, mock_redis_with_data):
    provider = RauthProvider()
    await provider.init(
        config, verifier=StubVerifier(), redis_client=mock_redis_with_data, start_cleanup=False
    )

    assert isinstance(provider.engine.session_store, RedisSessionStore)
    await provider.shutdown()


@pytest.mark.asyncio
async def test_independent_providers_do_not_share_state(config):
    first, second = RauthProvider(), RauthProvider()
    await first.init(config, verifier=StubVerifier(), start_cleanup=False)
    await second.init(config, verifier=StubVerifier(), start_cleanup=False)

    await first.revoke_session("tok")

    assert await first.is_session_revoked("tok") is True
    assert await second.is_session_revoked("tok") is False
    await first.shutdown()
    await second.shutdown()


@pytest.mark.asyncio
async def test_reinit_replaces_stack(config):
    provider = RauthProvider()
    await provider.init(config, verifier=StubVerifier())
    await provider.revoke_session("tok")

    await provider.init(config, verifier=StubVerifier())

    assert await provider.is_session_revoked("tok") is False
    await provider.shutdown()


@pytest.mark.asyncio
async def test_shutdown_releases_everything_when_cleanup_stop_fails(config):
    """Test a failing cleanup stop still closes the client and the storage."""
    provider = RauthProvider()
    await provider.init(config, start_cleanup=False)
    provider._cleanup.stop = AsyncMock(side_effect=RuntimeError("stop failed"))
    api_client = provider._api_client
    api_client.aclose = AsyncMock()
    storage = MagicMock()
    storage.disconnect = AsyncMock()
    provider._storage = storage

    with pytest.raises(RuntimeError, match="stop failed"):
        await provider.shutdown()

    api_client.aclose.assert_awaited_once()
    storage.disconnect.assert_awaited_once()
    assert not provider.initialized
    assert await provider.get_stats() == {"initialized": False}
