"""
Tests for the FastAPI service and the session dependency.

These tests use FastAPI TestClient with a provider initialized against a
stub verifier.
"""

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from conftest import StubVerifier
from rauth.config.provider import RauthConfig
from rauth.main import create_app
from rauth.modules.middleware import SessionAuth, SessionContext
from rauth.modules.session.errors import RemoteUnavailable
from rauth.provider import RauthProvider

PHONE = "+15550001"


class StaticConfigProvider:
    def get_rauth_config(self):
        return RauthConfig(api_key="test-api-key", app_id="test-app-id")


class VerifierInjectingProvider(RauthProvider):
    """Provider that always builds its engine around a given verifier."""

    def __init__(self, verifier):
        super().__init__()
        self._stub = verifier

    async def init(self, config, verifier=None, redis_client=None, start_cleanup=True):
        await super().init(config, verifier=self._stub, start_cleanup=start_cleanup)


@pytest.fixture
def verifier():
    return StubVerifier()


@pytest.fixture
def client(verifier):
    app = create_app(
        provider=VerifierInjectingProvider(verifier),
        config_provider=StaticConfigProvider(),
    )
    with TestClient(app) as test_client:
        yield test_client


def auth_headers(token="tok", phone=PHONE):
    return {"Authorization": f"Bearer {token}", "X-User-Phone": phone}


def test_health(client, verifier):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "initialized": True, "rauth_api": True}


def test_health_upstream_down(client, verifier):
    verifier.healthy = False

    assert client.get("/health").json()["rauth_api"] is False


def test_protected_route(client, verifier):
    resp = client.get("/me", headers=auth_headers())

    assert resp.status_code == 200
    assert resp.json() == {"user_phone": PHONE}
    assert verifier.calls == [("tok", PHONE)]


def test_phone_from_query_param(client):
    resp = client.get("/me", params={"user_phone": PHONE}, headers={"Authorization": "Bearer tok"})

    assert resp.status_code == 200


def test_missing_authorization(client):
    assert client.get("/me", headers={"X-User-Phone": PHONE}).status_code == 401


def test_malformed_authorization(client):
    resp = client.get("/me", headers={"Authorization": "Basic abc", "X-User-Phone": PHONE})

    assert resp.status_code == 401


def test_missing_phone(client):
    assert client.get("/me", headers={"Authorization": "Bearer tok"}).status_code == 400


def test_unverified_session(client, verifier):
    verifier.result = False

    resp = client.get("/me", headers=auth_headers())

    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid session"


def test_remote_failure_is_503(client, verifier):
    verifier.error = RemoteUnavailable("down")

    assert client.get("/me", headers=auth_headers()).status_code == 503


def test_webhook_revocation_blocks_session(client, verifier):
    """Test end to end: a revoked session is rejected without a remote call."""
    assert client.get("/me", headers=auth_headers()).status_code == 200

    resp = client.post("/webhooks/rauth", json={"event": "session_revoked", "session_token": "tok"})
    assert resp.status_code == 200

    resp = client.get("/me", headers=auth_headers())
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Session revoked"
    assert verifier.call_count == 1


def test_identity_mismatch_is_401(client):
    assert client.get("/me", headers=auth_headers()).status_code == 200

    assert client.get("/me", headers=auth_headers(phone="+15559999")).status_code == 401


def test_stats(client):
    client.get("/me", headers=auth_headers())

    stats = client.get("/stats").json()

    assert stats["initialized"] is True
    assert stats["sessions"]["active_sessions"] == 1


def test_uninitialized_provider_is_503():
    app = create_app(provider=RauthProvider())

    with TestClient(app) as test_client:
        assert test_client.get("/me", headers=auth_headers()).status_code == 503
        assert test_client.get("/health").json()["initialized"] is False


def test_optional_session_auth():
    """Test optional mode yields None instead of rejecting."""
    app = FastAPI()
    optional_session = SessionAuth(RauthProvider(), optional=True)

    @app.get("/maybe")
    async def maybe(session: SessionContext = Depends(optional_session)):
        return {"authenticated": session is not None}

    resp = TestClient(app).get("/maybe")

    assert resp.status_code == 200
    assert resp.json() == {"authenticated": False}
