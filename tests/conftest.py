"""
tests/conftest.py -- Shared test fixtures for BarberDesk integration tests.

This module provides:
  - FakeSupabaseFactory: stands in for SupabaseClientFactory and hands out
    MagicMock Supabase clients, so no test ever reaches the network
  - make_user() / make_session(): build provider-shaped responses
  - api_client: module-scoped TestClient running the real ASGI app (API + web)
  - provider: per-test FakeSupabaseFactory wired into a fresh AuthGateway and
    ServiceStore on app.state

The real AuthGateway and ServiceStore run in every integration test; only the
Supabase client underneath them is faked.

DEBUG must be set before any app import so get_settings() tolerates the
missing SUPABASE_URL / SUPABASE_ANON_KEY instead of raising ValueError.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager
from types import SimpleNamespace
from unittest.mock import MagicMock

# CRITICAL: Set DEBUG before any core/api import.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.limiter import limiter
from asgi import app
from auth.gateway import AuthGateway
from catalog.store import ServiceStore

# Rate limits are per-IP and every TestClient request comes from the same
# address; a module's worth of login calls would trip them.
limiter.enabled = False


# ---------------------------------------------------------------------------
# Provider fakes
# ---------------------------------------------------------------------------


class FakeSupabaseFactory:
    """Records which tokens each client was requested for."""

    def __init__(self) -> None:
        self.client = MagicMock(name="anon_client")
        self.admin_client = MagicMock(name="admin_client")
        self.anon_tokens: list[str | None] = []
        self.admin_calls = 0

    def anon(self, access_token: str | None = None) -> MagicMock:
        self.anon_tokens.append(access_token)
        return self.client

    def admin(self) -> MagicMock:
        self.admin_calls += 1
        return self.admin_client


def make_user(uid: str = "user-1", email: str = "barber@example.com", **metadata) -> MagicMock:
    """A supabase-py User lookalike: only model_dump() is read by the gateway."""
    record = {
        "id": uid,
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "user_metadata": metadata,
    }
    user = MagicMock(name=f"user_{uid}")
    user.id = uid
    user.model_dump.return_value = record
    return user


def make_session(access: str = "access-1", refresh: str = "refresh-1") -> SimpleNamespace:
    return SimpleNamespace(access_token=access, refresh_token=refresh)


def set_cookie_headers(resp) -> list[str]:
    """Return every Set-Cookie header on an httpx response."""
    return resp.headers.get_list("set-cookie")


def cookie_header(cookies: dict[str, str]) -> dict[str, str]:
    """Build an explicit Cookie header.

    The session cookies are set Secure, so the client jar never replays them
    over http://testserver; tests send them by hand instead.
    """
    return {"Cookie": "; ".join(f"{k}={v}" for k, v in cookies.items())}


# ---------------------------------------------------------------------------
# App fixtures
# ---------------------------------------------------------------------------


def _patch_lifespan(factory: FakeSupabaseFactory):
    """Return a lifespan that wires the fake factory into app.state."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.auth_gateway = AuthGateway(factory)
        app.state.service_store = ServiceStore(factory)
        yield

    return test_lifespan


@pytest.fixture(scope="module")
def api_client() -> Generator[TestClient, None, None]:
    """TestClient over the full app with redirects left unfollowed.

    follow_redirects=False lets web tests assert on Location headers.
    """
    app.router.lifespan_context = _patch_lifespan(FakeSupabaseFactory())
    with TestClient(app, follow_redirects=False, raise_server_exceptions=True) as client:
        yield client


@pytest.fixture
def provider(api_client: TestClient) -> FakeSupabaseFactory:
    """A fresh fake provider per test, so return values never leak between tests."""
    factory = FakeSupabaseFactory()
    app.state.auth_gateway = AuthGateway(factory)
    app.state.service_store = ServiceStore(factory)
    api_client.cookies.clear()
    return factory
