"""
core/provider.py -- Supabase client construction.

Supabase owns every user record, token and table row BarberDesk touches. This
module is the only place that knows how to build a client for it.

A fresh client is built per call. supabase-py clients keep the signed-in
session in memory, so a shared client would leak one user's session into the
next request. auto_refresh_token and persist_session are both off: the browser
holds the tokens (see auth/cookies.py), the server never does.

Two flavours:
  anon(token)  -- anon key; with a token, requests run as that user so the
                  provider's row-level security policies apply.
  admin()      -- service role key; bypasses RLS. Only the admin auth API
                  (create user, global sign-out) uses it.
"""

from __future__ import annotations

import logging
from typing import Optional

from supabase import Client, ClientOptions, create_client

from core.config import Settings

logger = logging.getLogger("barberdesk.supabase")


class ProviderError(Exception):
    """A call to the auth/data provider failed.

    message is the provider's own text and is safe to return to the client;
    route handlers map this to HTTP 400.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SupabaseClientFactory:
    def __init__(self, settings: Settings) -> None:
        self._url = settings.supabase_url
        self._anon_key = settings.supabase_anon_key
        self._service_key = settings.supabase_service_role_key

    def _build(self, key: str, access_token: Optional[str] = None) -> Client:
        if not self._url or not key:
            raise ProviderError("Auth provider is not configured.")
        headers: dict[str, str] = {}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        options = ClientOptions(
            auto_refresh_token=False,
            persist_session=False,
            headers=headers,
        )
        return create_client(self._url, key, options=options)

    def anon(self, access_token: Optional[str] = None) -> Client:
        """Return an anon-key client, optionally acting as the token's user."""
        return self._build(self._anon_key, access_token)

    def admin(self) -> Client:
        """Return a service-role client for the admin auth API."""
        if not self._service_key:
            logger.error("SUPABASE_SERVICE_ROLE_KEY is not set; admin API unavailable")
            raise ProviderError("Service role key is not configured.")
        return self._build(self._service_key)
