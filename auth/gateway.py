"""
auth/gateway.py -- Supabase Auth calls used by the session relay routes.

Every method is a single-shot call to the provider. Nothing is cached and no
token is decoded locally: the provider is the only authority on whether a
password, access token or refresh token is valid.

Error contract:
  Provider AuthError -> ProviderError(provider message). Route handlers map
  ProviderError to HTTP 400 with the message in the body.
  get_user() is the soft variant and returns None instead of raising (network
  errors included), mirroring how an invalid cookie is simply "not signed in".

Layer rule: imports from core/ only. No imports from api/, web/, or catalog/.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from supabase import AuthError

from auth.models import AuthUser, SessionTokens, SignInResult
from core.provider import ProviderError, SupabaseClientFactory

logger = logging.getLogger("barberdesk.auth")


def _to_auth_user(user: Any) -> AuthUser:
    """Map a supabase-py User model onto the AuthUser dataclass."""
    raw = user.model_dump(mode="json")
    return AuthUser(
        id=raw["id"],
        email=raw.get("email"),
        user_metadata=raw.get("user_metadata") or {},
        raw=raw,
    )


def _to_tokens(session: Any) -> SessionTokens:
    if session is None or not session.access_token or not session.refresh_token:
        raise ProviderError("No session returned by the auth provider.")
    return SessionTokens(access_token=session.access_token, refresh_token=session.refresh_token)


class AuthGateway:
    def __init__(self, factory: SupabaseClientFactory) -> None:
        self._factory = factory

    def sign_in(self, email: str, password: str) -> SignInResult:
        """Password sign-in. Returns the user and a fresh token pair."""
        client = self._factory.anon()
        try:
            resp = client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthError as exc:
            logger.warning("Sign-in rejected by provider: %s", exc.message)
            raise ProviderError(exc.message) from exc
        tokens = _to_tokens(resp.session)
        if resp.user is None:
            raise ProviderError("No user returned by the auth provider.")
        return SignInResult(user=_to_auth_user(resp.user), session=tokens)

    def refresh(self, refresh_token: str) -> SessionTokens:
        """Exchange a refresh token for a new access/refresh pair.

        Supabase rotates refresh tokens: the old one is spent after this call,
        so the caller must persist the returned pair.
        """
        client = self._factory.anon()
        try:
            resp = client.auth.refresh_session(refresh_token)
        except AuthError as exc:
            logger.warning("Session refresh rejected by provider: %s", exc.message)
            raise ProviderError(exc.message) from exc
        return _to_tokens(resp.session)

    def register(
        self,
        email: str,
        password: str,
        full_name: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> AuthUser:
        """Create a confirmed user through the admin API.

        email_confirm=True skips the confirmation mail: accounts are created by
        the shop owner, not by the barber signing up on their own.
        """
        client = self._factory.admin()
        try:
            resp = client.auth.admin.create_user(
                {
                    "email": email,
                    "password": password,
                    "user_metadata": {"full_name": full_name, "phone": phone},
                    "email_confirm": True,
                }
            )
        except AuthError as exc:
            logger.warning("User creation rejected by provider: %s", exc.message)
            raise ProviderError(exc.message) from exc
        logger.info("Created user %s", resp.user.id)
        return _to_auth_user(resp.user)

    def get_user(self, access_token: str) -> AuthUser | None:
        """Resolve an access token to its user. None on any provider failure.

        Network failures count as provider failures: an unreachable provider
        means "not signed in", not a 500 on every page.
        """
        if not access_token:
            return None
        try:
            client = self._factory.anon(access_token)
            resp = client.auth.get_user(access_token)
        except (AuthError, ProviderError) as exc:
            logger.debug("Access token rejected: %s", getattr(exc, "message", exc))
            return None
        except httpx.HTTPError as exc:
            logger.warning("Auth provider unreachable while resolving user: %s", exc)
            return None
        if resp is None or resp.user is None:
            return None
        return _to_auth_user(resp.user)

    def send_password_reset(self, email: str, redirect_to: str) -> None:
        """Ask the provider to mail a recovery link pointing at redirect_to."""
        client = self._factory.anon()
        try:
            client.auth.reset_password_for_email(email, {"redirect_to": redirect_to})
        except AuthError as exc:
            logger.warning("Password reset rejected by provider: %s", exc.message)
            raise ProviderError(exc.message) from exc

    def update_password(self, user_id: str, password: str) -> AuthUser:
        """Set a new password for an already-resolved user.

        supabase-py's auth.update_user reads the session held in client
        memory, which per-call clients never have, so the change goes through
        the admin API once the caller's token has been checked by get_user().
        """
        client = self._factory.admin()
        try:
            resp = client.auth.admin.update_user_by_id(user_id, {"password": password})
        except AuthError as exc:
            logger.warning("Password update rejected by provider: %s", exc.message)
            raise ProviderError(exc.message) from exc
        logger.info("Password updated for user %s", user_id)
        return _to_auth_user(resp.user)

    def sign_out(self, access_token: str) -> None:
        """Revoke the user's refresh tokens at the provider. Best effort.

        Logout must always succeed for the browser (its cookies are cleared
        regardless), so provider failures are logged rather than raised.
        """
        try:
            client = self._factory.admin()
            client.auth.admin.sign_out(access_token)
        except (AuthError, ProviderError, httpx.HTTPError) as exc:
            logger.warning("Provider sign-out failed: %s", getattr(exc, "message", exc))
