"""
auth/cookies.py -- Session cookie relay between the browser and the provider.

The browser stores the provider's token pair in two cookies:
  sb-access-token   -- short-lived JWT, sent as Bearer to the provider
  sb-refresh-token  -- exchanged for a new pair by GET /api/auth/refresh

Cookie attributes:
  httponly=True: JS cannot read either token (XSS mitigation).
  samesite="strict": never sent on cross-site requests, including top-level
      navigations -- CSRF mitigation for the cookie-authenticated routes.
  secure: HTTPS only. On by default; SECURE_COOKIES=false for plain-http dev.
  max_age: one week (SESSION_MAX_AGE). The provider decides whether the
      tokens are still valid; the cookie lifetime only bounds how long the
      browser keeps them.
"""

from __future__ import annotations

from starlette.responses import Response

from auth.models import SessionTokens
from core.config import get_settings

ACCESS_COOKIE = "sb-access-token"
REFRESH_COOKIE = "sb-refresh-token"


def set_session_cookies(response: Response, tokens: SessionTokens) -> None:
    """Write both session cookies onto the response."""
    settings = get_settings()
    for name, value in ((ACCESS_COOKIE, tokens.access_token), (REFRESH_COOKIE, tokens.refresh_token)):
        response.set_cookie(
            name,
            value=value,
            max_age=settings.session_max_age,
            path="/",
            httponly=True,
            secure=settings.secure_cookies,
            samesite="strict",
        )


def clear_session_cookies(response: Response) -> None:
    """Expire both session cookies. Attributes must match the ones used to set them."""
    settings = get_settings()
    for name in (ACCESS_COOKIE, REFRESH_COOKIE):
        response.delete_cookie(
            name,
            path="/",
            httponly=True,
            secure=settings.secure_cookies,
            samesite="strict",
        )
