"""
auth/dependencies.py -- FastAPI Depends() helpers for the current user.

Two token sources are checked in priority order:
  1. sb-access-token cookie -- set by POST /api/auth/login (browser).
  2. Authorization: Bearer <token> header -- API clients holding a provider JWT.

Either way the token is handed to the provider (AuthGateway.get_user); nothing
is verified locally.

try_get_current_user() is the soft variant (returns None on failure).
get_current_user() wraps it and raises HTTP 401 if unauthenticated.

Layer rule: no imports from web/ or catalog/.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from auth.cookies import ACCESS_COOKIE
from auth.gateway import AuthGateway
from auth.models import AuthUser


def get_bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None


def get_access_token(request: Request) -> str | None:
    """Return the caller's access token from the cookie or Bearer header."""
    return request.cookies.get(ACCESS_COOKIE) or get_bearer_token(request)


def try_get_current_user(request: Request) -> AuthUser | None:
    """Resolve the current user, or None. Never raises."""
    token = get_access_token(request)
    if token is None:
        return None
    gateway: AuthGateway = request.app.state.auth_gateway
    return gateway.get_user(token)


def get_current_user(request: Request) -> AuthUser:
    """Require authentication. Raises HTTP 401 if the request is not authenticated.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(user: AuthUser = Depends(get_current_user)): ...
    """
    user = try_get_current_user(request)
    if user is None:
        raise HTTPException(status_code=401, detail="Authentication required.")
    return user
