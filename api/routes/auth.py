"""
api/routes/auth.py -- Session relay endpoints.

Routes:
  POST /api/auth/login     -- password sign-in; sets both session cookies
  GET  /api/auth/refresh   -- swap the refresh cookie for a new token pair
  POST /api/auth/register  -- create a confirmed user via the provider admin API
  POST /api/auth/forgot-password -- mail a recovery link; always 200
  POST /api/auth/update-password -- set a new password for the current user
  POST /api/auth/logout    -- clear both cookies; best-effort provider sign-out
  GET  /api/auth/me        -- current user (cookie or Bearer token)

Every handler is a pass-through: validate required fields, call AuthGateway,
map ProviderError to 400 with the provider's message. Unexpected exceptions
fall through to the generic 500 handler in api/main.py.

Handlers are plain `def`: supabase-py's sync client blocks on HTTP, so FastAPI
runs them in its threadpool instead of on the event loop.

Security:
  POST /login, /register and /forgot-password are rate-limited per IP (settings).
  @router sits above @limiter.limit so FastAPI registers the rate-limited
  wrapper; SlowAPIMiddleware skips decorated routes.
  /forgot-password answers the same way whether or not the email exists.
  Cache-Control: no-store on every response that carries tokens in cookies.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from api.limiter import limiter
from api.models import (
    ForgotPasswordRequest,
    LoginRequest,
    OkResponse,
    RegisterRequest,
    UpdatePasswordRequest,
    UserEnvelope,
)
from auth.cookies import REFRESH_COOKIE, clear_session_cookies, set_session_cookies
from auth.dependencies import get_access_token, get_bearer_token, get_current_user
from auth.gateway import AuthGateway
from auth.models import AuthUser
from core.config import get_settings
from core.provider import ProviderError

logger = logging.getLogger("barberdesk.api.auth")

# Auth policy:
# - POST /api/auth/login:     public
# - GET  /api/auth/refresh:   refresh cookie required (401 without it)
# - POST /api/auth/register:  public, rate-limited; the provider admin API does the work
# - POST /api/auth/forgot-password: public, rate-limited
# - POST /api/auth/update-password: requires auth (recovery link token or session)
# - POST /api/auth/logout:    public -- clearing cookies needs no prior auth
# - GET  /api/auth/me:        requires auth (get_current_user)
router = APIRouter()

_MISSING_CREDENTIALS = "Email and password are required."


def _gateway(request: Request) -> AuthGateway:
    return request.app.state.auth_gateway


@router.post("/auth/login", response_model=UserEnvelope)
@limiter.limit(lambda: get_settings().login_rate_limit)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Sign in with email and password; set sb-access-token and sb-refresh-token."""
    if not body.email or not body.password:
        raise HTTPException(status_code=400, detail=_MISSING_CREDENTIALS)

    try:
        result = _gateway(request).sign_in(body.email, body.password)
    except ProviderError as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc

    resp = JSONResponse(content=UserEnvelope(user=result.user.raw).model_dump())
    set_session_cookies(resp, result.session)
    resp.headers["Cache-Control"] = "no-store"
    logger.info("User %s signed in", result.user.id)
    return resp


@router.get("/auth/refresh", response_model=OkResponse)
def refresh(request: Request) -> JSONResponse:
    """Mint a new token pair from the refresh cookie and rewrite both cookies.

    The provider rotates refresh tokens, so the old refresh cookie is useless
    after this call; both cookies are always replaced together.
    """
    refresh_token = request.cookies.get(REFRESH_COOKIE)
    if not refresh_token:
        raise HTTPException(status_code=401, detail="No refresh token")

    try:
        tokens = _gateway(request).refresh(refresh_token)
    except ProviderError as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc

    resp = JSONResponse(content=OkResponse().model_dump())
    set_session_cookies(resp, tokens)
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/auth/register", response_model=UserEnvelope)
@limiter.limit(lambda: get_settings().register_rate_limit)
def register(request: Request, body: RegisterRequest) -> UserEnvelope:
    """Create a user with full_name and phone as provider metadata.

    The account is created already confirmed. No cookies are set: the new
    user signs in separately.
    """
    if not body.email or not body.password:
        raise HTTPException(status_code=400, detail=_MISSING_CREDENTIALS)

    try:
        user = _gateway(request).register(
            body.email,
            body.password,
            full_name=body.full_name,
            phone=body.phone,
        )
    except ProviderError as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc

    return UserEnvelope(user=user.raw)


@router.post("/auth/forgot-password", response_model=OkResponse)
@limiter.limit(lambda: get_settings().password_reset_rate_limit)
def forgot_password(request: Request, body: ForgotPasswordRequest) -> OkResponse:
    """Mail a recovery link that lands on the /update-password page.

    Provider refusals are logged, not returned: the response must not reveal
    whether an account exists for the address.
    """
    if not body.email:
        raise HTTPException(status_code=400, detail="Email is required.")

    redirect_to = f"{request.base_url}update-password"
    try:
        _gateway(request).send_password_reset(body.email, redirect_to)
    except ProviderError as exc:
        logger.warning("Password reset for %s not sent: %s", body.email, exc.message)
    return OkResponse()


@router.post("/auth/update-password", response_model=OkResponse)
def update_password(request: Request, body: UpdatePasswordRequest) -> JSONResponse:
    """Set a new password for the caller.

    The recovery page sends the token from the mailed link as a Bearer header,
    which takes priority over any session cookie already in the browser.
    """
    if not body.password:
        raise HTTPException(status_code=400, detail="Password is required.")

    gateway = _gateway(request)
    token = get_bearer_token(request) or get_access_token(request)
    user = gateway.get_user(token) if token else None
    if user is None:
        raise HTTPException(status_code=401, detail="Authentication required.")

    try:
        gateway.update_password(user.id, body.password)
    except ProviderError as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc

    resp = JSONResponse(content=OkResponse().model_dump())
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/auth/logout", response_model=OkResponse)
def logout(request: Request) -> JSONResponse:
    """Clear both session cookies and revoke the session at the provider."""
    token = get_access_token(request)
    if token:
        _gateway(request).sign_out(token)
    resp = JSONResponse(content=OkResponse().model_dump())
    clear_session_cookies(resp)
    return resp


@router.get("/auth/me", response_model=UserEnvelope)
def me(current_user: AuthUser = Depends(get_current_user)) -> UserEnvelope:
    """Return the provider's record for the authenticated user."""
    return UserEnvelope(user=current_user.raw)
