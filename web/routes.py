"""
web/routes.py -- Jinja2 template routes for the BarberDesk web UI.

These routes serve HTML. They share app.state with the API routes (same auth
gateway) but return pages instead of JSON.

The login, register and password recovery pages are client-rendered forms: a
small inline script posts JSON to the matching /api/auth endpoint and shows
data.error on failure. The dashboard is server-rendered from the session cookie.

Routes:
  GET  /           -- redirect to /dashboard
  GET  /dashboard  -- greeting for the signed-in user (auth required)
  GET  /login      -- login form
  GET  /register   -- registration form
  GET  /forgot-password  -- request a recovery link
  GET  /update-password  -- set a new password from the recovery link
  POST /logout     -- clear session cookies, redirect /login
"""

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import quote, urlsplit

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from auth.cookies import clear_session_cookies
from auth.dependencies import get_access_token, try_get_current_user

logger = logging.getLogger("barberdesk.web")

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
router = APIRouter()


# ---------------------------------------------------------------------------
# Auth helpers
# ---------------------------------------------------------------------------


def _safe_next(next_url: Optional[str]) -> str:
    """Validate a post-login redirect target. Only accept relative paths.

    Browsers read "\\" as "/" and drop tabs and newlines, so "/\\host" and
    "/\\t/host" are protocol-relative too. Targets containing either, or
    parsing with a scheme or host, fall back to /dashboard.
    """
    if not next_url or not next_url.startswith("/"):
        return "/dashboard"
    if "\\" in next_url or any(ch.isspace() or ord(ch) < 0x20 for ch in next_url):
        return "/dashboard"
    parts = urlsplit(next_url)
    if next_url.startswith("//") or parts.scheme or parts.netloc:
        return "/dashboard"
    return next_url


def _login_redirect(request: Request) -> RedirectResponse:
    return RedirectResponse(f"/login?next={quote(request.url.path)}", status_code=302)


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------


@router.get("/", include_in_schema=False)
def root() -> RedirectResponse:
    return RedirectResponse("/dashboard", status_code=302)


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard(request: Request) -> HTMLResponse:
    """Render the welcome page for the user behind the session cookie."""
    user = try_get_current_user(request)
    if user is None:
        return _login_redirect(request)
    return templates.TemplateResponse(request, "dashboard.html", {"user": user})


@router.get("/login", response_class=HTMLResponse)
def login_form(request: Request) -> HTMLResponse:
    """Render the login form. Signed-in visitors go straight to ?next or /dashboard."""
    next_url = _safe_next(request.query_params.get("next"))
    if try_get_current_user(request) is not None:
        return RedirectResponse(next_url, status_code=302)
    return templates.TemplateResponse(request, "login.html", {"next_url": next_url})


@router.get("/register", response_class=HTMLResponse)
def register_form(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "register.html", {})


@router.get("/forgot-password", response_class=HTMLResponse)
def forgot_password_form(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "forgot_password.html", {})


@router.get("/update-password", response_class=HTMLResponse)
def update_password_form(request: Request) -> HTMLResponse:
    """Landing page of the recovery link. The token arrives in the URL fragment."""
    return templates.TemplateResponse(request, "update_password.html", {})


@router.post("/logout")
def logout(request: Request) -> RedirectResponse:
    """Clear the session cookies and redirect to the login page."""
    token = get_access_token(request)
    if token:
        request.app.state.auth_gateway.sign_out(token)
    resp = RedirectResponse("/login", status_code=302)
    clear_session_cookies(resp)
    return resp
