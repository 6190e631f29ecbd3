"""
tests/test_web_pages.py -- Integration tests for the HTML pages and their auth redirects.

The web_client follows no redirects, so we assert on Location headers directly.

Coverage:
  - Anonymous dashboard visit -> 302 /login?next=/dashboard
  - Signed-in dashboard shows the user's email (server-rendered)
  - /login and /register render their forms; signed-in /login skips the form
  - next= is always a relative path (open-redirect prevention)
  - /forgot-password and /update-password render the recovery forms
  - POST /logout clears cookies and redirects to /login
"""

from __future__ import annotations

from types import SimpleNamespace
from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from fastapi.testclient import TestClient
from supabase import AuthApiError

from conftest import cookie_header, make_user, set_cookie_headers


class TestDashboard:
    def test_anonymous_redirects_to_login(self, api_client: TestClient, provider) -> None:
        resp = api_client.get("/dashboard")
        assert resp.status_code == 302
        location = resp.headers["location"]
        assert location.startswith("/login")
        assert parse_qs(urlparse(location).query)["next"] == ["/dashboard"]

    def test_invalid_cookie_redirects_to_login(self, api_client: TestClient, provider) -> None:
        provider.client.auth.get_user.side_effect = AuthApiError("invalid JWT", 401, "bad_jwt")
        resp = api_client.get("/dashboard", headers=cookie_header({"sb-access-token": "garbage"}))
        assert resp.status_code == 302

    def test_unreachable_provider_redirects_to_login(self, api_client: TestClient, provider) -> None:
        provider.client.auth.get_user.side_effect = httpx.ConnectError("connection refused")
        resp = api_client.get("/dashboard", headers=cookie_header({"sb-access-token": "access-1"}))
        assert resp.status_code == 302
        assert resp.headers["location"].startswith("/login")

    def test_signed_in_user_is_greeted_by_email(self, api_client: TestClient, provider) -> None:
        provider.client.auth.get_user.return_value = SimpleNamespace(
            user=make_user(email="carlos@example.com", full_name="Carlos")
        )
        resp = api_client.get("/dashboard", headers=cookie_header({"sb-access-token": "access-1"}))
        assert resp.status_code == 200
        assert "text/html" in resp.headers["content-type"]
        assert "Welcome, carlos@example.com" in resp.text
        provider.client.auth.get_user.assert_called_once_with("access-1")

    def test_email_is_html_escaped(self, api_client: TestClient, provider) -> None:
        provider.client.auth.get_user.return_value = SimpleNamespace(user=make_user(email="<script>x</script>"))
        resp = api_client.get("/dashboard", headers=cookie_header({"sb-access-token": "access-1"}))
        assert "<script>x</script>" not in resp.text
        assert "&lt;script&gt;" in resp.text

    def test_root_redirects_to_dashboard(self, api_client: TestClient, provider) -> None:
        resp = api_client.get("/")
        assert resp.status_code == 302
        assert resp.headers["location"] == "/dashboard"


class TestLoginAndRegisterPages:
    def test_login_form_posts_to_login_api(self, api_client: TestClient, provider) -> None:
        resp = api_client.get("/login")
        assert resp.status_code == 200
        assert "/api/auth/login" in resp.text
        assert 'type="password"' in resp.text

    def test_signed_in_user_skips_login_form(self, api_client: TestClient, provider) -> None:
        provider.client.auth.get_user.return_value = SimpleNamespace(user=make_user())
        resp = api_client.get("/login?next=/dashboard", headers=cookie_header({"sb-access-token": "access-1"}))
        assert resp.status_code == 302
        assert resp.headers["location"] == "/dashboard"

    def test_register_form_posts_to_register_api(self, api_client: TestClient, provider) -> None:
        resp = api_client.get("/register")
        assert resp.status_code == 200
        assert "/api/auth/register" in resp.text
        assert 'id="full_name"' in resp.text
        assert 'id="phone"' in resp.text

    def test_login_form_links_to_password_reset(self, api_client: TestClient, provider) -> None:
        resp = api_client.get("/login")
        assert 'href="/forgot-password"' in resp.text

    def test_forgot_password_form_posts_to_api(self, api_client: TestClient, provider) -> None:
        resp = api_client.get("/forgot-password")
        assert resp.status_code == 200
        assert "/api/auth/forgot-password" in resp.text

    def test_update_password_form_sends_recovery_token(self, api_client: TestClient, provider) -> None:
        resp = api_client.get("/update-password")
        assert resp.status_code == 200
        assert "/api/auth/update-password" in resp.text
        assert "access_token" in resp.text


class TestSafeNext:
    def test_absolute_next_is_replaced(self, api_client: TestClient, provider) -> None:
        resp = api_client.get("/login?next=https://attacker.example")
        assert resp.status_code == 200
        assert "attacker.example" not in resp.text

    def test_protocol_relative_next_is_replaced(self, api_client: TestClient, provider) -> None:
        provider.client.auth.get_user.return_value = SimpleNamespace(user=make_user())
        resp = api_client.get("/login?next=//attacker.example", headers=cookie_header({"sb-access-token": "a"}))
        assert resp.status_code == 302
        assert resp.headers["location"] == "/dashboard"

    @pytest.mark.parametrize(
        "target",
        ["/%5Cattacker.example", "/%5C%5Cattacker.example", "/%09/attacker.example", "/%0A/attacker.example"],
    )
    def test_backslash_and_control_chars_are_replaced(self, api_client: TestClient, provider, target: str) -> None:
        resp = api_client.get(f"/login?next={target}")
        assert resp.status_code == 200
        assert "attacker.example" not in resp.text
        assert 'const nextUrl = "/dashboard";' in resp.text

    def test_plain_relative_path_is_kept(self, api_client: TestClient, provider) -> None:
        resp = api_client.get("/login?next=/dashboard%3Ftab%3Dservices")
        assert 'const nextUrl = "/dashboard?tab=services";' in resp.text


class TestLogoutPage:
    def test_logout_clears_cookies_and_redirects(self, api_client: TestClient, provider) -> None:
        resp = api_client.post("/logout", headers=cookie_header({"sb-access-token": "access-1"}))
        assert resp.status_code == 302
        assert resp.headers["location"] == "/login"
        names = {h.split("=", 1)[0] for h in set_cookie_headers(resp)}
        assert names == {"sb-access-token", "sb-refresh-token"}
        provider.admin_client.auth.admin.sign_out.assert_called_once_with("access-1")
