"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). The provider owns the
real user record and token lifecycle; these classes only carry what BarberDesk
reads from it.

Layer rule: no imports from api/, web/, or catalog/.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class SessionTokens:
    """The provider's access/refresh token pair. Both are opaque strings.

    BarberDesk never decodes or verifies them; it relays them through the
    sb-access-token / sb-refresh-token cookies.
    """

    access_token: str
    refresh_token: str


@dataclass
class AuthUser:
    """A user record as returned by the provider.

    raw is the provider's full JSON-serialisable record. API responses return
    it verbatim ({"user": raw}) so clients see exactly what the provider sent.
    """

    id: str
    email: str | None = None
    user_metadata: dict = field(default_factory=dict)
    raw: dict = field(default_factory=dict)


@dataclass
class SignInResult:
    user: AuthUser
    session: SessionTokens
