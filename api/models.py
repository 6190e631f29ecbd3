"""
API request and response models for BarberDesk REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.

Credentials fields are Optional on purpose: a missing email or password is a
400 with a fixed message from the route, not a 422 schema error.

Only emails are whitespace-stripped. Passwords reach the provider exactly as
typed: "  pw  " and "pw" are different passwords.
"""

from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

Email = Annotated[str, StringConstraints(strip_whitespace=True, max_length=320)]
Password = Annotated[str, StringConstraints(max_length=255)]

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class LoginRequest(BaseModel):
    """Request body for POST /api/auth/login."""

    email: Optional[Email] = None
    password: Optional[Password] = None


class RegisterRequest(BaseModel):
    """Request body for POST /api/auth/register.

    full_name and phone are stored as provider user_metadata, not validated here.
    """

    email: Optional[Email] = None
    password: Optional[Password] = None
    full_name: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=40)


class ForgotPasswordRequest(BaseModel):
    """Request body for POST /api/auth/forgot-password."""

    email: Optional[Email] = None


class UpdatePasswordRequest(BaseModel):
    """Request body for POST /api/auth/update-password."""

    password: Optional[Password] = None


class ServiceCreate(BaseModel):
    """Request body for POST /api/services.

    barber_id may be omitted by a signed-in caller; the route fills it with
    the caller's user id.
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    name: str = Field(min_length=1, max_length=255)
    price: float = Field(ge=0)
    duration: int = Field(gt=0, description="Duration in minutes.")
    barber_id: Optional[str] = None
    active: bool = True
    image_url: Optional[str] = Field(default=None, max_length=2048)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class UserEnvelope(BaseModel):
    """{"user": <provider user record>} -- returned by login, register and me."""

    user: dict[str, Any]


class OkResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    ok: bool = True


class ServiceStubResponse(BaseModel):
    """Acknowledgement returned by the per-id service routes."""

    id: str
    message: str
    body: Optional[dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """Error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str
    provider_configured: bool
