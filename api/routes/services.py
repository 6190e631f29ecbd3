"""
api/routes/services.py -- Barbershop service catalogue endpoints.

Routes:
  GET    /api/services          -- list services (optionally ?barber_id=)
  POST   /api/services          -- create a service
  GET    /api/services/{id}     -- acknowledgement only
  PATCH  /api/services/{id}     -- acknowledgement only, echoes the body
  DELETE /api/services/{id}     -- acknowledgement only

The collection routes go through ServiceStore with the caller's access token,
so the provider's row-level security decides what is visible and writable.

The per-id routes are acknowledgements: they echo what they received and do
not read or write the services table.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, HTTPException, Request

from api.models import ServiceCreate, ServiceStubResponse
from auth.dependencies import get_access_token, try_get_current_user
from catalog.store import ServiceStore
from core.provider import ProviderError

# Auth policy:
# - All routes are public at this layer. The provider enforces access per row
#   using the caller's token (or the anon role when there is none).
router = APIRouter()


def _store(request: Request) -> ServiceStore:
    return request.app.state.service_store


@router.get("/services", response_model=list[dict[str, Any]])
def list_services(request: Request, barber_id: Optional[str] = None) -> list[dict[str, Any]]:
    """Return services, newest first."""
    try:
        return _store(request).list_services(access_token=get_access_token(request), barber_id=barber_id)
    except ProviderError as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc


@router.post("/services", response_model=dict[str, Any])
def create_service(request: Request, body: ServiceCreate) -> dict[str, Any]:
    """Create a service. barber_id defaults to the signed-in caller."""
    payload = body.model_dump(exclude_none=True)
    if "barber_id" not in payload:
        user = try_get_current_user(request)
        if user is not None:
            payload["barber_id"] = user.id
    try:
        return _store(request).create_service(payload, access_token=get_access_token(request))
    except ProviderError as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc


@router.get("/services/{service_id}", response_model=ServiceStubResponse, response_model_exclude_none=True)
def get_service(service_id: str) -> ServiceStubResponse:
    return ServiceStubResponse(id=service_id, message="GET service by id")


@router.patch("/services/{service_id}", response_model=ServiceStubResponse)
def update_service(service_id: str, body: dict[str, Any] = Body(...)) -> ServiceStubResponse:
    return ServiceStubResponse(id=service_id, body=body, message="PATCH service by id")


@router.delete("/services/{service_id}", response_model=ServiceStubResponse, response_model_exclude_none=True)
def delete_service(service_id: str) -> ServiceStubResponse:
    return ServiceStubResponse(id=service_id, message="DELETE service by id")
