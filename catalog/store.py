"""
catalog/store.py -- Access to the provider's `services` table.

A service is something a barber sells: a haircut, a beard trim. Rows live in
Supabase; this module only issues PostgREST queries through supabase-py.

Pattern: Repository. Route handlers never build queries themselves. Rows are
returned as the provider's dicts -- the table schema is owned by the provider
migrations, not by this codebase.

Access control: every query runs on a client scoped to the caller's access
token, so the provider's row-level security policies decide which rows are
visible or writable. An anonymous caller gets whatever the anon role may see.

Usage:
    store = ServiceStore(factory)
    rows = store.list_services(access_token=token, barber_id=user.id)
    row = store.create_service({"name": "Fade", "price": 40, "duration": 30}, access_token=token)
"""

import logging
from typing import Any, Optional

from supabase import PostgrestAPIError

from core.provider import ProviderError, SupabaseClientFactory

logger = logging.getLogger("barberdesk.catalog")

_TABLE = "services"


class ServiceStore:
    def __init__(self, factory: SupabaseClientFactory) -> None:
        self._factory = factory

    def list_services(
        self,
        access_token: Optional[str] = None,
        barber_id: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """Return services, newest first, optionally for a single barber."""
        client = self._factory.anon(access_token)
        query = client.table(_TABLE).select("*")
        if barber_id:
            query = query.eq("barber_id", barber_id)
        try:
            resp = query.order("created_at", desc=True).execute()
        except PostgrestAPIError as exc:
            logger.warning("Listing services failed: %s", exc.message)
            raise ProviderError(exc.message or "Could not list services.") from exc
        return resp.data or []

    def create_service(self, payload: dict[str, Any], access_token: Optional[str] = None) -> dict[str, Any]:
        """Insert one service and return the stored row (with id and timestamps)."""
        client = self._factory.anon(access_token)
        try:
            resp = client.table(_TABLE).insert(payload).execute()
        except PostgrestAPIError as exc:
            logger.warning("Creating service failed: %s", exc.message)
            raise ProviderError(exc.message or "Could not create service.") from exc
        if not resp.data:
            # RLS can accept the insert but hide the row from the returning select.
            raise ProviderError("Service was not returned by the provider.")
        return resp.data[0]
