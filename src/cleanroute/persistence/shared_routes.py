"""Supabase persistence for routes shared with team members."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Sequence

from supabase import Client, create_client

from ..config import settings
from ..services.routing.errors import SharingUnavailableError

logger = logging.getLogger(__name__)

SHARED_ROUTES_TABLE = "shared_routes"
ROUTE_SHARES_TABLE = "route_shares"
NOTIFICATIONS_TABLE = "notifications"
NOT_CONFIGURED_MESSAGE = (
    "Supabase not configured. Set CLEANROUTE_SUPABASE_URL and CLEANROUTE_SUPABASE_KEY environment variables."
)


@lru_cache()
def get_supabase_client() -> Client | None:
    """Return the shared-routes database client, or None when credentials are missing."""
    if not settings.supabase_url or not settings.supabase_key:
        logger.warning("Route sharing disabled: Supabase URL or key not configured")
        return None
    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as exc:
        logger.error(f"Could not create Supabase client for route sharing: {exc}")
        return None


def _require_client() -> Client:
    supabase = get_supabase_client()
    if not supabase:
        raise SharingUnavailableError(NOT_CONFIGURED_MESSAGE)
    return supabase


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def share_route(
    *,
    route_data: dict[str, Any],
    team_member_ids: Sequence[str],
    name: str | None = None,
    description: str | None = None,
    created_by: str | None = None,
) -> dict[str, Any]:
    """Store a route and grant access to the given team members.

    Creates the ``shared_routes`` record, one ``route_shares`` row per team member,
    and a notification per team member. A failed notification insert is logged and
    does not undo the share.
    """
    supabase = _require_client()
    created_at = _now_iso()
    record = {
        "name": name or f"Route {datetime.now(timezone.utc).date().isoformat()}",
        "description": description or "",
        "route_data": route_data,
        "created_by": created_by,
        "created_at": created_at,
    }
    response = supabase.table(SHARED_ROUTES_TABLE).insert(record).execute()
    if not response.data:
        raise RuntimeError("Failed to create shared route")
    shared_route = response.data[0]
    route_id = shared_route["id"]

    shares = [
        {"route_id": route_id, "team_member_id": member_id, "shared_at": created_at}
        for member_id in team_member_ids
    ]
    supabase.table(ROUTE_SHARES_TABLE).insert(shares).execute()

    notifications = [
        {
            "user_id": member_id,
            "type": "route_shared",
            "title": "New Route Assigned",
            "message": f'A new route "{shared_route["name"]}" has been shared with you.',
            "is_read": False,
            "related_id": route_id,
            "created_at": created_at,
        }
        for member_id in team_member_ids
    ]
    try:
        supabase.table(NOTIFICATIONS_TABLE).insert(notifications).execute()
    except Exception as exc:
        logger.warning(f"Failed to create route notifications for shared route {route_id}: {exc}")

    logger.info(f"Shared route {route_id} with {len(team_member_ids)} team member(s)")
    return {
        "id": str(route_id),
        "name": shared_route["name"],
        "description": shared_route.get("description") or "",
        "shared_with": len(team_member_ids),
    }


def list_shared_routes(team_member_id: str | None = None) -> list[dict[str, Any]]:
    """Return shared routes, newest first, optionally only those shared with one team member."""
    supabase = _require_client()

    query = supabase.table(SHARED_ROUTES_TABLE).select("id, name, description, created_by, created_at")
    if team_member_id:
        shares = (
            supabase.table(ROUTE_SHARES_TABLE)
            .select("route_id")
            .eq("team_member_id", team_member_id)
            .execute()
        )
        route_ids = [share["route_id"] for share in shares.data or []]
        if not route_ids:
            return []
        query = query.in_("id", route_ids)

    response = query.order("created_at", desc=True).execute()
    return list(response.data or [])


def get_shared_route(route_id: str) -> dict[str, Any] | None:
    """Fetch one shared route with the list of team members it was shared with."""
    supabase = _require_client()

    response = supabase.table(SHARED_ROUTES_TABLE).select("*").eq("id", route_id).limit(1).execute()
    if not response.data:
        return None
    route = dict(response.data[0])

    try:
        shares = (
            supabase.table(ROUTE_SHARES_TABLE)
            .select("team_member_id, shared_at")
            .eq("route_id", route_id)
            .execute()
        )
        route["shared_with"] = list(shares.data or [])
    except Exception as exc:
        logger.warning(f"Failed to load shares for route {route_id}: {exc}")
        route["shared_with"] = []
    return route
