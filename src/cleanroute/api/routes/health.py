"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Check whether the managed database used for route sharing is reachable."""
    from ...persistence.shared_routes import NOT_CONFIGURED_MESSAGE, SHARED_ROUTES_TABLE, get_supabase_client

    supabase = get_supabase_client()
    if not supabase:
        return {"configured": False, "message": NOT_CONFIGURED_MESSAGE}

    try:
        supabase.table(SHARED_ROUTES_TABLE).select("id", count="exact").limit(1).execute()
        return {
            "configured": True,
            "connected": True,
            "message": "Database connected.",
        }
    except Exception as exc:
        return {
            "configured": True,
            "connected": False,
            "error": str(exc),
            "message": f"Database connection error: {exc}",
        }
