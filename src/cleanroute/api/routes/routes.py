"""Routing endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, status

from ...persistence.shared_routes import get_shared_route, list_shared_routes, share_route
from ...schemas.routing import (
    OptimizeRouteRequest,
    OptimizeRouteResponse,
    SharedRouteSummary,
    ShareRouteRequest,
    ShareRouteResponse,
)
from ...services.routing.errors import SharingUnavailableError
from ...services.routing.service import optimize_route

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post("/optimize", response_model=OptimizeRouteResponse, status_code=status.HTTP_200_OK)
def optimize(payload: OptimizeRouteRequest) -> OptimizeRouteResponse:
    try:
        return optimize_route(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error optimizing route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to optimize route: {str(exc)}"
        ) from exc


@router.post("/share", response_model=ShareRouteResponse, status_code=status.HTTP_200_OK)
def share(payload: ShareRouteRequest) -> ShareRouteResponse:
    """Share an optimized route with team members."""
    if not payload.route.points:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Route must have points array"
        )
    try:
        summary = share_route(
            route_data=payload.route.model_dump(mode="json", by_alias=True),
            team_member_ids=payload.team_member_ids,
            name=payload.name,
            description=payload.description,
            created_by=payload.requested_by,
        )
    except SharingUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error sharing route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to share route: {str(exc)}"
        ) from exc
    return ShareRouteResponse(shared_route=SharedRouteSummary(**summary))


@router.get("/shared", status_code=status.HTTP_200_OK)
def shared_routes(
    team_member_id: str | None = Query(default=None, alias="teamMemberId", description="Only routes shared with this team member"),
) -> dict:
    try:
        return {"routes": list_shared_routes(team_member_id=team_member_id)}
    except SharingUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error listing shared routes: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to get routes: {str(exc)}"
        ) from exc


@router.get("/shared/{route_id}", status_code=status.HTTP_200_OK)
def shared_route(route_id: str) -> dict:
    try:
        route = get_shared_route(route_id)
    except SharingUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error getting shared route {route_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to get route: {str(exc)}"
        ) from exc
    if route is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Route not found")
    return {"route": route}
