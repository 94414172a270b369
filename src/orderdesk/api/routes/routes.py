"""Delivery route endpoints."""

from __future__ import annotations

import logging
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...models.domain import Identity
from ...schemas.customers import MessageResponse
from ...schemas.routes import RouteCreateRequest, RouteModel, RouteStatsResponse, RouteUpdateRequest
from ...services import routes as route_service
from ...services.errors import OrderDeskError
from ..deps import get_identity, get_store, raise_http, require_admin

router = APIRouter(prefix="/routes", tags=["routes"])


@router.get("", response_model=List[RouteModel], status_code=status.HTTP_200_OK)
def list_routes(
    active_only: bool = Query(default=False, alias="activeOnly"),
    client: Any = Depends(get_store),
    identity: Identity = Depends(get_identity),
) -> List[RouteModel]:
    return [RouteModel.from_route(route) for route in route_service.list_routes(client, active_only=active_only)]


@router.get("/{route_id}", response_model=RouteModel, status_code=status.HTTP_200_OK)
def get_route(
    route_id: str,
    client: Any = Depends(get_store),
    identity: Identity = Depends(get_identity),
) -> RouteModel:
    try:
        return RouteModel.from_route(route_service.get_route(client, route_id))
    except OrderDeskError as exc:
        raise_http(exc)


@router.get("/{route_id}/stats", response_model=RouteStatsResponse, status_code=status.HTTP_200_OK)
def get_route_stats(
    route_id: str,
    client: Any = Depends(get_store),
    admin: Identity = Depends(require_admin),
) -> RouteStatsResponse:
    try:
        return RouteStatsResponse(**route_service.route_stats(client, route_id))
    except OrderDeskError as exc:
        raise_http(exc)


@router.post("", response_model=RouteModel, status_code=status.HTTP_201_CREATED)
def create_route(
    payload: RouteCreateRequest,
    client: Any = Depends(get_store),
    admin: Identity = Depends(require_admin),
) -> RouteModel:
    try:
        return RouteModel.from_route(route_service.create_route(client, payload.name))
    except OrderDeskError as exc:
        raise_http(exc)
    except Exception as exc:
        logging.exception(f"Error creating route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create route: {str(exc)}",
        ) from exc


@router.put("/{route_id}", response_model=RouteModel, status_code=status.HTTP_200_OK)
def update_route(
    route_id: str,
    payload: RouteUpdateRequest,
    client: Any = Depends(get_store),
    admin: Identity = Depends(require_admin),
) -> RouteModel:
    try:
        route = route_service.update_route(client, route_id, name=payload.name, is_active=payload.isActive)
        return RouteModel.from_route(route)
    except OrderDeskError as exc:
        raise_http(exc)
    except Exception as exc:
        logging.exception(f"Error updating route {route_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update route: {str(exc)}",
        ) from exc


@router.delete("/{route_id}", response_model=MessageResponse, status_code=status.HTTP_200_OK)
def delete_route(
    route_id: str,
    client: Any = Depends(get_store),
    admin: Identity = Depends(require_admin),
) -> MessageResponse:
    try:
        route_service.delete_route(client, route_id)
        return MessageResponse(message="Route deleted successfully")
    except OrderDeskError as exc:
        raise_http(exc)
    except Exception as exc:
        logging.exception(f"Error deleting route {route_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete route: {str(exc)}",
        ) from exc
