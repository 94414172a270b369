"""Order ledger, listing, export and dashboard endpoints."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ...config import settings
from ...models.domain import Identity
from ...schemas.customers import MessageResponse
from ...schemas.orders import (
    BulkDeleteResponse,
    DashboardResponse,
    OrderCreateRequest,
    OrderListResponse,
    OrderModel,
    OrderSummaryModel,
    OrderUpdateRequest,
    PaginationModel,
)
from ...services import orders as order_service
from ...services.errors import OrderDeskError
from ..deps import get_identity, get_store, raise_http, require_admin

router = APIRouter(prefix="/orders", tags=["orders"])


def _order_filters(
    date_: date | None = Query(default=None, alias="date", description="Single calendar day"),
    date_from: date | None = Query(default=None, alias="dateFrom"),
    date_to: date | None = Query(default=None, alias="dateTo"),
    route: str | None = Query(default=None, description="Route id, or 'all'"),
    vehicle: str | None = Query(default=None, description="Vehicle, or 'all'"),
    sales_executive: str | None = Query(default=None, alias="salesExecutive"),
    search: str | None = Query(default=None, description="Customer name or phone"),
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
) -> order_service.OrderFilters:
    page_size = min(limit or settings.default_page_size, settings.max_page_size)
    return order_service.OrderFilters(
        date=date_,
        date_from=date_from,
        date_to=date_to,
        route_id=route,
        vehicle=vehicle,
        sales_executive=sales_executive,
        search=search,
        page=page,
        page_size=page_size,
    )


@router.get("", response_model=OrderListResponse, status_code=status.HTTP_200_OK)
def list_orders(
    filters: order_service.OrderFilters = Depends(_order_filters),
    client: Any = Depends(get_store),
    identity: Identity = Depends(get_identity),
) -> OrderListResponse:
    try:
        result = order_service.list_orders(client, identity, filters)
    except OrderDeskError as exc:
        raise_http(exc)
    except Exception as exc:
        logging.exception(f"Error listing orders: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to list orders: {str(exc)}",
        ) from exc

    return OrderListResponse(
        orders=[OrderModel.from_priced(priced) for priced in result.orders],
        pagination=PaginationModel(
            total=result.total,
            page=result.page,
            limit=result.page_size,
            totalPages=result.total_pages,
        ),
        summary=OrderSummaryModel(
            totalOrders=result.summary.total_orders,
            totalStandardQty=result.summary.total_standard_qty,
            totalPremiumQty=result.summary.total_premium_qty,
            totalRevenue=result.summary.total_revenue,
        ),
    )


@router.get("/dashboard", response_model=DashboardResponse, status_code=status.HTTP_200_OK)
def get_dashboard(
    days: int = Query(default=30, ge=1, le=366),
    client: Any = Depends(get_store),
    identity: Identity = Depends(get_identity),
) -> DashboardResponse:
    try:
        return DashboardResponse(**order_service.build_dashboard(client, identity, days=days))
    except OrderDeskError as exc:
        raise_http(exc)
    except Exception as exc:
        logging.exception(f"Error building dashboard: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to build dashboard: {str(exc)}",
        ) from exc


@router.get("/export/csv", status_code=status.HTTP_200_OK)
def export_orders(
    filters: order_service.OrderFilters = Depends(_order_filters),
    client: Any = Depends(get_store),
    identity: Identity = Depends(get_identity),
) -> Response:
    try:
        content = order_service.export_orders_csv(client, identity, filters)
    except OrderDeskError as exc:
        raise_http(exc)
    except Exception as exc:
        logging.exception(f"Error exporting orders: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to export orders: {str(exc)}",
        ) from exc

    filename = f"orders-{date.today().isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.delete("/bulk/old-data", response_model=BulkDeleteResponse, status_code=status.HTTP_200_OK)
def delete_old_orders(
    days: int | None = Query(default=None, ge=0),
    client: Any = Depends(get_store),
    admin: Identity = Depends(require_admin),
) -> BulkDeleteResponse:
    days = settings.old_orders_days if days is None else days
    try:
        deleted = order_service.bulk_delete_older_than(client, days)
    except OrderDeskError as exc:
        raise_http(exc)
    except Exception as exc:
        logging.exception(f"Error deleting old orders: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete old orders: {str(exc)}",
        ) from exc
    logging.info(f"Admin {admin.username} deleted {deleted} orders older than {days} days")
    return BulkDeleteResponse(message=f"Deleted {deleted} orders older than {days} days", deletedCount=deleted)


@router.delete("/bulk/recent", response_model=BulkDeleteResponse, status_code=status.HTTP_200_OK)
def delete_recent_orders(
    days: int | None = Query(default=None, ge=0),
    client: Any = Depends(get_store),
    admin: Identity = Depends(require_admin),
) -> BulkDeleteResponse:
    days = settings.recent_orders_days if days is None else days
    try:
        deleted = order_service.bulk_delete_within_last(client, days)
    except OrderDeskError as exc:
        raise_http(exc)
    except Exception as exc:
        logging.exception(f"Error deleting recent orders: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete recent orders: {str(exc)}",
        ) from exc
    logging.info(f"Admin {admin.username} deleted {deleted} orders from the last {days} days")
    return BulkDeleteResponse(message=f"Deleted {deleted} orders from the last {days} days", deletedCount=deleted)


@router.get("/{order_id}", response_model=OrderModel, status_code=status.HTTP_200_OK)
def get_order(
    order_id: str,
    client: Any = Depends(get_store),
    identity: Identity = Depends(get_identity),
) -> OrderModel:
    try:
        return OrderModel.from_priced(order_service.get_order(client, identity, order_id))
    except OrderDeskError as exc:
        raise_http(exc)
    except Exception as exc:
        logging.exception(f"Error fetching order {order_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch order: {str(exc)}",
        ) from exc


@router.post("", response_model=OrderModel, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreateRequest,
    client: Any = Depends(get_store),
    identity: Identity = Depends(get_identity),
) -> OrderModel:
    try:
        priced = order_service.create_order(
            client,
            identity,
            date=payload.date,
            customer_id=payload.customerId,
            vehicle=payload.vehicle,
            standard_qty=payload.standardQty,
            premium_qty=payload.premiumQty,
        )
    except OrderDeskError as exc:
        raise_http(exc)
    except Exception as exc:
        logging.exception(f"Error creating order: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create order: {str(exc)}",
        ) from exc
    return OrderModel.from_priced(priced)


@router.put("/{order_id}", response_model=OrderModel, status_code=status.HTTP_200_OK)
def update_order(
    order_id: str,
    payload: OrderUpdateRequest,
    client: Any = Depends(get_store),
    admin: Identity = Depends(require_admin),
) -> OrderModel:
    changes = {
        "date": payload.date,
        "customer_id": payload.customerId,
        "vehicle": payload.vehicle,
        "standard_qty": payload.standardQty,
        "premium_qty": payload.premiumQty,
    }
    try:
        return OrderModel.from_priced(order_service.update_order(client, order_id, changes))
    except OrderDeskError as exc:
        raise_http(exc)
    except Exception as exc:
        logging.exception(f"Error updating order {order_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update order: {str(exc)}",
        ) from exc


@router.delete("/{order_id}", response_model=MessageResponse, status_code=status.HTTP_200_OK)
def delete_order(
    order_id: str,
    client: Any = Depends(get_store),
    admin: Identity = Depends(require_admin),
) -> MessageResponse:
    try:
        order_service.delete_order(client, order_id)
    except OrderDeskError as exc:
        raise_http(exc)
    except Exception as exc:
        logging.exception(f"Error deleting order {order_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete order: {str(exc)}",
        ) from exc
    return MessageResponse(message="Order deleted successfully")
