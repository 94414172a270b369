"""Order API schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from ..models.domain import PricedOrder


class OrderCreateRequest(BaseModel):
    date: datetime
    customerId: str = Field(min_length=1)
    vehicle: str = Field(min_length=1)
    standardQty: int = Field(default=0, ge=0)
    premiumQty: int = Field(default=0, ge=0)


class OrderUpdateRequest(BaseModel):
    date: datetime | None = None
    customerId: str | None = None
    vehicle: str | None = None
    standardQty: int | None = Field(default=None, ge=0)
    premiumQty: int | None = Field(default=None, ge=0)


class OrderModel(BaseModel):
    id: str
    date: datetime
    customerId: str
    customerName: str
    customerPhone: str
    routeId: str | None = None
    route: str
    salesExecutive: str
    vehicle: str
    standardQty: int
    premiumQty: int
    standardUnitPrice: float
    premiumUnitPrice: float
    standardTotal: float
    premiumTotal: float
    total: float
    createdBy: str | None = None
    createdByUsername: str | None = None
    createdAt: datetime | None = None
    updatedAt: datetime | None = None

    @classmethod
    def from_priced(cls, priced: PricedOrder) -> "OrderModel":
        order = priced.order
        return cls(
            id=order.id,
            date=order.date,
            customerId=order.customer_id,
            customerName=priced.customer_name,
            customerPhone=priced.customer_phone,
            routeId=order.route_id,
            route=priced.route_name,
            salesExecutive=order.sales_executive,
            vehicle=order.vehicle,
            standardQty=order.standard_qty,
            premiumQty=order.premium_qty,
            standardUnitPrice=priced.standard_unit_price,
            premiumUnitPrice=priced.premium_unit_price,
            standardTotal=priced.standard_total,
            premiumTotal=priced.premium_total,
            total=priced.total,
            createdBy=order.created_by,
            createdByUsername=order.created_by_username,
            createdAt=order.created_at,
            updatedAt=order.updated_at,
        )


class PaginationModel(BaseModel):
    total: int
    page: int
    limit: int
    totalPages: int


class OrderSummaryModel(BaseModel):
    totalOrders: int
    totalStandardQty: int
    totalPremiumQty: int
    totalRevenue: float


class OrderListResponse(BaseModel):
    orders: List[OrderModel]
    pagination: PaginationModel
    summary: OrderSummaryModel


class BulkDeleteResponse(BaseModel):
    message: str
    deletedCount: int


class DashboardKpiModel(BaseModel):
    totalRevenue: float
    totalOrders: int
    avgOrderValue: float
    totalStandard: int
    totalPremium: int
    revenueGrowth: float
    ordersGrowth: float


class RevenuePointModel(BaseModel):
    date: str
    revenue: float
    orders: int


class RouteRevenueModel(BaseModel):
    name: str
    revenue: float


class DashboardResponse(BaseModel):
    kpi: DashboardKpiModel
    revenueChart: List[RevenuePointModel]
    topRoutes: List[RouteRevenueModel]
