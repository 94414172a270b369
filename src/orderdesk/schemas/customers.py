"""Customer-facing API schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from ..models.domain import Customer
from .orders import PaginationModel


class CustomerCreateRequest(BaseModel):
    name: str = Field(min_length=1)
    route: str = Field(min_length=1, description="Route name")
    salesExecutive: str = Field(min_length=1, description="Sales executive username")
    standardUnitPrice: float = Field(ge=0)
    premiumUnitPrice: float = Field(ge=0)
    phone: str = ""


class CustomerUpdateRequest(BaseModel):
    name: str | None = None
    route: str | None = None
    salesExecutive: str | None = None
    standardUnitPrice: float | None = Field(default=None, ge=0)
    premiumUnitPrice: float | None = Field(default=None, ge=0)
    phone: str | None = None


class CustomerModel(BaseModel):
    id: str
    name: str
    routeId: str | None = None
    route: str | None = None
    salesExecutive: str
    standardUnitPrice: float
    premiumUnitPrice: float
    phone: str
    createdAt: datetime | None = None
    updatedAt: datetime | None = None

    @classmethod
    def from_customer(cls, customer: Customer, route_name: str | None = None) -> "CustomerModel":
        return cls(
            id=customer.id,
            name=customer.name,
            routeId=customer.route_id,
            route=route_name,
            salesExecutive=customer.sales_executive,
            standardUnitPrice=customer.standard_unit_price,
            premiumUnitPrice=customer.premium_unit_price,
            phone=customer.phone,
            createdAt=customer.created_at,
            updatedAt=customer.updated_at,
        )


class CustomerListResponse(BaseModel):
    customers: List[CustomerModel]
    pagination: PaginationModel


class CustomerImportRequest(BaseModel):
    csvData: str


class CustomerImportResponse(BaseModel):
    message: str
    imported: int
    updated: int
    failed: int
    errors: List[str] | None = None


class MessageResponse(BaseModel):
    message: str
