"""Route and sales executive API schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from ..models.domain import Route, SalesExecutive


class RouteCreateRequest(BaseModel):
    name: str = Field(min_length=1)


class RouteUpdateRequest(BaseModel):
    name: str | None = None
    isActive: bool | None = None


class RouteModel(BaseModel):
    id: str
    name: str
    isActive: bool
    createdAt: datetime | None = None

    @classmethod
    def from_route(cls, route: Route) -> "RouteModel":
        return cls(id=route.id, name=route.name, isActive=route.is_active, createdAt=route.created_at)


class RouteStatsResponse(BaseModel):
    customersCount: int
    ordersCount: int


class SalesExecutiveModel(BaseModel):
    id: str
    username: str
    displayName: str

    @classmethod
    def from_executive(cls, executive: SalesExecutive) -> "SalesExecutiveModel":
        return cls(id=executive.id, username=executive.username, displayName=executive.display_name)
