"""Role-scoped order listing with pagination and full-set summaries.

The listing runs in two passes: the store narrows orders by the directly
filterable columns (date span, route, vehicle, sales executive), then the
matched orders are joined in memory to their customers and routes, searched
by customer name or phone, priced, sorted and paginated. The summary is
computed over every filtered order, not only the returned page.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterable, Optional

from ...models.domain import Identity, Order, PricedOrder, Route
from ...persistence import customers as customer_store
from ...persistence import orders as order_store
from ...persistence.orders import OrderPredicate
from ...persistence.query import day_span, fetch_by_ids
from ...persistence.routes import route_from_row
from ..errors import ValidationError
from ..pricing import price_order


@dataclass(slots=True)
class OrderFilters:
    date: Optional[date] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    route_id: Optional[str] = None
    vehicle: Optional[str] = None
    sales_executive: Optional[str] = None
    search: Optional[str] = None
    page: int = 1
    page_size: int = 50


@dataclass(slots=True)
class OrderSummary:
    total_orders: int = 0
    total_standard_qty: int = 0
    total_premium_qty: int = 0
    total_revenue: float = 0.0


@dataclass(slots=True)
class OrderPage:
    orders: list[PricedOrder]
    total: int
    page: int
    page_size: int
    summary: OrderSummary = field(default_factory=OrderSummary)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0


def build_predicate(identity: Identity, filters: OrderFilters) -> OrderPredicate:
    predicate = OrderPredicate()

    if filters.date is not None:
        predicate.date_from, predicate.date_to = day_span(filters.date)
    else:
        if filters.date_from is not None:
            predicate.date_from = day_span(filters.date_from)[0]
        if filters.date_to is not None:
            predicate.date_to = day_span(filters.date_to)[1]

    if filters.route_id and filters.route_id != "all":
        predicate.route_id = filters.route_id
    if filters.vehicle and filters.vehicle != "all":
        predicate.vehicle = filters.vehicle

    # Non-admins only ever see their own orders, whatever filter they send
    if not identity.is_admin:
        predicate.sales_executive = identity.username
    elif filters.sales_executive and filters.sales_executive != "all":
        predicate.sales_executive = filters.sales_executive
    return predicate


def price_orders(client: Any, orders: Iterable[Order]) -> list[PricedOrder]:
    """Join orders to their current customer and route and compute totals."""
    orders = list(orders)
    customers = customer_store.get_customers(client, [order.customer_id for order in orders])
    route_rows = fetch_by_ids(client, "routes", (customer.route_id for customer in customers.values()))
    routes: dict[str, Route] = {route_id: route_from_row(row) for route_id, row in route_rows.items()}

    priced: list[PricedOrder] = []
    for order in orders:
        customer = customers.get(order.customer_id)
        route = routes.get(customer.route_id) if customer is not None else None
        priced.append(price_order(order, customer, route))
    return priced


def price_single(client: Any, order: Order) -> PricedOrder:
    return price_orders(client, [order])[0]


def _matches_search(priced: PricedOrder, needle: str) -> bool:
    return needle in priced.customer_name.lower() or needle in priced.customer_phone.lower()


def _sort_key(priced: PricedOrder) -> tuple[datetime, datetime]:
    return priced.order.date, priced.order.created_at or datetime.min


def collect_orders(client: Any, identity: Identity, filters: OrderFilters) -> list[PricedOrder]:
    """Every order matching the filters, priced and sorted newest first."""
    orders = order_store.find_orders(client, build_predicate(identity, filters))
    priced = price_orders(client, orders)

    search = (filters.search or "").strip().lower()
    if search:
        priced = [item for item in priced if _matches_search(item, search)]

    priced.sort(key=_sort_key, reverse=True)
    return priced


def summarize(priced: Iterable[PricedOrder]) -> OrderSummary:
    summary = OrderSummary()
    for item in priced:
        summary.total_orders += 1
        summary.total_standard_qty += item.order.standard_qty
        summary.total_premium_qty += item.order.premium_qty
        summary.total_revenue += item.total
    return summary


def list_orders(client: Any, identity: Identity, filters: OrderFilters) -> OrderPage:
    if filters.page < 1:
        raise ValidationError("Page must be 1 or greater")
    if filters.page_size < 1:
        raise ValidationError("Page size must be 1 or greater")

    priced = collect_orders(client, identity, filters)
    offset = (filters.page - 1) * filters.page_size
    return OrderPage(
        orders=priced[offset:offset + filters.page_size],
        total=len(priced),
        page=filters.page,
        page_size=filters.page_size,
        summary=summarize(priced),
    )
