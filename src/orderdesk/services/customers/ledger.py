"""Customer ledger: validated create, update, delete and listing."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from ...models.domain import Customer
from ...persistence import customers as customer_store
from ...persistence import orders as order_store
from ...persistence.query import fetch_by_ids
from ..errors import (
    CustomerNotFound,
    DuplicateCustomerName,
    HasDependentOrders,
    InvalidRoute,
    UnknownSalesExecutive,
    ValidationError,
)
from ..propagation import PropagationDispatcher, propagate_route, propagate_sales_executive
from ..registry import find_active_route_by_name, find_route_by_name, find_sales_executive_by_username

logger = logging.getLogger(__name__)


def _require_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Customer name is required")
    return cleaned


def _require_price(value: Any, label: str) -> float:
    if value is None:
        raise ValidationError(f"{label} is required")
    try:
        price = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{label} must be a number") from exc
    if price < 0:
        raise ValidationError(f"{label} cannot be negative")
    return price


def _resolve_route_id(client: Any, route_name: Optional[str]) -> str:
    if not route_name or not route_name.strip():
        raise ValidationError("Route is required")
    route = find_active_route_by_name(client, route_name)
    if route is None:
        raise InvalidRoute(route_name.strip().upper())
    return route.id


def _require_sales_executive(client: Any, username: Optional[str]) -> str:
    cleaned = (username or "").strip()
    if not cleaned:
        raise ValidationError("Sales executive is required")
    if find_sales_executive_by_username(client, cleaned) is None:
        raise UnknownSalesExecutive(cleaned)
    return cleaned


def get_customer(client: Any, customer_id: str) -> Customer:
    customer = customer_store.get_customer(client, customer_id)
    if customer is None:
        raise CustomerNotFound(customer_id)
    return customer


def create_customer(
    client: Any,
    *,
    name: str,
    route: str,
    sales_executive: str,
    standard_unit_price: Any,
    premium_unit_price: Any,
    phone: str | None = "",
) -> Customer:
    cleaned_name = _require_name(name)
    route_id = _resolve_route_id(client, route)
    if customer_store.find_customer_by_name(client, cleaned_name) is not None:
        raise DuplicateCustomerName(cleaned_name)

    return customer_store.insert_customer(
        client,
        {
            "name": cleaned_name,
            "route_id": route_id,
            "sales_executive": _require_sales_executive(client, sales_executive),
            "standard_unit_price": _require_price(standard_unit_price, "Standard price"),
            "premium_unit_price": _require_price(premium_unit_price, "Premium price"),
            "phone": (phone or "").strip(),
        },
    )


def update_customer(
    client: Any,
    customer_id: str,
    changes: dict[str, Any],
    dispatcher: PropagationDispatcher | None = None,
) -> Customer:
    """Apply a partial update.

    ``changes`` may hold ``name``, ``route`` (a route name), ``sales_executive``,
    ``standard_unit_price``, ``premium_unit_price`` and ``phone``. When the
    executive or route changes and a dispatcher is given, the new value is
    copied onto the customer's orders in the background.
    """
    current = get_customer(client, customer_id)
    payload: dict[str, Any] = {}

    if changes.get("route") is not None:
        payload["route_id"] = _resolve_route_id(client, changes["route"])

    if changes.get("name") is not None:
        cleaned_name = _require_name(changes["name"])
        if cleaned_name != current.name:
            if customer_store.find_customer_by_name(client, cleaned_name, exclude_id=customer_id) is not None:
                raise DuplicateCustomerName(cleaned_name)
            payload["name"] = cleaned_name

    if changes.get("sales_executive") is not None:
        payload["sales_executive"] = _require_sales_executive(client, changes["sales_executive"])
    if changes.get("standard_unit_price") is not None:
        payload["standard_unit_price"] = _require_price(changes["standard_unit_price"], "Standard price")
    if changes.get("premium_unit_price") is not None:
        payload["premium_unit_price"] = _require_price(changes["premium_unit_price"], "Premium price")
    if changes.get("phone") is not None:
        payload["phone"] = changes["phone"].strip()

    if not payload:
        return current

    updated = customer_store.update_customer(client, customer_id, payload)
    if updated is None:
        raise CustomerNotFound(customer_id)
    logger.info(f"Updated customer '{updated.name}' ({customer_id}): {sorted(payload)}")

    if dispatcher is not None:
        if updated.sales_executive != current.sales_executive:
            propagate_sales_executive(client, dispatcher, customer_id, updated.sales_executive)
        if updated.route_id != current.route_id:
            propagate_route(client, dispatcher, customer_id, updated.route_id)
    return updated


def delete_customer(client: Any, customer_id: str) -> Customer:
    """Delete a customer with no orders; customers with orders are refused, never cascaded."""
    customer = get_customer(client, customer_id)
    orders_count = order_store.count_orders_for_customer(client, customer_id)
    if orders_count > 0:
        raise HasDependentOrders(orders_count)
    customer_store.delete_customer(client, customer_id)
    logger.info(f"Deleted customer '{customer.name}' ({customer_id})")
    return customer


def filter_customers(
    client: Any,
    *,
    route_name: str | None = None,
    search: str | None = None,
) -> list[Customer]:
    """Customers sorted by name, optionally narrowed by route and a name/phone search."""
    route_id = None
    if route_name and route_name != "all":
        route = find_route_by_name(client, route_name)
        if route is None:
            return []
        route_id = route.id

    customers = customer_store.list_customers(client, route_id=route_id)
    if search:
        needle = search.strip().lower()
        customers = [
            customer
            for customer in customers
            if needle in customer.name.lower() or needle in (customer.phone or "").lower()
        ]
    return customers


def list_customers(
    client: Any,
    *,
    route_name: str | None = None,
    search: str | None = None,
    page: int = 1,
    page_size: int = 50,
) -> tuple[list[Customer], int]:
    customers = filter_customers(client, route_name=route_name, search=search)
    offset = (page - 1) * page_size
    return customers[offset:offset + page_size], len(customers)


def route_names_for(client: Any, customers: Iterable[Customer]) -> dict[str, str]:
    rows = fetch_by_ids(client, "routes", (customer.route_id for customer in customers))
    return {route_id: row["name"] for route_id, row in rows.items()}
