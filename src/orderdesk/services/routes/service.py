"""Route administration: create, rename, toggle and guarded delete."""

from __future__ import annotations

import logging
from typing import Any

from ...models.domain import Route
from ...persistence import customers as customer_store
from ...persistence import orders as order_store
from ...persistence import routes as route_store
from ..errors import DuplicateRouteName, RouteInUse, RouteNotFound, ValidationError
from ..registry import find_route_by_name, normalize_route_name

logger = logging.getLogger(__name__)


def list_routes(client: Any, *, active_only: bool = False) -> list[Route]:
    return route_store.list_routes(client, active_only=active_only)


def get_route(client: Any, route_id: str) -> Route:
    route = route_store.get_route(client, route_id)
    if route is None:
        raise RouteNotFound(route_id)
    return route


def create_route(client: Any, name: str) -> Route:
    normalized = normalize_route_name(name or "")
    if not normalized:
        raise ValidationError("Route name is required")
    if find_route_by_name(client, normalized) is not None:
        raise DuplicateRouteName(normalized)
    route = route_store.insert_route(client, normalized)
    logger.info(f"Created route '{route.name}' ({route.id})")
    return route


def update_route(client: Any, route_id: str, *, name: str | None = None, is_active: bool | None = None) -> Route:
    current = get_route(client, route_id)
    changes: dict[str, Any] = {}
    if name is not None:
        normalized = normalize_route_name(name)
        if not normalized:
            raise ValidationError("Route name is required")
        if normalized != current.name:
            existing = find_route_by_name(client, normalized)
            if existing is not None and existing.id != route_id:
                raise DuplicateRouteName(normalized)
            changes["name"] = normalized
    if is_active is not None and is_active != current.is_active:
        changes["is_active"] = is_active
    if not changes:
        return current

    updated = route_store.update_route(client, route_id, changes)
    if updated is None:
        raise RouteNotFound(route_id)
    logger.info(f"Updated route {route_id}: {changes}")
    return updated


def delete_route(client: Any, route_id: str) -> Route:
    """Delete a route nobody references; referenced routes are refused, never cascaded."""
    route = get_route(client, route_id)

    customers_count = customer_store.count_customers_for_route(client, route_id)
    if customers_count > 0:
        raise RouteInUse(route.name, customers_count, "customers")

    orders_count = order_store.count_orders_for_route(client, route_id)
    if orders_count > 0:
        raise RouteInUse(route.name, orders_count, "orders")

    route_store.delete_route(client, route_id)
    logger.info(f"Deleted route '{route.name}' ({route_id})")
    return route


def route_stats(client: Any, route_id: str) -> dict[str, int]:
    get_route(client, route_id)
    return {
        "customersCount": customer_store.count_customers_for_route(client, route_id),
        "ordersCount": order_store.count_orders_for_route(client, route_id),
    }
