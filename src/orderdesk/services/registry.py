"""Reference lookups for routes and sales executives.

Other services validate names against these tables. Lookups return ``None``
when nothing matches; callers decide whether that is fatal.
"""

from __future__ import annotations

import logging
from typing import Any

from ..models.domain import Route, SalesExecutive
from ..persistence import routes as route_store
from ..persistence import users as user_store

logger = logging.getLogger(__name__)


def normalize_route_name(name: str) -> str:
    return name.strip().upper()


def find_route_by_name(client: Any, name: str) -> Route | None:
    normalized = normalize_route_name(name or "")
    if not normalized:
        return None
    return route_store.get_route_by_name(client, normalized)


def find_active_route_by_name(client: Any, name: str) -> Route | None:
    normalized = normalize_route_name(name or "")
    if not normalized:
        return None
    route = route_store.get_route_by_name(client, normalized, active_only=True)
    if route is None:
        logger.warning(f"Route '{normalized}' not found or inactive")
    return route


def list_active_routes(client: Any) -> list[Route]:
    return route_store.list_routes(client, active_only=True)


def find_sales_executive_by_display_name(client: Any, name: str) -> SalesExecutive | None:
    display_name = (name or "").strip()
    if not display_name:
        return None
    executive = user_store.find_sales_executive_by_display_name(client, display_name)
    if executive is None:
        logger.warning(f"Sales executive '{display_name}' not found")
    return executive


def find_sales_executive_by_username(client: Any, username: str) -> SalesExecutive | None:
    username = (username or "").strip()
    if not username:
        return None
    return user_store.find_sales_executive_by_username(client, username)


def list_sales_executives(client: Any) -> list[SalesExecutive]:
    return user_store.list_sales_executives(client)
