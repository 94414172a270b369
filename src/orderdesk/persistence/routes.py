"""Route table persistence."""

from __future__ import annotations

from typing import Any

from ..models.domain import Route
from .query import fetch_all, format_timestamp, new_id, now, parse_timestamp

TABLE = "routes"


def route_from_row(row: dict[str, Any]) -> Route:
    return Route(
        id=row["id"],
        name=row["name"],
        is_active=bool(row.get("is_active", True)),
        created_at=parse_timestamp(row.get("created_at")),
    )


def get_route(client: Any, route_id: str) -> Route | None:
    response = client.table(TABLE).select("*").eq("id", route_id).limit(1).execute()
    if not response.data:
        return None
    return route_from_row(response.data[0])


def get_route_by_name(client: Any, name: str, *, active_only: bool = False) -> Route | None:
    query = client.table(TABLE).select("*").eq("name", name)
    if active_only:
        query = query.eq("is_active", True)
    response = query.limit(1).execute()
    if not response.data:
        return None
    return route_from_row(response.data[0])


def list_routes(client: Any, *, active_only: bool = False) -> list[Route]:
    def build():
        query = client.table(TABLE).select("*")
        if active_only:
            query = query.eq("is_active", True)
        return query.order("name")

    return [route_from_row(row) for row in fetch_all(build)]


def insert_route(client: Any, name: str, *, is_active: bool = True) -> Route:
    record = {
        "id": new_id(),
        "name": name,
        "is_active": is_active,
        "created_at": format_timestamp(now()),
    }
    response = client.table(TABLE).insert(record).execute()
    return route_from_row(response.data[0] if response.data else record)


def update_route(client: Any, route_id: str, changes: dict[str, Any]) -> Route | None:
    response = client.table(TABLE).update(changes).eq("id", route_id).execute()
    if not response.data:
        return None
    return route_from_row(response.data[0])


def delete_route(client: Any, route_id: str) -> bool:
    response = client.table(TABLE).delete().eq("id", route_id).execute()
    return bool(response.data)
