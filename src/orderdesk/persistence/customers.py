"""Customer database persistence."""

from __future__ import annotations

import logging
from typing import Any

from ..models.domain import Customer
from .query import (
    count_rows,
    escape_like,
    fetch_all,
    fetch_by_ids,
    format_timestamp,
    new_id,
    now,
    parse_timestamp,
    same_text,
)

TABLE = "customers"

logger = logging.getLogger(__name__)


def customer_from_row(row: dict[str, Any]) -> Customer:
    return Customer(
        id=row["id"],
        name=row["name"],
        route_id=row.get("route_id"),
        sales_executive=row.get("sales_executive") or "",
        standard_unit_price=float(row.get("standard_unit_price") or 0),
        premium_unit_price=float(row.get("premium_unit_price") or 0),
        phone=row.get("phone") or "",
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
    )


def get_customer(client: Any, customer_id: str) -> Customer | None:
    response = client.table(TABLE).select("*").eq("id", customer_id).limit(1).execute()
    if not response.data:
        return None
    return customer_from_row(response.data[0])


def get_customers(client: Any, customer_ids: list[str]) -> dict[str, Customer]:
    """Batch lookup keyed by id; deleted customers are absent."""
    rows = fetch_by_ids(client, TABLE, customer_ids)
    return {customer_id: customer_from_row(row) for customer_id, row in rows.items()}


def find_customer_by_name(client: Any, name: str, *, exclude_id: str | None = None) -> Customer | None:
    """Case-insensitive exact name match across the whole ledger."""
    query = client.table(TABLE).select("*").ilike("name", escape_like(name.strip()))
    if exclude_id:
        query = query.neq("id", exclude_id)
    response = query.execute()
    for row in response.data or []:
        if same_text(row["name"], name):
            return customer_from_row(row)
    return None


def list_customers(client: Any, *, route_id: str | None = None) -> list[Customer]:
    def build():
        query = client.table(TABLE).select("*")
        if route_id:
            query = query.eq("route_id", route_id)
        return query.order("name")

    return [customer_from_row(row) for row in fetch_all(build)]


def insert_customer(client: Any, values: dict[str, Any]) -> Customer:
    timestamp = format_timestamp(now())
    record = {"id": new_id(), "created_at": timestamp, "updated_at": timestamp, **values}
    response = client.table(TABLE).insert(record).execute()
    logger.info(f"Created customer '{record['name']}' ({record['id']})")
    return customer_from_row(response.data[0] if response.data else record)


def update_customer(client: Any, customer_id: str, changes: dict[str, Any]) -> Customer | None:
    payload = {**changes, "updated_at": format_timestamp(now())}
    response = client.table(TABLE).update(payload).eq("id", customer_id).execute()
    if not response.data:
        return None
    return customer_from_row(response.data[0])


def delete_customer(client: Any, customer_id: str) -> bool:
    response = client.table(TABLE).delete().eq("id", customer_id).execute()
    return bool(response.data)


def count_customers_for_route(client: Any, route_id: str) -> int:
    return count_rows(client, TABLE, "route_id", route_id)
