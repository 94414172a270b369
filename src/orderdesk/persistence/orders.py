"""Order table persistence."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..models.domain import Order
from .query import (
    count_rows,
    day_span,
    fetch_all,
    format_timestamp,
    new_id,
    now,
    parse_timestamp,
)

TABLE = "orders"

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class OrderPredicate:
    """Store-side filter over directly indexed order columns."""

    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    route_id: Optional[str] = None
    vehicle: Optional[str] = None
    sales_executive: Optional[str] = None


def order_from_row(row: dict[str, Any]) -> Order:
    return Order(
        id=row["id"],
        date=parse_timestamp(row["date"]),
        customer_id=row["customer_id"],
        route_id=row.get("route_id"),
        sales_executive=row.get("sales_executive") or "",
        vehicle=row.get("vehicle") or "",
        standard_qty=int(row.get("standard_qty") or 0),
        premium_qty=int(row.get("premium_qty") or 0),
        created_by=row.get("created_by"),
        created_by_username=row.get("created_by_username"),
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
    )


def get_order(client: Any, order_id: str) -> Order | None:
    response = client.table(TABLE).select("*").eq("id", order_id).limit(1).execute()
    if not response.data:
        return None
    return order_from_row(response.data[0])


def find_order_for_day(
    client: Any,
    customer_id: str,
    day: date | datetime,
    *,
    exclude_id: str | None = None,
) -> Order | None:
    start, end = day_span(day)
    query = (
        client.table(TABLE)
        .select("*")
        .eq("customer_id", customer_id)
        .gte("date", format_timestamp(start))
        .lte("date", format_timestamp(end))
    )
    if exclude_id:
        query = query.neq("id", exclude_id)
    response = query.limit(1).execute()
    if not response.data:
        return None
    return order_from_row(response.data[0])


def find_orders(client: Any, predicate: OrderPredicate) -> list[Order]:
    def build():
        query = client.table(TABLE).select("*")
        if predicate.date_from is not None:
            query = query.gte("date", format_timestamp(predicate.date_from))
        if predicate.date_to is not None:
            query = query.lte("date", format_timestamp(predicate.date_to))
        if predicate.route_id:
            query = query.eq("route_id", predicate.route_id)
        if predicate.vehicle:
            query = query.eq("vehicle", predicate.vehicle)
        if predicate.sales_executive:
            query = query.eq("sales_executive", predicate.sales_executive)
        return query.order("date", desc=True).order("created_at", desc=True)

    return [order_from_row(row) for row in fetch_all(build)]


def insert_order(client: Any, values: dict[str, Any]) -> Order:
    timestamp = format_timestamp(now())
    record = {"id": new_id(), "created_at": timestamp, "updated_at": timestamp, **values}
    response = client.table(TABLE).insert(record).execute()
    logger.info(f"Created order {record['id']} for customer {record['customer_id']} on {record['date']}")
    return order_from_row(response.data[0] if response.data else record)


def update_order(client: Any, order_id: str, changes: dict[str, Any]) -> Order | None:
    payload = {**changes, "updated_at": format_timestamp(now())}
    response = client.table(TABLE).update(payload).eq("id", order_id).execute()
    if not response.data:
        return None
    return order_from_row(response.data[0])


def delete_order(client: Any, order_id: str) -> bool:
    response = client.table(TABLE).delete().eq("id", order_id).execute()
    return bool(response.data)


def delete_orders_before(client: Any, cutoff: datetime) -> int:
    response = client.table(TABLE).delete().lt("date", format_timestamp(cutoff)).execute()
    return len(response.data or [])


def delete_orders_from(client: Any, cutoff: datetime) -> int:
    response = client.table(TABLE).delete().gte("date", format_timestamp(cutoff)).execute()
    return len(response.data or [])


def count_orders_for_customer(client: Any, customer_id: str) -> int:
    return count_rows(client, TABLE, "customer_id", customer_id)


def count_orders_for_route(client: Any, route_id: str) -> int:
    return count_rows(client, TABLE, "route_id", route_id)


def set_customer_field_on_orders(client: Any, customer_id: str, column: str, value: Any) -> int:
    """Overwrite a denormalized customer column on every order of that customer."""
    response = client.table(TABLE).update({column: value}).eq("customer_id", customer_id).execute()
    return len(response.data or [])
