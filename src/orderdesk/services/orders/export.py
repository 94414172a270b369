"""Order CSV export: the list query without pagination."""

from __future__ import annotations

from typing import Any

from ...models.domain import Identity
from ..csv_codec import encode_csv
from .query import OrderFilters, collect_orders

EXPORT_COLUMNS = (
    "Date",
    "Customer",
    "Route",
    "Sales Executive",
    "Vehicle",
    "Phone",
    "Standard Qty",
    "Premium Qty",
    "Total",
)
CREATED_BY_COLUMN = "Created By"


def export_orders_csv(client: Any, identity: Identity, filters: OrderFilters) -> str:
    columns = list(EXPORT_COLUMNS)
    if identity.is_admin:
        columns.append(CREATED_BY_COLUMN)

    rows = []
    for priced in collect_orders(client, identity, filters):
        order = priced.order
        row = {
            "Date": order.date.date().isoformat(),
            "Customer": priced.customer_name,
            "Route": priced.route_name,
            "Sales Executive": order.sales_executive,
            "Vehicle": order.vehicle,
            "Phone": priced.customer_phone,
            "Standard Qty": order.standard_qty,
            "Premium Qty": order.premium_qty,
            "Total": f"{priced.total:.2f}",
        }
        if identity.is_admin:
            row[CREATED_BY_COLUMN] = order.created_by_username or ""
        rows.append(row)
    return encode_csv(rows, columns)
