"""Order service helpers."""

from .dashboard import build_dashboard
from .export import export_orders_csv
from .ledger import (
    bulk_delete_older_than,
    bulk_delete_within_last,
    create_order,
    delete_order,
    get_order,
    update_order,
)
from .query import OrderFilters, OrderPage, OrderSummary, collect_orders, list_orders

__all__ = [
    "OrderFilters",
    "OrderPage",
    "OrderSummary",
    "list_orders",
    "collect_orders",
    "create_order",
    "get_order",
    "update_order",
    "delete_order",
    "bulk_delete_older_than",
    "bulk_delete_within_last",
    "export_orders_csv",
    "build_dashboard",
]
