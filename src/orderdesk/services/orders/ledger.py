"""Order ledger: create, update, fetch and delete orders.

An order copies ``route_id`` and ``sales_executive`` from its customer when it
is created (or moved to another customer). At most one order may exist per
customer per calendar day. That rule is enforced by looking for an existing
order before the write, not by a unique index, so two simultaneous creates
for the same customer and day can both succeed.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any, Optional

from ...config import settings
from ...models.domain import Customer, Identity, Order, PricedOrder
from ...persistence import customers as customer_store
from ...persistence import orders as order_store
from ...persistence.query import as_datetime, day_span, format_timestamp
from ..errors import (
    CustomerNotFound,
    DuplicateOrderForDay,
    EmptyOrder,
    InvalidVehicle,
    OrderAccessDenied,
    OrderNotFound,
    ValidationError,
)
from .query import price_single

logger = logging.getLogger(__name__)


def _check_vehicle(vehicle: Optional[str]) -> str:
    cleaned = (vehicle or "").strip()
    if not cleaned:
        raise ValidationError("Vehicle is required")
    if cleaned not in settings.vehicles:
        raise InvalidVehicle(cleaned)
    return cleaned


def _check_quantity(value: Any, label: str) -> int:
    quantity = int(value or 0)
    if quantity < 0:
        raise ValidationError(f"{label} cannot be negative")
    return quantity


def _resolve_customer(client: Any, customer_id: str) -> Customer:
    customer = customer_store.get_customer(client, customer_id) if customer_id else None
    if customer is None:
        raise CustomerNotFound(customer_id)
    return customer


def _ensure_no_order_that_day(client: Any, customer_id: str, when: datetime, exclude_id: str | None = None) -> None:
    if order_store.find_order_for_day(client, customer_id, when, exclude_id=exclude_id) is not None:
        raise DuplicateOrderForDay(customer_id)


def create_order(
    client: Any,
    identity: Identity,
    *,
    date: date | datetime,
    customer_id: str,
    vehicle: str,
    standard_qty: int = 0,
    premium_qty: int = 0,
) -> PricedOrder:
    if date is None:
        raise ValidationError("Order date is required")
    vehicle = _check_vehicle(vehicle)
    standard_qty = _check_quantity(standard_qty, "Standard quantity")
    premium_qty = _check_quantity(premium_qty, "Premium quantity")
    when = as_datetime(date)

    customer = _resolve_customer(client, customer_id)
    _ensure_no_order_that_day(client, customer.id, when)
    if standard_qty == 0 and premium_qty == 0:
        raise EmptyOrder()

    order = order_store.insert_order(
        client,
        {
            "date": format_timestamp(when),
            "customer_id": customer.id,
            "route_id": customer.route_id,
            "sales_executive": customer.sales_executive,
            "vehicle": vehicle,
            "standard_qty": standard_qty,
            "premium_qty": premium_qty,
            "created_by": identity.id,
            "created_by_username": identity.username,
        },
    )
    return price_single(client, order)


def get_order(client: Any, identity: Identity, order_id: str) -> PricedOrder:
    order = order_store.get_order(client, order_id)
    if order is None:
        raise OrderNotFound(order_id)
    if not identity.is_admin and order.sales_executive != identity.username:
        raise OrderAccessDenied()
    return price_single(client, order)


def update_order(client: Any, order_id: str, changes: dict[str, Any]) -> PricedOrder:
    """Apply a partial update of ``date``, ``customer_id``, ``vehicle`` and quantities."""
    current = order_store.get_order(client, order_id)
    if current is None:
        raise OrderNotFound(order_id)

    payload: dict[str, Any] = {}
    target_customer_id = current.customer_id
    target_date = current.date

    if changes.get("customer_id"):
        customer = _resolve_customer(client, changes["customer_id"])
        target_customer_id = customer.id
        payload["customer_id"] = customer.id
        payload["route_id"] = customer.route_id
        payload["sales_executive"] = customer.sales_executive

    if changes.get("date") is not None:
        target_date = as_datetime(changes["date"])
        payload["date"] = format_timestamp(target_date)

    if changes.get("vehicle") is not None:
        payload["vehicle"] = _check_vehicle(changes["vehicle"])

    standard_qty = current.standard_qty
    premium_qty = current.premium_qty
    if changes.get("standard_qty") is not None:
        standard_qty = _check_quantity(changes["standard_qty"], "Standard quantity")
        payload["standard_qty"] = standard_qty
    if changes.get("premium_qty") is not None:
        premium_qty = _check_quantity(changes["premium_qty"], "Premium quantity")
        payload["premium_qty"] = premium_qty

    if "customer_id" in payload or "date" in payload:
        _ensure_no_order_that_day(client, target_customer_id, target_date, exclude_id=order_id)
    if standard_qty == 0 and premium_qty == 0:
        raise EmptyOrder()

    if not payload:
        return price_single(client, current)

    updated = order_store.update_order(client, order_id, payload)
    if updated is None:
        raise OrderNotFound(order_id)
    logger.info(f"Updated order {order_id}: {sorted(payload)}")
    return price_single(client, updated)


def delete_order(client: Any, order_id: str) -> Order:
    order = order_store.get_order(client, order_id)
    if order is None:
        raise OrderNotFound(order_id)
    order_store.delete_order(client, order_id)
    logger.info(f"Deleted order {order_id}")
    return order


def bulk_delete_older_than(client: Any, days: int, today: date | None = None) -> int:
    """Delete every order dated up to and including the day ``days`` days ago."""
    if days < 0:
        raise ValidationError("Days cannot be negative")
    today = today or date.today()
    _, cutoff = day_span(today - timedelta(days=days))
    deleted = order_store.delete_orders_before(client, cutoff)
    logger.info(f"Deleted {deleted} orders older than {days} days (before {format_timestamp(cutoff)})")
    return deleted


def bulk_delete_within_last(client: Any, days: int, today: date | None = None) -> int:
    """Delete every order dated on or after the day ``days`` days ago."""
    if days < 0:
        raise ValidationError("Days cannot be negative")
    today = today or date.today()
    cutoff, _ = day_span(today - timedelta(days=days))
    deleted = order_store.delete_orders_from(client, cutoff)
    logger.info(f"Deleted {deleted} orders from the last {days} days (since {format_timestamp(cutoff)})")
    return deleted
