"""Order pricing.

Totals are never stored on an order. Every read path (list, single fetch,
create/update responses, CSV export, dashboard) calls :func:`price_order`
with the customer's current unit prices, so a price change on the customer
re-prices that customer's historical orders on the next read.
"""

from __future__ import annotations

from typing import Optional

from ..models.domain import (
    DELETED_CUSTOMER_NAME,
    UNKNOWN_ROUTE_NAME,
    Customer,
    Order,
    PricedOrder,
    Route,
)


def price_order(order: Order, customer: Optional[Customer], route: Optional[Route] = None) -> PricedOrder:
    """Join an order to its customer and compute its totals.

    A missing customer (deleted) prices the order at zero and substitutes a
    placeholder name.
    """
    if customer is None:
        return PricedOrder(
            order=order,
            customer_name=DELETED_CUSTOMER_NAME,
            customer_phone="",
            route_name=UNKNOWN_ROUTE_NAME,
            standard_unit_price=0.0,
            premium_unit_price=0.0,
            standard_total=0.0,
            premium_total=0.0,
            total=0.0,
        )

    standard_total = order.standard_qty * customer.standard_unit_price
    premium_total = order.premium_qty * customer.premium_unit_price
    return PricedOrder(
        order=order,
        customer_name=customer.name,
        customer_phone=customer.phone or "",
        route_name=route.name if route is not None else UNKNOWN_ROUTE_NAME,
        standard_unit_price=customer.standard_unit_price,
        premium_unit_price=customer.premium_unit_price,
        standard_total=standard_total,
        premium_total=premium_total,
        total=standard_total + premium_total,
    )
