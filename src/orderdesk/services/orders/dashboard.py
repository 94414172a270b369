"""Sales dashboard figures for a trailing window of days."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Any

from ...models.domain import Identity, PricedOrder
from ..errors import ValidationError
from .query import OrderFilters, collect_orders, summarize

TOP_ROUTES_LIMIT = 5


def _growth(current: float, previous: float) -> float:
    if not previous:
        return 0.0
    return round((current - previous) / previous * 100, 1)


def _window(client: Any, identity: Identity, start: date, end: date) -> list[PricedOrder]:
    return collect_orders(client, identity, OrderFilters(date_from=start, date_to=end))


def build_dashboard(client: Any, identity: Identity, days: int = 30, today: date | None = None) -> dict[str, Any]:
    if days < 1:
        raise ValidationError("Days must be 1 or greater")
    today = today or date.today()
    start = today - timedelta(days=days - 1)
    previous_end = start - timedelta(days=1)
    previous_start = previous_end - timedelta(days=days - 1)

    current = _window(client, identity, start, today)
    previous = summarize(_window(client, identity, previous_start, previous_end))
    summary = summarize(current)

    per_day: dict[date, list[float]] = {start + timedelta(days=i): [0.0, 0] for i in range(days)}
    per_route: dict[str, float] = defaultdict(float)
    for priced in current:
        bucket = per_day.get(priced.order.date.date())
        if bucket is not None:
            bucket[0] += priced.total
            bucket[1] += 1
        per_route[priced.route_name] += priced.total

    top_routes = sorted(per_route.items(), key=lambda item: (-item[1], item[0]))[:TOP_ROUTES_LIMIT]

    return {
        "kpi": {
            "totalRevenue": summary.total_revenue,
            "totalOrders": summary.total_orders,
            "avgOrderValue": round(summary.total_revenue / summary.total_orders, 2) if summary.total_orders else 0.0,
            "totalStandard": summary.total_standard_qty,
            "totalPremium": summary.total_premium_qty,
            "revenueGrowth": _growth(summary.total_revenue, previous.total_revenue),
            "ordersGrowth": _growth(summary.total_orders, previous.total_orders),
        },
        "revenueChart": [
            {"date": day.isoformat(), "revenue": revenue, "orders": int(count)}
            for day, (revenue, count) in sorted(per_day.items())
        ],
        "topRoutes": [{"name": name, "revenue": revenue} for name, revenue in top_routes],
    }
