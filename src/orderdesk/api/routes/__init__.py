"""Route group exports."""

from . import customers, health, orders, routes, sales_executives

__all__ = ["orders", "customers", "routes", "sales_executives", "health"]
