"""Domain models for routes, sales executives, customers and orders."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


ROLE_ADMIN = "admin"
ROLE_USER = "user"
ROLES = (ROLE_ADMIN, ROLE_USER)

DELETED_CUSTOMER_NAME = "Customer Deleted"
UNKNOWN_ROUTE_NAME = "Unknown"


@dataclass(slots=True)
class Identity:
    """Authenticated caller attached to each request."""

    id: str
    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


@dataclass(slots=True)
class Route:
    """Named delivery route. Names are stored upper-case."""

    id: str
    name: str
    is_active: bool = True
    created_at: Optional[datetime] = None


@dataclass(slots=True)
class SalesExecutive:
    """A non-admin user that owns customers and their orders."""

    id: str
    username: str
    display_name: str
    role: str = ROLE_USER


@dataclass(slots=True)
class Customer:
    """Customer record with its route and two unit prices."""

    id: str
    name: str
    route_id: str
    sales_executive: str
    standard_unit_price: float
    premium_unit_price: float
    phone: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(slots=True)
class Order:
    """One delivery order for a customer on a calendar day.

    ``route_id`` and ``sales_executive`` are copies taken from the customer
    when the order is created; monetary totals are never stored.
    """

    id: str
    date: datetime
    customer_id: str
    route_id: Optional[str]
    sales_executive: str
    vehicle: str
    standard_qty: int
    premium_qty: int
    created_by: Optional[str] = None
    created_by_username: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(slots=True)
class PricedOrder:
    """An order joined to its customer and route, with totals derived at read time."""

    order: Order
    customer_name: str
    customer_phone: str
    route_name: str
    standard_unit_price: float
    premium_unit_price: float
    standard_total: float
    premium_total: float
    total: float
