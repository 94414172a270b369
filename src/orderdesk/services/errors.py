"""Error taxonomy shared by the order desk services.

Every service failure is one of four families, each mapped to an HTTP status
by the API layer:

* ``NotFoundError``   - a referenced customer, order or route is absent (404)
* ``ValidationError`` - a field is missing, malformed or out of range (400)
* ``ConflictError``   - the write would break a uniqueness or reference rule (409)
* ``ForbiddenError``  - the caller's role does not allow the operation (403)

Messages are single sentences meant to be shown to the user as-is.
"""

from __future__ import annotations


class OrderDeskError(Exception):
    """Base exception for order desk domain errors."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(OrderDeskError):
    status_code = 404


class ValidationError(OrderDeskError):
    status_code = 400


class ConflictError(OrderDeskError):
    status_code = 409


class ForbiddenError(OrderDeskError):
    status_code = 403


class StoreUnavailableError(OrderDeskError):
    """Raised when the backing store is not configured."""

    status_code = 503


# Not found

class CustomerNotFound(NotFoundError):
    def __init__(self, customer_id: str) -> None:
        super().__init__("Customer not found")
        self.customer_id = customer_id


class OrderNotFound(NotFoundError):
    def __init__(self, order_id: str) -> None:
        super().__init__("Order not found")
        self.order_id = order_id


class RouteNotFound(NotFoundError):
    def __init__(self, route_id: str) -> None:
        super().__init__("Route not found")
        self.route_id = route_id


# Validation

class InvalidRoute(ValidationError):
    def __init__(self, route_name: str) -> None:
        super().__init__(f"Route '{route_name}' not found or inactive")
        self.route_name = route_name


class UnknownSalesExecutive(ValidationError):
    def __init__(self, username: str) -> None:
        super().__init__(f"Sales executive '{username}' not found")
        self.username = username


class InvalidVehicle(ValidationError):
    def __init__(self, vehicle: str) -> None:
        super().__init__(f"Vehicle '{vehicle}' is not a known vehicle")
        self.vehicle = vehicle


class EmptyOrder(ValidationError):
    def __init__(self) -> None:
        super().__init__("At least one quantity (Standard or Premium) must be greater than 0")


class EmptyFile(ValidationError):
    def __init__(self) -> None:
        super().__init__("CSV file is empty")


class InvalidHeader(ValidationError):
    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"CSV header is missing required column(s): {', '.join(missing)}")
        self.missing = missing


class UnknownImportRoute(ValidationError):
    def __init__(self, route_name: str) -> None:
        super().__init__(
            f"Route '{route_name}' not found or inactive. Please create it first in the Routes page."
        )
        self.route_name = route_name


# Conflict

class DuplicateCustomerName(ConflictError):
    def __init__(self, name: str) -> None:
        super().__init__("A customer with this name already exists")
        self.name = name


class DuplicateRouteName(ConflictError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Route '{name}' already exists")
        self.name = name


class DuplicateOrderForDay(ConflictError):
    def __init__(self, customer_id: str) -> None:
        super().__init__("An order for this customer has already been created for this date")
        self.customer_id = customer_id


class HasDependentOrders(ConflictError):
    def __init__(self, count: int) -> None:
        super().__init__(
            f"Cannot delete customer. They have {count} order(s). Please delete the orders first."
        )
        self.count = count


class RouteInUse(ConflictError):
    def __init__(self, route_name: str, count: int, kind: str) -> None:
        if kind == "customers":
            message = (
                f'Cannot delete route "{route_name}". It is being used by {count} customer(s). '
                "Please reassign all customers to a different route first."
            )
        else:
            message = f'Cannot delete route "{route_name}". It is referenced in {count} order(s).'
        super().__init__(message)
        self.route_name = route_name
        self.count = count
        self.kind = kind


# Forbidden

class AdminRequired(ForbiddenError):
    def __init__(self) -> None:
        super().__init__("Admin access required")


class OrderAccessDenied(ForbiddenError):
    def __init__(self) -> None:
        super().__init__("You can only access orders for your own customers")
