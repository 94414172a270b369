from datetime import datetime

import pytest

from src.orderdesk.services import routes as route_service
from src.orderdesk.services.errors import DuplicateRouteName, RouteInUse, RouteNotFound, ValidationError


def test_create_route_upper_cases_name(store) -> None:
    route = route_service.create_route(store, "  ponnani ")

    assert route.name == "PONNANI"
    assert route.is_active is True
    assert store.tables["routes"][0]["name"] == "PONNANI"


def test_create_route_rejects_duplicate_in_any_case(store, seed) -> None:
    seed.route("PONNANI")

    with pytest.raises(DuplicateRouteName):
        route_service.create_route(store, "Ponnani")


def test_create_route_requires_name(store) -> None:
    with pytest.raises(ValidationError):
        route_service.create_route(store, "   ")


def test_update_route_renames_and_deactivates(store, seed) -> None:
    row = seed.route("PONNANI")

    route = route_service.update_route(store, row["id"], name="ponnani west", is_active=False)

    assert route.name == "PONNANI WEST"
    assert route.is_active is False


def test_update_route_keeping_own_name_is_not_a_duplicate(store, seed) -> None:
    row = seed.route("PONNANI")

    route = route_service.update_route(store, row["id"], name="ponnani")

    assert route.name == "PONNANI"


def test_update_route_rejects_name_of_another_route(store, seed) -> None:
    row = seed.route("PONNANI")
    seed.route("TIRUR")

    with pytest.raises(DuplicateRouteName):
        route_service.update_route(store, row["id"], name="tirur")


def test_update_missing_route_is_not_found(store) -> None:
    with pytest.raises(RouteNotFound):
        route_service.update_route(store, "missing", name="X")


def test_delete_route_refused_while_customers_use_it(store, seed) -> None:
    route = seed.route("PONNANI")
    seed.customer("Hotel Malabar", route)

    with pytest.raises(RouteInUse) as excinfo:
        route_service.delete_route(store, route["id"])

    assert excinfo.value.kind == "customers"
    assert "1 customer(s)" in excinfo.value.message
    assert len(store.tables["routes"]) == 1


def test_delete_route_refused_while_orders_reference_it(store, seed) -> None:
    route = seed.route("PONNANI")
    other = seed.route("TIRUR")
    customer = seed.customer("Hotel Malabar", route)
    seed.order(customer, datetime(2025, 1, 5))
    # customer moved away, the order still carries the old route
    store.tables["customers"][0]["route_id"] = other["id"]

    with pytest.raises(RouteInUse) as excinfo:
        route_service.delete_route(store, route["id"])

    assert excinfo.value.kind == "orders"
    assert excinfo.value.message == 'Cannot delete route "PONNANI". It is referenced in 1 order(s).'


def test_delete_unused_route(store, seed) -> None:
    route = seed.route("PONNANI")

    route_service.delete_route(store, route["id"])

    assert store.tables["routes"] == []


def test_route_stats_counts_customers_and_orders(store, seed) -> None:
    route = seed.route("PONNANI")
    customer = seed.customer("Hotel Malabar", route)
    seed.customer("Cafe Kerala", route)
    seed.order(customer, datetime(2025, 1, 5))

    assert route_service.route_stats(store, route["id"]) == {"customersCount": 2, "ordersCount": 1}
