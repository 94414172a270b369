from datetime import date, datetime, timedelta

import pytest

from src.orderdesk.services import orders as order_service
from src.orderdesk.services.errors import ValidationError
from src.orderdesk.services.orders import OrderFilters

VEHICLE_A = "A - (Ponnani / Valancheri)"
VEHICLE_B = "B - (Thirur / Cheruppalasery)"


@pytest.fixture
def ledger(seed):
    ponnani = seed.route("PONNANI")
    tirur = seed.route("TIRUR")
    return {
        "ponnani": ponnani,
        "tirur": tirur,
        "malabar": seed.customer("Hotel Malabar", ponnani, "ravi", 10, 20, phone="9847000000"),
        "kerala": seed.customer("Cafe Kerala", tirur, "anu", 5, 15, phone="0494111"),
    }


def test_summary_covers_every_filtered_order_not_just_the_page(store, seed, admin, ledger) -> None:
    start = datetime(2025, 1, 1, 9, 0)
    for index in range(120):
        seed.order(ledger["malabar"], start + timedelta(days=index), standard_qty=1, premium_qty=1)

    page = order_service.list_orders(store, admin, OrderFilters(page=1, page_size=50))

    assert len(page.orders) == 50
    assert page.total == 120
    assert page.total_pages == 3
    assert page.summary.total_orders == 120
    assert page.summary.total_standard_qty == 120
    assert page.summary.total_premium_qty == 120
    assert page.summary.total_revenue == 120 * 30

    last = order_service.list_orders(store, admin, OrderFilters(page=3, page_size=50))
    assert len(last.orders) == 20
    assert last.summary.total_orders == 120


def test_orders_sorted_newest_first_then_by_creation(store, seed, admin, ledger) -> None:
    first = seed.order(ledger["malabar"], datetime(2025, 1, 5, 0, 0), created_at=datetime(2025, 1, 4, 10, 0))
    later_same_day = seed.order(ledger["kerala"], datetime(2025, 1, 5, 0, 0), created_at=datetime(2025, 1, 4, 11, 0))
    newest = seed.order(ledger["malabar"], datetime(2025, 1, 6, 0, 0))

    page = order_service.list_orders(store, admin, OrderFilters())

    assert [priced.order.id for priced in page.orders] == [newest["id"], later_same_day["id"], first["id"]]


def test_non_admin_only_sees_own_orders_even_when_filtering_for_others(store, seed, ravi, ledger) -> None:
    seed.order(ledger["malabar"], datetime(2025, 1, 5))
    seed.order(ledger["kerala"], datetime(2025, 1, 5))

    page = order_service.list_orders(store, ravi, OrderFilters(sales_executive="anu"))

    assert page.total == 1
    assert page.orders[0].order.sales_executive == "ravi"


def test_admin_filters_by_executive_route_and_vehicle(store, seed, admin, ledger) -> None:
    seed.order(ledger["malabar"], datetime(2025, 1, 5), vehicle=VEHICLE_A)
    seed.order(ledger["malabar"], datetime(2025, 1, 6), vehicle=VEHICLE_B)
    seed.order(ledger["kerala"], datetime(2025, 1, 5), vehicle=VEHICLE_A)

    assert order_service.list_orders(store, admin, OrderFilters(sales_executive="anu")).total == 1
    assert order_service.list_orders(store, admin, OrderFilters(route_id=ledger["ponnani"]["id"])).total == 2
    assert order_service.list_orders(store, admin, OrderFilters(vehicle=VEHICLE_A)).total == 2
    assert order_service.list_orders(store, admin, OrderFilters(vehicle="all", route_id="all")).total == 3


def test_single_date_filter_covers_whole_day(store, seed, admin, ledger) -> None:
    seed.order(ledger["malabar"], datetime(2025, 1, 5, 0, 0))
    seed.order(ledger["kerala"], datetime(2025, 1, 5, 23, 59, 59, 999000))
    seed.order(ledger["kerala"], datetime(2025, 1, 6, 0, 0))

    page = order_service.list_orders(store, admin, OrderFilters(date=date(2025, 1, 5)))

    assert page.total == 2


def test_date_range_is_inclusive(store, seed, admin, ledger) -> None:
    seed.order(ledger["malabar"], datetime(2025, 1, 4, 23, 0))
    seed.order(ledger["malabar"], datetime(2025, 1, 5, 6, 0))
    seed.order(ledger["malabar"], datetime(2025, 1, 7, 22, 0))
    seed.order(ledger["malabar"], datetime(2025, 1, 8, 0, 0))

    page = order_service.list_orders(
        store, admin, OrderFilters(date_from=date(2025, 1, 5), date_to=date(2025, 1, 7))
    )

    assert page.total == 2


def test_search_matches_customer_name_or_phone(store, seed, admin, ledger) -> None:
    seed.order(ledger["malabar"], datetime(2025, 1, 5))
    seed.order(ledger["kerala"], datetime(2025, 1, 5))

    by_name = order_service.list_orders(store, admin, OrderFilters(search="malabar"))
    by_phone = order_service.list_orders(store, admin, OrderFilters(search="0494"))

    assert [priced.customer_name for priced in by_name.orders] == ["Hotel Malabar"]
    assert [priced.customer_name for priced in by_phone.orders] == ["Cafe Kerala"]
    assert by_phone.summary.total_orders == 1


def test_orders_of_deleted_customers_are_listed_at_zero(store, seed, admin, ledger) -> None:
    seed.order(ledger["malabar"], datetime(2025, 1, 5), standard_qty=4)
    store.tables["customers"] = [row for row in store.tables["customers"] if row["id"] != ledger["malabar"]["id"]]

    page = order_service.list_orders(store, admin, OrderFilters())

    assert page.orders[0].customer_name == "Customer Deleted"
    assert page.orders[0].route_name == "Unknown"
    assert page.summary.total_revenue == 0
    assert page.summary.total_standard_qty == 4


def test_price_change_reprices_history(store, seed, admin, ledger) -> None:
    seed.order(ledger["malabar"], datetime(2025, 1, 5), standard_qty=2, premium_qty=0)
    store.tables["customers"][0]["standard_unit_price"] = 12

    page = order_service.list_orders(store, admin, OrderFilters())

    assert page.orders[0].total == 24


@pytest.mark.parametrize("filters", [OrderFilters(page=0), OrderFilters(page_size=0)])
def test_invalid_paging_is_rejected(store, admin, filters) -> None:
    with pytest.raises(ValidationError):
        order_service.list_orders(store, admin, filters)


def test_empty_ledger(store, admin) -> None:
    page = order_service.list_orders(store, admin, OrderFilters())

    assert page.orders == []
    assert page.total == 0
    assert page.total_pages == 0
    assert page.summary.total_revenue == 0
