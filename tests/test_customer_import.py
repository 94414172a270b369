from datetime import datetime
from io import BytesIO

import pytest
from openpyxl import Workbook

from src.orderdesk.services import customers as customer_service
from src.orderdesk.services.customers.importer import parse_price
from src.orderdesk.services.errors import EmptyFile, InvalidHeader, UnknownImportRoute

HEADER = "Name,Route,SalesExecutive,GreenPrice,OrangePrice,Phone\n"


@pytest.fixture(autouse=True)
def reference_data(seed):
    seed.user("ravi", "Ravi Kumar")
    seed.user("anu", "Anu Thomas")
    return {"ponnani": seed.route("PONNANI"), "tirur": seed.route("TIRUR")}


def _names(store):
    return sorted(row["name"] for row in store.tables["customers"])


def test_parse_price_strips_currency_and_separators() -> None:
    assert parse_price("₹1,200.50") == 1200.5
    assert parse_price(" 45 ") == 45.0
    assert parse_price("-3") == -3.0
    assert parse_price("abc") is None
    assert parse_price("") is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Rs. 250", 250.0),
        ("Rs.1,200", 1200.0),
        ("rs 75.5", 75.5),
        ("INR 1,000", 1000.0),
        ("$ 12.25", 12.25),
    ],
)
def test_parse_price_removes_currency_prefixes(raw, expected) -> None:
    assert parse_price(raw) == expected


@pytest.mark.parametrize("raw", ["250/-", "1e3", ".250", "12.5.1", "12 abc"])
def test_parse_price_rejects_anything_but_a_plain_number(raw) -> None:
    assert parse_price(raw) is None


def test_import_creates_new_customers(store, reference_data) -> None:
    text = HEADER + "Hotel Malabar,ponnani,Ravi Kumar,₹12,30,9847000000\nCafe Kerala,TIRUR,anu thomas,10,25,\n"

    result = customer_service.import_customers_csv(store, text)

    assert (result.imported, result.updated, result.failed) == (2, 0, 0)
    assert result.errors == []
    assert result.message == "Import completed. 2 new customers created, 0 customers updated, 0 failed."
    malabar = next(row for row in store.tables["customers"] if row["name"] == "Hotel Malabar")
    assert malabar["route_id"] == reference_data["ponnani"]["id"]
    assert malabar["sales_executive"] == "ravi"
    assert malabar["standard_unit_price"] == 12.0


def test_import_updates_existing_customer_by_name(store, seed, reference_data) -> None:
    seed.customer("Hotel Malabar", reference_data["ponnani"], sales_executive="ravi", standard_unit_price=5)
    text = HEADER + "hotel malabar,PONNANI,Ravi Kumar,15,35,0494\n"

    result = customer_service.import_customers_csv(store, text)

    assert (result.imported, result.updated, result.failed) == (0, 1, 0)
    row = store.tables["customers"][0]
    assert row["standard_unit_price"] == 15.0
    assert row["premium_unit_price"] == 35.0
    assert row["phone"] == "0494"


def test_import_reports_row_errors_and_keeps_good_rows(store, reference_data) -> None:
    text = HEADER + (
        "Hotel Malabar,PONNANI,Ravi Kumar,12,30,\n"
        ",PONNANI,Ravi Kumar,12,30,\n"
        "Cafe Kerala,PONNANI,Ravi Kumar,abc,30,\n"
        "Tea Stall,PONNANI,Ravi Kumar,-1,30,\n"
        "Bakery,PONNANI,Nobody,12,30,\n"
        "HOTEL MALABAR,PONNANI,Ravi Kumar,12,30,\n"
    )

    result = customer_service.import_customers_csv(store, text)

    assert (result.imported, result.updated, result.failed) == (1, 0, 5)
    assert result.errors[0].startswith("Row 3: missing required field(s) Name")
    assert result.errors[1] == "Row 4: invalid price format (Cafe Kerala)"
    assert result.errors[2] == "Row 5: prices cannot be negative (Tea Stall)"
    assert result.errors[3] == "Row 6: sales executive 'Nobody' not found (Bakery)"
    assert result.errors[4] == "Row 7: duplicate of row 2 in this file (HOTEL MALABAR)"
    assert _names(store) == ["Hotel Malabar"]


def test_import_unknown_route_aborts_before_writing(store, reference_data) -> None:
    text = HEADER + "Hotel Malabar,PONNANI,Ravi Kumar,12,30,\nCafe Kerala,NOWHERE,Ravi Kumar,12,30,\n"

    with pytest.raises(UnknownImportRoute) as excinfo:
        customer_service.import_customers_csv(store, text)

    assert "NOWHERE" in excinfo.value.message
    assert store.tables["customers"] == []


def test_import_missing_header_column_aborts(store) -> None:
    with pytest.raises(InvalidHeader) as excinfo:
        customer_service.import_customers_csv(store, "Name,Route\nHotel Malabar,PONNANI\n")

    assert "SalesExecutive" in excinfo.value.missing


def test_import_empty_file_aborts(store) -> None:
    with pytest.raises(EmptyFile):
        customer_service.import_customers_csv(store, HEADER)


def test_import_error_list_is_truncated(store, reference_data) -> None:
    rows = "".join(f"Customer {index},PONNANI,Nobody,12,30,\n" for index in range(15))

    result = customer_service.import_customers_csv(store, HEADER + rows)

    assert result.failed == 15
    assert len(result.errors) == 10


def test_import_executive_change_propagates_to_orders(store, seed, reference_data, dispatcher) -> None:
    customer = seed.customer("Hotel Malabar", reference_data["ponnani"], sales_executive="ravi")
    seed.order(customer, datetime(2025, 1, 5))

    customer_service.import_customers_csv(
        store,
        HEADER + "Hotel Malabar,PONNANI,Anu Thomas,12,30,\n",
        dispatcher=dispatcher,
    )
    dispatcher.drain(timeout=5)

    assert store.tables["orders"][0]["sales_executive"] == "anu"


def test_rows_from_workbook_matches_csv_shape(store, reference_data) -> None:
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(["Name", "Route", "SalesExecutive", "GreenPrice", "OrangePrice", "Phone"])
    sheet.append(["Hotel Malabar", "PONNANI", "Ravi Kumar", 12.0, 30, 9847000000])
    sheet.append([None, None, None, None, None, None])
    buffer = BytesIO()
    workbook.save(buffer)

    fieldnames, rows = customer_service.rows_from_workbook(buffer.getvalue())

    assert fieldnames[:3] == ["Name", "Route", "SalesExecutive"]
    assert rows == [
        {
            "Name": "Hotel Malabar",
            "Route": "PONNANI",
            "SalesExecutive": "Ravi Kumar",
            "GreenPrice": "12",
            "OrangePrice": "30",
            "Phone": "9847000000",
        }
    ]
    result = customer_service.import_customers(store, fieldnames, rows)
    assert result.imported == 1


def test_import_accepts_rupee_prefixed_prices(store, reference_data) -> None:
    text = HEADER + 'Hotel Malabar,PONNANI,Ravi Kumar,Rs. 250,"Rs.1,200",\nCafe Kerala,PONNANI,Ravi Kumar,250/-,30,\n'

    result = customer_service.import_customers_csv(store, text)

    assert (result.imported, result.failed) == (1, 1)
    assert result.errors == ["Row 3: invalid price format (Cafe Kerala)"]
    row = store.tables["customers"][0]
    assert row["standard_unit_price"] == 250.0
    assert row["premium_unit_price"] == 1200.0


def test_import_name_with_asterisk_does_not_update_similar_customer(store, seed, reference_data) -> None:
    seed.customer("Shop 1", reference_data["ponnani"], standard_unit_price=5)

    result = customer_service.import_customers_csv(store, HEADER + "Shop*,PONNANI,Ravi Kumar,12,30,\n")

    assert (result.imported, result.updated) == (1, 0)
    assert _names(store) == ["Shop 1", "Shop*"]
    shop_1 = next(row for row in store.tables["customers"] if row["name"] == "Shop 1")
    assert shop_1["standard_unit_price"] == 5
