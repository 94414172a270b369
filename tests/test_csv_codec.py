from src.orderdesk.services.csv_codec import decode_csv, encode_csv


def test_decode_csv_trims_cells_and_skips_blank_rows() -> None:
    text = "\ufeffName , Route\n  Hotel Malabar , ponnani \n,\n\nCafe Kerala,TIRUR\n"

    fieldnames, rows = decode_csv(text)

    assert fieldnames == ["Name", "Route"]
    assert rows == [
        {"Name": "Hotel Malabar", "Route": "ponnani"},
        {"Name": "Cafe Kerala", "Route": "TIRUR"},
    ]


def test_decode_csv_fills_missing_trailing_cells() -> None:
    fieldnames, rows = decode_csv("Name,Route,Phone\nHotel Malabar,PONNANI\n")

    assert fieldnames == ["Name", "Route", "Phone"]
    assert rows == [{"Name": "Hotel Malabar", "Route": "PONNANI", "Phone": ""}]


def test_decode_csv_handles_quoted_commas() -> None:
    _, rows = decode_csv('Name,GreenPrice\n"Stores, Main Road","1,200.50"\n')

    assert rows == [{"Name": "Stores, Main Road", "GreenPrice": "1,200.50"}]


def test_encode_csv_writes_header_for_empty_rows() -> None:
    assert encode_csv([], ["Date", "Total"]) == "Date,Total\n"


def test_encode_csv_orders_columns_and_ignores_extras() -> None:
    content = encode_csv([{"Total": "10.00", "Date": "2025-01-05", "extra": 1}], ["Date", "Total"])

    assert content == "Date,Total\n2025-01-05,10.00\n"
