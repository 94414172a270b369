"""Bulk customer import from CSV (or xlsx) with per-row diagnostics.

File-level problems (empty file, missing header columns, a route that does
not exist) abort the import before anything is written. Row-level problems
skip that row, are counted as failures and reported, and the rest of the
file is still imported. Rows are matched to existing customers by
case-insensitive name: a match is updated in place, anything else is created.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from io import BytesIO
from typing import Any

from openpyxl import load_workbook

from ...config import settings
from ...persistence import customers as customer_store
from ..csv_codec import decode_csv
from ..errors import EmptyFile, InvalidHeader, UnknownImportRoute
from ..propagation import PropagationDispatcher, propagate_sales_executive
from ..registry import find_active_route_by_name, find_sales_executive_by_display_name, normalize_route_name

logger = logging.getLogger(__name__)

# "Green" and "Orange" are the legacy column names for standard and premium prices
IMPORT_COLUMNS = ("Name", "Route", "SalesExecutive", "GreenPrice", "OrangePrice", "Phone")
REQUIRED_VALUES = ("Name", "Route", "SalesExecutive", "GreenPrice", "OrangePrice")

_CURRENCY_TOKENS = re.compile(r"₹|\$|\bINR|\bRs\.?", re.IGNORECASE)
_PRICE_SEPARATORS = re.compile(r"[,\s]")
_PRICE_FORMAT = re.compile(r"-?\d+(\.\d+)?")


@dataclass
class ImportResult:
    imported: int = 0
    updated: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        return (
            f"Import completed. {self.imported} new customers created, "
            f"{self.updated} customers updated, {self.failed} failed."
        )


class _RowRejected(Exception):
    pass


def parse_price(raw: str) -> float | None:
    """Parse a price cell, ignoring currency symbols, spaces and thousands separators.

    What remains must be a plain decimal number; anything else (``250/-``,
    ``1e3``) is rejected rather than rewritten.
    """
    cleaned = _PRICE_SEPARATORS.sub("", _CURRENCY_TOKENS.sub("", raw or ""))
    if not _PRICE_FORMAT.fullmatch(cleaned):
        return None
    return float(cleaned)


def rows_from_workbook(payload: bytes) -> tuple[list[str], list[dict[str, str]]]:
    """Read the active sheet of an xlsx file into the same shape as ``decode_csv``."""
    workbook = load_workbook(filename=BytesIO(payload), read_only=True, data_only=True)
    worksheet = workbook.active
    rows_iter = worksheet.iter_rows(values_only=True)
    first_row = next(rows_iter, None)
    headers = [str(cell).strip() if cell is not None else "" for cell in (first_row or [])]

    rows: list[dict[str, str]] = []
    for values in rows_iter:
        row = {}
        for i, header in enumerate(headers):
            cell = values[i] if i < len(values) else None
            row[header] = _cell_to_text(cell)
        if any(row.values()):
            rows.append(row)
    workbook.close()
    return headers, rows


def _cell_to_text(cell: Any) -> str:
    if cell is None:
        return ""
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    return str(cell).strip()


def _resolve_import_routes(client: Any, rows: list[dict[str, str]]) -> dict[str, str]:
    route_names = sorted({normalize_route_name(row.get("Route", "")) for row in rows} - {""})
    route_map: dict[str, str] = {}
    for route_name in route_names:
        route = find_active_route_by_name(client, route_name)
        if route is None:
            raise UnknownImportRoute(route_name)
        route_map[route_name] = route.id
    return route_map


def _parse_row_prices(row: dict[str, str]) -> tuple[float, float]:
    standard_price = parse_price(row["GreenPrice"])
    premium_price = parse_price(row["OrangePrice"])
    if standard_price is None or premium_price is None:
        raise _RowRejected("invalid price format")
    if standard_price < 0 or premium_price < 0:
        raise _RowRejected("prices cannot be negative")
    return standard_price, premium_price


def import_customers(
    client: Any,
    fieldnames: list[str],
    rows: list[dict[str, str]],
    dispatcher: PropagationDispatcher | None = None,
) -> ImportResult:
    if not rows:
        raise EmptyFile()
    missing_columns = [column for column in IMPORT_COLUMNS if column not in fieldnames]
    if missing_columns:
        raise InvalidHeader(missing_columns)

    route_map = _resolve_import_routes(client, rows)

    result = ImportResult()
    seen_names: dict[str, int] = {}

    # Row 1 is the header, so the first data row is row 2
    for row_number, row in enumerate(rows, start=2):
        name = row.get("Name", "")
        try:
            missing = [column for column in REQUIRED_VALUES if not row.get(column)]
            if missing:
                raise _RowRejected(f"missing required field(s) {', '.join(missing)}")

            key = name.lower()
            if key in seen_names:
                raise _RowRejected(f"duplicate of row {seen_names[key]} in this file")

            standard_price, premium_price = _parse_row_prices(row)

            executive = find_sales_executive_by_display_name(client, row["SalesExecutive"])
            if executive is None:
                raise _RowRejected(f"sales executive '{row['SalesExecutive']}' not found")

            phone = row.get("Phone", "")
            existing = customer_store.find_customer_by_name(client, name)
            if existing is not None:
                customer_store.update_customer(
                    client,
                    existing.id,
                    {
                        "sales_executive": executive.username,
                        "standard_unit_price": standard_price,
                        "premium_unit_price": premium_price,
                        "phone": phone,
                    },
                )
                if dispatcher is not None and existing.sales_executive != executive.username:
                    propagate_sales_executive(client, dispatcher, existing.id, executive.username)
                result.updated += 1
            else:
                customer_store.insert_customer(
                    client,
                    {
                        "name": name,
                        "route_id": route_map[normalize_route_name(row["Route"])],
                        "sales_executive": executive.username,
                        "standard_unit_price": standard_price,
                        "premium_unit_price": premium_price,
                        "phone": phone,
                    },
                )
                result.imported += 1
            seen_names[key] = row_number
        except _RowRejected as exc:
            result.failed += 1
            result.errors.append(f"Row {row_number}: {exc} ({name or 'unnamed'})")
        except Exception as exc:
            logger.warning(f"Failed to import row {row_number} ({name}): {exc}")
            result.failed += 1
            result.errors.append(f"Row {row_number}: failed to import ({name or 'unnamed'}): {exc}")

    logger.info(result.message)
    result.errors = result.errors[:settings.import_error_limit]
    return result


def import_customers_csv(client: Any, text: str, dispatcher: PropagationDispatcher | None = None) -> ImportResult:
    fieldnames, rows = decode_csv(text or "")
    return import_customers(client, fieldnames, rows, dispatcher=dispatcher)
