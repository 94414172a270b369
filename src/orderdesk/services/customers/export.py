"""Customer CSV export in the import column layout, so exports can be re-imported."""

from __future__ import annotations

from typing import Any

from ..csv_codec import encode_csv
from ..registry import list_sales_executives
from .importer import IMPORT_COLUMNS
from .ledger import filter_customers, route_names_for


def export_customers_csv(client: Any, *, route_name: str | None = None, search: str | None = None) -> str:
    customers = filter_customers(client, route_name=route_name, search=search)
    route_names = route_names_for(client, customers)
    display_names = {executive.username: executive.display_name for executive in list_sales_executives(client)}

    rows = [
        {
            "Name": customer.name,
            "Route": route_names.get(customer.route_id, ""),
            "SalesExecutive": display_names.get(customer.sales_executive, customer.sales_executive),
            "GreenPrice": customer.standard_unit_price,
            "OrangePrice": customer.premium_unit_price,
            "Phone": customer.phone,
        }
        for customer in customers
    ]
    return encode_csv(rows, IMPORT_COLUMNS)
