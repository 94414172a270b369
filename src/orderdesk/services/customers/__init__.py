"""Customer service helpers."""

from .export import export_customers_csv
from .importer import ImportResult, import_customers, import_customers_csv, rows_from_workbook
from .ledger import (
    create_customer,
    delete_customer,
    get_customer,
    list_customers,
    route_names_for,
    update_customer,
)

__all__ = [
    "create_customer",
    "update_customer",
    "delete_customer",
    "get_customer",
    "list_customers",
    "route_names_for",
    "import_customers",
    "import_customers_csv",
    "rows_from_workbook",
    "ImportResult",
    "export_customers_csv",
]
