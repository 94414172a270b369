"""Read access to the users table (sales executives)."""

from __future__ import annotations

from typing import Any

from ..models.domain import ROLE_USER, SalesExecutive
from .query import escape_like, fetch_all, same_text

TABLE = "users"


def sales_executive_from_row(row: dict[str, Any]) -> SalesExecutive:
    return SalesExecutive(
        id=row["id"],
        username=row["username"],
        display_name=row.get("display_name") or row["username"],
        role=row.get("role") or ROLE_USER,
    )


def find_sales_executive_by_display_name(client: Any, display_name: str) -> SalesExecutive | None:
    response = (
        client.table(TABLE)
        .select("*")
        .ilike("display_name", escape_like(display_name))
        .eq("role", ROLE_USER)
        .execute()
    )
    for row in response.data or []:
        if same_text(row.get("display_name"), display_name):
            return sales_executive_from_row(row)
    return None


def find_sales_executive_by_username(client: Any, username: str) -> SalesExecutive | None:
    response = (
        client.table(TABLE)
        .select("*")
        .eq("username", username)
        .eq("role", ROLE_USER)
        .limit(1)
        .execute()
    )
    if not response.data:
        return None
    return sales_executive_from_row(response.data[0])


def list_sales_executives(client: Any) -> list[SalesExecutive]:
    rows = fetch_all(lambda: client.table(TABLE).select("*").eq("role", ROLE_USER).order("username"))
    return [sales_executive_from_row(row) for row in rows]
