"""Shared helpers for building and paging Supabase queries."""

from __future__ import annotations

import uuid
from datetime import date, datetime, time
from typing import Any, Callable, Iterable

# PostgREST caps a single response at 1000 rows by default
PAGE_SIZE = 1000
ID_BATCH_SIZE = 100

END_OF_DAY = time(23, 59, 59, 999000)


def new_id() -> str:
    return str(uuid.uuid4())


def now() -> datetime:
    return datetime.now()


def format_timestamp(value: datetime) -> str:
    """Serialize a timestamp the way every table stores it (millisecond precision)."""
    return value.isoformat(timespec="milliseconds")


def parse_timestamp(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    # Stored values are wall-clock times; drop any offset the store adds back
    return parsed.replace(tzinfo=None)


def as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    return datetime.combine(value, time.min)


def day_span(value: date | datetime) -> tuple[datetime, datetime]:
    """Return the first and last millisecond of the calendar day containing ``value``."""
    day = value.date() if isinstance(value, datetime) else value
    return datetime.combine(day, time.min), datetime.combine(day, END_OF_DAY)


def escape_like(value: str) -> str:
    """Escape LIKE wildcards for a case-insensitive ``ilike`` lookup.

    PostgREST reads ``*`` as ``%`` and offers no escape for it, so it is
    narrowed to the single-character wildcard ``_``. The pattern can then
    still match other values in that position; callers confirm the match
    with :func:`same_text`.
    """
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return escaped.replace("*", "_")


def same_text(left: str | None, right: str | None) -> bool:
    return (left or "").strip().lower() == (right or "").strip().lower()


def fetch_all(build_query: Callable[[], Any]) -> list[dict[str, Any]]:
    """Run a select repeatedly with ``range`` until every matching row is read.

    ``build_query`` must return a fresh filter builder on each call since
    Supabase builders are mutated by ``range``.
    """
    rows: list[dict[str, Any]] = []
    start = 0
    while True:
        response = build_query().range(start, start + PAGE_SIZE - 1).execute()
        batch = response.data or []
        rows.extend(batch)
        if len(batch) < PAGE_SIZE:
            break
        start += PAGE_SIZE
    return rows


def fetch_by_ids(client: Any, table: str, ids: Iterable[str]) -> dict[str, dict[str, Any]]:
    """Fetch rows by primary key in batches; missing ids are simply absent from the result."""
    unique_ids = list(dict.fromkeys(i for i in ids if i))
    found: dict[str, dict[str, Any]] = {}
    for i in range(0, len(unique_ids), ID_BATCH_SIZE):
        batch = unique_ids[i:i + ID_BATCH_SIZE]
        response = client.table(table).select("*").in_("id", batch).execute()
        for row in response.data or []:
            found[row["id"]] = row
    return found


def count_rows(client: Any, table: str, column: str, value: Any) -> int:
    response = client.table(table).select("id", count="exact").eq(column, value).execute()
    if response.count is not None:
        return response.count
    return len(response.data or [])
