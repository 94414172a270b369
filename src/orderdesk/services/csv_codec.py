"""CSV encode/decode used by customer import and the CSV exports."""

from __future__ import annotations

import csv
import io
from typing import Any, Iterable, Mapping, Sequence


def decode_csv(text: str) -> tuple[list[str], list[dict[str, str]]]:
    """Parse CSV text with a header row into trimmed string maps.

    Rows whose cells are all blank are skipped. Missing trailing cells come
    back as empty strings.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    reader = csv.DictReader(io.StringIO(text))
    fieldnames = [name.strip() for name in (reader.fieldnames or [])]
    rows: list[dict[str, str]] = []
    for raw in reader:
        row = {}
        for index, name in enumerate(fieldnames):
            original_key = reader.fieldnames[index]
            value = raw.get(original_key)
            row[name] = value.strip() if isinstance(value, str) else ""
        if any(row.values()):
            rows.append(row)
    return fieldnames, rows


def encode_csv(rows: Iterable[Mapping[str, Any]], fieldnames: Sequence[str]) -> str:
    """Write rows under ``fieldnames`` in the given order; a header is always written."""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(fieldnames), extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()
