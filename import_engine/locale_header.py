"""
import_engine.locale_header - Optional store-code header row.

Row 1 is a header when the caller asks for it or when its first cell
is blank.  Each non-blank header cell names the store whose
translation sits in that column of every later row.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LocaleOverride:
    column: int
    store_code: str


def is_header_row(cells: list[str], forced: bool) -> bool:
    return forced or not cells or not cells[0].strip()


def parse_header(cells: list[str]) -> list[LocaleOverride]:
    """Non-blank cells in ascending column order."""
    return [
        LocaleOverride(column=i, store_code=value.strip())
        for i, value in enumerate(cells)
        if value.strip()
    ]


def primary_bound(overrides: list[LocaleOverride], row_length: int) -> int:
    """First column that is no longer a path segment."""
    if not overrides:
        return row_length
    return min(row_length, min(o.column for o in overrides))


def override_values(
    overrides: list[LocaleOverride],
    cells: list[str],
) -> list[tuple[str, str]]:
    """(store_code, label) for every override cell that is non-blank."""
    values = []
    for override in overrides:
        if override.column >= len(cells):
            continue
        label = cells[override.column].strip()
        if label:
            values.append((override.store_code, label))
    return values
