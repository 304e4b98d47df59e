# =============================================================================
# lib/listing.py - Search and Sort Over Fetched Rows
# =============================================================================
# The admin screens fetch a whole table (they are small) and then filter and
# sort in memory. These helpers implement that substring search and the
# sort-toggle behavior shared by the list endpoints.
# =============================================================================

from __future__ import annotations

from typing import Any, Iterable, Literal, Sequence

SortOrder = Literal["asc", "desc"]


def _text(value: Any) -> str:
    """Render a cell for matching. Whole floats print without '.0'."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def search_rows(
    rows: Iterable[dict[str, Any]],
    query: str | None,
    fields: Sequence[str] = (),
    composites: Sequence[Sequence[str]] = (),
) -> list[dict[str, Any]]:
    """
    Case-insensitive substring search.

    Args:
        rows: Rows as returned by the record store
        query: Search text; empty or None returns every row
        fields: Columns matched one by one
        composites: Column groups joined with spaces and matched as one
            string, e.g. ("street_address", "city", "district", "state")

    Example:
        search_rows(quotes, "pune", fields=("name", "email"),
                    composites=[("street_address", "city", "district", "state")])
    """
    rows = list(rows)
    if not query:
        return rows

    needle = query.lower()
    matched = []
    for row in rows:
        haystacks = [_text(row.get(f)) for f in fields]
        haystacks += [" ".join(_text(row.get(f)) for f in group) for group in composites]
        if any(needle in h.lower() for h in haystacks):
            matched.append(row)
    return matched


def _sort_key(value: Any) -> tuple[int, Any]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value)
    return (1, _text(value).lower())


def sort_rows(
    rows: Iterable[dict[str, Any]],
    field: str,
    descending: bool = False,
) -> list[dict[str, Any]]:
    """
    Stable sort on one column, case-insensitive for text.

    Rows missing the column (or holding None) always go last.
    """
    rows = list(rows)
    present = [r for r in rows if r.get(field) is not None]
    missing = [r for r in rows if r.get(field) is None]
    present.sort(key=lambda r: _sort_key(r[field]), reverse=descending)
    return present + missing


def toggle_order(
    current_field: str,
    current_order: SortOrder,
    field: str,
) -> tuple[str, SortOrder]:
    """
    Next (field, order) after the user clicks a sort control.

    Clicking the active column flips the direction; a new column starts
    ascending.
    """
    if field == current_field:
        return field, "desc" if current_order == "asc" else "asc"
    return field, "asc"
