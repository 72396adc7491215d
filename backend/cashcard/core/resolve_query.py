"""Query Resolution — turns raw page/size/sort text into a canonical PageQuery.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - Missing page → 0, missing size → default_size, missing sort → amount ASC
    - Malformed input raises QueryValidationError; it is never silently defaulted
    - 1 <= limit <= max_size; oversized requests are clamped to max_size
    - 0 <= offset <= MAX_OFFSET; pages past it are rejected, never sent to the store
    - Ordering is total: sort field, then id ASC (ids are unique)

Design Decisions:
    - Sort field is a closed enum (SortField): no column name ever comes from the wire
    - Single sort parameter only: the canonical descriptor carries one field/direction
    - Oversized pages are clamped to max_size, not rejected
"""

from dataclasses import dataclass

from cashcard.core.domain_types import MAX_CARD_ID, SortDirection, SortField
from cashcard.core.errors import QueryValidationError

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
# No owner can hold more cards than there are ids
MAX_OFFSET = MAX_CARD_ID


@dataclass(frozen=True)
class PageQuery:
    """Canonical query descriptor handed to the repository."""
    offset: int = 0
    limit: int = DEFAULT_PAGE_SIZE
    sort_field: SortField = SortField.AMOUNT
    sort_direction: SortDirection = SortDirection.ASC

    @property
    def order_by(self) -> list[tuple[SortField, SortDirection]]:
        """Sort keys with the id tie-break appended."""
        keys = [(self.sort_field, self.sort_direction)]
        if self.sort_field is not SortField.ID:
            keys.append((SortField.ID, SortDirection.ASC))
        return keys


def resolve_page_query(
    page: str | None = None,
    size: str | None = None,
    sort: list[str] | None = None,
    *,
    default_size: int = DEFAULT_PAGE_SIZE,
    max_size: int = MAX_PAGE_SIZE,
) -> PageQuery:
    """Normalize raw request parameters. Raises QueryValidationError on bad input."""
    page_index = _parse_page(page)
    limit = _parse_size(size, default_size, max_size)
    sort_field, sort_direction = _parse_sort(sort)
    offset = page_index * limit
    if offset > MAX_OFFSET:
        raise QueryValidationError(
            f"'page' too large: page * size must be <= {MAX_OFFSET}", "page",
        )
    return PageQuery(
        offset=offset,
        limit=limit,
        sort_field=sort_field,
        sort_direction=sort_direction,
    )


def _parse_int(raw: str, field: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise QueryValidationError(
            f"'{field}' must be an integer, got '{raw}'", field,
        ) from None


def _parse_page(page: str | None) -> int:
    if page is None or not page.strip():
        return 0
    value = _parse_int(page, "page")
    if value < 0:
        raise QueryValidationError("'page' must be >= 0", "page")
    return value


def _parse_size(size: str | None, default_size: int, max_size: int) -> int:
    if size is None or not size.strip():
        return min(default_size, max_size)
    value = _parse_int(size, "size")
    if value < 1:
        raise QueryValidationError("'size' must be >= 1", "size")
    return min(value, max_size)


def _parse_sort(
    sort: list[str] | None,
) -> tuple[SortField, SortDirection]:
    tokens = [t for t in (sort or []) if t.strip()]
    if not tokens:
        return SortField.AMOUNT, SortDirection.ASC
    if len(tokens) > 1:
        raise QueryValidationError(
            "Only one 'sort' parameter is supported", "sort",
        )

    parts = [p.strip().lower() for p in tokens[0].split(",")]
    if len(parts) > 2 or not parts[0]:
        raise QueryValidationError(
            f"Malformed sort '{tokens[0]}', expected 'field' or 'field,direction'",
            "sort",
        )
    try:
        field = SortField(parts[0])
    except ValueError:
        allowed = ", ".join(f.value for f in SortField)
        raise QueryValidationError(
            f"Cannot sort by '{parts[0]}'. Allowed: {allowed}", "sort",
        ) from None

    if len(parts) == 1:
        return field, SortDirection.ASC
    try:
        direction = SortDirection(parts[1])
    except ValueError:
        raise QueryValidationError(
            f"Sort direction must be 'asc' or 'desc', got '{parts[1]}'", "sort",
        ) from None
    return field, direction
