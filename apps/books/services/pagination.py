"""Offset pagination shared by book listings, search and book reviews."""

from dataclasses import dataclass
from typing import Optional

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

# Largest value a database accepts for LIMIT and OFFSET (signed 64-bit).
MAX_WINDOW_END = 2 ** 63 - 1


@dataclass(frozen=True)
class PaginationWindow:
    """A page/limit pair and the slice of results it covers."""

    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def end(self) -> int:
        return self.skip + self.limit

    def apply(self, queryset):
        """Slice a queryset (or sequence) down to this window."""
        return queryset[self.skip:self.end]

    def describe(self, total: int) -> dict:
        """
        Build next/prev page descriptors against a total result count.

        ``next`` is present only while results remain after this window,
        ``prev`` only when this window does not start at the first result.
        """
        pagination = {}
        if self.end < total:
            pagination['next'] = {'page': self.page + 1, 'limit': self.limit}
        if self.skip > 0:
            pagination['prev'] = {'page': self.page - 1, 'limit': self.limit}
        return pagination


def plan_window(*, page=None, limit=None, max_limit: Optional[int] = None) -> PaginationWindow:
    """
    Build a pagination window from raw request values.

    Values that are missing, not integers, or not positive fall back to
    the defaults (page 1, limit 10). Oversized values are clamped so the
    window never ends past MAX_WINDOW_END.

    Args:
        page: Requested page number
        limit: Requested page size
        max_limit: Optional cap on page size; None leaves it unbounded

    Returns:
        PaginationWindow
    """
    page = _positive_int(page, DEFAULT_PAGE)
    limit = _positive_int(limit, DEFAULT_LIMIT)
    if max_limit is not None:
        limit = min(limit, max_limit)
    limit = min(limit, MAX_WINDOW_END)
    page = min(page, MAX_WINDOW_END // limit)
    return PaginationWindow(page=page, limit=limit)


def _positive_int(raw, default: int) -> int:
    if isinstance(raw, bool):
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default
