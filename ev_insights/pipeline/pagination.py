# ========================
# ev_insights/pipeline/pagination.py
# ========================

"""
Pagination Module

Stateless paging over the loaded dataset. The caller owns the current page
index and passes it in on every request.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Sequence, Tuple

from .ingestion import Row

logger = logging.getLogger(__name__)


class InvalidArgument(ValueError):
    """Raised when the paginator is called with a non-positive page size."""


@dataclass(frozen=True)
class Page:
    """One page of rows plus the total number of pages."""

    items: Tuple[Row, ...]
    page_count: int
    index: int
    size: int

    @property
    def has_previous(self) -> bool:
        return 0 < self.index < self.page_count

    @property
    def has_next(self) -> bool:
        return 0 <= self.index < self.page_count - 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            'items': [dict(item) for item in self.items],
            'page_count': self.page_count,
            'index': self.index,
            'size': self.size,
        }


def page_count(total: int, size: int) -> int:
    """Number of pages needed for `total` rows; 0 for an empty dataset."""
    _check_size(size)
    return math.ceil(total / size)


def paginate(rows: Sequence[Row], index: int, size: int) -> Page:
    """
    Slice out page `index` of `rows`.

    Args:
        rows (sequence): The full row sequence
        index (int): Zero-based page index; out-of-range yields no items
        size (int): Rows per page, must be positive

    Returns:
        Page: items for the page and the total page count

    Raises:
        InvalidArgument: if `size` is not a positive integer
    """
    count = page_count(len(rows), size)

    if 0 <= index < count:
        offset = index * size
        items = tuple(rows[offset:offset + size])
    else:
        items = ()
        if count:
            logger.debug(f"Page index {index} outside [0, {count}), returning empty page")

    return Page(items=items, page_count=count, index=index, size=size)


def _check_size(size: Any) -> None:
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise InvalidArgument(f"Page size must be a positive integer, got {size!r}")
