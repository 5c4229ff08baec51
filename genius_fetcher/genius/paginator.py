"""
Page-by-page fetching of Genius collection endpoints

Collection endpoints (songs by artist, albums by artist, tracks by album)
take per_page and page parameters and answer with a list plus a next_page
cursor. paginate() drives those calls in one of two modes:

- Bounded: the caller wants exactly `total` items. Each request asks for
  min(per_page, remaining), so the last page shrinks instead of overshooting.
- Unbounded: the caller wants everything. Each request asks for the full
  per_page until the server reports next_page as null/0.

The next page to request is always the server's next_page value. Any error
aborts the whole fetch and nothing collected so far is returned.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..utils.logger import get_logger
from .requester import CancellationToken

logger = get_logger(__name__)

# fetch_page(page, per_page) -> decoded "response" object of the envelope
PageFetcher = Callable[[int, int], Dict[str, Any]]


def get_per_page(total: int, fetched: int, per_page: int) -> int:
    """Page size for the next bounded request: never more than what is still missing"""
    remaining = total - fetched
    if remaining < per_page:
        return remaining
    return per_page


@dataclass
class PageCursor:
    """
    Position of a paginated fetch

    Attributes:
        per_page: Page size ceiling
        target: Exact number of items wanted, None for everything
        page: 1-based page to request next
        fetched: Items collected so far
        exhausted: The server reported there is no next page
    """
    per_page: int
    target: Optional[int] = None
    page: int = 1
    fetched: int = 0
    exhausted: bool = False

    @property
    def bounded(self) -> bool:
        return self.target is not None

    @property
    def remaining(self) -> Optional[int]:
        if not self.bounded:
            return None
        return self.target - self.fetched

    @property
    def done(self) -> bool:
        if self.exhausted:
            return True
        return self.bounded and self.remaining <= 0

    def page_size(self) -> int:
        if not self.bounded:
            return self.per_page
        return get_per_page(self.target, self.fetched, self.per_page)

    def advance(self, count: int, next_page: Any) -> None:
        """Record a fetched page and move to the server-supplied next page"""
        self.fetched += count
        next_page = int(next_page) if next_page else 0
        # An empty page ends the fetch even if the server claims more
        if next_page < 1 or count == 0:
            self.exhausted = True
        else:
            self.page = next_page


def paginate(
    fetch_page: PageFetcher,
    items_key: str,
    per_page: int = 50,
    total: Optional[int] = None,
    cancel: Optional[CancellationToken] = None,
    on_page: Optional[Callable[[PageCursor], None]] = None
) -> List[Any]:
    """
    Collect the items of a paged collection in server order

    Args:
        fetch_page: Called with (page, per_page); returns the decoded response object
        items_key: Key of the item list inside the response object ('songs', 'albums', ...)
        per_page: Page size ceiling
        total: Number of items wanted; None (or -1) for everything
        cancel: Optional token checked before every page
        on_page: Optional callback receiving the cursor after each page

    Returns:
        All collected items

    Raises:
        ValueError: If per_page or total is out of range
        GeniusError: Whatever the first failing page raised
    """
    if per_page < 1:
        raise ValueError(f"per_page must be at least 1: {per_page}")
    if total is not None and total < 0:
        if total != -1:
            raise ValueError(f"total must be a non-negative count or -1: {total}")
        total = None

    cursor = PageCursor(per_page=per_page, target=total)
    items: List[Any] = []

    while not cursor.done:
        if cancel is not None:
            cancel.raise_if_cancelled(f"{items_key} page {cursor.page}")

        size = cursor.page_size()
        response = fetch_page(cursor.page, size)
        page_items = response.get(items_key) or []

        if cursor.bounded:
            page_items = page_items[:cursor.remaining]

        items.extend(page_items)
        cursor.advance(len(page_items), response.get('next_page'))

        logger.debug(
            f"Fetched {len(page_items)} {items_key} (page size {size}), "
            f"{cursor.fetched} total, next page: {'none' if cursor.exhausted else cursor.page}"
        )
        if on_page is not None:
            on_page(cursor)

    return items
