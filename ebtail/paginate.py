"""
Draining of paginated AWS listing calls.
"""

import logging
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .errors import UpstreamListError

logger = logging.getLogger(__name__)

PageFetcher = Callable[[Optional[str]], Tuple[Sequence[Any], Optional[str]]]


def collect_pages(fetch_page: PageFetcher, resource: str = "items") -> List[Any]:
    """
    Collect every item of a paginated listing, in page order.

    Args:
        fetch_page: Called with the continuation token (None for the first
            page); returns the page's items and the next token
        resource: Name used in log and error messages

    Returns:
        All items across all pages

    Raises:
        UpstreamListError: If any page fails; no partial result is returned
    """
    items: List[Any] = []
    token: Optional[str] = None
    pages = 0

    while True:
        try:
            page_items, token = fetch_page(token)
        except Exception as e:
            raise UpstreamListError(f"Listing {resource} failed after {pages} page(s): {e}") from e

        items.extend(page_items)
        pages += 1
        if not token:
            break

    logger.debug(f"Collected {len(items)} {resource} across {pages} page(s)")
    return items
