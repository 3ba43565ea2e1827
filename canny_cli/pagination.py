"""
Depagination of cursor listings.

Offset listings (``hasMore`` plus skip/limit) are deliberately fetched one
page per command; see ``OffsetPage.next_skip`` for the follow-up offset.
Only cursor listings whose command promises "all" results go through
``depaginate``.
"""

from canny_cli import config
from canny_cli.api import _log_http_event


def depaginate(fetch_page, *, page_size=None, on_progress=None, max_records=None):
    """Fetch every page of a cursor listing into one ordered list.

    Args:
        fetch_page: ``fetch_page(cursor, limit) -> CursorPage``. Called with
            ``cursor=None`` for the first page.
        page_size: Items requested per page (default: USERS_PAGE_SIZE).
        on_progress: Optional ``on_progress(count)`` called once per non-empty
            page with the running total.
        max_records: Stop once more than this many records have accumulated
            (default: MAX_DEPAGINATED_RECORDS). Checked after a page is added,
            so the result may exceed it by up to one page.

    Any error raised by *fetch_page* propagates; nothing partial is returned.
    """
    if page_size is None:
        page_size = config.USERS_PAGE_SIZE
    if max_records is None:
        max_records = config.MAX_DEPAGINATED_RECORDS

    records = []
    cursor = None
    pages = 0
    while True:
        page = fetch_page(cursor, page_size)
        pages += 1
        # Some deployments send hasNextPage=true with an empty final page.
        if not page.items:
            break
        records.extend(page.items)
        if on_progress is not None:
            on_progress(len(records))
        _log_http_event(
            phase="page",
            page=pages,
            page_items=len(page.items),
            total=len(records),
            has_next_page=page.has_next_page,
        )
        if not page.has_next_page or page.cursor is None:
            break
        cursor = page.cursor
        if len(records) > max_records:
            _log_http_event(phase="page_ceiling", total=len(records), max_records=max_records)
            break
    return records
