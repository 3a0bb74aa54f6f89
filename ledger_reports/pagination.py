"""Page slicing of the flat row sequence (``ledger_reports.pagination``)."""

from __future__ import annotations

from collections.abc import Sequence

from ledger_reports.models import FlatRow, ReportPage


def page_count(total_rows: int, page_size: int) -> int:
    """Number of pages; an empty report still has one (empty) page."""
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    return max(1, -(-total_rows // page_size))


def paginate(rows: Sequence[FlatRow], page: int, page_size: int) -> ReportPage:
    """
    Slice one 1-based page out of ``rows``.

    Pages past either end clamp to the first/last page.
    """
    pages = page_count(len(rows), page_size)
    page = min(max(page, 1), pages)
    start = (page - 1) * page_size
    return ReportPage(
        rows=tuple(rows[start:start + page_size]),
        page=page,
        page_size=page_size,
        page_count=pages,
        total_rows=len(rows),
    )
