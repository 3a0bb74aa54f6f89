"""
External collaborators (``ledger_reports.sources``).

Contracts for the raw-entry source and the hierarchy title lookup, with
implementations backed by a SQLAlchemy session and by plain mappings.
The wire format of a source is its own concern: it only has to return
records shaped like ``LedgerEntry`` (see ``ledger_ingestion``).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Protocol, runtime_checkable

from sqlalchemy.orm import Session

from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.journal import CodeKind
from ledger_kernel.selectors.journal_selector import JournalSelector
from ledger_reports.levels import HierarchyLevel
from ledger_reports.models import FetchParams

logger = get_logger("reports.sources")


@runtime_checkable
class LedgerSource(Protocol):
    """Raw-entry source: one record per posting for the given parameters."""

    def fetch(self, params: FetchParams) -> Iterable[Mapping[str, Any]]:
        ...


@runtime_checkable
class TitleLookup(Protocol):
    """LevelCode -> title per level; ``None`` when no title is known."""

    def title(self, level: HierarchyLevel, code: str) -> str | None:
        ...


class SqlLedgerSource:
    """
    Raw-entry source over journal storage.

    The session is owned by the caller; this source only reads.
    """

    def __init__(self, session: Session):
        self._selector = JournalSelector(session)

    def fetch(self, params: FetchParams) -> list[dict[str, Any]]:
        return self._selector.raw_items(
            fiscal_year_id=params.fiscal_year_id,
            date_from=params.date_from,
            date_to=params.date_to,
            journal_code_from=params.document_from,
            journal_code_to=params.document_to,
            status=params.status,
        )


class MappingTitleLookup:
    """Title lookup backed by ``{level: {code: title}}``."""

    def __init__(self, titles: Mapping[HierarchyLevel, Mapping[str, str]] | None = None):
        self._titles: dict[HierarchyLevel, dict[str, str]] = {
            HierarchyLevel(level): dict(codes) for level, codes in (titles or {}).items()
        }

    def title(self, level: HierarchyLevel, code: str) -> str | None:
        return self._titles.get(level, {}).get(code) or None


_KIND_BY_LEVEL = {
    HierarchyLevel.GROUP: CodeKind.GROUP,
    HierarchyLevel.GENERAL: CodeKind.GENERAL,
    HierarchyLevel.SPECIFIC: CodeKind.SPECIFIC,
    HierarchyLevel.DETAIL: CodeKind.DETAIL,
}


class SqlTitleLookup(MappingTitleLookup):
    """Title lookup loaded once from the hierarchy code table."""

    def __init__(self, session: Session):
        selector = JournalSelector(session)
        super().__init__(
            {level: selector.titles(kind.value) for level, kind in _KIND_BY_LEVEL.items()}
        )
        logger.debug(
            "hierarchy_titles_loaded",
            extra={level.value: len(self._titles[level]) for level in _KIND_BY_LEVEL},
        )


NO_TITLES: TitleLookup = MappingTitleLookup()
