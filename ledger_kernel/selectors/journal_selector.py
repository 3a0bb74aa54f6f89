"""
Module: ledger_kernel.selectors.journal_selector
Responsibility: Read-only journal queries feeding the report builder: the
    flat raw-item listing (one record per journal item, joined with its
    document header) and the hierarchy code titles.
Architecture position: Kernel > Selectors.  MUST NOT import from
    ledger_reports or ledger_ingestion.

Failure modes:
    - Returns an empty list when no journal items match.
    - Contradictory ranges (from > to) are passed to SQL literally and
      match nothing.
"""

from datetime import date
from typing import Any

from sqlalchemy import select

from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.journal import HierarchyCode, Journal, JournalItem
from ledger_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.journal")

# Status value meaning "do not filter by status"
ALL_STATUSES = "all"


class JournalSelector(BaseSelector):
    """
    Selector for the report builder's raw journal listing.

    Guarantees:
        - Records are ordered by document date, document code, then line
          sequence, so downstream running balances are reproducible.
        - Amounts are returned as Decimal.
    """

    def raw_items(
        self,
        fiscal_year_id: str,
        date_from: date | None = None,
        date_to: date | None = None,
        journal_code_from: int | None = None,
        journal_code_to: int | None = None,
        status: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        List journal items as loosely-typed records.

        Each record has the keys ``date``, ``journal_code``, ``account_code``,
        ``detail_code``, ``debit``, ``credit`` and ``description``.
        """
        query = (
            select(
                Journal.journal_date,
                Journal.code,
                Journal.description.label("journal_description"),
                JournalItem.account_code,
                JournalItem.detail_code,
                JournalItem.debit,
                JournalItem.credit,
                JournalItem.description,
            )
            .select_from(JournalItem)
            .join(Journal, JournalItem.journal_id == Journal.id)
            .where(Journal.fiscal_year_id == fiscal_year_id)
        )

        if date_from is not None:
            query = query.where(Journal.journal_date >= date_from)
        if date_to is not None:
            query = query.where(Journal.journal_date <= date_to)
        if journal_code_from is not None:
            query = query.where(Journal.code >= journal_code_from)
        if journal_code_to is not None:
            query = query.where(Journal.code <= journal_code_to)
        if status and status != ALL_STATUSES:
            query = query.where(Journal.status == status)

        query = query.order_by(
            Journal.journal_date, Journal.code, JournalItem.line_seq,
        )

        rows = self.session.execute(query).all()
        items = [
            {
                "date": row.journal_date,
                "journal_code": row.code,
                "account_code": row.account_code,
                "detail_code": row.detail_code,
                "debit": row.debit,
                "credit": row.credit,
                "description": row.description or row.journal_description,
            }
            for row in rows
        ]

        logger.debug(
            "journal_raw_items_selected",
            extra={
                "fiscal_year_id": fiscal_year_id,
                "item_count": len(items),
            },
        )
        return items

    def titles(self, kind: str) -> dict[str, str]:
        """Return ``{code: title}`` for one hierarchy code kind."""
        query = (
            select(HierarchyCode.code, HierarchyCode.title)
            .where(HierarchyCode.kind == kind)
            .order_by(HierarchyCode.code)
        )
        return {row.code: row.title for row in self.session.execute(query).all()}
