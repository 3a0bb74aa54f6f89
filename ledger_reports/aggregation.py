"""
Grouping and totals (``ledger_reports.aggregation``).

Partitions filtered postings into GroupedBlocks keyed by their LevelCodes
at the effective levels.  Nesting always follows the fixed hierarchy order
(Document, Group, General, Specific, Detail); the order in which a user
picked the levels never changes it.  ZERO I/O.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from ledger_kernel.domain.ledger_entry import LedgerEntry
from ledger_kernel.logging_config import get_logger
from ledger_reports.codes import CodeClassifier, composite_sort_key
from ledger_reports.levels import HierarchyLevel, ordered_levels
from ledger_reports.models import ZERO, ConsolidationSpec, GroupedBlock

logger = get_logger("reports.aggregation")


def effective_levels(
    group_by: Iterable[HierarchyLevel],
    consolidation: ConsolidationSpec,
) -> tuple[HierarchyLevel, ...]:
    """
    Grouping levels actually nested, outermost first.

    With consolidation enabled, every target level other than the primary
    (outermost) selection is summarized inside its block instead of being
    nested, and a Document selection with ``collapse_within_document``
    reduces the grouping to Document alone.
    """
    levels = ordered_levels(group_by)
    if not consolidation.enabled or not levels:
        return levels

    primary = levels[0]
    removable = consolidation.target_levels - {primary}
    levels = tuple(level for level in levels if level not in removable)

    if HierarchyLevel.DOCUMENT in levels and consolidation.collapse_within_document:
        levels = (HierarchyLevel.DOCUMENT,)
    return levels


def _sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def aggregate(
    entries: Iterable[LedgerEntry],
    levels: Iterable[HierarchyLevel],
    classifier: CodeClassifier,
) -> tuple[GroupedBlock, ...]:
    """
    Group ``entries`` by their LevelCodes at ``levels``.

    No levels: a single block holding every entry.  Otherwise one block per
    distinct composite key, rows in input order, blocks sorted
    numeric-aware segment by segment.
    """
    entries = tuple(entries)
    levels = ordered_levels(levels)

    if not levels:
        return (
            GroupedBlock(
                key_parts=(),
                rows=entries,
                total_debit=_sum(e.debit for e in entries),
                total_credit=_sum(e.credit for e in entries),
            ),
        )

    buckets: dict[tuple[str, ...], list[LedgerEntry]] = {}
    for entry in entries:
        key = tuple(classifier.code_for(entry, level) for level in levels)
        buckets.setdefault(key, []).append(entry)

    blocks = [
        GroupedBlock(
            key_parts=tuple(zip(levels, key)),
            rows=tuple(rows),
            total_debit=_sum(e.debit for e in rows),
            total_credit=_sum(e.credit for e in rows),
        )
        for key, rows in buckets.items()
    ]
    blocks.sort(key=lambda b: composite_sort_key(code for _, code in b.key_parts))

    logger.debug(
        "entries_aggregated",
        extra={
            "levels": [level.value for level in levels],
            "entry_count": len(entries),
            "block_count": len(blocks),
        },
    )
    return tuple(blocks)
