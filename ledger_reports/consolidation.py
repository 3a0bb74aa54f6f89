"""
Block consolidation (``ledger_reports.consolidation``).

Collapses the postings of one block into synthetic summary rows, one per
LevelCode of the consolidation target.  Sums are preserved exactly; only
the row count shrinks.  ZERO I/O.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable

from ledger_kernel.domain.ledger_entry import LedgerEntry
from ledger_kernel.logging_config import get_logger
from ledger_reports.codes import CodeClassifier, code_sort_key
from ledger_reports.levels import HierarchyLevel
from ledger_reports.models import ZERO, ConsolidationSpec, GroupedBlock

logger = get_logger("reports.consolidation")

# Least to most granular; Document is never a target
TARGET_PRIORITY: tuple[HierarchyLevel, ...] = (
    HierarchyLevel.GROUP,
    HierarchyLevel.GENERAL,
    HierarchyLevel.SPECIFIC,
    HierarchyLevel.DETAIL,
)


@dataclasses.dataclass(frozen=True)
class ConsolidatedRow:
    """A display row and how many postings it stands for."""

    entry: LedgerEntry
    source_count: int = 1


def consolidation_target(
    spec: ConsolidationSpec,
    primary: HierarchyLevel | None,
) -> HierarchyLevel | None:
    """Most granular target level once the block's primary level is excluded."""
    if not spec.enabled:
        return None
    candidates = [
        level
        for level in TARGET_PRIORITY
        if level in spec.target_levels and level is not primary
    ]
    return candidates[-1] if candidates else None


def _passthrough(rows: Iterable[LedgerEntry]) -> tuple[ConsolidatedRow, ...]:
    return tuple(ConsolidatedRow(entry=row) for row in rows)


def consolidate_rows(
    rows: Iterable[LedgerEntry],
    target: HierarchyLevel,
    classifier: CodeClassifier,
) -> tuple[ConsolidatedRow, ...]:
    """
    One synthetic row per LevelCode of ``target``.

    Debit and credit are summed; the date is the earliest contributing date;
    a Specific target writes the key into ``account_code`` and a Detail
    target into ``detail_code``.  Every other field comes from the first
    contributing row.  Output is sorted numeric-aware by key.
    """
    grouped: dict[str, list[LedgerEntry]] = {}
    for row in rows:
        grouped.setdefault(classifier.code_for(row, target), []).append(row)

    out: list[tuple[str, ConsolidatedRow]] = []
    for key, members in grouped.items():
        first = members[0]
        changes = {
            "date": min(m.date for m in members),
            "debit": sum((m.debit for m in members), ZERO),
            "credit": sum((m.credit for m in members), ZERO),
        }
        if target is HierarchyLevel.SPECIFIC and key:
            changes["account_code"] = key
        elif target is HierarchyLevel.DETAIL:
            changes["detail_code"] = key or None
        out.append(
            (key, ConsolidatedRow(dataclasses.replace(first, **changes), len(members)))
        )

    out.sort(key=lambda pair: code_sort_key(pair[0]))
    return tuple(row for _, row in out)


def consolidate_block(
    block: GroupedBlock,
    spec: ConsolidationSpec,
    primary: HierarchyLevel | None,
    classifier: CodeClassifier,
) -> tuple[ConsolidatedRow, ...]:
    """Display rows of ``block``; its raw rows when consolidation does not apply."""
    target = consolidation_target(spec, primary)
    if target is None:
        if spec.enabled:
            logger.debug(
                "consolidation_noop_no_target",
                extra={"primary": primary.value if primary else None},
            )
        return _passthrough(block.rows)
    return consolidate_rows(block.rows, target, classifier)
