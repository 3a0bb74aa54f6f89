"""
Report flattening (``ledger_reports.flatten``).

Expands grouped blocks into one ordered sequence of Header, Data and Total
rows for pagination and export.

The walk recurses once per effective level (at most five), outermost level
first.  Every outermost group starts its running balance at zero; nested
groups carry it on unchanged.  With no grouping one balance runs over the
whole sequence.
"""

from __future__ import annotations

from collections.abc import Sequence

from ledger_kernel.logging_config import get_logger
from ledger_reports.balances import RunningBalance
from ledger_reports.codes import CodeClassifier, sort_codes
from ledger_reports.consolidation import consolidate_block
from ledger_reports.levels import HierarchyLevel
from ledger_reports.models import (
    ConsolidationSpec,
    DataRow,
    FlatRow,
    GroupedBlock,
    HeaderRow,
    TotalRow,
)

logger = get_logger("reports.flatten")


def flatten_blocks(
    blocks: Sequence[GroupedBlock],
    levels: Sequence[HierarchyLevel],
    classifier: CodeClassifier,
    consolidation: ConsolidationSpec | None = None,
    show_group_totals: bool = True,
) -> tuple[FlatRow, ...]:
    """
    Flatten ``blocks`` grouped at ``levels`` (the effective levels).

    Header ``row_count`` is the pre-consolidation posting count, so it
    reports true posting volume even when fewer summary lines follow.
    """
    consolidation = consolidation or ConsolidationSpec()
    levels = tuple(levels)
    primary = levels[0] if levels else None
    out: list[FlatRow] = []

    def emit_blocks(group: Sequence[GroupedBlock], balance: RunningBalance) -> None:
        for block in group:
            for row in consolidate_block(block, consolidation, primary, classifier):
                out.append(
                    DataRow(
                        entry=row.entry,
                        running_balance=balance.post(row.entry),
                        source_count=row.source_count,
                    )
                )
            if show_group_totals:
                out.append(TotalRow(block=block))

    def walk(
        group: Sequence[GroupedBlock],
        depth: int,
        balance: RunningBalance,
    ) -> None:
        if depth == len(levels):
            emit_blocks(group, balance)
            return

        level = levels[depth]
        buckets: dict[str, list[GroupedBlock]] = {}
        for block in group:
            buckets.setdefault(block.code_for(level), []).append(block)

        for code in sort_codes(buckets):
            sub = buckets[code]
            out.append(
                HeaderRow(
                    level=level,
                    code=code,
                    row_count=sum(block.row_count for block in sub),
                )
            )
            # Only the outermost level resets the balance
            child = RunningBalance() if depth == 0 else balance
            walk(sub, depth + 1, child)

    walk(blocks, 0, RunningBalance())

    logger.debug(
        "blocks_flattened",
        extra={
            "levels": [level.value for level in levels],
            "block_count": len(blocks),
            "row_count": len(out),
        },
    )
    return tuple(out)
