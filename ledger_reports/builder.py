"""
Pure report derivation.

Turns an already-filtered entry list and a layout into a flattened
LedgerReport.  ZERO I/O. ZERO side effects.

Functions in this module are deterministic: the same entries, layout and
metadata always produce an equal report, which export reproducibility
depends on.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable

from ledger_kernel.domain.ledger_entry import LedgerEntry
from ledger_reports.aggregation import aggregate, effective_levels
from ledger_reports.codes import CodeClassifier
from ledger_reports.flatten import flatten_blocks
from ledger_reports.models import ZERO, LedgerReport, ReportLayout, ReportMetadata


def build_report(
    entries: Iterable[LedgerEntry],
    layout: ReportLayout,
    classifier: CodeClassifier,
    metadata: ReportMetadata,
) -> LedgerReport:
    """
    Aggregate, consolidate, balance and flatten ``entries`` per ``layout``.

    Report totals are taken over the blocks, which together hold every
    entry exactly once.
    """
    entries = tuple(entries)
    levels = effective_levels(layout.group_by, layout.consolidation)
    blocks = aggregate(entries, levels, classifier)
    rows = flatten_blocks(
        blocks,
        levels,
        classifier,
        consolidation=layout.consolidation,
        show_group_totals=layout.show_group_totals,
    )

    return LedgerReport(
        metadata=dataclasses.replace(
            metadata,
            entry_count=len(entries),
            group_by=layout.group_by,
            effective_levels=levels,
            consolidated=layout.consolidation.enabled,
            columns=layout.columns,
        ),
        blocks=blocks,
        rows=rows,
        total_debit=sum((b.total_debit for b in blocks), ZERO),
        total_credit=sum((b.total_credit for b in blocks), ZERO),
    )
