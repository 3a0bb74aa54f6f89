"""
Hierarchy levels (``ledger_reports.levels``).

The five granularities at which postings are classified and grouped, and
the fixed order that governs nesting regardless of user selection order.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum


class HierarchyLevel(str, Enum):
    """Classification level of a posting. Values match the saved-config keys."""

    DOCUMENT = "journal_code"
    GROUP = "group_code"
    GENERAL = "general_code"
    SPECIFIC = "specific_code"
    DETAIL = "detail_code"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    HierarchyLevel.DOCUMENT: "Document Number",
    HierarchyLevel.GROUP: "Group",
    HierarchyLevel.GENERAL: "General",
    HierarchyLevel.SPECIFIC: "Specific",
    HierarchyLevel.DETAIL: "Detail",
}

# Outermost first
HIERARCHY_ORDER: tuple[HierarchyLevel, ...] = (
    HierarchyLevel.DOCUMENT,
    HierarchyLevel.GROUP,
    HierarchyLevel.GENERAL,
    HierarchyLevel.SPECIFIC,
    HierarchyLevel.DETAIL,
)

# Levels derived from the account code by truncation
ACCOUNT_LEVELS: tuple[HierarchyLevel, ...] = (
    HierarchyLevel.GROUP,
    HierarchyLevel.GENERAL,
    HierarchyLevel.SPECIFIC,
)

# Levels that may carry a code filter set or act as a consolidation target
CODE_LEVELS: tuple[HierarchyLevel, ...] = ACCOUNT_LEVELS + (HierarchyLevel.DETAIL,)


def ordered_levels(levels: Iterable[HierarchyLevel | str]) -> tuple[HierarchyLevel, ...]:
    """Return the distinct levels of ``levels`` in fixed hierarchy order."""
    selected = {HierarchyLevel(level) for level in levels}
    return tuple(level for level in HIERARCHY_ORDER if level in selected)
