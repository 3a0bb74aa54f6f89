"""ORM models for journal storage."""

from ledger_kernel.models.journal import (
    CodeKind,
    HierarchyCode,
    Journal,
    JournalItem,
    JournalStatus,
)

__all__ = [
    "CodeKind",
    "HierarchyCode",
    "Journal",
    "JournalItem",
    "JournalStatus",
]
