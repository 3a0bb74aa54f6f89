"""
ledger_ingestion.domain.types -- Pure frozen dataclasses for ingestion results.

ZERO I/O. Imports only from ledger_kernel/domain/.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ledger_kernel.domain.dtos import ValidationError
from ledger_kernel.domain.ledger_entry import LedgerEntry


@dataclass(frozen=True)
class RejectedRecord:
    """A raw record that failed validation, kept for diagnostics."""

    source_row: int  # Position in the source listing (1-indexed)
    raw_data: dict[str, Any]
    errors: tuple[ValidationError, ...]


@dataclass(frozen=True)
class IngestionResult:
    """Accepted entries in source order plus the quarantined records."""

    entries: tuple[LedgerEntry, ...]
    rejected: tuple[RejectedRecord, ...] = ()

    @property
    def accepted_count(self) -> int:
        return len(self.entries)

    @property
    def rejected_count(self) -> int:
        return len(self.rejected)
