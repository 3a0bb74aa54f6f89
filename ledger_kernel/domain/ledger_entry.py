"""
LedgerEntry -- the strict record type for one ledger posting.

Responsibility:
    The immutable value every report derivation consumes.  Produced at the
    ingestion boundary (``ledger_ingestion``) from loosely-typed source
    records, and by the consolidator as synthetic summary rows.

Architecture position:
    Kernel > Domain -- pure, zero I/O.

Invariants enforced:
    - debit and credit are Decimal and never negative.
    - Instances are frozen; derivations build new instances.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class LedgerEntry:
    """A single ledger posting as fetched for reporting."""

    date: date
    account_code: str
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    journal_code: int | None = None
    detail_code: str | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        if self.debit < 0:
            raise ValueError(f"debit cannot be negative: {self.debit}")
        if self.credit < 0:
            raise ValueError(f"credit cannot be negative: {self.credit}")

    @property
    def delta(self) -> Decimal:
        """Signed movement of this posting (debit - credit)."""
        return self.debit - self.credit
