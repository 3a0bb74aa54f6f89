"""Running balance accumulation (``ledger_reports.balances``)."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from ledger_kernel.domain.ledger_entry import LedgerEntry
from ledger_reports.models import ZERO


class RunningBalance:
    """
    Cumulative signed (debit - credit) balance.

    Never clamped; balances may go negative.
    """

    def __init__(self, opening: Decimal = ZERO):
        self.value = opening

    def reset(self) -> None:
        self.value = ZERO

    def post(self, entry: LedgerEntry) -> Decimal:
        """Apply one posting and return the balance after it."""
        self.value += entry.delta
        return self.value


def running_balances(
    entries: Iterable[LedgerEntry],
    opening: Decimal = ZERO,
) -> list[Decimal]:
    """Balance after each entry, in order."""
    acc = RunningBalance(opening)
    return [acc.post(entry) for entry in entries]
