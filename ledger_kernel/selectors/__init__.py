"""Read-only query selectors over journal storage."""

from ledger_kernel.selectors.base import BaseSelector
from ledger_kernel.selectors.journal_selector import JournalSelector

__all__ = ["BaseSelector", "JournalSelector"]
