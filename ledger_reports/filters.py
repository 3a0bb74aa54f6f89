"""
Entry filtering (``ledger_reports.filters``).

Pure predicate over one posting.  Ranges are inclusive and evaluated
literally: a range whose lower bound exceeds its upper bound matches
nothing, which is an empty result and not an error.
"""

from __future__ import annotations

from collections.abc import Iterable

from ledger_kernel.domain.ledger_entry import LedgerEntry
from ledger_kernel.logging_config import get_logger
from ledger_reports.codes import CodeClassifier
from ledger_reports.levels import CODE_LEVELS
from ledger_reports.models import FilterSet

logger = get_logger("reports.filters")


class FilterEvaluator:
    """Decides whether a posting passes a FilterSet."""

    def __init__(self, filters: FilterSet, classifier: CodeClassifier):
        self.filters = filters
        self.classifier = classifier
        self._active_levels = tuple(
            (level, filters.codes_for(level))
            for level in CODE_LEVELS
            if filters.codes_for(level)
        )

    def matches(self, entry: LedgerEntry) -> bool:
        f = self.filters

        # Missing document number counts as 0
        document = entry.journal_code or 0
        if f.document_from is not None and document < f.document_from:
            return False
        if f.document_to is not None and document > f.document_to:
            return False

        if f.date_from is not None and entry.date < f.date_from:
            return False
        if f.date_to is not None and entry.date > f.date_to:
            return False

        for level, accepted in self._active_levels:
            if self.classifier.code_for(entry, level) not in accepted:
                return False
        return True

    __call__ = matches


def apply_filters(
    entries: Iterable[LedgerEntry],
    filters: FilterSet,
    classifier: CodeClassifier,
) -> tuple[LedgerEntry, ...]:
    """Entries passing ``filters``, in input order."""
    evaluator = FilterEvaluator(filters, classifier)
    kept = tuple(entry for entry in entries if evaluator.matches(entry))
    logger.debug(
        "entries_filtered",
        extra={
            "kept_count": len(kept),
            "level_filters_active": filters.has_level_filters,
        },
    )
    return kept
