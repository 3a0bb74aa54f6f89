"""
Code classification (``ledger_reports.codes``).

Pure functions deriving the per-level code of a posting, plus the
numeric-aware ordering used everywhere codes are sorted.  ZERO I/O.

Account codes are hierarchical by prefix, so Group/General/Specific codes
are left-truncations of the account code.  Detail codes form a flat global
space and are never truncated.  Localized digit glyphs are folded to ASCII
before any comparison.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from ledger_kernel.domain.ledger_entry import LedgerEntry
from ledger_reports.config import CodeDigits
from ledger_reports.levels import ACCOUNT_LEVELS, HIERARCHY_ORDER, HierarchyLevel

# Arabic-Indic U+0660-0669 and Eastern Arabic-Indic U+06F0-06F9
_DIGIT_TABLE = str.maketrans(
    {
        **{chr(0x0660 + i): str(i) for i in range(10)},
        **{chr(0x06F0 + i): str(i) for i in range(10)},
    }
)

_DIGIT_RUN = re.compile(r"([0-9]+)")


def normalize_digits(value: object) -> str:
    """Fold localized digit glyphs to ASCII; every other character passes through."""
    if value is None:
        return ""
    return str(value).translate(_DIGIT_TABLE)


def level_code(
    code: object,
    level: HierarchyLevel,
    digits: CodeDigits,
) -> str:
    """
    Derive the LevelCode of a raw code at one hierarchy level.

    ``code`` is the account code for Group/General/Specific, the detail code
    for Detail and the journal code for Document.  Account levels are
    left-truncated to the configured length (never padded); an invalid length
    keeps the whole code.  Null or blank input yields ``""``.
    """
    normalized = normalize_digits(code).strip()
    if not normalized:
        return ""
    if level in ACCOUNT_LEVELS:
        length = digits.length_for(level)
        if length is not None:
            return normalized[:length]
    return normalized


def code_sort_key(code: str) -> tuple:
    """
    Numeric-aware sort key: digit runs compare by value, text runs
    lexicographically.  ``"9" < "10"``; ``""`` sorts first.
    """
    parts: list[tuple[int, int, str]] = []
    for index, part in enumerate(_DIGIT_RUN.split(code)):
        if not part:
            continue
        if index % 2:
            parts.append((0, int(part), ""))
        else:
            parts.append((1, 0, part))
    # Raw string breaks ties such as "01" vs "1"
    return (tuple(parts), code)


def composite_sort_key(codes: Iterable[str]) -> tuple:
    """Segment-by-segment numeric-aware key for a composite group key."""
    return tuple(code_sort_key(code) for code in codes)


def sort_codes(codes: Iterable[str]) -> list[str]:
    """Sort codes with the numeric-aware comparator."""
    return sorted(codes, key=code_sort_key)


class CodeClassifier:
    """
    Binds a CodeDigits configuration and classifies postings.

    Stateless apart from the configuration; safe to share within a session.
    """

    def __init__(self, digits: CodeDigits | None = None):
        self.digits = digits or CodeDigits()

    def code_for(self, entry: LedgerEntry, level: HierarchyLevel) -> str:
        """LevelCode of ``entry`` at ``level``."""
        if level is HierarchyLevel.DOCUMENT:
            return level_code(entry.journal_code, level, self.digits)
        if level is HierarchyLevel.DETAIL:
            return level_code(entry.detail_code, level, self.digits)
        return level_code(entry.account_code, level, self.digits)

    def codes_for(
        self,
        entry: LedgerEntry,
        levels: Iterable[HierarchyLevel] = HIERARCHY_ORDER,
    ) -> tuple[tuple[HierarchyLevel, str], ...]:
        """(level, LevelCode) pairs of ``entry`` for ``levels`` in the order given."""
        return tuple((level, self.code_for(entry, level)) for level in levels)
