"""
Report Builder Domain Models (``ledger_reports.models``).

Responsibility
--------------
Frozen dataclass value objects flowing through the report pipeline: the
filter set and fetch parameters (what is fetched and cached), the layout
(how cached entries are derived), grouped blocks, the flat row union and
the finished report.

Architecture position
---------------------
**Reports layer** -- pure data definitions with ZERO I/O.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* Filter codes are digit-normalized on construction, so membership tests
  are exact string equality.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Literal

from ledger_kernel.domain.ledger_entry import LedgerEntry
from ledger_reports.codes import normalize_digits
from ledger_reports.levels import CODE_LEVELS, HierarchyLevel, ordered_levels

ZERO = Decimal("0")


def _normalized_codes(codes: Iterable[str] | None) -> frozenset[str]:
    if not codes:
        return frozenset()
    out = {normalize_digits(code).strip() for code in codes}
    out.discard("")
    return frozenset(out)


# =========================================================================
# Enums
# =========================================================================


class ReportColumn(str, Enum):
    """Columns available to the tabular projection and export sinks."""

    DATE = "date"
    JOURNAL_CODE = "journal_code"
    DESCRIPTION = "description"
    GROUP_CODE = "group_code"
    GENERAL_CODE = "general_code"
    SPECIFIC_CODE = "specific_code"
    DETAIL_CODE = "detail_code"
    DEBIT = "debit"
    CREDIT = "credit"
    RUNNING_BALANCE = "running_balance"


DEFAULT_COLUMNS: tuple[ReportColumn, ...] = (
    ReportColumn.DATE,
    ReportColumn.JOURNAL_CODE,
    ReportColumn.DESCRIPTION,
    ReportColumn.SPECIFIC_CODE,
    ReportColumn.DETAIL_CODE,
    ReportColumn.DEBIT,
    ReportColumn.CREDIT,
    ReportColumn.RUNNING_BALANCE,
)


class SessionStatus(str, Enum):
    """Lifecycle of a report session's entry list."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


# =========================================================================
# Fetch side (affects the cache signature)
# =========================================================================


@dataclass(frozen=True)
class FetchParams:
    """Exactly what the raw-entry source receives."""

    fiscal_year_id: str
    date_from: date | None = None
    date_to: date | None = None
    document_from: int | None = None
    document_to: int | None = None
    status: str | None = None


@dataclass(frozen=True)
class FilterSet:
    """
    Multi-dimensional entry filter.

    Within a level the accepted codes OR together (empty = unrestricted);
    levels, the document range and the date range AND together.
    """

    group_codes: frozenset[str] = frozenset()
    general_codes: frozenset[str] = frozenset()
    specific_codes: frozenset[str] = frozenset()
    detail_codes: frozenset[str] = frozenset()
    document_from: int | None = None
    document_to: int | None = None
    date_from: date | None = None
    date_to: date | None = None

    def __post_init__(self) -> None:
        for name in ("group_codes", "general_codes", "specific_codes", "detail_codes"):
            object.__setattr__(self, name, _normalized_codes(getattr(self, name)))

    @classmethod
    def for_levels(
        cls,
        codes: Mapping[HierarchyLevel, Iterable[str]],
        **ranges,
    ) -> FilterSet:
        """Build from a ``{level: codes}`` mapping plus range keywords."""
        kwargs = {
            f"{level.name.lower()}_codes": frozenset(values)
            for level, values in codes.items()
            if level in CODE_LEVELS
        }
        return cls(**kwargs, **ranges)

    def codes_for(self, level: HierarchyLevel) -> frozenset[str]:
        """Accepted codes for a level; Document has none (it uses a range)."""
        if level not in CODE_LEVELS:
            return frozenset()
        return getattr(self, f"{level.name.lower()}_codes")

    @property
    def has_level_filters(self) -> bool:
        return any(self.codes_for(level) for level in CODE_LEVELS)


@dataclass(frozen=True)
class ReportRequest:
    """Everything that shapes the cached, filtered entry list."""

    params: FetchParams
    filters: FilterSet = field(default_factory=FilterSet)

    @property
    def effective_filters(self) -> FilterSet:
        """Level filters with the fetch ranges applied to the entries too."""
        p = self.params
        f = self.filters
        return FilterSet(
            group_codes=f.group_codes,
            general_codes=f.general_codes,
            specific_codes=f.specific_codes,
            detail_codes=f.detail_codes,
            document_from=f.document_from if f.document_from is not None else p.document_from,
            document_to=f.document_to if f.document_to is not None else p.document_to,
            date_from=f.date_from if f.date_from is not None else p.date_from,
            date_to=f.date_to if f.date_to is not None else p.date_to,
        )


# =========================================================================
# Derivation side (never part of the cache signature)
# =========================================================================


@dataclass(frozen=True)
class ConsolidationSpec:
    """Optional collapsing of a block's rows into summary rows."""

    enabled: bool = False
    target_levels: frozenset[HierarchyLevel] = frozenset(
        {HierarchyLevel.SPECIFIC, HierarchyLevel.DETAIL}
    )
    collapse_within_document: bool = True

    def __post_init__(self) -> None:
        # Document is never a consolidation target
        targets = frozenset(HierarchyLevel(level) for level in self.target_levels)
        object.__setattr__(self, "target_levels", targets & frozenset(CODE_LEVELS))


@dataclass(frozen=True)
class ReportLayout:
    """How cached entries are grouped, consolidated and presented."""

    group_by: tuple[HierarchyLevel, ...] = ()
    consolidation: ConsolidationSpec = field(default_factory=ConsolidationSpec)
    show_group_totals: bool = True
    columns: tuple[ReportColumn, ...] = DEFAULT_COLUMNS

    def __post_init__(self) -> None:
        # Selection order is kept for display; nesting uses hierarchy order
        seen: list[HierarchyLevel] = []
        for level in self.group_by:
            level = HierarchyLevel(level)
            if level not in seen:
                seen.append(level)
        object.__setattr__(self, "group_by", tuple(seen))
        object.__setattr__(
            self, "columns", tuple(ReportColumn(c) for c in self.columns),
        )

    @property
    def nesting_levels(self) -> tuple[HierarchyLevel, ...]:
        """Selected levels in fixed hierarchy order."""
        return ordered_levels(self.group_by)


# =========================================================================
# Derived structures
# =========================================================================


@dataclass(frozen=True)
class GroupedBlock:
    """Entries sharing identical LevelCodes across the effective levels."""

    key_parts: tuple[tuple[HierarchyLevel, str], ...]
    rows: tuple[LedgerEntry, ...]
    total_debit: Decimal
    total_credit: Decimal

    @property
    def row_count(self) -> int:
        """Pre-consolidation posting count."""
        return len(self.rows)

    def code_for(self, level: HierarchyLevel) -> str:
        for part_level, code in self.key_parts:
            if part_level is level:
                return code
        return ""

    @property
    def balance(self) -> Decimal:
        return self.total_debit - self.total_credit


@dataclass(frozen=True)
class HeaderRow:
    """Opens a group at one level."""

    level: HierarchyLevel
    code: str
    row_count: int
    kind: Literal["header"] = "header"


@dataclass(frozen=True)
class DataRow:
    """One (possibly consolidated) posting with its running balance."""

    entry: LedgerEntry
    running_balance: Decimal
    source_count: int = 1
    kind: Literal["row"] = "row"


@dataclass(frozen=True)
class TotalRow:
    """Closes a block with its debit/credit totals."""

    block: GroupedBlock
    kind: Literal["total"] = "total"


FlatRow = HeaderRow | DataRow | TotalRow


@dataclass(frozen=True)
class ReportMetadata:
    """Metadata attached to every built report."""

    entity_name: str
    generated_at: str  # ISO format timestamp from injected clock
    signature: str | None = None
    entry_count: int = 0
    group_by: tuple[HierarchyLevel, ...] = ()
    effective_levels: tuple[HierarchyLevel, ...] = ()
    consolidated: bool = False
    # Selected display columns, in the user's order
    columns: tuple[ReportColumn, ...] = DEFAULT_COLUMNS


@dataclass(frozen=True)
class LedgerReport:
    """Complete flattened report."""

    metadata: ReportMetadata
    blocks: tuple[GroupedBlock, ...]
    rows: tuple[FlatRow, ...]
    total_debit: Decimal
    total_credit: Decimal

    @property
    def effective_levels(self) -> tuple[HierarchyLevel, ...]:
        return self.metadata.effective_levels

    @property
    def is_balanced(self) -> bool:
        return self.total_debit == self.total_credit


@dataclass(frozen=True)
class ReportPage:
    """One page of flat rows."""

    rows: tuple[FlatRow, ...]
    page: int
    page_size: int
    page_count: int
    total_rows: int

    @property
    def has_next(self) -> bool:
        return self.page < self.page_count

    @property
    def has_previous(self) -> bool:
        return self.page > 1
