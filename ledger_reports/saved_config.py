"""
Saved report configuration (``ledger_reports.saved_config``).

A named snapshot of the report builder's inputs, serializable as a plain
dict or in a compact one-letter-key form.  Loading is best-effort: absent
fields take their defaults and unrecognized levels or columns are dropped,
so an older or hand-edited configuration still opens.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any, Self

from ledger_kernel.logging_config import get_logger
from ledger_reports.levels import CODE_LEVELS, HierarchyLevel
from ledger_reports.models import (
    DEFAULT_COLUMNS,
    ConsolidationSpec,
    FetchParams,
    FilterSet,
    ReportColumn,
    ReportLayout,
    ReportRequest,
)

logger = get_logger("reports.saved_config")

PACK_VERSION = 1

PACK_KEYS: dict[str, str] = {
    "date_from": "a",
    "date_to": "b",
    "document_from": "c",
    "document_to": "d",
    "group_filter": "e",
    "general_filter": "f",
    "specific_filter": "g",
    "detail_filter": "h",
    "status": "i",
    "columns": "j",
    "group_by": "k",
    "consolidate_enabled": "l",
    "consolidate_targets": "m",
    "consolidate_within_document": "n",
    "show_group_totals": "o",
    "page_size": "p",
    "sort_key": "q",
    "sort_dir": "r",
    "lang": "s",
    "narrow_date_from": "t",
    "narrow_date_to": "u",
    "narrow_document_from": "v",
    "narrow_document_to": "w",
}
UNPACK_KEYS: dict[str, str] = {short: name for name, short in PACK_KEYS.items()}


def _date_or_none(value: Any) -> date | None:
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        logger.debug("saved_config_date_dropped", extra={"value": value})
        return None


def _iso(value: date | None) -> str | None:
    return value.isoformat() if value else None


def _int_or_none(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _codes(value: Any) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(code) for code in value if code is not None and str(code).strip())


def _known(enum_type: type, values: Any) -> tuple:
    if not isinstance(values, (list, tuple)):
        return ()
    out = []
    for value in values:
        try:
            member = enum_type(value)
        except ValueError:
            logger.debug(
                "saved_config_value_dropped",
                extra={"type": enum_type.__name__, "value": value},
            )
            continue
        if member not in out:
            out.append(member)
    return tuple(out)


def _bool(value: Any, default: bool) -> bool:
    return value if isinstance(value, bool) else default


@dataclass(frozen=True)
class SavedReportConfiguration:
    """Report builder inputs as saved by a user."""

    date_from: date | None = None
    date_to: date | None = None
    document_from: int | None = None
    document_to: int | None = None
    group_filter: tuple[str, ...] = ()
    general_filter: tuple[str, ...] = ()
    specific_filter: tuple[str, ...] = ()
    detail_filter: tuple[str, ...] = ()
    status: str | None = None
    columns: tuple[ReportColumn, ...] = DEFAULT_COLUMNS
    group_by: tuple[HierarchyLevel, ...] = ()
    consolidate_enabled: bool = False
    consolidate_targets: tuple[HierarchyLevel, ...] = (
        HierarchyLevel.SPECIFIC,
        HierarchyLevel.DETAIL,
    )
    consolidate_within_document: bool = True
    show_group_totals: bool = True
    page_size: int = 50
    # Carried through untouched for the presentation layer
    sort_key: str | None = None
    sort_dir: str | None = None
    lang: str | None = None
    # Entry-side ranges narrowing the fetched listing (FilterSet ranges)
    narrow_date_from: date | None = None
    narrow_date_to: date | None = None
    narrow_document_from: int | None = None
    narrow_document_to: int | None = None
    fiscal_year_id: str | None = None

    # ------------------------------------------------------------------
    # Engine inputs
    # ------------------------------------------------------------------

    @classmethod
    def from_inputs(
        cls,
        request: ReportRequest,
        layout: ReportLayout,
        page_size: int = 50,
    ) -> Self:
        """Snapshot of a request and layout."""
        p = request.params
        f = request.filters
        return cls(
            date_from=p.date_from,
            date_to=p.date_to,
            document_from=p.document_from,
            document_to=p.document_to,
            group_filter=tuple(sorted(f.group_codes)),
            general_filter=tuple(sorted(f.general_codes)),
            specific_filter=tuple(sorted(f.specific_codes)),
            detail_filter=tuple(sorted(f.detail_codes)),
            narrow_date_from=f.date_from,
            narrow_date_to=f.date_to,
            narrow_document_from=f.document_from,
            narrow_document_to=f.document_to,
            status=p.status,
            columns=layout.columns,
            group_by=layout.group_by,
            consolidate_enabled=layout.consolidation.enabled,
            consolidate_targets=tuple(
                level for level in CODE_LEVELS
                if level in layout.consolidation.target_levels
            ),
            consolidate_within_document=layout.consolidation.collapse_within_document,
            show_group_totals=layout.show_group_totals,
            page_size=page_size,
            fiscal_year_id=p.fiscal_year_id,
        )

    def to_request(self, fiscal_year_id: str | None = None) -> ReportRequest:
        """
        Rebuild the fetch request.

        Raises:
            ValueError: if neither the snapshot nor the caller names a
                fiscal year.
        """
        fiscal_year_id = fiscal_year_id or self.fiscal_year_id
        if not fiscal_year_id:
            raise ValueError("fiscal_year_id is required to rebuild a request")
        return ReportRequest(
            params=FetchParams(
                fiscal_year_id=fiscal_year_id,
                date_from=self.date_from,
                date_to=self.date_to,
                document_from=self.document_from,
                document_to=self.document_to,
                status=self.status,
            ),
            filters=FilterSet(
                group_codes=frozenset(self.group_filter),
                general_codes=frozenset(self.general_filter),
                specific_codes=frozenset(self.specific_filter),
                detail_codes=frozenset(self.detail_filter),
                document_from=self.narrow_document_from,
                document_to=self.narrow_document_to,
                date_from=self.narrow_date_from,
                date_to=self.narrow_date_to,
            ),
        )

    def to_layout(self) -> ReportLayout:
        return ReportLayout(
            group_by=self.group_by,
            consolidation=ConsolidationSpec(
                enabled=self.consolidate_enabled,
                target_levels=frozenset(self.consolidate_targets),
                collapse_within_document=self.consolidate_within_document,
            ),
            show_group_totals=self.show_group_totals,
            columns=self.columns,
        )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "fiscal_year_id": self.fiscal_year_id,
            "date_from": _iso(self.date_from),
            "date_to": _iso(self.date_to),
            "document_from": self.document_from,
            "document_to": self.document_to,
            "group_filter": list(self.group_filter),
            "general_filter": list(self.general_filter),
            "specific_filter": list(self.specific_filter),
            "detail_filter": list(self.detail_filter),
            "status": self.status,
            "columns": [c.value for c in self.columns],
            "group_by": [level.value for level in self.group_by],
            "consolidate_enabled": self.consolidate_enabled,
            "consolidate_targets": [level.value for level in self.consolidate_targets],
            "consolidate_within_document": self.consolidate_within_document,
            "show_group_totals": self.show_group_totals,
            "page_size": self.page_size,
            "sort_key": self.sort_key,
            "sort_dir": self.sort_dir,
            "lang": self.lang,
            "narrow_date_from": _iso(self.narrow_date_from),
            "narrow_date_to": _iso(self.narrow_date_to),
            "narrow_document_from": self.narrow_document_from,
            "narrow_document_to": self.narrow_document_to,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Best-effort load; absent or unreadable fields take defaults."""
        defaults = cls()
        page_size = _int_or_none(data.get("page_size"))
        columns = _known(ReportColumn, data.get("columns"))
        targets = _known(HierarchyLevel, data.get("consolidate_targets"))
        status = data.get("status")
        return cls(
            date_from=_date_or_none(data.get("date_from")),
            date_to=_date_or_none(data.get("date_to")),
            document_from=_int_or_none(data.get("document_from")),
            document_to=_int_or_none(data.get("document_to")),
            group_filter=_codes(data.get("group_filter")),
            general_filter=_codes(data.get("general_filter")),
            specific_filter=_codes(data.get("specific_filter")),
            detail_filter=_codes(data.get("detail_filter")),
            status=status if isinstance(status, str) and status else None,
            columns=columns if "columns" in data else defaults.columns,
            group_by=_known(HierarchyLevel, data.get("group_by")),
            consolidate_enabled=_bool(
                data.get("consolidate_enabled"), defaults.consolidate_enabled,
            ),
            consolidate_targets=(
                tuple(t for t in targets if t in CODE_LEVELS)
                if "consolidate_targets" in data
                else defaults.consolidate_targets
            ),
            consolidate_within_document=_bool(
                data.get("consolidate_within_document"),
                defaults.consolidate_within_document,
            ),
            show_group_totals=_bool(
                data.get("show_group_totals"), defaults.show_group_totals,
            ),
            page_size=page_size if page_size and page_size > 0 else defaults.page_size,
            sort_key=data.get("sort_key"),
            sort_dir=data.get("sort_dir"),
            lang=data.get("lang"),
            narrow_date_from=_date_or_none(data.get("narrow_date_from")),
            narrow_date_to=_date_or_none(data.get("narrow_date_to")),
            narrow_document_from=_int_or_none(data.get("narrow_document_from")),
            narrow_document_to=_int_or_none(data.get("narrow_document_to")),
            fiscal_year_id=data.get("fiscal_year_id"),
        )

    def pack(self) -> dict[str, Any]:
        """Compact form: ``{"version": 1, "data": {<letter>: value}}``."""
        full = self.to_dict()
        return {
            "version": PACK_VERSION,
            "data": {short: full[name] for name, short in PACK_KEYS.items()},
        }

    @classmethod
    def unpack(cls, packed: Any) -> Self | None:
        """Inverse of ``pack``; None when ``packed`` is not a mapping."""
        if not isinstance(packed, Mapping):
            return None
        version = packed.get("version", PACK_VERSION)
        if version != PACK_VERSION:
            logger.warning(
                "saved_config_version_unknown",
                extra={"version": version, "expected": PACK_VERSION},
            )
        data = packed.get("data")
        if not isinstance(data, Mapping):
            data = {}
        return cls.from_dict(
            {UNPACK_KEYS[short]: value for short, value in data.items() if short in UNPACK_KEYS}
        )

