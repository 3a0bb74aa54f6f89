"""
Tabular projection (``ledger_reports.rendering``).

Projects the flat row sequence onto the selected columns as lists of cell
strings, the complete and format-agnostic input of every export sink.
Sinks choose the bytes; nothing here filters or reorders rows.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from ledger_reports.codes import CodeClassifier
from ledger_reports.levels import HierarchyLevel
from ledger_reports.models import (
    DataRow,
    FlatRow,
    HeaderRow,
    ReportColumn,
    TotalRow,
)
from ledger_reports.sources import NO_TITLES, TitleLookup

GROUP_TOTAL_LABEL = "Group Total"

COLUMN_LABELS: dict[ReportColumn, str] = {
    ReportColumn.DATE: "Date",
    ReportColumn.JOURNAL_CODE: "Document Number",
    ReportColumn.DESCRIPTION: "Description",
    ReportColumn.GROUP_CODE: "Group",
    ReportColumn.GENERAL_CODE: "General",
    ReportColumn.SPECIFIC_CODE: "Specific",
    ReportColumn.DETAIL_CODE: "Detail",
    ReportColumn.DEBIT: "Debit",
    ReportColumn.CREDIT: "Credit",
    ReportColumn.RUNNING_BALANCE: "Running Balance",
}

_CODE_COLUMNS: dict[ReportColumn, HierarchyLevel] = {
    ReportColumn.GROUP_CODE: HierarchyLevel.GROUP,
    ReportColumn.GENERAL_CODE: HierarchyLevel.GENERAL,
    ReportColumn.SPECIFIC_CODE: HierarchyLevel.SPECIFIC,
    ReportColumn.DETAIL_CODE: HierarchyLevel.DETAIL,
}


def format_amount(value: Decimal, precision: int = 2) -> str:
    """Fixed-point amount with thousands separators."""
    return f"{value:,.{precision}f}"


def _with_title(code: str, title: str | None) -> str:
    return f"{code} — {title}" if title else code


def header_label(row: HeaderRow, titles: TitleLookup = NO_TITLES) -> str:
    """``"<Level>: <code> — <title> (Count: n)"``; bare code when untitled."""
    title = None
    if row.level is not HierarchyLevel.DOCUMENT and row.code:
        title = titles.title(row.level, row.code)
    return f"{row.level.label}: {_with_title(row.code, title)} (Count: {row.row_count})"


def _data_cell(
    row: DataRow,
    column: ReportColumn,
    classifier: CodeClassifier,
    titles: TitleLookup,
    precision: int,
) -> str:
    entry = row.entry
    if column is ReportColumn.DATE:
        return entry.date.isoformat()
    if column is ReportColumn.JOURNAL_CODE:
        return "" if entry.journal_code is None else str(entry.journal_code)
    if column is ReportColumn.DESCRIPTION:
        return entry.description or ""
    if column is ReportColumn.DEBIT:
        return format_amount(entry.debit, precision)
    if column is ReportColumn.CREDIT:
        return format_amount(entry.credit, precision)
    if column is ReportColumn.RUNNING_BALANCE:
        return format_amount(row.running_balance, precision)

    level = _CODE_COLUMNS[column]
    code = classifier.code_for(entry, level)
    return _with_title(code, titles.title(level, code) if code else None)


def _total_cells(row: TotalRow, columns: Sequence[ReportColumn], precision: int) -> list[str]:
    cells = []
    for column in columns:
        if column is ReportColumn.DEBIT:
            cells.append(format_amount(row.block.total_debit, precision))
        elif column is ReportColumn.CREDIT:
            cells.append(format_amount(row.block.total_credit, precision))
        else:
            cells.append("")
    # The label takes the first cell whatever the column
    return [GROUP_TOTAL_LABEL, *cells[1:]]


def render_table(
    rows: Sequence[FlatRow],
    columns: Sequence[ReportColumn],
    classifier: CodeClassifier,
    titles: TitleLookup = NO_TITLES,
    precision: int = 2,
) -> list[list[str]]:
    """
    Column-label row followed by one list of cells per flat row.

    Header rows carry their label in the first cell and blanks elsewhere.
    """
    columns = [ReportColumn(c) for c in columns]
    width = len(columns)
    table: list[list[str]] = [[COLUMN_LABELS[c] for c in columns]]

    for row in rows:
        if isinstance(row, HeaderRow):
            table.append([header_label(row, titles)] + [""] * (width - 1))
        elif isinstance(row, TotalRow):
            table.append(_total_cells(row, columns, precision))
        else:
            table.append(
                [_data_cell(row, c, classifier, titles, precision) for c in columns]
            )
    return table


def render_to_dict(obj: object) -> dict | list | str | int | float | bool | None:
    """
    Convert any report dataclass to a plain dict for JSON serialization.

    Handles:
    - Decimal -> str (preserving precision)
    - date -> ISO format string
    - Enum -> .value
    - Nested frozen dataclasses -> nested dicts
    - Tuples, sets -> lists (sets sorted)
    """
    if obj is None:
        return None
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [render_to_dict(item) for item in obj]
    if isinstance(obj, (set, frozenset)):
        return sorted(render_to_dict(item) for item in obj)
    if isinstance(obj, dict):
        return {str(k): render_to_dict(v) for k, v in obj.items()}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: render_to_dict(getattr(obj, f.name))
            for f in dataclasses.fields(obj)
        }
    if isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)
