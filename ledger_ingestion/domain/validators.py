"""
Record validators for raw ledger records.

Each validator inspects one loosely-typed record (a mapping with the keys
``date``, ``journal_code``, ``account_code``, ``detail_code``, ``debit``,
``credit`` and ``description``) and returns a list of ValidationErrors;
an empty list means the record converts cleanly.

Architecture: ledger_ingestion/domain. ZERO I/O. Imports only from
ledger_kernel.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from ledger_kernel.domain.dtos import ValidationError
from ledger_kernel.domain.ledger_entry import LedgerEntry
from ledger_kernel.exceptions import MalformedEntryError
from ledger_kernel.logging_config import get_logger

from ledger_ingestion.domain.types import IngestionResult, RejectedRecord

logger = get_logger("ingestion.validators")

ZERO = Decimal("0")


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


# -----------------------------------------------------------------------------
# Field parsers (return (value, error))
# -----------------------------------------------------------------------------


def _parse_date(value: Any) -> tuple[date | None, ValidationError | None]:
    if _blank(value):
        return None, ValidationError(
            code="MISSING_FIELD", message="date is required", field="date",
        )
    if isinstance(value, datetime):
        return value.date(), None
    if isinstance(value, date):
        return value, None
    try:
        # Accept both plain dates and ISO timestamps
        return date.fromisoformat(str(value).strip()[:10]), None
    except ValueError:
        return None, ValidationError(
            code="INVALID_DATE",
            message=f"Invalid date: {value!r}",
            field="date",
        )


def _parse_amount(
    value: Any,
    field_name: str,
) -> tuple[Decimal | None, ValidationError | None]:
    if _blank(value):
        return ZERO, None
    if isinstance(value, bool):
        return None, ValidationError(
            code="INVALID_AMOUNT",
            message=f"Invalid amount at {field_name}: {value!r}",
            field=field_name,
        )
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None, ValidationError(
            code="INVALID_AMOUNT",
            message=f"Invalid amount at {field_name}: {value!r}",
            field=field_name,
        )
    if not amount.is_finite():
        return None, ValidationError(
            code="INVALID_AMOUNT",
            message=f"Non-finite amount at {field_name}: {value!r}",
            field=field_name,
        )
    if amount < 0:
        return None, ValidationError(
            code="NEGATIVE_AMOUNT",
            message=f"Amount at {field_name} cannot be negative: {amount}",
            field=field_name,
        )
    return amount, None


def _parse_journal_code(value: Any) -> tuple[int | None, ValidationError | None]:
    if _blank(value):
        return None, None
    if isinstance(value, bool):
        return None, ValidationError(
            code="INVALID_DOCUMENT_CODE",
            message=f"Invalid document code: {value!r}",
            field="journal_code",
        )
    if isinstance(value, int):
        return value, None
    try:
        # Decimal and int both accept localized digit glyphs
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        number = None
    if number is None or not number.is_finite() or number != number.to_integral_value():
        return None, ValidationError(
            code="INVALID_DOCUMENT_CODE",
            message=f"Invalid document code: {value!r}",
            field="journal_code",
        )
    return int(number), None


def _parse_code(value: Any) -> str | None:
    if _blank(value):
        return None
    return str(value).strip()


# -----------------------------------------------------------------------------
# Record-level API
# -----------------------------------------------------------------------------


def _convert(record: Mapping[str, Any]) -> tuple[LedgerEntry | None, list[ValidationError]]:
    if not isinstance(record, Mapping):
        return None, [
            ValidationError(
                code="INVALID_RECORD",
                message="record must be a mapping",
                details={"type": type(record).__name__},
            )
        ]

    errors: list[ValidationError] = []

    entry_date, err = _parse_date(record.get("date"))
    if err:
        errors.append(err)

    account_code = _parse_code(record.get("account_code"))
    if account_code is None:
        errors.append(
            ValidationError(
                code="MISSING_FIELD",
                message="account_code is required",
                field="account_code",
            )
        )

    debit, err = _parse_amount(record.get("debit"), "debit")
    if err:
        errors.append(err)
    credit, err = _parse_amount(record.get("credit"), "credit")
    if err:
        errors.append(err)

    journal_code, err = _parse_journal_code(record.get("journal_code"))
    if err:
        errors.append(err)

    if errors:
        return None, errors

    description = record.get("description")
    entry = LedgerEntry(
        date=entry_date,
        account_code=account_code,
        debit=debit,
        credit=credit,
        journal_code=journal_code,
        detail_code=_parse_code(record.get("detail_code")),
        description=None if description is None else str(description),
    )
    return entry, []


def validate_record(record: Mapping[str, Any]) -> list[ValidationError]:
    """Validation errors of one raw record (empty when it converts cleanly)."""
    return _convert(record)[1]


def convert_record(record: Mapping[str, Any], source_row: int = 1) -> LedgerEntry:
    """
    Convert one raw record to a LedgerEntry.

    Raises:
        MalformedEntryError: if the record fails validation.
    """
    entry, errors = _convert(record)
    if entry is None:
        raise MalformedEntryError(source_row, tuple(e.message for e in errors))
    return entry


def ingest_records(
    records: Iterable[Mapping[str, Any]],
    strict: bool = False,
) -> IngestionResult:
    """
    Convert a raw listing, preserving source order.

    Malformed records are quarantined in ``rejected``; with ``strict=True``
    the first one raises MalformedEntryError instead.
    """
    entries: list[LedgerEntry] = []
    rejected: list[RejectedRecord] = []
    for row_number, record in enumerate(records, start=1):
        entry, errors = _convert(record)
        if entry is not None:
            entries.append(entry)
            continue
        if strict:
            raise MalformedEntryError(row_number, tuple(e.message for e in errors))
        rejected.append(
            RejectedRecord(
                source_row=row_number,
                raw_data=dict(record) if isinstance(record, Mapping) else {"value": record},
                errors=tuple(errors),
            )
        )

    if rejected:
        logger.warning(
            "ledger_records_quarantined",
            extra={
                "rejected_count": len(rejected),
                "accepted_count": len(entries),
                "error_codes": sorted({e.code for r in rejected for e in r.errors}),
            },
        )
    return IngestionResult(entries=tuple(entries), rejected=tuple(rejected))
