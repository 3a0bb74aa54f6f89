"""
Ledger Ingestion (``ledger_ingestion``).

Converts loosely-typed raw ledger records, as returned by a raw-entry
source, into strict ``LedgerEntry`` values.  Malformed records are
quarantined with machine-readable validation errors instead of leaking
nulls into aggregation.
"""

from ledger_ingestion.domain.types import IngestionResult, RejectedRecord
from ledger_ingestion.domain.validators import (
    convert_record,
    ingest_records,
    validate_record,
)

__all__ = [
    "IngestionResult",
    "RejectedRecord",
    "convert_record",
    "ingest_records",
    "validate_record",
]
