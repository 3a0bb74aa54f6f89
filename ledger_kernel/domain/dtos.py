"""
DTOs -- plain data passed across the ingestion boundary.

Responsibility:
    ``ValidationError`` describes one problem with one raw ledger record.
    Ingestion collects them per record instead of raising, so a malformed
    posting is quarantined and the rest of the fetch still loads.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ValidationError:
    """
    One problem found in a raw record.

    ``code`` is machine-readable (``MISSING_FIELD``, ``INVALID_AMOUNT``, ...),
    ``field`` names the offending record key and ``details`` carries the
    rejected value where that helps diagnosis.
    """

    code: str
    message: str
    field: str | None = None
    details: dict[str, Any] | None = None
