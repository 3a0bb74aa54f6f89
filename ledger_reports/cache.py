"""
Query cache (``ledger_reports.cache``).

Memoizes the filtered entry list of a report request by its signature.
The signature covers every input that shapes the cached list (fiscal
year, date range, document range, status and the level filter sets);
grouping, consolidation and presentation never enter it, so changing them
never re-fetches.

There is no eviction: a cache lives inside one report session and its
result sets are scoped to one fiscal year.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any

from ledger_ingestion import RejectedRecord, ingest_records
from ledger_kernel.domain.ledger_entry import LedgerEntry
from ledger_kernel.exceptions import LedgerFetchError
from ledger_kernel.logging_config import get_logger
from ledger_reports.codes import CodeClassifier, sort_codes
from ledger_reports.filters import apply_filters
from ledger_reports.models import ReportRequest
from ledger_reports.sources import LedgerSource

logger = get_logger("reports.cache")


def _fmt(value: date | int | str | None) -> str:
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def request_signature(request: ReportRequest) -> str:
    """Stable cache key for a request."""
    p = request.params
    f = request.filters
    parts = [
        f"fy={_fmt(p.fiscal_year_id)}",
        f"from={_fmt(p.date_from)}",
        f"to={_fmt(p.date_to)}",
        f"jfrom={_fmt(p.document_from)}",
        f"jto={_fmt(p.document_to)}",
        f"status={_fmt(p.status)}",
        f"gf={','.join(sort_codes(f.group_codes))}",
        f"mf={','.join(sort_codes(f.general_codes))}",
        f"sf={','.join(sort_codes(f.specific_codes))}",
        f"df={','.join(sort_codes(f.detail_codes))}",
    ]
    # Filter-side ranges narrower than the fetch
    narrowing = [
        ("ffrom", f.date_from),
        ("fto", f.date_to),
        ("fjfrom", f.document_from),
        ("fjto", f.document_to),
    ]
    parts.extend(f"{key}={_fmt(value)}" for key, value in narrowing if value is not None)
    return "|".join(parts)


class QueryCache:
    """
    Signature-keyed store of filtered entry lists.

    Contract
    --------
    * A hit returns the stored tuple without touching the source.
    * A miss fetches, ingests (quarantining malformed records), filters and
      stores.
    * A failed fetch raises LedgerFetchError and stores nothing.
    """

    def __init__(self, source: LedgerSource, classifier: CodeClassifier):
        self._source = source
        self._classifier = classifier
        self._entries: dict[str, tuple[LedgerEntry, ...]] = {}
        self._rejected: dict[str, tuple[RejectedRecord, ...]] = {}
        self.hits = 0
        self.misses = 0
        self.fetch_count = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, signature: str) -> bool:
        return signature in self._entries

    def lookup(self, signature: str) -> tuple[LedgerEntry, ...] | None:
        """Stored entries for ``signature``; counts a hit when present."""
        cached = self._entries.get(signature)
        if cached is not None:
            self.hits += 1
            logger.debug("query_cache_hit", extra={"signature": signature})
        return cached

    def record_miss(self, signature: str) -> None:
        """Count a miss that the caller is about to fetch for."""
        self.misses += 1
        self.fetch_count += 1
        logger.info("query_cache_miss_fetching", extra={"signature": signature})

    def rejected_for(self, signature: str) -> tuple[RejectedRecord, ...]:
        """Records quarantined while ingesting ``signature``."""
        return self._rejected.get(signature, ())

    def get_or_fetch(self, request: ReportRequest) -> tuple[LedgerEntry, ...]:
        signature = request_signature(request)
        cached = self.lookup(signature)
        if cached is not None:
            return cached

        self.record_miss(signature)
        try:
            records = list(self._source.fetch(request.params))
        except Exception as exc:
            logger.exception("ledger_fetch_failed", extra={"signature": signature})
            raise LedgerFetchError(signature, str(exc)) from exc
        return self.store(request, records)

    def store(
        self,
        request: ReportRequest,
        records: Iterable[Mapping[str, Any]],
    ) -> tuple[LedgerEntry, ...]:
        """Ingest, filter and store raw records fetched for ``request``."""
        signature = request_signature(request)
        result = ingest_records(records)
        entries = apply_filters(
            result.entries, request.effective_filters, self._classifier,
        )
        self._entries[signature] = entries
        self._rejected[signature] = result.rejected
        logger.info(
            "query_cache_stored",
            extra={
                "signature": signature,
                "entry_count": len(entries),
                "rejected_count": result.rejected_count,
            },
        )
        return entries

    def invalidate(self, signature: str | None = None) -> None:
        """Drop one signature, or everything when ``signature`` is None."""
        if signature is None:
            self._entries.clear()
            self._rejected.clear()
        else:
            self._entries.pop(signature, None)
            self._rejected.pop(signature, None)
        logger.debug("query_cache_invalidated", extra={"signature": signature})
