"""
Report Session Service (``ledger_reports.service``).

Responsibility
--------------
Owns the mutable state of one report instance: the query cache, the
current filtered entry list and the request sequence.  Bridges the
raw-entry source (through ``QueryCache``) to the pure derivation in
``builder.py``, pagination and the tabular projection.

Architecture position
---------------------
**Reports layer** -- thin orchestration.  ``ReportSession`` is the sole
stateful object; everything it delegates to is pure.  Constructor:
``source`` + ``config`` + ``clock`` + ``titles`` + ``cache``.

Invariants enforced
-------------------
* Last request wins -- a completion whose ticket is not the latest is
  discarded and never overwrites the current entries.
* A failed fetch caches nothing and leaves other signatures valid.
* ``build`` never fetches; layout changes are derived from cached entries.

Failure modes
-------------
* Source failure  -> ``LedgerFetchError``; status ``failed``, ``last_error``
  set.
* ``build`` before any successful load  -> ``NoEntriesLoadedError``.
* Non-positive page size  -> ``ValueError``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any
from uuid import uuid4

from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.ledger_entry import LedgerEntry
from ledger_kernel.exceptions import LedgerFetchError, NoEntriesLoadedError
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_reports.builder import build_report
from ledger_reports.cache import QueryCache, request_signature
from ledger_reports.codes import CodeClassifier
from ledger_reports.config import LedgerReportConfig
from ledger_reports.models import (
    FetchParams,
    LedgerReport,
    ReportColumn,
    ReportLayout,
    ReportMetadata,
    ReportPage,
    ReportRequest,
    SessionStatus,
)
from ledger_reports.pagination import paginate
from ledger_reports.rendering import render_table
from ledger_reports.sources import NO_TITLES, LedgerSource, TitleLookup

logger = get_logger("reports.service")

AsyncFetch = Callable[[FetchParams], Awaitable[Iterable[Mapping[str, Any]]]]


@dataclass(frozen=True)
class RequestTicket:
    """Identifies one in-flight load; only the latest may complete."""

    seq: int
    signature: str
    request: ReportRequest


class ReportSession:
    """
    One report builder instance.

    Contract
    --------
    * ``load`` / ``load_async`` fetch through the cache and install the
      result as the current entry list.
    * ``build`` derives a ``LedgerReport`` from the current entries.

    Guarantees
    ----------
    * Clock is injectable for deterministic metadata.
    * Each session owns its cache; nothing is shared between sessions
      unless the caller injects the same cache.

    Non-goals
    ---------
    * Does NOT retry failed fetches.
    * Does NOT encode export bytes.
    """

    def __init__(
        self,
        source: LedgerSource,
        config: LedgerReportConfig | None = None,
        clock: Clock | None = None,
        titles: TitleLookup | None = None,
        cache: QueryCache | None = None,
        report_id: str | None = None,
    ):
        self._config = config or LedgerReportConfig.with_defaults()
        self._classifier = CodeClassifier(self._config.code_digits)
        self._cache = cache or QueryCache(source, self._classifier)
        self._clock = clock or SystemClock()
        self._titles = titles or NO_TITLES
        self.report_id = report_id or uuid4().hex

        self._seq = 0
        self._latest: RequestTicket | None = None
        self._entries: tuple[LedgerEntry, ...] | None = None
        self._signature: str | None = None
        self.status = SessionStatus.IDLE
        self.last_error: Exception | None = None

        logger.info(
            "report_session_initialized",
            extra={
                "report_id": self.report_id,
                "entity_name": self._config.entity_name,
            },
        )

    # =========================================================================
    # State
    # =========================================================================

    @property
    def config(self) -> LedgerReportConfig:
        return self._config

    @property
    def classifier(self) -> CodeClassifier:
        return self._classifier

    @property
    def cache(self) -> QueryCache:
        return self._cache

    @property
    def entries(self) -> tuple[LedgerEntry, ...] | None:
        """Current filtered entries, or None before a successful load."""
        return self._entries

    @property
    def signature(self) -> str | None:
        """Signature of the current entries."""
        return self._signature

    # =========================================================================
    # Last-request-wins protocol
    # =========================================================================

    def begin_request(self, request: ReportRequest) -> RequestTicket:
        """Issue a ticket that supersedes every earlier one."""
        self._seq += 1
        ticket = RequestTicket(
            seq=self._seq,
            signature=request_signature(request),
            request=request,
        )
        self._latest = ticket
        self.status = SessionStatus.LOADING
        self.last_error = None
        logger.debug(
            "report_request_started",
            extra={"request_seq": ticket.seq, "signature": ticket.signature},
        )
        return ticket

    def is_current(self, ticket: RequestTicket) -> bool:
        return self._latest is not None and ticket.seq == self._latest.seq

    def complete_request(
        self,
        ticket: RequestTicket,
        entries: Sequence[LedgerEntry],
    ) -> bool:
        """Install ``entries`` if ``ticket`` is still the latest request."""
        if not self.is_current(ticket):
            logger.info(
                "stale_report_result_discarded",
                extra={
                    "request_seq": ticket.seq,
                    "latest_seq": self._latest.seq if self._latest else None,
                },
            )
            return False
        self._entries = tuple(entries)
        self._signature = ticket.signature
        self.status = SessionStatus.READY
        logger.info(
            "report_entries_loaded",
            extra={"request_seq": ticket.seq, "entry_count": len(self._entries)},
        )
        return True

    def fail_request(self, ticket: RequestTicket, error: Exception) -> bool:
        """Record ``error`` if ``ticket`` is still the latest request."""
        if not self.is_current(ticket):
            logger.info(
                "stale_report_failure_discarded",
                extra={"request_seq": ticket.seq, "error": str(error)},
            )
            return False
        self._entries = None
        self._signature = None
        self.status = SessionStatus.FAILED
        self.last_error = error
        return True

    # =========================================================================
    # Loading
    # =========================================================================

    def load(self, request: ReportRequest) -> tuple[LedgerEntry, ...]:
        """
        Fetch (or reuse) the filtered entries for ``request``.

        Raises:
            LedgerFetchError: if the source fails.  Any other error raised
                while loading is re-raised as is; either way the session
                status becomes ``failed`` with ``last_error`` set.
        """
        ticket = self.begin_request(request)
        with LogContext.bind(
            report_id=self.report_id,
            signature=ticket.signature,
            request_seq=str(ticket.seq),
        ):
            try:
                entries = self._cache.get_or_fetch(request)
            except Exception as exc:
                self.fail_request(ticket, exc)
                raise
            self.complete_request(ticket, entries)
        return entries

    async def load_async(
        self,
        request: ReportRequest,
        fetch: AsyncFetch,
    ) -> tuple[LedgerEntry, ...] | None:
        """
        Await ``fetch`` for ``request`` unless its signature is cached.

        Returns the installed entries, or None when a newer request was
        started while this one was in flight (its result is still cached
        under its own signature, it just never becomes current).

        Raises:
            LedgerFetchError: if ``fetch`` fails and this is still the
                latest request.
        """
        ticket = self.begin_request(request)
        with LogContext.bind(
            report_id=self.report_id,
            signature=ticket.signature,
            request_seq=str(ticket.seq),
        ):
            entries = self._cache.lookup(ticket.signature)
            if entries is None:
                self._cache.record_miss(ticket.signature)
                try:
                    records = list(await fetch(request.params))
                except Exception as exc:
                    error = LedgerFetchError(ticket.signature, str(exc))
                    if self.fail_request(ticket, error):
                        logger.exception(
                            "ledger_fetch_failed",
                            extra={"signature": ticket.signature},
                        )
                        raise error from exc
                    return None
                try:
                    entries = self._cache.store(request, records)
                except Exception as exc:
                    if self.fail_request(ticket, exc):
                        raise
                    return None

            if not self.complete_request(ticket, entries):
                return None
        return entries

    # =========================================================================
    # Derivation
    # =========================================================================

    def _build_metadata(self) -> ReportMetadata:
        """Build report metadata with injected clock timestamp."""
        return ReportMetadata(
            entity_name=self._config.entity_name,
            generated_at=self._clock.now().isoformat(),
            signature=self._signature,
        )

    def build(self, layout: ReportLayout | None = None) -> LedgerReport:
        """
        Derive the flattened report from the current entries.

        Raises:
            NoEntriesLoadedError: if no load has succeeded.
        """
        if self._entries is None:
            raise NoEntriesLoadedError(self.report_id)
        layout = layout or ReportLayout(show_group_totals=self._config.show_group_totals)

        report = build_report(
            self._entries, layout, self._classifier, self._build_metadata(),
        )
        logger.info(
            "ledger_report_built",
            extra={
                "report_id": self.report_id,
                "group_by": [level.value for level in layout.group_by],
                "effective_levels": [level.value for level in report.effective_levels],
                "consolidated": layout.consolidation.enabled,
                "row_count": len(report.rows),
            },
        )
        return report

    def page(
        self,
        report: LedgerReport,
        page: int = 1,
        page_size: int | None = None,
    ) -> ReportPage:
        if page_size is None:
            page_size = self._config.default_page_size
        return paginate(report.rows, page, page_size)

    def render(
        self,
        report: LedgerReport,
        columns: Sequence[ReportColumn] | None = None,
    ) -> list[list[str]]:
        """
        Tabular projection of every row of ``report``.

        Defaults to the columns selected in the layout the report was
        built with.
        """
        return render_table(
            report.rows,
            columns if columns is not None else report.metadata.columns,
            self._classifier,
            self._titles,
            self._config.display_precision,
        )
