"""
Ledger Report Builder (``ledger_reports``).

Responsibility
--------------
Turns a filtered list of ledger entries into a multi-level grouped,
optionally consolidated report with per-group running balances, flattened
into Header, Data and Total rows ready for pagination and export.

Architecture position
---------------------
**Reports layer** -- pure derivation functions (classification, filtering,
aggregation, consolidation, balances, flattening) plus one stateful
``ReportSession`` that owns the query cache and the current entry list.

Invariants enforced
-------------------
* Block totals equal the sums of their entries (conservation).
* Nesting always follows the fixed hierarchy order Document > Group >
  General > Specific > Detail, whatever order levels were selected in.
* Running balances reset only at the outermost grouping level.
* Grouping, consolidation and display changes never re-fetch.

Failure modes
-------------
* Source failure -> ``LedgerFetchError``; nothing cached.
* Malformed raw records -> quarantined at ingestion.
* Building before a successful load -> ``NoEntriesLoadedError``.
"""

from ledger_reports.aggregation import aggregate, effective_levels
from ledger_reports.builder import build_report
from ledger_reports.cache import QueryCache, request_signature
from ledger_reports.codes import (
    CodeClassifier,
    code_sort_key,
    level_code,
    normalize_digits,
    sort_codes,
)
from ledger_reports.config import CodeDigits, LedgerReportConfig, load_report_config
from ledger_reports.consolidation import consolidate_block, consolidation_target
from ledger_reports.filters import FilterEvaluator, apply_filters
from ledger_reports.flatten import flatten_blocks
from ledger_reports.levels import HIERARCHY_ORDER, HierarchyLevel
from ledger_reports.models import (
    ConsolidationSpec,
    DataRow,
    FetchParams,
    FilterSet,
    FlatRow,
    GroupedBlock,
    HeaderRow,
    LedgerReport,
    ReportColumn,
    ReportLayout,
    ReportMetadata,
    ReportPage,
    ReportRequest,
    SessionStatus,
    TotalRow,
)
from ledger_reports.pagination import page_count, paginate
from ledger_reports.rendering import header_label, render_table, render_to_dict
from ledger_reports.saved_config import SavedReportConfiguration
from ledger_reports.service import ReportSession, RequestTicket
from ledger_reports.sources import (
    NO_TITLES,
    LedgerSource,
    MappingTitleLookup,
    SqlLedgerSource,
    SqlTitleLookup,
    TitleLookup,
)
