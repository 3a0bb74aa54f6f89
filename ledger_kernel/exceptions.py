"""
Typed exception hierarchy for the ledger report builder.

Every error has a typed class (catch by type, not message), a class-level
``code`` attribute (machine-readable, API-safe) and structured attributes
carrying the data needed to act on it.

    LedgerReportError (base)
    |
    +-- ConfigurationError
    |   +-- InvalidConfigurationError
    |
    +-- FetchError
    |   +-- LedgerFetchError
    |
    +-- IngestionError
    |   +-- MalformedEntryError
    |
    +-- ReportStateError
        +-- NoEntriesLoadedError

Category        | Code                    | When Raised
----------------|-------------------------|------------------------------------------
Configuration   | INVALID_CONFIGURATION   | Config file/dict cannot be interpreted
----------------|-------------------------|------------------------------------------
Fetch           | LEDGER_FETCH_FAILED     | Raw-entry source raised during a fetch
----------------|-------------------------|------------------------------------------
Ingestion       | MALFORMED_ENTRY         | Strict ingestion met an invalid record
----------------|-------------------------|------------------------------------------
Report state    | NO_ENTRIES_LOADED       | Build requested before any load finished

Conditions that are expected (contradictory ranges, consolidation with
nothing left to consolidate, missing titles, invalid digit lengths) are NOT
exceptions. They evaluate literally or fall back, and are logged.
"""


class LedgerReportError(Exception):
    """
    Base exception for all ledger report builder errors.

    All subclasses carry a ``code`` class attribute.
    """

    code: str = "LEDGER_REPORT_ERROR"


# Configuration


class ConfigurationError(LedgerReportError):
    """Base exception for configuration errors."""

    code: str = "CONFIGURATION_ERROR"


class InvalidConfigurationError(ConfigurationError):
    """A configuration source could not be interpreted."""

    code: str = "INVALID_CONFIGURATION"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid report configuration in {source}: {reason}")


# Fetch


class FetchError(LedgerReportError):
    """Base exception for raw-entry fetch errors."""

    code: str = "FETCH_ERROR"


class LedgerFetchError(FetchError):
    """
    The raw-entry source failed.

    The failed signature is never cached; the next attempt re-fetches.
    """

    code: str = "LEDGER_FETCH_FAILED"

    def __init__(self, signature: str, reason: str):
        self.signature = signature
        self.reason = reason
        super().__init__(f"Ledger fetch failed for {signature}: {reason}")


# Ingestion


class IngestionError(LedgerReportError):
    """Base exception for ingestion errors."""

    code: str = "INGESTION_ERROR"


class MalformedEntryError(IngestionError):
    """A raw record could not be converted to a ledger entry."""

    code: str = "MALFORMED_ENTRY"

    def __init__(self, source_row: int, errors: tuple[str, ...]):
        self.source_row = source_row
        self.errors = errors
        super().__init__(
            f"Malformed ledger record at row {source_row}: {'; '.join(errors)}"
        )


# Report state


class ReportStateError(LedgerReportError):
    """Base exception for report session state errors."""

    code: str = "REPORT_STATE_ERROR"


class NoEntriesLoadedError(ReportStateError):
    """A report was built before any ledger entries were loaded."""

    code: str = "NO_ENTRIES_LOADED"

    def __init__(self, report_id: str):
        self.report_id = report_id
        super().__init__(f"No ledger entries loaded for report {report_id}")
