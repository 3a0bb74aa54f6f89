"""
Pytest fixtures for the ledger report builder test suite.

Provides:
- Structured logging setup and a JSON log capture fixture
- Deterministic clock
- LedgerEntry fixtures (factories live in tests/factories.py)
- SQLite in-memory SQLAlchemy sessions for the SQL-backed source
"""

import json
import logging
from datetime import date, datetime, UTC
from io import StringIO
from typing import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from ledger_kernel.db.base import Base
from ledger_kernel.domain.clock import DeterministicClock
from ledger_kernel.domain.ledger_entry import LedgerEntry
from ledger_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from ledger_reports.codes import CodeClassifier
from ledger_reports.config import CodeDigits, LedgerReportConfig
from tests.factories import make_entry

# Importing the models registers their tables on Base.metadata
import ledger_kernel.models  # noqa: F401


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture ledger_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, report_session):
            report_session.load(request)
            logs = captured_logs()
            assert any(r["message"] == "report_entries_loaded" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("ledger_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Domain fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    return DeterministicClock(datetime(2024, 6, 30, 18, 0, tzinfo=UTC))


@pytest.fixture
def report_config() -> LedgerReportConfig:
    """Default configuration: digits 2/4/6."""
    return LedgerReportConfig(code_digits=CodeDigits(group=2, general=4, specific=6))


@pytest.fixture
def classifier(report_config) -> CodeClassifier:
    return CodeClassifier(report_config.code_digits)


@pytest.fixture
def entry_factory():
    return make_entry


@pytest.fixture
def document_example_entries() -> list[LedgerEntry]:
    """Two documents: #1 with two postings, #2 with one."""
    return [
        make_entry("111007", debit=100, journal_code=1, on=date(2024, 1, 1)),
        make_entry("111007", credit=30, journal_code=1, on=date(2024, 1, 1)),
        make_entry("121003", debit=50, journal_code=2, on=date(2024, 1, 2)),
    ]


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def db_engine():
    """SQLite in-memory engine with all tables created."""
    engine = create_engine("sqlite+pysqlite:///:memory:")
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(db_engine) -> Generator[Session, None, None]:
    factory = sessionmaker(bind=db_engine, expire_on_commit=False)
    db_session = factory()
    try:
        yield db_session
    finally:
        db_session.rollback()
        db_session.close()
