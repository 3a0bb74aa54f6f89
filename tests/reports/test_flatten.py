"""
Flattening tests.

- Header / Data / Total row sequence for nested groupings
- Header counts are pre-consolidation posting counts
- Running balances reset only at the outermost level
- Flattened data rows conserve the report totals
"""

from datetime import date
from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st

from ledger_reports.aggregation import aggregate, effective_levels
from ledger_reports.builder import build_report
from ledger_reports.codes import CodeClassifier
from ledger_reports.flatten import flatten_blocks
from ledger_reports.levels import HIERARCHY_ORDER, HierarchyLevel
from ledger_reports.models import (
    ConsolidationSpec,
    DataRow,
    HeaderRow,
    ReportLayout,
    ReportMetadata,
    TotalRow,
)
from tests.factories import make_entry

DOC = HierarchyLevel.DOCUMENT
GROUP = HierarchyLevel.GROUP
SPECIFIC = HierarchyLevel.SPECIFIC
DETAIL = HierarchyLevel.DETAIL

METADATA = ReportMetadata(entity_name="Test Co", generated_at="2024-06-30T18:00:00+00:00")


def _kinds(rows):
    return [row.kind for row in rows]


def _flatten(entries, levels, classifier, **kwargs):
    blocks = aggregate(entries, levels, classifier)
    return flatten_blocks(blocks, levels, classifier, **kwargs)


class TestDocumentGroupingExample:
    """Two documents, grouped by Document."""

    def test_row_sequence(self, document_example_entries, classifier):
        report = build_report(
            document_example_entries,
            ReportLayout(group_by=(DOC,)),
            classifier,
            METADATA,
        )
        rows = report.rows

        assert _kinds(rows) == ["header", "row", "row", "total", "header", "row", "total"]
        assert rows[0] == HeaderRow(level=DOC, code="1", row_count=2)
        assert rows[4] == HeaderRow(level=DOC, code="2", row_count=1)
        assert [r.running_balance for r in rows if isinstance(r, DataRow)] == [
            Decimal(100), Decimal(70), Decimal(50),
        ]
        first_total, second_total = (r for r in rows if isinstance(r, TotalRow))
        assert (first_total.block.total_debit, first_total.block.total_credit) == (
            Decimal(100), Decimal(30),
        )
        assert (second_total.block.total_debit, second_total.block.total_credit) == (
            Decimal(50), Decimal(0),
        )
        assert report.total_debit == Decimal(150)
        assert report.total_credit == Decimal(30)
        assert report.is_balanced is False

    def test_metadata_is_completed(self, document_example_entries, classifier):
        report = build_report(
            document_example_entries,
            ReportLayout(group_by=(DOC,)),
            classifier,
            METADATA,
        )
        assert report.metadata.entry_count == 3
        assert report.metadata.effective_levels == (DOC,)
        assert report.metadata.entity_name == "Test Co"
        assert report.metadata.consolidated is False


class TestResetBoundary:

    def test_balance_resets_between_outer_groups(self, classifier):
        entries = [
            make_entry("101001", debit=100),
            make_entry("101002", credit=20),
            make_entry("111007", debit=50),
        ]
        rows = _flatten(entries, (GROUP,), classifier)
        balances = [r.running_balance for r in rows if isinstance(r, DataRow)]
        assert balances == [Decimal(100), Decimal(80), Decimal(50)]

    def test_balance_carries_across_inner_groups(self, classifier):
        entries = [
            make_entry("101001", debit=10, journal_code=1),
            make_entry("111007", debit=5, journal_code=1),
            make_entry("101001", debit=1, journal_code=2),
        ]
        rows = _flatten(entries, (DOC, GROUP), classifier)
        assert _kinds(rows) == [
            "header", "header", "row", "total", "header", "row", "total",
            "header", "header", "row", "total",
        ]
        balances = [r.running_balance for r in rows if isinstance(r, DataRow)]
        assert balances == [Decimal(10), Decimal(15), Decimal(1)]

    def test_no_grouping_runs_one_balance(self, classifier):
        entries = [make_entry(debit=3), make_entry(credit=1), make_entry(debit=2)]
        rows = _flatten(entries, (), classifier)
        assert _kinds(rows) == ["row", "row", "row", "total"]
        assert [r.running_balance for r in rows[:3]] == [Decimal(3), Decimal(2), Decimal(4)]


class TestFlattenOptions:

    def test_totals_can_be_hidden(self, document_example_entries, classifier):
        rows = _flatten(document_example_entries, (DOC,), classifier, show_group_totals=False)
        assert _kinds(rows) == ["header", "row", "row", "header", "row"]

    def test_empty_input_yields_single_total(self, classifier):
        rows = _flatten([], (), classifier)
        assert _kinds(rows) == ["total"]

    def test_empty_input_with_grouping_yields_nothing(self, classifier):
        assert _flatten([], (GROUP,), classifier) == ()

    def test_header_count_is_pre_consolidation(self, classifier):
        entries = [
            make_entry("1110071", debit=1, detail_code="5"),
            make_entry("1110072", debit=2, detail_code="5"),
            make_entry("1110073", debit=3, detail_code="6"),
        ]
        layout = ReportLayout(
            group_by=(GROUP, DETAIL),
            consolidation=ConsolidationSpec(enabled=True, target_levels={DETAIL}),
        )
        report = build_report(entries, layout, classifier, METADATA)

        assert report.effective_levels == (GROUP,)
        header, *data, total = report.rows
        assert header == HeaderRow(level=GROUP, code="11", row_count=3)
        assert [(r.entry.detail_code, r.source_count) for r in data] == [("5", 2), ("6", 1)]
        assert [r.running_balance for r in data] == [Decimal(3), Decimal(6)]
        assert isinstance(total, TotalRow)

    def test_collapse_within_document(self, classifier):
        entries = [
            make_entry("111007", debit=4, journal_code=1, on=date(2024, 1, 2)),
            make_entry("111007", debit=6, journal_code=1, on=date(2024, 1, 1)),
            make_entry("121003", credit=10, journal_code=1, on=date(2024, 1, 2)),
        ]
        layout = ReportLayout(
            group_by=(DOC, GROUP, SPECIFIC),
            consolidation=ConsolidationSpec(enabled=True, target_levels={SPECIFIC}),
        )
        report = build_report(entries, layout, classifier, METADATA)

        assert report.effective_levels == (DOC,)
        data = [r for r in report.rows if isinstance(r, DataRow)]
        assert [(r.entry.account_code, r.entry.debit, r.entry.credit) for r in data] == [
            ("111007", Decimal(10), Decimal(0)),
            ("121003", Decimal(0), Decimal(10)),
        ]
        assert data[0].entry.date == date(2024, 1, 1)
        assert report.metadata.consolidated is True


entry_strategy = st.builds(
    make_entry,
    account_code=st.sampled_from(["101001", "101002", "111007", "112004"]),
    debit=st.decimals(min_value=0, max_value=10**6, places=2),
    credit=st.decimals(min_value=0, max_value=10**6, places=2),
    journal_code=st.integers(min_value=1, max_value=5),
    detail_code=st.one_of(st.none(), st.sampled_from(["1", "2"])),
)


@settings(max_examples=60)
@given(
    entries=st.lists(entry_strategy, max_size=25),
    group_by=st.lists(st.sampled_from(HIERARCHY_ORDER), max_size=5, unique=True),
    consolidate=st.booleans(),
)
def test_flattened_rows_conserve_totals(entries, group_by, consolidate):
    classifier = CodeClassifier()
    layout = ReportLayout(
        group_by=tuple(group_by),
        consolidation=ConsolidationSpec(enabled=consolidate),
    )
    report = build_report(entries, layout, classifier, METADATA)
    data = [r for r in report.rows if isinstance(r, DataRow)]

    assert len(data) <= len(entries)
    assert sum(r.source_count for r in data) == len(entries)
    assert sum((r.entry.debit for r in data), Decimal(0)) == report.total_debit
    assert sum((r.entry.credit for r in data), Decimal(0)) == report.total_credit
    assert report.effective_levels == effective_levels(layout.group_by, layout.consolidation)

    outer = [r for r in report.rows if isinstance(r, HeaderRow) and r.level in report.effective_levels[:1]]
    assert sum(h.row_count for h in outer) == (len(entries) if report.effective_levels else 0)
