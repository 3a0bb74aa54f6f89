"""
Consolidation tests.

Summary rows preserve debit/credit sums exactly and never outnumber the
rows they replace.
"""

from datetime import date
from decimal import Decimal

from hypothesis import given
from hypothesis import strategies as st

from ledger_reports.codes import CodeClassifier
from ledger_reports.consolidation import (
    consolidate_block,
    consolidate_rows,
    consolidation_target,
)
from ledger_reports.aggregation import aggregate
from ledger_reports.levels import HierarchyLevel
from ledger_reports.models import ConsolidationSpec
from tests.factories import make_entry

DOC = HierarchyLevel.DOCUMENT
GROUP = HierarchyLevel.GROUP
GENERAL = HierarchyLevel.GENERAL
SPECIFIC = HierarchyLevel.SPECIFIC
DETAIL = HierarchyLevel.DETAIL


class TestConsolidationTarget:

    def test_disabled_has_no_target(self):
        assert consolidation_target(ConsolidationSpec(enabled=False), GROUP) is None

    def test_most_granular_target_wins(self):
        spec = ConsolidationSpec(enabled=True, target_levels={GENERAL, SPECIFIC, DETAIL})
        assert consolidation_target(spec, GROUP) is DETAIL

    def test_primary_level_is_excluded(self):
        spec = ConsolidationSpec(enabled=True, target_levels={SPECIFIC, DETAIL})
        assert consolidation_target(spec, DETAIL) is SPECIFIC

    def test_only_target_is_primary(self):
        spec = ConsolidationSpec(enabled=True, target_levels={SPECIFIC})
        assert consolidation_target(spec, SPECIFIC) is None

    def test_no_grouping_still_consolidates(self):
        spec = ConsolidationSpec(enabled=True, target_levels={SPECIFIC})
        assert consolidation_target(spec, None) is SPECIFIC


class TestConsolidateRows:

    def test_specific_target_sums_and_rewrites_account(self, classifier):
        rows = [
            make_entry("1110071", debit=100, on=date(2024, 1, 5), description="first"),
            make_entry("1110072", credit=30, on=date(2024, 1, 3), description="second"),
            make_entry("111008", debit=10, on=date(2024, 1, 9)),
        ]
        out = consolidate_rows(rows, SPECIFIC, classifier)

        assert [r.entry.account_code for r in out] == ["111007", "111008"]
        summary = out[0]
        assert summary.source_count == 2
        assert summary.entry.debit == Decimal("100")
        assert summary.entry.credit == Decimal("30")
        assert summary.entry.date == date(2024, 1, 3)
        # Other fields come from the first contributing row
        assert summary.entry.description == "first"

    def test_detail_target_keys_by_detail_code(self, classifier):
        rows = [
            make_entry(detail_code="10", debit=1),
            make_entry(detail_code=None, debit=2),
            make_entry(detail_code="2", debit=3),
            make_entry(detail_code="10", debit=4),
        ]
        out = consolidate_rows(rows, DETAIL, classifier)

        assert [r.entry.detail_code for r in out] == [None, "2", "10"]
        assert [r.entry.debit for r in out] == [Decimal(2), Decimal(3), Decimal(5)]
        assert [r.source_count for r in out] == [1, 1, 2]

    def test_group_target_leaves_codes_untouched(self, classifier):
        rows = [make_entry("111007", debit=1), make_entry("112000", debit=2)]
        (summary,) = consolidate_rows(rows, GROUP, classifier)
        assert summary.entry.account_code == "111007"
        assert summary.entry.debit == Decimal(3)


class TestConsolidateBlock:

    def test_passthrough_without_target(self, classifier):
        rows = [make_entry(debit=1), make_entry(debit=2)]
        (block,) = aggregate(rows, (SPECIFIC,), classifier)
        spec = ConsolidationSpec(enabled=True, target_levels={SPECIFIC})

        out = consolidate_block(block, spec, SPECIFIC, classifier)
        assert [r.entry for r in out] == rows
        assert all(r.source_count == 1 for r in out)

    def test_disabled_is_passthrough(self, classifier):
        rows = [make_entry("111007"), make_entry("111008")]
        (block,) = aggregate(rows, (GROUP,), classifier)
        out = consolidate_block(block, ConsolidationSpec(), GROUP, classifier)
        assert len(out) == 2


@given(
    st.lists(
        st.builds(
            make_entry,
            account_code=st.sampled_from(["101001", "1010012", "111007", "121"]),
            debit=st.decimals(min_value=0, max_value=10**5, places=2),
            credit=st.decimals(min_value=0, max_value=10**5, places=2),
            detail_code=st.one_of(st.none(), st.sampled_from(["1", "2", "3"])),
        ),
        max_size=25,
    ),
    st.sampled_from([GROUP, GENERAL, SPECIFIC, DETAIL]),
)
def test_consolidation_conserves_sums(rows, target):
    out = consolidate_rows(rows, target, CodeClassifier())

    assert len(out) <= len(rows)
    assert sum(r.source_count for r in out) == len(rows)
    assert sum((r.entry.debit for r in out), Decimal(0)) == sum(
        (e.debit for e in rows), Decimal(0)
    )
    assert sum((r.entry.credit for r in out), Decimal(0)) == sum(
        (e.credit for e in rows), Decimal(0)
    )
