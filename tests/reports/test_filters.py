"""
FilterEvaluator tests.

Within a level accepted codes OR together; levels, the document range and
the date range AND together.  Empty sets restrict nothing.
"""

from datetime import date

import pytest
from hypothesis import given
from hypothesis import strategies as st

from ledger_reports.codes import CodeClassifier
from ledger_reports.filters import FilterEvaluator, apply_filters
from ledger_reports.levels import HierarchyLevel
from ledger_reports.models import FetchParams, FilterSet, ReportRequest
from tests.factories import make_entry


@pytest.fixture
def mixed_entries():
    return [
        make_entry("101001", debit=10, journal_code=1, on=date(2024, 1, 1)),
        make_entry("101002", debit=20, journal_code=2, on=date(2024, 1, 5), detail_code="7"),
        make_entry("111007", debit=30, journal_code=3, on=date(2024, 2, 1), detail_code="8"),
        make_entry("112004", credit=60, journal_code=4, on=date(2024, 3, 1)),
    ]


class TestLevelFilters:

    def test_group_filter_excludes_other_groups(self, mixed_entries, classifier):
        kept = apply_filters(mixed_entries, FilterSet(group_codes={"11"}), classifier)
        assert [e.account_code for e in kept] == ["111007", "112004"]

    def test_empty_filter_excludes_nothing(self, mixed_entries, classifier):
        assert apply_filters(mixed_entries, FilterSet(), classifier) == tuple(mixed_entries)

    def test_codes_within_a_level_are_ored(self, mixed_entries, classifier):
        kept = apply_filters(
            mixed_entries, FilterSet(general_codes={"1010", "1120"}), classifier,
        )
        assert [e.account_code for e in kept] == ["101001", "101002", "112004"]

    def test_levels_are_anded(self, mixed_entries, classifier):
        filters = FilterSet(group_codes={"10", "11"}, detail_codes={"8"})
        kept = apply_filters(mixed_entries, filters, classifier)
        assert [e.account_code for e in kept] == ["111007"]

    def test_missing_detail_never_matches_a_detail_filter(self, classifier):
        entry = make_entry("101001", detail_code=None)
        assert FilterEvaluator(FilterSet(detail_codes={"7"}), classifier)(entry) is False

    def test_filter_codes_are_digit_normalized(self, mixed_entries, classifier):
        kept = apply_filters(mixed_entries, FilterSet(group_codes={"۱۱"}), classifier)
        assert len(kept) == 2

    def test_for_levels_builder(self, mixed_entries, classifier):
        filters = FilterSet.for_levels({HierarchyLevel.SPECIFIC: ["101002"]})
        kept = apply_filters(mixed_entries, filters, classifier)
        assert [e.account_code for e in kept] == ["101002"]


class TestRanges:

    def test_document_range_is_inclusive(self, mixed_entries, classifier):
        kept = apply_filters(
            mixed_entries, FilterSet(document_from=2, document_to=3), classifier,
        )
        assert [e.journal_code for e in kept] == [2, 3]

    def test_missing_document_number_counts_as_zero(self, classifier):
        entry = make_entry(journal_code=None)
        assert FilterEvaluator(FilterSet(document_to=0), classifier)(entry) is True
        assert FilterEvaluator(FilterSet(document_from=1), classifier)(entry) is False

    def test_date_range_is_inclusive(self, mixed_entries, classifier):
        kept = apply_filters(
            mixed_entries,
            FilterSet(date_from=date(2024, 1, 5), date_to=date(2024, 2, 1)),
            classifier,
        )
        assert [e.date for e in kept] == [date(2024, 1, 5), date(2024, 2, 1)]

    def test_contradictory_ranges_match_nothing(self, mixed_entries, classifier):
        filters = FilterSet(document_from=5, document_to=1)
        assert apply_filters(mixed_entries, filters, classifier) == ()
        filters = FilterSet(date_from=date(2024, 12, 1), date_to=date(2024, 1, 1))
        assert apply_filters(mixed_entries, filters, classifier) == ()

    def test_request_applies_fetch_ranges_to_entries(self, mixed_entries, classifier):
        request = ReportRequest(params=FetchParams("fy", document_from=3))
        kept = apply_filters(mixed_entries, request.effective_filters, classifier)
        assert [e.journal_code for e in kept] == [3, 4]


@given(
    codes=st.lists(st.sampled_from(["101001", "111007", "121003", "131000"]), max_size=20),
    accepted=st.sets(st.sampled_from(["10", "11", "12", "13"]), max_size=4),
)
def test_filtering_is_a_subsequence_of_matching_entries(codes, accepted):
    classifier = CodeClassifier()
    entries = [make_entry(code, debit=1) for code in codes]
    kept = apply_filters(entries, FilterSet(group_codes=accepted), classifier)

    expected = [e for e in entries if not accepted or e.account_code[:2] in accepted]
    assert list(kept) == expected
