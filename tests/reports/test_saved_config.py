"""Saved report configuration tests: dict and packed forms, best-effort load."""

from datetime import date

import pytest

from ledger_reports.cache import request_signature
from ledger_reports.levels import HierarchyLevel
from ledger_reports.models import (
    ConsolidationSpec,
    FetchParams,
    FilterSet,
    ReportColumn,
    ReportLayout,
    ReportRequest,
)
from ledger_reports.saved_config import PACK_KEYS, SavedReportConfiguration

DOC = HierarchyLevel.DOCUMENT
GROUP = HierarchyLevel.GROUP
SPECIFIC = HierarchyLevel.SPECIFIC
DETAIL = HierarchyLevel.DETAIL


@pytest.fixture
def saved():
    return SavedReportConfiguration(
        date_from=date(2024, 1, 1),
        date_to=date(2024, 3, 31),
        document_from=10,
        group_filter=("11",),
        status="permanent",
        columns=(ReportColumn.DATE, ReportColumn.DEBIT),
        group_by=(GROUP, DOC),
        consolidate_enabled=True,
        consolidate_targets=(DETAIL,),
        page_size=25,
        lang="fa",
    )


class TestDictForm:

    def test_round_trip(self, saved):
        assert SavedReportConfiguration.from_dict(saved.to_dict()) == saved

    def test_plain_values(self, saved):
        data = saved.to_dict()
        assert data["date_from"] == "2024-01-01"
        assert data["group_by"] == ["group_code", "journal_code"]
        assert data["columns"] == ["date", "debit"]

    def test_missing_fields_take_defaults(self):
        loaded = SavedReportConfiguration.from_dict({})
        assert loaded == SavedReportConfiguration()

    def test_unknown_levels_and_columns_are_dropped(self):
        loaded = SavedReportConfiguration.from_dict(
            {
                "group_by": ["group_code", "region_code"],
                "columns": ["debit", "margin"],
                "consolidate_targets": ["journal_code", "detail_code"],
            }
        )
        assert loaded.group_by == (GROUP,)
        assert loaded.columns == (ReportColumn.DEBIT,)
        assert loaded.consolidate_targets == (DETAIL,)

    def test_unreadable_values_fall_back(self):
        loaded = SavedReportConfiguration.from_dict(
            {
                "date_from": "someday",
                "document_from": "abc",
                "page_size": 0,
                "show_group_totals": "yes",
            }
        )
        assert loaded.date_from is None
        assert loaded.document_from is None
        assert loaded.page_size == 50
        assert loaded.show_group_totals is True


class TestPackedForm:

    def test_pack_uses_one_letter_keys(self, saved):
        packed = saved.pack()
        assert packed["version"] == 1
        assert set(packed["data"]) == set(PACK_KEYS.values())
        assert packed["data"]["a"] == "2024-01-01"
        assert packed["data"]["k"] == ["group_code", "journal_code"]

    def test_unpack_inverts_pack(self, saved):
        assert SavedReportConfiguration.unpack(saved.pack()) == saved

    def test_unpack_rejects_non_mapping(self):
        assert SavedReportConfiguration.unpack(None) is None
        assert SavedReportConfiguration.unpack(["a"]) is None

    def test_unpack_ignores_unknown_short_keys(self):
        loaded = SavedReportConfiguration.unpack({"version": 1, "data": {"p": 10, "zz": 1}})
        assert loaded.page_size == 10


class TestEngineInputs:

    def test_to_request(self, saved):
        request = saved.to_request("fy-2024")
        assert request.params == FetchParams(
            "fy-2024",
            date_from=date(2024, 1, 1),
            date_to=date(2024, 3, 31),
            document_from=10,
            status="permanent",
        )
        assert request.filters.group_codes == frozenset({"11"})

    def test_to_request_requires_fiscal_year(self, saved):
        with pytest.raises(ValueError, match="fiscal_year_id"):
            saved.to_request()

    def test_to_layout(self, saved):
        layout = saved.to_layout()
        assert layout.group_by == (GROUP, DOC)
        assert layout.nesting_levels == (DOC, GROUP)
        assert layout.consolidation == ConsolidationSpec(
            enabled=True, target_levels={DETAIL}, collapse_within_document=True,
        )

    def test_from_inputs_round_trip(self):
        request = ReportRequest(
            params=FetchParams("fy-2024", document_to=99),
            filters=FilterSet(specific_codes={"111007", "101001"}),
        )
        layout = ReportLayout(group_by=(SPECIFIC,), show_group_totals=False)
        saved = SavedReportConfiguration.from_inputs(request, layout, page_size=20)

        assert saved.to_request() == request
        assert saved.to_layout() == layout
        assert saved.specific_filter == ("101001", "111007")

    def test_narrowing_ranges_keep_the_cache_signature(self):
        request = ReportRequest(
            params=FetchParams("fy-2024", date_from=date(2024, 1, 1)),
            filters=FilterSet(
                group_codes={"11"},
                date_from=date(2024, 2, 1),
                date_to=date(2024, 2, 29),
                document_from=5,
                document_to=40,
            ),
        )
        saved = SavedReportConfiguration.from_inputs(request, ReportLayout())
        reloaded = SavedReportConfiguration.unpack(saved.pack())

        assert reloaded.narrow_date_from == date(2024, 2, 1)
        assert reloaded.narrow_document_to == 40
        assert reloaded.to_request("fy-2024") == request
        assert request_signature(reloaded.to_request("fy-2024")) == request_signature(request)
