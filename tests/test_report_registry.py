"""Unit tests for report variants and ReportRegistry."""

import pytest

from conversion_report.errors import UnsupportedReportTypeError
from conversion_report.models.watermark import RunWindow
from conversion_report.reports import NO_CONVERSIONS_MESSAGE, GoogleSearchAdsConversionsReport, ReportRegistry


class TestReportRegistry:
    """Tests for ReportRegistry."""

    def test_get_google_search_ads(self) -> None:
        """Registry returns the Google Search Ads report for its selector."""
        report = ReportRegistry.get("googleSearchAdsConversions")
        assert isinstance(report, GoogleSearchAdsConversionsReport)

    def test_unknown_report_raises(self) -> None:
        """Unknown selector raises an explicit error."""
        with pytest.raises(UnsupportedReportTypeError, match="Unsupported report type: facebookAds") as exc:
            ReportRegistry.get("facebookAds")
        assert exc.value.http_status == 400

    def test_missing_report_raises(self) -> None:
        with pytest.raises(UnsupportedReportTypeError):
            ReportRegistry.get(None)

    def test_available_reports(self) -> None:
        assert ReportRegistry.available_reports() == ["googleSearchAdsConversions"]


class TestGoogleSearchAdsConversionsReport:
    """Tests for the query template and projection."""

    def test_query_uses_window_bounds(self) -> None:
        """Window bounds appear as exclusive CreatedDate filters."""
        window = RunWindow(lower_bound="2023-01-04T00:00:00.000Z", upper_bound="2023-01-05T00:00:00.000Z")
        query = GoogleSearchAdsConversionsReport().build_query(window)
        assert "CreatedDate > 2023-01-04T00:00:00.000Z" in query
        assert "CreatedDate < 2023-01-05T00:00:00.000Z" in query

    def test_query_fixed_predicate(self) -> None:
        """Fixed predicate and ordering of the report."""
        query = " ".join(GoogleSearchAdsConversionsReport().build_query(RunWindow(lower_bound="a", upper_bound="b")).split())
        assert "FROM Lead_Post__c" in query
        assert "URL_GCLID__c != null" in query
        assert "Opportunity__c != null" in query
        assert "Opportunity__r.Application_Date__c != null" in query
        assert "First_Name__c != 'AAUTest'" in query
        assert query.endswith("ORDER BY Opportunity__r.Application_Date__c DESC")

    def test_columns_and_keys(self) -> None:
        report = GoogleSearchAdsConversionsReport()
        assert [c.label for c in report.columns] == ["Google Click ID", "Stage Name", "Application Date"]
        assert report.dedup_field == "Opportunity__c"
        assert report.exclude_url_field == "URL_Details__c"
        assert report.empty_message == NO_CONVERSIONS_MESSAGE == "No conversions for this run"
