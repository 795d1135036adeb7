"""Registry of the supported report types."""

from typing import Optional, Type

from conversion_report.errors import UnsupportedReportTypeError
from conversion_report.reports.base import BaseReport
from conversion_report.reports.google_search_ads import GoogleSearchAdsConversionsReport


class ReportRegistry:
    """Closed set of report variants, keyed by their wire selector."""

    _reports: dict[str, Type[BaseReport]] = {
        GoogleSearchAdsConversionsReport.report_type: GoogleSearchAdsConversionsReport,
    }

    @classmethod
    def get(cls, report_type: Optional[str]) -> BaseReport:
        """Report instance for the selector; unknown selectors raise UnsupportedReportTypeError."""
        report_cls = cls._reports.get(report_type or "")
        if not report_cls:
            raise UnsupportedReportTypeError(report_type, cls.available_reports())
        return report_cls()

    @classmethod
    def available_reports(cls) -> list[str]:
        return list(cls._reports.keys())
