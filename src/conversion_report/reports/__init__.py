"""Report type variants."""

from conversion_report.reports.base import NO_CONVERSIONS_MESSAGE, BaseReport, Column
from conversion_report.reports.google_search_ads import GoogleSearchAdsConversionsReport
from conversion_report.reports.registry import ReportRegistry

__all__ = [
    "NO_CONVERSIONS_MESSAGE",
    "BaseReport",
    "Column",
    "GoogleSearchAdsConversionsReport",
    "ReportRegistry",
]
