"""Abstract base class for report types."""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

from conversion_report.models.watermark import RunWindow

NO_CONVERSIONS_MESSAGE = "No conversions for this run"


@dataclass(frozen=True)
class Column:
    """One output column: dotted source path, header label, value when absent."""

    path: str
    label: str
    default: str = ""


class BaseReport(ABC):
    """
    A report variant: its query template, dedup key, exclusion rule and
    column projection. One variant per watermark key.
    """

    report_type: str = ""
    dedup_field: str = ""
    exclude_url_field: str = ""
    exclude_url_pattern: str = ""
    columns: tuple[Column, ...] = ()
    empty_message: str = NO_CONVERSIONS_MESSAGE

    @abstractmethod
    def build_query(self, window: RunWindow) -> str:
        """Query selecting records created strictly inside the window."""
        pass

    def exclusion_regex(self) -> re.Pattern[str] | None:
        if not self.exclude_url_pattern:
            return None
        return re.compile(self.exclude_url_pattern, re.IGNORECASE)
