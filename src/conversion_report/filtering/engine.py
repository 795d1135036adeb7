"""Post-processing of a query result: dedup then exclusion."""

import logging

from pydantic import BaseModel, Field

from conversion_report.models.record import RawRecord
from conversion_report.reports.base import BaseReport

from .rules import apply_exclusion_rule, dedupe_records

logger = logging.getLogger(__name__)


class FilterOutcome(BaseModel):
    """Records surviving each stage, in response order."""

    unique: list[RawRecord] = Field(default_factory=list, description="After dedup")
    kept: list[RawRecord] = Field(default_factory=list, description="After dedup and exclusion")
    explanations: list[str] = Field(default_factory=list, description="One line per excluded record")

    @property
    def excluded_count(self) -> int:
        return len(self.unique) - len(self.kept)


class RecordFilter:
    """Applies a report's dedup key and exclusion rule to raw records."""

    def __init__(self, report: BaseReport):
        self.report = report
        self._exclusion = report.exclusion_regex()

    def filter(self, records: list[RawRecord]) -> FilterOutcome:
        unique = dedupe_records(records, self.report.dedup_field)
        kept: list[RawRecord] = []
        explanations: list[str] = []
        for record in unique:
            passed, explanation, _ = apply_exclusion_rule(record, self.report.exclude_url_field, self._exclusion)
            if passed:
                kept.append(record)
            else:
                explanations.append(explanation)
                logger.debug(explanation)
        return FilterOutcome(unique=unique, kept=kept, explanations=explanations)
