"""Dedup and exclusion of query records."""

from conversion_report.filtering.engine import FilterOutcome, RecordFilter
from conversion_report.filtering.rules import apply_exclusion_rule, dedupe_records

__all__ = ["FilterOutcome", "RecordFilter", "apply_exclusion_rule", "dedupe_records"]
