"""Data models for records, watermarks and run outcomes."""

from conversion_report.models.outcome import RunOutcome
from conversion_report.models.record import QueryResult, RawRecord
from conversion_report.models.watermark import DEFAULT_SEED, RunWindow, WatermarkHistory

__all__ = ["DEFAULT_SEED", "QueryResult", "RawRecord", "RunOutcome", "RunWindow", "WatermarkHistory"]
