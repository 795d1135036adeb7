"""Outcome of one report run."""

from typing import Any

from pydantic import BaseModel, Field

from conversion_report.models.watermark import RunWindow


class RunOutcome(BaseModel):
    """What a completed run did. Fatal failures raise instead of returning."""

    success: bool = True
    request_id: str
    report_type: str
    environment: str
    window: RunWindow
    records_fetched: int = 0
    unique_records: int = 0
    records_reported: int = 0
    report_body: str = ""
    notified: bool = False
    watermark_committed: bool = False
    query_response: dict[str, Any] = Field(default_factory=dict)

    def to_response(self) -> dict[str, Any]:
        """Body of the single success response sent to the trigger caller."""
        return {
            "success": self.success,
            "requestId": self.request_id,
            "reportType": self.report_type,
            "environment": self.environment,
            "lowerBound": self.window.lower_bound,
            "upperBound": self.window.upper_bound,
            "recordsFetched": self.records_fetched,
            "uniqueRecords": self.unique_records,
            "recordsReported": self.records_reported,
            "notified": self.notified,
            "watermarkCommitted": self.watermark_committed,
            "queryResponse": self.query_response,
        }
