"""Raw CRM records and query result pages."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class RawRecord(BaseModel):
    """
    One record returned by the CRM query API.
    Keeps the source payload as-is; nested relationship fields stay nested.
    """

    data: dict[str, Any] = Field(default_factory=dict)

    def get_path(self, path: str) -> Any:
        """
        Resolve a dotted path such as 'Opportunity__r.StageName'.
        Returns None as soon as a segment is missing or null.
        """
        value: Any = self.data
        for segment in path.split("."):
            if not isinstance(value, dict):
                return None
            value = value.get(segment)
            if value is None:
                return None
        return value


class QueryResult(BaseModel):
    """Result set of a CRM query, all pages merged."""

    total_size: int = 0
    done: bool = True
    records: list[RawRecord] = Field(default_factory=list)
    next_records_url: Optional[str] = None
    raw: dict[str, Any] = Field(default_factory=dict, description="Untouched body of the first page")

    @classmethod
    def from_response(cls, body: dict[str, Any]) -> "QueryResult":
        """Build from a query API response body."""
        return cls(
            total_size=int(body.get("totalSize") or 0),
            done=bool(body.get("done", True)),
            records=[RawRecord(data=r) for r in body.get("records") or []],
            next_records_url=body.get("nextRecordsUrl"),
            raw=body,
        )

    def extend(self, page: dict[str, Any]) -> None:
        """Append the records of a follow-up page."""
        self.records.extend(RawRecord(data=r) for r in page.get("records") or [])
        self.done = bool(page.get("done", True))
        self.next_records_url = page.get("nextRecordsUrl")
