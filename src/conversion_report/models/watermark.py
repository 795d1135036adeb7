"""Watermark history and the run window derived from it."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SEED = "2022-11-22T23:59:59.999Z"


def start_of_day_label(now: Optional[datetime] = None) -> str:
    """
    Midnight of the current local calendar date, labeled with a 'Z' offset.
    The date components are local while the suffix claims UTC; this matches
    the boundaries already persisted by earlier runs.
    """
    now = now or datetime.now()
    return now.strftime("%Y-%m-%dT00:00:00.000Z")


class WatermarkHistory(BaseModel):
    """
    Append-only sequence of run boundary timestamps.
    The last element is the upper bound of the most recent completed run.
    """

    model_config = ConfigDict(frozen=True)

    run_date_times: list[str] = Field(default_factory=lambda: [DEFAULT_SEED])

    @classmethod
    def seeded(cls) -> "WatermarkHistory":
        """History used when nothing has been persisted yet."""
        return cls(run_date_times=[DEFAULT_SEED])

    @classmethod
    def from_document(cls, document: Any, child_key: str) -> Optional["WatermarkHistory"]:
        """Parse a stored document {child_key: [...]}; None when absent or empty."""
        if not isinstance(document, dict):
            return None
        values = document.get(child_key)
        if not values:
            return None
        return cls(run_date_times=[str(v) for v in values])

    @property
    def last(self) -> str:
        return self.run_date_times[-1]

    def appended(self, timestamp: str) -> "WatermarkHistory":
        """New history with timestamp appended; self is left untouched."""
        return WatermarkHistory(run_date_times=[*self.run_date_times, timestamp])

    def to_document(self, child_key: str) -> dict[str, list[str]]:
        return {child_key: list(self.run_date_times)}

    def __len__(self) -> int:
        return len(self.run_date_times)


class RunWindow(BaseModel):
    """Open interval (lower_bound, upper_bound) of creation times for one run."""

    model_config = ConfigDict(frozen=True)

    lower_bound: str
    upper_bound: str

    @classmethod
    def for_history(cls, history: WatermarkHistory, now: Optional[datetime] = None) -> "RunWindow":
        """Lower bound is the last watermark; upper bound is today's start. Not validated."""
        return cls(lower_bound=history.last, upper_bound=start_of_day_label(now))
