"""Error taxonomy for the conversion report job.

Every error carries the upstream HTTP status (``None`` when the failure was not
an HTTP response, e.g. a connection error) and the upstream body, so the
trigger endpoint can surface both verbatim.
"""

from typing import Any, Optional

import httpx


def response_body(response: httpx.Response) -> Any:
    """JSON body when there is one, text otherwise."""
    try:
        return response.json()
    except ValueError:
        return response.text


class ReportJobError(Exception):
    """Base error for the report job."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body if body is not None else {"error": message}

    @property
    def http_status(self) -> int:
        """Status to answer the caller with; non-HTTP failures map to 500."""
        return self.status_code if self.status_code is not None else 500


class AuthenticationError(ReportJobError):
    """OAuth token exchange with the CRM failed. Fatal for the run."""


class QueryError(ReportJobError):
    """Report query against the CRM failed. Fatal for the run."""


class StoreError(ReportJobError):
    """Watermark store read or write failed."""


class NotificationError(ReportJobError):
    """Report email could not be delivered."""


class UnauthorizedRequestError(ReportJobError):
    """Trigger request carried the wrong authorization key."""

    def __init__(self, message: str = "Authorization failed"):
        super().__init__(message, status_code=403)


class UnsupportedReportTypeError(ReportJobError):
    """Requested report type is not one of the registered variants."""

    def __init__(self, report_type: Optional[str], available: list[str]):
        super().__init__(
            f"Unsupported report type: {report_type}. Available: {available}",
            status_code=400,
        )
        self.report_type = report_type
        self.available = available
