"""Pytest fixtures for conversion-report tests."""

from typing import Any, Optional

import pytest

from conversion_report.config import (
    EnvironmentConfig,
    FirebaseConfig,
    JobConfig,
    MailgunConfig,
    NotificationConfig,
    SalesforceCredentials,
)
from conversion_report.connectors.base import AccessToken, BaseConnector
from conversion_report.errors import NotificationError, StoreError
from conversion_report.models.record import QueryResult, RawRecord
from conversion_report.notify.base import BaseNotifier
from conversion_report.store.base import BaseWatermarkStore


def make_record(
    opportunity: Optional[str] = "006A",
    url: Optional[str] = "https://apply.example.com/form",
    gclid: Optional[str] = "gclid-1",
    stage: Optional[str] = "Applied",
    application_date: Optional[str] = "2023-01-04",
) -> RawRecord:
    """Lead post record shaped like the query API returns it."""
    data: dict[str, Any] = {
        "attributes": {"type": "Lead_Post__c"},
        "Id": f"a0{opportunity}",
        "URL_GCLID__c": gclid,
        "Opportunity__c": opportunity,
        "URL_Details__c": url,
        "CreatedDate": "2023-01-03T10:00:00.000+0000",
        "Opportunity__r": {
            "attributes": {"type": "Opportunity"},
            "StageName": stage,
            "Application_Date__c": application_date,
        },
    }
    return RawRecord(data=data)


def query_body(records: list[RawRecord]) -> dict[str, Any]:
    return {"totalSize": len(records), "done": True, "records": [r.data for r in records]}


class FakeConnector(BaseConnector):
    """In-memory query service recording its calls."""

    def __init__(self, records: Optional[list[RawRecord]] = None, auth_error: Exception | None = None, query_error: Exception | None = None):
        self.records = records or []
        self.auth_error = auth_error
        self.query_error = query_error
        self.calls: list[str] = []
        self.queries: list[str] = []

    def authenticate(self) -> AccessToken:
        self.calls.append("authenticate")
        if self.auth_error:
            raise self.auth_error
        return AccessToken(access_token="tok", instance_url="https://example.my.salesforce.com")

    def query(self, query: str, token: AccessToken) -> QueryResult:
        self.calls.append("query")
        self.queries.append(query)
        if self.query_error:
            raise self.query_error
        return QueryResult.from_response(query_body(self.records))


class MemoryStore(BaseWatermarkStore):
    """Dict-backed watermark store recording reads and writes."""

    def __init__(self, documents: Optional[dict[str, Any]] = None, fail_read: bool = False, fail_write: bool = False):
        self.documents = dict(documents or {})
        self.fail_read = fail_read
        self.fail_write = fail_write
        self.reads: list[str] = []
        self.writes: list[tuple[str, dict]] = []

    def read(self, root: str) -> Optional[dict[str, Any]]:
        self.reads.append(root)
        if self.fail_read:
            raise StoreError("read failed", status_code=503)
        return self.documents.get(root)

    def write(self, root: str, document: dict[str, Any]) -> None:
        self.writes.append((root, document))
        if self.fail_write:
            raise StoreError("write failed", status_code=503)
        self.documents[root] = document


class FakeNotifier(BaseNotifier):
    """Notifier that keeps sent messages in a list."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: list[dict[str, str]] = []

    def send(self, sender: str, recipient: str, subject: str, text: str) -> Any:
        if self.fail:
            raise NotificationError("mail down", status_code=502)
        self.sent.append({"from": sender, "to": recipient, "subject": subject, "text": text})
        return {"id": f"<{len(self.sent)}@mail>", "message": "Queued. Thank you."}


def _environment(suffix: str) -> EnvironmentConfig:
    return EnvironmentConfig(
        api_key=f"trigger-key{suffix}",
        salesforce=SalesforceCredentials(
            oauth_url=f"https://login{suffix}.example.com/services/oauth2/token",
            username=f"user{suffix}@example.com",
            password="secret",
            client_id="client",
            client_secret="client-secret",
        ),
    )


@pytest.fixture
def config() -> JobConfig:
    """Job config with prod and uat environments."""
    return JobConfig(
        production=_environment(""),
        uat=_environment("-uat"),
        firebase=FirebaseConfig(database_url="https://report-db.example.firebaseio.com", auth_token="db-secret"),
        mailgun=MailgunConfig(api_key="mg-key", domain="mg.example.com"),
        notification=NotificationConfig(sender="reports@example.com", recipient="marketing@example.com"),
    )


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()
