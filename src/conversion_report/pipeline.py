"""Incremental report pipeline: watermark → window → query → dedup/filter → CSV → email → commit."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from conversion_report.config import PRODUCTION, JobConfig
from conversion_report.connectors import BaseConnector, SalesforceConnector
from conversion_report.encoding import encode_csv
from conversion_report.errors import NotificationError, ReportJobError, StoreError
from conversion_report.filtering import FilterOutcome, RecordFilter
from conversion_report.logutil import new_request_id
from conversion_report.models.outcome import RunOutcome
from conversion_report.models.record import QueryResult
from conversion_report.models.watermark import RunWindow
from conversion_report.notify import BaseNotifier, MailgunNotifier, build_subject
from conversion_report.reports import BaseReport
from conversion_report.store import BaseWatermarkStore, FirebaseWatermarkStore, SqliteWatermarkStore

logger = logging.getLogger(__name__)


def build_report_body(report: BaseReport, result: QueryResult) -> tuple[str, FilterOutcome]:
    """
    Email body for a query result.
    Empty result sets produce the report's fixed message; otherwise rows are
    deduped, filtered and encoded as CSV.
    """
    if not result.records:
        return report.empty_message, FilterOutcome()
    outcome = RecordFilter(report).filter(result.records)
    return encode_csv(outcome.kept, report.columns), outcome


def run_incremental_report(
    config: JobConfig,
    *,
    report: BaseReport,
    connector: BaseConnector,
    store: BaseWatermarkStore,
    notifier: BaseNotifier,
    environment: str = PRODUCTION,
    now: Optional[datetime] = None,
    request_id: Optional[str] = None,
) -> RunOutcome:
    """
    Run one incremental report.
    AuthenticationError, StoreError on read and QueryError abort the run.
    Notification and watermark write failures are logged and reported in the
    outcome; the watermark is committed even when the email fails.
    """
    request_id = request_id or new_request_id()
    root, child_key = config.firebase.root, config.firebase.child_key

    token = connector.authenticate()
    logger.info("[%s] Authenticated against %s", request_id, token.instance_url)

    history = store.load_history(root, child_key)
    window = RunWindow.for_history(history, now)
    logger.info("[%s] Run window %s - %s", request_id, window.lower_bound, window.upper_bound)

    query = report.build_query(window)
    logger.info("[%s] Running %s query: %s", request_id, report.report_type, " ".join(query.split()))
    result = connector.query(query, token)

    body, filtered = build_report_body(report, result)
    if result.records:
        logger.info(
            "[%s] Number of query records [%d], unique [%d], final data [%d]",
            request_id,
            len(result.records),
            len(filtered.unique),
            len(filtered.kept),
        )
    else:
        logger.info("[%s] %s", request_id, body)

    notified = False
    subject = build_subject(config.notification.subject_prefix, window)
    try:
        notifier.send(config.notification.sender, config.notification.recipient, subject, body)
        notified = True
    except NotificationError as e:
        logger.error(
            "[%s] Notification failed: subject=%r recipient=%s error=%s body=%s",
            request_id,
            subject,
            config.notification.recipient,
            e.message,
            e.body,
        )

    committed = False
    try:
        store.save_history(root, child_key, history.appended(window.upper_bound))
        committed = True
    except StoreError as e:
        logger.error(
            "[%s] Watermark commit failed: root=%s child_key=%s upper_bound=%s error=%s",
            request_id,
            root,
            child_key,
            window.upper_bound,
            e.message,
        )

    return RunOutcome(
        request_id=request_id,
        report_type=report.report_type,
        environment=environment,
        window=window,
        records_fetched=len(result.records),
        unique_records=len(filtered.unique),
        records_reported=len(filtered.kept),
        report_body=body,
        notified=notified,
        watermark_committed=committed,
        query_response=result.raw,
    )


def send_error_alert(
    config: JobConfig,
    notifier: BaseNotifier,
    error: Exception,
    *,
    request_id: str,
    source: str,
) -> bool:
    """Best-effort alert email for a failed run. Returns True when sent."""
    if isinstance(error, ReportJobError):
        content = error.body if isinstance(error.body, str) else json.dumps(error.body, default=str)
    else:
        content = f"{type(error).__name__}: {error}"
    try:
        notifier.send(
            config.notification.sender,
            config.notification.alert_to,
            f"[ERROR] {source}",
            f"{content}\n\nRequest ID: {request_id}",
        )
        return True
    except NotificationError as e:
        logger.error("[%s] Error alert could not be sent: %s", request_id, e.message)
        return False


# --- component factories (one instance per process) ---


def make_connector(config: JobConfig, environment: Optional[str]) -> SalesforceConnector:
    return SalesforceConnector(config.environment(environment).salesforce, timeout=config.http_timeout)


def make_store(config: JobConfig, backend: str = "firebase", db_path: Optional[Path] = None) -> BaseWatermarkStore:
    """Firebase store by default; 'sqlite' for a local database file."""
    if backend == "sqlite":
        return SqliteWatermarkStore(db_path or Path("conversion_report.db"))
    if backend == "firebase":
        return FirebaseWatermarkStore(config.firebase, timeout=config.http_timeout)
    raise ValueError(f"Unknown store backend: {backend}. Available: ['firebase', 'sqlite']")


def make_notifier(config: JobConfig) -> MailgunNotifier:
    return MailgunNotifier(config.mailgun, timeout=config.http_timeout)
