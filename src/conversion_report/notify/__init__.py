"""Report delivery."""

from conversion_report.notify.base import BaseNotifier, build_subject
from conversion_report.notify.mailgun import MailgunNotifier

__all__ = ["BaseNotifier", "MailgunNotifier", "build_subject"]
