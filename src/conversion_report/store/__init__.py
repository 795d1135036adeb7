"""Watermark stores."""

from conversion_report.store.base import BaseWatermarkStore
from conversion_report.store.firebase import FirebaseWatermarkStore
from conversion_report.store.sqlite_store import SqliteWatermarkStore

__all__ = ["BaseWatermarkStore", "FirebaseWatermarkStore", "SqliteWatermarkStore"]
