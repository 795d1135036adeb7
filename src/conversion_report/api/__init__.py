"""HTTP trigger surface."""

from conversion_report.api.app import create_app

__all__ = ["create_app"]
