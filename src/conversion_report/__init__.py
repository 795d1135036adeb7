"""Incremental CRM conversion report job."""

__version__ = "0.1.0"
