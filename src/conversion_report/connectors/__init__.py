"""Remote query service connectors."""

from conversion_report.connectors.base import AccessToken, BaseConnector
from conversion_report.connectors.salesforce import SalesforceConnector

__all__ = ["AccessToken", "BaseConnector", "SalesforceConnector"]
