"""Abstract base class for the remote query service."""

from abc import ABC, abstractmethod

from pydantic import BaseModel

from conversion_report.models.record import QueryResult


class AccessToken(BaseModel):
    """Bearer credential returned by the token exchange. No expiry handling."""

    access_token: str
    instance_url: str
    token_type: str = "Bearer"

    @property
    def authorization_header(self) -> str:
        return f"{self.token_type} {self.access_token}"


class BaseConnector(ABC):
    """
    Standard interface for an authenticated query API.
    Every call is attempted exactly once; failures raise typed errors.
    """

    @abstractmethod
    def authenticate(self) -> AccessToken:
        """Exchange configured credentials for a bearer token."""
        pass

    @abstractmethod
    def query(self, query: str, token: AccessToken) -> QueryResult:
        """Run a read query and return the full result set."""
        pass

    def close(self) -> None:
        """Release any held HTTP resources."""
        pass
