"""Salesforce REST connector: OAuth password flow + SOQL query endpoint.

Flow:
1. POST form-encoded credentials to the org's OAuth token URL
2. GET {instance_url}/services/data/{version}/query/?q=<SOQL> with the bearer token
3. Follow nextRecordsUrl while the result set is not done
"""

import logging
from typing import Any, Optional

import httpx

from conversion_report.config import SalesforceCredentials
from conversion_report.connectors.base import AccessToken, BaseConnector
from conversion_report.errors import AuthenticationError, QueryError, response_body
from conversion_report.models.record import QueryResult

logger = logging.getLogger(__name__)


class SalesforceConnector(BaseConnector):
    """Connector for the Salesforce REST query API."""

    QUERY_PATH_TEMPLATE = "/services/data/{version}/query/"

    def __init__(
        self,
        credentials: SalesforceCredentials,
        client: Optional[httpx.Client] = None,
        timeout: float = 60.0,
    ):
        self._credentials = credentials
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def authenticate(self) -> AccessToken:
        """Exchange username/password credentials for an access token."""
        creds = self._credentials
        form = {
            "username": creds.username,
            "password": creds.password,
            "grant_type": creds.grant_type,
            "client_id": creds.client_id,
            "client_secret": creds.client_secret,
        }
        try:
            resp = self._client.post(creds.oauth_url, data=form)
        except httpx.RequestError as e:
            raise AuthenticationError(f"OAuth request to {creds.oauth_url} failed: {e}") from e

        if not resp.is_success:
            raise AuthenticationError(
                f"Authorization failed for OAuth endpoint {creds.oauth_url}",
                status_code=resp.status_code,
                body=response_body(resp),
            )

        try:
            payload = resp.json()
            return AccessToken(
                access_token=payload["access_token"],
                instance_url=payload["instance_url"].rstrip("/"),
                token_type=payload.get("token_type") or "Bearer",
            )
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise AuthenticationError(
                f"Unexpected token response from {creds.oauth_url}: {e}",
                body=response_body(resp),
            ) from e

    def _get(self, url: str, token: AccessToken, params: Optional[dict] = None) -> dict[str, Any]:
        try:
            resp = self._client.get(
                url,
                params=params,
                headers={"Authorization": token.authorization_header},
            )
        except httpx.RequestError as e:
            raise QueryError(f"Query request to {url} failed: {e}") from e

        if not resp.is_success:
            raise QueryError(
                f"Query failed for {url}",
                status_code=resp.status_code,
                body=response_body(resp),
            )

        body = response_body(resp)
        if not isinstance(body, dict):
            raise QueryError(f"Unexpected query response from {url}", body=body)
        return body

    def query(self, query: str, token: AccessToken) -> QueryResult:
        """Run SOQL and merge every page of the result."""
        url = token.instance_url + self.QUERY_PATH_TEMPLATE.format(version=self._credentials.api_version)
        logger.debug("Querying %s", url)
        result = QueryResult.from_response(self._get(url, token, params={"q": query}))

        while not result.done and result.next_records_url:
            logger.debug("Fetching next page %s", result.next_records_url)
            page = self._get(token.instance_url + result.next_records_url, token)
            result.extend(page)

        logger.info("Query returned %d of %d records", len(result.records), result.total_size)
        return result

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
