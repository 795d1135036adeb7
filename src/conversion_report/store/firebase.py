"""Firebase Realtime Database watermark store over the REST API.

GET {database_url}/{root}.json returns the document (JSON null when absent);
PUT to the same URL replaces it. An optional auth token (database secret or
ID token) is sent as the 'auth' query parameter.
"""

from typing import Any, Optional

import httpx

from conversion_report.config import FirebaseConfig
from conversion_report.errors import response_body
from conversion_report.store.base import BaseWatermarkStore, store_error


class FirebaseWatermarkStore(BaseWatermarkStore):
    """Watermark documents in a Firebase Realtime Database."""

    def __init__(
        self,
        config: FirebaseConfig,
        client: Optional[httpx.Client] = None,
        timeout: float = 60.0,
    ):
        if not config.database_url:
            raise ValueError("Firebase database_url is not configured")
        self._base_url = config.database_url.rstrip("/")
        self._auth_token = config.auth_token
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def _url(self, root: str) -> str:
        return f"{self._base_url}/{root.strip('/')}.json"

    def _params(self) -> dict[str, str]:
        return {"auth": self._auth_token} if self._auth_token else {}

    def read(self, root: str) -> Optional[dict[str, Any]]:
        try:
            resp = self._client.get(self._url(root), params=self._params())
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise store_error("read", root, e, e.response.status_code, response_body(e.response)) from e
        except httpx.RequestError as e:
            raise store_error("read", root, e) from e

        data = resp.json()
        if data is None:
            return None
        if not isinstance(data, dict):
            raise store_error("read", root, ValueError(f"expected an object, got {type(data).__name__}"))
        return data

    def write(self, root: str, document: dict[str, Any]) -> None:
        try:
            resp = self._client.put(self._url(root), params=self._params(), json=document)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise store_error("write", root, e, e.response.status_code, response_body(e.response)) from e
        except httpx.RequestError as e:
            raise store_error("write", root, e) from e

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
