"""
Shared HTTP plumbing for the vendor clients.

Each call opens a short-lived httpx.AsyncClient, logs the exchange and
converts every transport, status or decoding failure into RequestError.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from ..config import Settings, get_settings
from ..errors import RequestError

logger = logging.getLogger(__name__)


class BaseAPIClient(ABC):
    """Base class holding settings, auth headers and the request helper"""

    VENDOR = "API"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            settings: Explicit configuration (defaults to get_settings())
            transport: Optional httpx transport, used by tests to stub the vendor
        """
        self.settings = settings or get_settings()
        self.timeout = self.settings.request_timeout
        self._transport = transport

    @property
    @abstractmethod
    def base_url(self) -> str:
        """Vendor base URL the endpoints are appended to"""

    @property
    def _headers(self) -> Dict[str, str]:
        return {"Accept": "application/json"}

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def _request(
        self,
        method: str,
        endpoint: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Make a JSON request against the vendor base URL.

        Returns:
            Decoded JSON body (dict or list)

        Raises:
            RequestError: On network errors, HTTP status >= 400 or invalid JSON
        """
        url = f"{self.base_url}{endpoint}"
        headers = dict(self._headers)
        if json is not None:
            headers["Content-Type"] = "application/json"

        try:
            async with self._http_client() as client:
                response = await client.request(method, url, headers=headers, json=json)
        except httpx.HTTPError as e:
            logger.error(f"{self.VENDOR} {method} {endpoint} failed: {e}")
            raise RequestError(f"{self.VENDOR} request to {endpoint} failed: {e}") from e

        logger.info(f"{self.VENDOR} {method} {endpoint} -> {response.status_code}")

        if response.status_code >= 400:
            logger.error(f"{self.VENDOR} error: {response.text}")
            raise RequestError(
                f"{self.VENDOR} {method} {endpoint} returned {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise RequestError(f"{self.VENDOR} returned invalid JSON from {endpoint}") from e

    async def _fetch_bytes(self, url: str) -> bytes:
        """Download raw bytes from an absolute URL (no auth headers)"""
        try:
            async with self._http_client() as client:
                response = await client.get(url)
        except httpx.HTTPError as e:
            raise RequestError(f"Download of {url} failed: {e}") from e

        if response.status_code >= 400:
            raise RequestError(
                f"Download of {url} returned {response.status_code}",
                status_code=response.status_code,
            )
        return response.content
