"""Base HTTP client for talking to the finance API."""

import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


class BaseHTTPClient:
    """
    Base HTTP client.

    Provides:
    - Request/response logging
    - Timeout management
    - A pluggable transport (tests route requests straight into the app)

    Error statuses are returned, not raised; subclasses decide what each
    status means for their resource.
    """

    def __init__(
        self,
        base_url: str,
        service_name: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            base_url: Base URL for the service (e.g., "http://localhost:8000")
            service_name: Name of the service (used in log lines)
            timeout: Request timeout in seconds
            transport: Optional httpx transport, e.g. httpx.ASGITransport(app)
        """
        self.base_url = base_url.rstrip("/")
        self.service_name = service_name
        self.timeout = timeout

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport,
        )

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make an HTTP request.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: Request path (relative to base_url)
            **kwargs: Additional arguments for httpx.request

        Returns:
            HTTP response, whatever its status

        Raises:
            httpx.TransportError: If the service cannot be reached
        """
        logger.debug(f"[{self.service_name}] {method} {self.base_url}{path}")
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            logger.error(f"[{self.service_name}] {method} {path} failed: {e}")
            raise
        logger.debug(f"[{self.service_name}] {method} {path} -> {response.status_code}")
        return response

    async def get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make a GET request."""
        return await self._request("GET", path, params=params, **kwargs)

    async def post(
        self,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make a POST request."""
        return await self._request("POST", path, json=json, **kwargs)

    async def put(
        self,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make a PUT request."""
        return await self._request("PUT", path, json=json, **kwargs)

    async def delete(
        self,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make a DELETE request."""
        return await self._request("DELETE", path, **kwargs)
