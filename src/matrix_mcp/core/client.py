"""HTTP client for the Matrix REST API.

Every call issues exactly one request, following any redirects the API
answers with. There is no retry, backoff or caching; a failure surfaces to
the caller immediately.

Example usage:
    client = MatrixClient(base_url="https://matrix.loot42.com", api_key="...")
    task = await client.api_fetch("/api/task/42")
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

import httpx

from matrix_mcp.core.errors import MatrixAPIError

if TYPE_CHECKING:  # pragma: no cover - import-time typing only
    from matrix_mcp.config import MatrixConfig

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://matrix.loot42.com"
API_KEY_HEADER = "x-api-key"


class MatrixClient:
    """Thin async wrapper around the Matrix REST API.

    Attributes:
        base_url: API base URL, without trailing slash
        headers: Header set sent with every request

    Example:
        client = MatrixClient.from_config(config)
        messages = await client.api_fetch("/api/messages?since=1700000000000")
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_key: str = "",
        *,
        headers: Optional[Mapping[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: API base URL (default: https://matrix.loot42.com)
            api_key: Value of the x-api-key header
            headers: Shared header set; built from ``api_key`` when omitted
            transport: Optional httpx transport (used by tests to mock the API)
        """
        self._base_url = base_url.rstrip("/")
        if headers is None:
            headers = {"Content-Type": "application/json", API_KEY_HEADER: api_key}
        self._headers: Dict[str, str] = dict(headers)
        self._transport = transport

    @classmethod
    def from_config(
        cls,
        config: "MatrixConfig",
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "MatrixClient":
        """Build a client from the server configuration."""
        return cls(
            base_url=config.base_url,
            headers=config.build_headers(),
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self._headers)

    async def api_fetch(
        self,
        path: str,
        *,
        method: str = "GET",
        body: Optional[Any] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """Issue one request against the Matrix API and return its JSON body.

        Args:
            path: Request path, already including any query string
            method: HTTP method (default: GET)
            body: JSON-serializable request body, sent compact
            headers: Per-call header overrides; they win over the shared
                headers key by key

        Returns:
            Parsed JSON response body

        Raises:
            MatrixAPIError: If the API answered with a non-2xx status
            httpx.RequestError: On network failure
            json.JSONDecodeError: If a 2xx response body is not JSON
        """
        url = f"{self._base_url}{path}"
        merged_headers = {**self._headers, **(headers or {})}
        content = None
        if body is not None:
            content = json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")

        logger.debug("Matrix API request: %s %s", method, path)

        async with httpx.AsyncClient(
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            response = await client.request(
                method,
                url,
                headers=merged_headers,
                content=content,
            )

        try:
            payload = response.json()
        except json.JSONDecodeError:
            if not response.is_success:
                raise MatrixAPIError(response.status_code, text=response.text)
            raise

        if not response.is_success:
            logger.debug(
                "Matrix API error response: %s %s -> %s",
                method,
                path,
                response.status_code,
            )
            raise MatrixAPIError(response.status_code, payload)

        return payload
