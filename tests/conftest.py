"""
Root pytest configuration and shared fixtures.

The Matrix API is replaced by ``MatrixAPIStub``, an ``httpx.MockTransport``
handler that records every request and answers from a route table.
"""

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest
from mcp import types

from matrix_mcp.config import MatrixConfig
from matrix_mcp.core.client import MatrixClient
from matrix_mcp.tools.dispatch import ToolDispatcher

TEST_BASE_URL = "https://matrix.test"
TEST_API_KEY = "test-key"


class MatrixAPIStub:
    """Recording stand-in for the Matrix API.

    Routes are keyed by (method, raw path including query string). Unrouted
    requests get ``200 {"ok": true}``.
    """

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self._routes: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self._default: Dict[str, Any] = {"status_code": 200, "json": {"ok": True}}

    def respond(
        self,
        method: str,
        path: str,
        status_code: int = 200,
        *,
        json_body: Any = None,
        text: Optional[str] = None,
    ) -> None:
        route: Dict[str, Any] = {"status_code": status_code}
        if text is not None:
            route["text"] = text
        else:
            route["json"] = json_body
        self._routes[(method, path)] = route

    def respond_default(self, status_code: int = 200, *, json_body: Any = None) -> None:
        self._default = {"status_code": status_code, "json": json_body}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.raw_path.decode("ascii"))
        route = self._routes.get(key, self._default)
        return httpx.Response(**route)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def last_request(self) -> httpx.Request:
        assert self.requests, "no request was issued"
        return self.requests[-1]

    def last_path(self) -> str:
        return self.last_request.url.raw_path.decode("ascii")

    def last_json(self) -> Any:
        return json.loads(self.last_request.content)


def run(coro):
    """Drive a coroutine to completion from a sync test."""
    return asyncio.run(coro)


def result_text(result: types.CallToolResult) -> str:
    """Return the text of a single-item tool result."""
    assert len(result.content) == 1
    item = result.content[0]
    assert isinstance(item, types.TextContent)
    return item.text


@pytest.fixture
def matrix_api() -> MatrixAPIStub:
    return MatrixAPIStub()


@pytest.fixture
def client(matrix_api: MatrixAPIStub) -> MatrixClient:
    return MatrixClient(
        base_url=TEST_BASE_URL,
        api_key=TEST_API_KEY,
        transport=matrix_api.transport,
    )


@pytest.fixture
def dispatcher(client: MatrixClient) -> ToolDispatcher:
    return ToolDispatcher(client)


@pytest.fixture
def test_config() -> MatrixConfig:
    return MatrixConfig(
        api_key=TEST_API_KEY,
        base_url=TEST_BASE_URL,
        log_level="WARNING",
        server_name="matrix-mcp",
        server_version="1.0.0",
    )


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run with no matrix-mcp environment variables and no stray config file."""
    for name in (
        "MATRIX_API_KEY",
        "MATRIX_BASE_URL",
        "MATRIX_MCP_LOG_LEVEL",
        "MATRIX_MCP_STRUCTURED_LOGGING",
        "MATRIX_MCP_STRICT_ARGUMENTS",
        "MATRIX_MCP_CONFIG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture(autouse=True)
def reset_matrix_logger():
    """Drop handlers bound to captured streams between tests."""
    logger = logging.getLogger("matrix_mcp")
    level = logger.level
    yield
    logger.handlers.clear()
    logger.setLevel(level)
