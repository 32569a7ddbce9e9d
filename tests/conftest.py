import asyncio
import json
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

import miro_mcp.tools  # noqa: F401
from miro_mcp.client import MiroClient
from miro_mcp.config import ServerConfig
from miro_mcp.credentials import TenantCredentials
from miro_mcp.registry import ToolDispatcher, registry

TOKEN = "tok-123"


class FakeMiro:
    """Canned Miro API responses keyed by method and path, recording every request."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._routes: Dict[Tuple[str, str], Tuple[int, Any, Dict[str, str]]] = {}

    def route(self, method: str, path: str, status: int = 200, json: Any = None, headers: Optional[Dict[str, str]] = None):
        self._routes[(method, "/v2" + path)] = (status, json, headers or {})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body, headers = self._routes.get(
            (request.method, request.url.path), (404, {"message": "Not found"}, {})
        )
        if body is None:
            return httpx.Response(status, headers=headers)
        return httpx.Response(status, json=body, headers=headers)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture
def fake_miro():
    return FakeMiro()


@pytest.fixture
def config():
    return ServerConfig()


@pytest.fixture
def client(fake_miro, config):
    return MiroClient(TenantCredentials(access_token=TOKEN), config, transport=fake_miro.transport)


@pytest.fixture
def dispatcher(client, config):
    return ToolDispatcher(registry, client, config)


@pytest.fixture
def call(dispatcher):
    """Run a tool and return ``(result, parsed_text)``; parsed text is None for non-JSON output."""

    def _call(name: str, arguments: Optional[Dict[str, Any]] = None):
        result = asyncio.run(dispatcher.dispatch(name, arguments))
        try:
            parsed = json.loads(result.content[0].text)
        except ValueError:
            parsed = None
        return result, parsed

    return _call
