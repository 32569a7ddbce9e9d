"""Transport front door for the Miro MCP server.

HTTP mode serves many tenants from one process: every ``POST /mcp`` carries
its own ``X-Miro-Access-Token`` and gets its own client, dispatcher and MCP
server, which are discarded once the response is sent. stdio mode serves a
single tenant whose token comes from ``MIRO_ACCESS_TOKEN``.
"""

import argparse
import asyncio
import logging
import sys
from typing import Any, Callable, Dict, List, Mapping, Optional

import uvicorn
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from mcp.types import CallToolResult, Tool
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from . import SERVER_NAME, __version__
from . import tools  # noqa: F401
from .client import MiroClient
from .config import ServerConfig
from .credentials import (
    REQUIRED_HEADERS,
    TenantCredentials,
    credentials_from_env,
    resolve_credentials,
    validate_credentials,
)
from .errors import MissingCredentialsError
from .registry import ToolDispatcher, ToolRegistry, registry

logger = logging.getLogger("miro-mcp")

ClientFactory = Callable[[TenantCredentials, ServerConfig], MiroClient]

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


# ─── MCP Server ──────────────────────────────────────────────────────────────


def build_mcp_server(dispatcher: ToolDispatcher) -> Server:
    """A fresh MCP server whose tool calls run through ``dispatcher``."""
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return dispatcher.tools.mcp_tools()

    @server.call_tool()
    async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> CallToolResult:
        return await dispatcher.dispatch(name, arguments)

    return server


# ─── HTTP Front Door ─────────────────────────────────────────────────────────


def _unauthorized(message: str) -> JSONResponse:
    return JSONResponse(
        {"error": "Unauthorized", "message": message, "required_headers": list(REQUIRED_HEADERS)},
        status_code=401,
    )


class MiroMcpEndpoint:
    """ASGI endpoint for ``POST /mcp``."""

    def __init__(
        self,
        config: ServerConfig,
        client_factory: ClientFactory = MiroClient,
        tools: ToolRegistry = registry,
    ):
        self._config = config
        self._client_factory = client_factory
        self._tools = tools

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)
        credentials = resolve_credentials(request.headers)
        try:
            validate_credentials(credentials)
        except MissingCredentialsError as e:
            logger.warning("Rejected MCP request without credentials")
            await _unauthorized(e.message)(scope, receive, send)
            return

        client = self._client_factory(credentials, self._config)
        dispatcher = ToolDispatcher(self._tools, client, self._config)
        manager = StreamableHTTPSessionManager(
            app=build_mcp_server(dispatcher),
            event_store=None,
            json_response=True,
            stateless=True,
        )
        async with manager.run():
            await manager.handle_request(scope, receive, send)


def _server_info(tools: ToolRegistry) -> Dict[str, Any]:
    return {
        "name": SERVER_NAME,
        "version": __version__,
        "description": "Multi-tenant Miro MCP Server",
        "endpoints": {
            "mcp": "/mcp (POST) - Streamable HTTP MCP endpoint",
            "health": "/health - Health check",
        },
        "authentication": {
            "description": "Pass Miro credentials via request headers",
            "required_headers": {REQUIRED_HEADERS[0]: "Miro OAuth access token"},
        },
        "tools": tools.names(),
    }


def create_app(
    config: Optional[ServerConfig] = None,
    client_factory: ClientFactory = MiroClient,
    tools: ToolRegistry = registry,
) -> Starlette:
    """Build the Starlette application serving ``/mcp``, ``/health`` and ``/``."""
    config = config or ServerConfig()

    async def health(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok", "server": SERVER_NAME})

    async def info(request: Request) -> JSONResponse:
        return JSONResponse(_server_info(tools))

    return Starlette(
        routes=[
            Route("/mcp", MiroMcpEndpoint(config, client_factory, tools), methods=["POST"]),
            Route("/health", health, methods=["GET"]),
            Route("/", info, methods=["GET"]),
        ],
    )


# ─── stdio ───────────────────────────────────────────────────────────────────


async def run_stdio(
    config: ServerConfig,
    environ: Optional[Mapping[str, str]] = None,
    client_factory: ClientFactory = MiroClient,
) -> None:
    """Serve a single tenant over stdio."""
    credentials = credentials_from_env(environ)
    validate_credentials(credentials)
    dispatcher = ToolDispatcher(registry, client_factory(credentials, config), config)
    server = build_mcp_server(dispatcher)
    logger.info("Serving %d tools over stdio", len(registry))
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


# ─── Entry Point ─────────────────────────────────────────────────────────────


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="miro-mcp", description="Multi-tenant MCP server for Miro")
    parser.add_argument("--transport", choices=["http", "stdio"], default="http")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    config = ServerConfig.from_env()

    # stdout carries the stdio protocol stream
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    if args.transport == "stdio":
        try:
            asyncio.run(run_stdio(config))
        except MissingCredentialsError:
            logger.error("MIRO_ACCESS_TOKEN environment variable is not set")
            return 1
        return 0

    logger.info("Starting %s %s on %s:%d", SERVER_NAME, __version__, args.host, args.port)
    uvicorn.run(create_app(config), host=args.host, port=args.port, log_level=config.log_level.lower())
    return 0
