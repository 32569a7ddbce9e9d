"""Tool catalogue and per-request dispatch.

Tools are registered once, at import time, on the process-wide ``registry``.
A ``ToolDispatcher`` is built per inbound request around that request's
``MiroClient``; it validates arguments, runs the handler and always returns a
``CallToolResult`` with exactly one text block. Failures never escape it.
"""

import inspect
import logging
import typing
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Mapping, Optional, Type

from mcp.types import CallToolResult, TextContent, Tool, ToolAnnotations
from pydantic import BaseModel, ValidationError

from .client import MiroClient
from .config import ServerConfig
from .errors import MiroApiError, error_details
from .formatters import format_error, to_json, truncate

logger = logging.getLogger("miro-mcp.registry")


@dataclass(frozen=True)
class ToolContext:
    """What a tool handler may use: this request's client and the server config."""

    client: MiroClient
    config: ServerConfig


Handler = Callable[[ToolContext, Any], Awaitable[str]]


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    input_model: Type[BaseModel]
    handler: Handler
    annotations: Mapping[str, Any] = field(default_factory=dict)

    @property
    def input_schema(self) -> Dict[str, Any]:
        return self.input_model.model_json_schema(by_alias=True)

    @property
    def title(self) -> Optional[str]:
        return self.annotations.get("title")

    @property
    def read_only(self) -> bool:
        return bool(self.annotations.get("readOnlyHint"))

    def to_mcp_tool(self) -> Tool:
        return Tool(
            name=self.name,
            title=self.title,
            description=self.description,
            inputSchema=self.input_schema,
            annotations=ToolAnnotations(**self.annotations) if self.annotations else None,
        )


class ToolRegistry:
    """Named tools, each bound to a pydantic input model and an async handler."""

    def __init__(self):
        self._tools: Dict[str, ToolDescriptor] = {}

    def tool(self, name: str, annotations: Optional[Mapping[str, Any]] = None):
        """Register ``async def handler(ctx, params: SomeInput) -> str``.

        The input model comes from the ``params`` annotation and the tool
        description from the handler's docstring.
        """

        def decorator(func: Handler) -> Handler:
            if name in self._tools:
                raise ValueError(f"Tool already registered: {name}")
            hints = typing.get_type_hints(func)
            input_model = hints.get("params")
            if not (isinstance(input_model, type) and issubclass(input_model, BaseModel)):
                raise TypeError(f"Tool {name} must annotate 'params' with a pydantic model")
            self._tools[name] = ToolDescriptor(
                name=name,
                description=inspect.getdoc(func) or "",
                input_model=input_model,
                handler=func,
                annotations=dict(annotations or {}),
            )
            return func

        return decorator

    def get(self, name: str) -> Optional[ToolDescriptor]:
        return self._tools.get(name)

    def names(self) -> List[str]:
        return list(self._tools)

    def mcp_tools(self) -> List[Tool]:
        return [descriptor.to_mcp_tool() for descriptor in self._tools.values()]

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools


registry = ToolRegistry()


def _text_result(text: str, is_error: bool) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)


def _validation_message(name: str, exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ())) or "input"
        problems.append(f"{location}: {err.get('msg', 'invalid value')}")
    return to_json({
        "error": f"Error: Invalid input for {name}: " + "; ".join(problems),
        "details": {"type": "ValidationError", "errors": problems},
    })


class ToolDispatcher:
    """Executes registered tools for one request's client."""

    def __init__(self, tools: ToolRegistry, client: MiroClient, config: ServerConfig):
        self._tools = tools
        self._context = ToolContext(client=client, config=config)

    @property
    def tools(self) -> ToolRegistry:
        return self._tools

    async def dispatch(self, name: str, arguments: Optional[Dict[str, Any]]) -> CallToolResult:
        descriptor = self._tools.get(name)
        if descriptor is None:
            logger.warning("Unknown tool requested: %s", name)
            return _text_result(to_json({"error": f"Error: Unknown tool: {name}"}), is_error=True)

        logger.info("Tool call: %s", name)
        try:
            params = descriptor.input_model.model_validate(arguments or {})
        except ValidationError as e:
            logger.warning("Invalid arguments for %s: %d error(s)", name, e.error_count())
            return _text_result(_validation_message(name, e), is_error=True)

        try:
            text = await descriptor.handler(self._context, params)
        except MiroApiError as e:
            logger.warning("Tool %s failed: %s %s", name, error_details(e), e.message)
            return _text_result(format_error(e), is_error=True)
        except Exception as e:
            logger.exception("Unexpected failure in tool %s", name)
            return _text_result(format_error(e), is_error=True)

        return _text_result(truncate(text, self._context.config.character_limit), is_error=False)
