"""Connector tools: lines joining two board items."""

from typing import Optional

from pydantic import Field

from ..formatters import format_response, format_success
from ..models import ConnectorShape, StrokeCap
from ..registry import ToolContext, registry
from .common import (
    CREATES,
    DELETES,
    READ_ONLY,
    UPDATES,
    BoardInput,
    FormatMixin,
    PaginationMixin,
    ToolInput,
    annotations,
    compact,
)

# ─── Input Models ────────────────────────────────────────────────────────────


class ListConnectorsInput(BoardInput, PaginationMixin, FormatMixin):
    pass


class ConnectorInput(BoardInput):
    connector_id: str = Field(..., description="Connector ID", min_length=1)


class GetConnectorInput(ConnectorInput, FormatMixin):
    pass


class ConnectorStyleMixin(ToolInput):
    shape: Optional[ConnectorShape] = Field(default=None, description="Line shape")
    start_stroke_cap: Optional[StrokeCap] = Field(default=None, description="Decoration at the start of the line")
    end_stroke_cap: Optional[StrokeCap] = Field(default=None, description="Decoration at the end of the line")
    stroke_color: Optional[str] = Field(default=None, description="Line color (hex, e.g. '#1a1a1a')")
    stroke_width: Optional[str] = Field(default=None, description="Line width (e.g. '2')")
    caption: Optional[str] = Field(default=None, description="Text shown on the line", max_length=200)


class CreateConnectorInput(BoardInput, ConnectorStyleMixin):
    start_item_id: str = Field(..., description="ID of the item the connector starts from", min_length=1)
    end_item_id: str = Field(..., description="ID of the item the connector ends at", min_length=1)


class UpdateConnectorInput(ConnectorInput, ConnectorStyleMixin):
    pass


def _connector_body(params: ConnectorStyleMixin, **extra) -> dict:
    style = compact({
        "startStrokeCap": params.start_stroke_cap,
        "endStrokeCap": params.end_stroke_cap,
        "strokeColor": params.stroke_color,
        "strokeWidth": params.stroke_width,
    })
    return compact({
        **extra,
        "shape": params.shape,
        "style": style or None,
        "captions": [{"content": params.caption}] if params.caption else None,
    })


# ─── Connectors ──────────────────────────────────────────────────────────────


@registry.tool(name="miro_list_connectors", annotations=annotations(READ_ONLY, "List Connectors"))
async def miro_list_connectors(ctx: ToolContext, params: ListConnectorsInput) -> str:
    """List the connectors on a Miro board with their start and end items."""
    page = await ctx.client.list_connectors(params.board_id, limit=params.limit, cursor=params.cursor)
    return format_response(page, params.format, "connectors", limit=ctx.config.character_limit)


@registry.tool(name="miro_create_connector", annotations=annotations(CREATES, "Create Connector"))
async def miro_create_connector(ctx: ToolContext, params: CreateConnectorInput) -> str:
    """Connect two items on a Miro board with a line.

    Args:
      - boardId: Board ID
      - startItemId: ID of the start item
      - endItemId: ID of the end item
      - shape: Line shape (straight, elbowed, curved)
      - startStrokeCap / endStrokeCap: Line end decorations (e.g., none, arrow, stealth, diamond, erd_one)
      - strokeColor: Line color
      - strokeWidth: Line width
      - caption: Text shown on the line

    Returns:
      The created connector with its ID.
    """
    body = _connector_body(
        params,
        startItem={"id": params.start_item_id},
        endItem={"id": params.end_item_id},
    )
    connector = await ctx.client.create_connector(params.board_id, body)
    return format_success("Connector created", "connector", connector)


@registry.tool(name="miro_get_connector", annotations=annotations(READ_ONLY, "Get Connector"))
async def miro_get_connector(ctx: ToolContext, params: GetConnectorInput) -> str:
    """Get a connector by ID."""
    connector = await ctx.client.get_connector(params.board_id, params.connector_id)
    return format_response(connector, params.format, "connector")


@registry.tool(name="miro_update_connector", annotations=annotations(UPDATES, "Update Connector"))
async def miro_update_connector(ctx: ToolContext, params: UpdateConnectorInput) -> str:
    """Change a connector's shape, line decorations, color, width, or caption."""
    connector = await ctx.client.update_connector(params.board_id, params.connector_id, _connector_body(params))
    return format_success("Connector updated", "connector", connector)


@registry.tool(name="miro_delete_connector", annotations=annotations(DELETES, "Delete Connector"))
async def miro_delete_connector(ctx: ToolContext, params: ConnectorInput) -> str:
    """Delete a connector from a Miro board. The connected items are kept."""
    await ctx.client.delete_connector(params.board_id, params.connector_id)
    return format_success(f"Connector {params.connector_id} deleted")
