"""Sticky note, shape, text, card and frame tools."""

from typing import Optional

from pydantic import Field

from ..formatters import format_response, format_success
from ..models import FrameFormat, ShapeType, StickyNoteShape, TextAlign
from ..registry import ToolContext, registry
from .common import (
    CREATES,
    DELETES,
    READ_ONLY,
    UPDATES,
    BoardInput,
    BoardItemInput,
    FormatMixin,
    PaginationMixin,
    annotations,
    geometry,
    item_payload,
    position,
)


class GetWidgetInput(BoardItemInput, FormatMixin):
    pass


class PlacementMixin(BoardInput):
    x: float = Field(default=0, description="X coordinate")
    y: float = Field(default=0, description="Y coordinate")


class MoveMixin(BoardItemInput):
    x: Optional[float] = Field(default=None, description="New X coordinate (applied together with y)")
    y: Optional[float] = Field(default=None, description="New Y coordinate (applied together with x)")


# ─── Sticky Notes ────────────────────────────────────────────────────────────


class CreateStickyNoteInput(PlacementMixin):
    content: str = Field(..., description="Sticky note text content", max_length=6000)
    shape: Optional[StickyNoteShape] = Field(default=None, description="Sticky note shape")
    fill_color: Optional[str] = Field(
        default=None,
        description="Background color (e.g., 'yellow', 'light_yellow', 'orange', 'green', 'cyan', 'blue', 'violet', 'red', 'gray')",
    )
    width: Optional[float] = Field(default=None, description="Width in pixels", gt=0)
    height: Optional[float] = Field(default=None, description="Height in pixels", gt=0)


class UpdateStickyNoteInput(MoveMixin):
    content: Optional[str] = Field(default=None, description="New text content", max_length=6000)
    fill_color: Optional[str] = Field(default=None, description="New background color")


@registry.tool(name="miro_create_sticky_note", annotations=annotations(CREATES, "Create Sticky Note"))
async def miro_create_sticky_note(ctx: ToolContext, params: CreateStickyNoteInput) -> str:
    """Create a sticky note on a Miro board.

    Args:
      - boardId: Board ID
      - content: Text content of the sticky note
      - x: X coordinate (default: 0)
      - y: Y coordinate (default: 0)
      - shape: Shape of sticky note (square, rectangle)
      - fillColor: Background color
      - width: Width in pixels
      - height: Height in pixels

    Returns:
      The created sticky note with its ID.
    """
    body = item_payload(
        data={"content": params.content, "shape": params.shape},
        style={"fillColor": params.fill_color},
        pos=position(params.x, params.y),
        geom=geometry(params.width, params.height),
    )
    sticky_note = await ctx.client.create_sticky_note(params.board_id, body)
    return format_success("Sticky note created", "stickyNote", sticky_note)


@registry.tool(name="miro_get_sticky_note", annotations=annotations(READ_ONLY, "Get Sticky Note"))
async def miro_get_sticky_note(ctx: ToolContext, params: GetWidgetInput) -> str:
    """Get a sticky note, including its content, position, and style."""
    sticky_note = await ctx.client.get_sticky_note(params.board_id, params.item_id)
    return format_response(sticky_note, params.format, "sticky_note")


@registry.tool(name="miro_update_sticky_note", annotations=annotations(UPDATES, "Update Sticky Note"))
async def miro_update_sticky_note(ctx: ToolContext, params: UpdateStickyNoteInput) -> str:
    """Update the content, position, or color of a sticky note."""
    body = item_payload(
        data={"content": params.content},
        style={"fillColor": params.fill_color},
        pos=position(params.x, params.y),
    )
    sticky_note = await ctx.client.update_sticky_note(params.board_id, params.item_id, body)
    return format_success("Sticky note updated", "stickyNote", sticky_note)


@registry.tool(name="miro_delete_sticky_note", annotations=annotations(DELETES, "Delete Sticky Note"))
async def miro_delete_sticky_note(ctx: ToolContext, params: BoardItemInput) -> str:
    """Delete a sticky note from a Miro board."""
    await ctx.client.delete_sticky_note(params.board_id, params.item_id)
    return format_success(f"Sticky note {params.item_id} deleted")


# ─── Shapes ──────────────────────────────────────────────────────────────────


class CreateShapeInput(PlacementMixin):
    shape: ShapeType = Field(..., description="Shape type")
    width: float = Field(default=100, description="Width in pixels", gt=0)
    height: float = Field(default=100, description="Height in pixels", gt=0)
    content: Optional[str] = Field(default=None, description="Text content inside the shape")
    fill_color: Optional[str] = Field(default=None, description="Fill color")
    border_color: Optional[str] = Field(default=None, description="Border color")
    border_width: Optional[str] = Field(default=None, description="Border width")


class UpdateShapeInput(MoveMixin):
    content: Optional[str] = Field(default=None, description="New text content")
    width: Optional[float] = Field(default=None, description="New width", gt=0)
    height: Optional[float] = Field(default=None, description="New height", gt=0)
    fill_color: Optional[str] = Field(default=None, description="New fill color")


@registry.tool(name="miro_create_shape", annotations=annotations(CREATES, "Create Shape"))
async def miro_create_shape(ctx: ToolContext, params: CreateShapeInput) -> str:
    """Create a shape on a Miro board.

    Args:
      - boardId: Board ID
      - shape: Shape type (rectangle, round_rectangle, circle, triangle, rhombus, star, cloud, ...)
      - x, y: Coordinates (default: 0)
      - width, height: Size in pixels (default: 100)
      - content: Text content inside the shape
      - fillColor, borderColor, borderWidth: Style
    """
    body = item_payload(
        data={"shape": params.shape, "content": params.content},
        style={
            "fillColor": params.fill_color,
            "borderColor": params.border_color,
            "borderWidth": params.border_width,
        },
        pos=position(params.x, params.y),
        geom=geometry(params.width, params.height),
    )
    shape = await ctx.client.create_shape(params.board_id, body)
    return format_success("Shape created", "shape", shape)


@registry.tool(name="miro_get_shape", annotations=annotations(READ_ONLY, "Get Shape"))
async def miro_get_shape(ctx: ToolContext, params: GetWidgetInput) -> str:
    """Get a shape from a Miro board."""
    shape = await ctx.client.get_shape(params.board_id, params.item_id)
    return format_response(shape, params.format, "shape")


@registry.tool(name="miro_update_shape", annotations=annotations(UPDATES, "Update Shape"))
async def miro_update_shape(ctx: ToolContext, params: UpdateShapeInput) -> str:
    """Update the content, position, size, or fill color of a shape."""
    body = item_payload(
        data={"content": params.content},
        style={"fillColor": params.fill_color},
        pos=position(params.x, params.y),
        geom=geometry(params.width, params.height),
    )
    shape = await ctx.client.update_shape(params.board_id, params.item_id, body)
    return format_success("Shape updated", "shape", shape)


@registry.tool(name="miro_delete_shape", annotations=annotations(DELETES, "Delete Shape"))
async def miro_delete_shape(ctx: ToolContext, params: BoardItemInput) -> str:
    """Delete a shape from a Miro board."""
    await ctx.client.delete_shape(params.board_id, params.item_id)
    return format_success(f"Shape {params.item_id} deleted")


# ─── Text ────────────────────────────────────────────────────────────────────


class CreateTextInput(PlacementMixin):
    content: str = Field(..., description="Text content (supports simple HTML formatting)")
    width: Optional[float] = Field(default=None, description="Width in pixels", gt=0)
    font_size: Optional[str] = Field(default=None, description="Font size")
    text_align: Optional[TextAlign] = Field(default=None, description="Text alignment")
    color: Optional[str] = Field(default=None, description="Text color")


class UpdateTextInput(MoveMixin):
    content: Optional[str] = Field(default=None, description="New text content")
    font_size: Optional[str] = Field(default=None, description="New font size")
    color: Optional[str] = Field(default=None, description="New text color")


@registry.tool(name="miro_create_text", annotations=annotations(CREATES, "Create Text"))
async def miro_create_text(ctx: ToolContext, params: CreateTextInput) -> str:
    """Create a free-standing text item on a Miro board."""
    body = item_payload(
        data={"content": params.content},
        style={"fontSize": params.font_size, "textAlign": params.text_align, "color": params.color},
        pos=position(params.x, params.y),
        geom=geometry(params.width),
    )
    text = await ctx.client.create_text(params.board_id, body)
    return format_success("Text created", "text", text)


@registry.tool(name="miro_get_text", annotations=annotations(READ_ONLY, "Get Text"))
async def miro_get_text(ctx: ToolContext, params: GetWidgetInput) -> str:
    """Get a text item from a Miro board."""
    text = await ctx.client.get_text(params.board_id, params.item_id)
    return format_response(text, params.format, "text")


@registry.tool(name="miro_update_text", annotations=annotations(UPDATES, "Update Text"))
async def miro_update_text(ctx: ToolContext, params: UpdateTextInput) -> str:
    """Update the content, position, font size, or color of a text item."""
    body = item_payload(
        data={"content": params.content},
        style={"fontSize": params.font_size, "color": params.color},
        pos=position(params.x, params.y),
    )
    text = await ctx.client.update_text(params.board_id, params.item_id, body)
    return format_success("Text updated", "text", text)


@registry.tool(name="miro_delete_text", annotations=annotations(DELETES, "Delete Text"))
async def miro_delete_text(ctx: ToolContext, params: BoardItemInput) -> str:
    """Delete a text item from a Miro board."""
    await ctx.client.delete_text(params.board_id, params.item_id)
    return format_success(f"Text {params.item_id} deleted")


# ─── Cards ───────────────────────────────────────────────────────────────────


class CreateCardInput(PlacementMixin):
    title: str = Field(..., description="Card title", min_length=1)
    description: Optional[str] = Field(default=None, description="Card description")
    due_date: Optional[str] = Field(default=None, description="Due date in ISO 8601 format")
    assignee_id: Optional[str] = Field(default=None, description="Assignee user ID")


class UpdateCardInput(MoveMixin):
    title: Optional[str] = Field(default=None, description="New card title")
    description: Optional[str] = Field(default=None, description="New card description")
    due_date: Optional[str] = Field(default=None, description="New due date in ISO 8601 format")
    assignee_id: Optional[str] = Field(default=None, description="New assignee user ID")


def _card_data(params) -> dict:
    return {
        "title": params.title,
        "description": params.description,
        "dueDate": params.due_date,
        "assigneeId": params.assignee_id,
    }


@registry.tool(name="miro_create_card", annotations=annotations(CREATES, "Create Card"))
async def miro_create_card(ctx: ToolContext, params: CreateCardInput) -> str:
    """Create a card (a task-style item with title, description, due date and assignee)."""
    body = item_payload(data=_card_data(params), pos=position(params.x, params.y))
    card = await ctx.client.create_card(params.board_id, body)
    return format_success("Card created", "card", card)


@registry.tool(name="miro_get_card", annotations=annotations(READ_ONLY, "Get Card"))
async def miro_get_card(ctx: ToolContext, params: GetWidgetInput) -> str:
    """Get a card from a Miro board."""
    card = await ctx.client.get_card(params.board_id, params.item_id)
    return format_response(card, params.format, "card")


@registry.tool(name="miro_update_card", annotations=annotations(UPDATES, "Update Card"))
async def miro_update_card(ctx: ToolContext, params: UpdateCardInput) -> str:
    """Update a card's fields or position."""
    body = item_payload(data=_card_data(params), pos=position(params.x, params.y))
    card = await ctx.client.update_card(params.board_id, params.item_id, body)
    return format_success("Card updated", "card", card)


@registry.tool(name="miro_delete_card", annotations=annotations(DELETES, "Delete Card"))
async def miro_delete_card(ctx: ToolContext, params: BoardItemInput) -> str:
    """Delete a card from a Miro board."""
    await ctx.client.delete_card(params.board_id, params.item_id)
    return format_success(f"Card {params.item_id} deleted")


# ─── Frames ──────────────────────────────────────────────────────────────────


class CreateFrameInput(PlacementMixin):
    title: Optional[str] = Field(default=None, description="Frame title")
    width: float = Field(default=800, description="Width in pixels", gt=0)
    height: float = Field(default=600, description="Height in pixels", gt=0)
    format: Optional[FrameFormat] = Field(default=None, description="Frame format")
    fill_color: Optional[str] = Field(default=None, description="Background color")


class UpdateFrameInput(MoveMixin):
    title: Optional[str] = Field(default=None, description="New frame title")
    width: Optional[float] = Field(default=None, description="New width", gt=0)
    height: Optional[float] = Field(default=None, description="New height", gt=0)
    fill_color: Optional[str] = Field(default=None, description="New background color")


class FrameItemsInput(BoardInput, PaginationMixin, FormatMixin):
    frame_id: str = Field(..., description="Frame ID", min_length=1)


@registry.tool(name="miro_create_frame", annotations=annotations(CREATES, "Create Frame"))
async def miro_create_frame(ctx: ToolContext, params: CreateFrameInput) -> str:
    """Create a frame to group items on a Miro board.

    Args:
      - boardId: Board ID
      - title: Frame title
      - x, y: Coordinates (default: 0)
      - width, height: Size in pixels (default: 800 x 600)
      - format: Frame format (custom, desktop, phone, a4, letter, square, freeform)
      - fillColor: Background color
    """
    body = item_payload(
        data={"title": params.title, "format": params.format},
        style={"fillColor": params.fill_color},
        pos=position(params.x, params.y),
        geom=geometry(params.width, params.height),
    )
    frame = await ctx.client.create_frame(params.board_id, body)
    return format_success("Frame created", "frame", frame)


@registry.tool(name="miro_get_frame", annotations=annotations(READ_ONLY, "Get Frame"))
async def miro_get_frame(ctx: ToolContext, params: GetWidgetInput) -> str:
    """Get a frame, including its title, position, and size."""
    frame = await ctx.client.get_frame(params.board_id, params.item_id)
    return format_response(frame, params.format, "frame")


@registry.tool(name="miro_update_frame", annotations=annotations(UPDATES, "Update Frame"))
async def miro_update_frame(ctx: ToolContext, params: UpdateFrameInput) -> str:
    """Update a frame's title, position, size, or background color."""
    body = item_payload(
        data={"title": params.title},
        style={"fillColor": params.fill_color},
        pos=position(params.x, params.y),
        geom=geometry(params.width, params.height),
    )
    frame = await ctx.client.update_frame(params.board_id, params.item_id, body)
    return format_success("Frame updated", "frame", frame)


@registry.tool(name="miro_delete_frame", annotations=annotations(DELETES, "Delete Frame"))
async def miro_delete_frame(ctx: ToolContext, params: BoardItemInput) -> str:
    """Delete a frame from a Miro board."""
    await ctx.client.delete_frame(params.board_id, params.item_id)
    return format_success(f"Frame {params.item_id} deleted")


@registry.tool(name="miro_get_frame_items", annotations=annotations(READ_ONLY, "Get Frame Items"))
async def miro_get_frame_items(ctx: ToolContext, params: FrameItemsInput) -> str:
    """List the items contained in a frame, paginated."""
    page = await ctx.client.get_frame_items(params.board_id, params.frame_id, limit=params.limit, cursor=params.cursor)
    return format_response(page, params.format, "items", limit=ctx.config.character_limit)
