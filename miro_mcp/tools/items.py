"""Generic board item and tag tools."""

from typing import Optional

from pydantic import Field

from ..formatters import format_response, format_success
from ..models import ItemType, Page
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
    compact,
)

# ─── Input Models ────────────────────────────────────────────────────────────


class ListItemsInput(BoardInput, PaginationMixin, FormatMixin):
    type: Optional[ItemType] = Field(default=None, description="Filter by item type")


class GetItemInput(BoardItemInput, FormatMixin):
    pass


class UpdateItemPositionInput(BoardItemInput):
    x: float = Field(..., description="X coordinate")
    y: float = Field(..., description="Y coordinate")
    parent_id: Optional[str] = Field(default=None, description="Parent item ID (e.g., a frame)")


class ListTagsInput(BoardInput, PaginationMixin, FormatMixin):
    pass


class TagInput(BoardInput):
    tag_id: str = Field(..., description="Tag ID", min_length=1)


class GetTagInput(TagInput, FormatMixin):
    pass


class CreateTagInput(BoardInput):
    title: str = Field(..., description="Tag title", min_length=1, max_length=120)
    fill_color: Optional[str] = Field(default=None, description="Tag color (e.g., 'red', 'light_green', 'blue')")


class UpdateTagInput(TagInput):
    title: Optional[str] = Field(default=None, description="New tag title", max_length=120)
    fill_color: Optional[str] = Field(default=None, description="New tag color")


class ItemTagInput(BoardItemInput):
    tag_id: str = Field(..., description="Tag ID", min_length=1)


class ItemsByTagInput(TagInput, PaginationMixin, FormatMixin):
    pass


class ItemTagsInput(BoardItemInput, FormatMixin):
    pass


# ─── Items ───────────────────────────────────────────────────────────────────


@registry.tool(name="miro_list_items", annotations=annotations(READ_ONLY, "List Board Items"))
async def miro_list_items(ctx: ToolContext, params: ListItemsInput) -> str:
    """List all items on a Miro board.

    Args:
      - boardId: Board ID
      - limit: Number of items to return (1-100, default: configured page size)
      - cursor: Pagination cursor
      - type: Filter by item type (sticky_note, shape, text, card, image, frame, connector, embed, app_card, document)
      - format: Response format ('json' or 'markdown')

    Returns:
      Paginated list of items on the board.
    """
    page = await ctx.client.list_items(params.board_id, limit=params.limit, cursor=params.cursor, item_type=params.type)
    return format_response(page, params.format, "items", limit=ctx.config.character_limit)


@registry.tool(name="miro_get_item", annotations=annotations(READ_ONLY, "Get Board Item"))
async def miro_get_item(ctx: ToolContext, params: GetItemInput) -> str:
    """Get any item on a board by ID, including its type, content, position, and style."""
    item = await ctx.client.get_item(params.board_id, params.item_id)
    return format_response(item, params.format, "item")


@registry.tool(name="miro_update_item_position", annotations=annotations(UPDATES, "Move Board Item"))
async def miro_update_item_position(ctx: ToolContext, params: UpdateItemPositionInput) -> str:
    """Move an item on a Miro board, optionally into a parent such as a frame.

    Args:
      - boardId: Board ID
      - itemId: Item ID
      - x: New X coordinate
      - y: New Y coordinate
      - parentId: Optional parent item ID (e.g., frame ID)
    """
    item = await ctx.client.update_item_position(
        params.board_id, params.item_id, params.x, params.y, parent_id=params.parent_id
    )
    return format_success("Item position updated", "item", item)


@registry.tool(name="miro_delete_item", annotations=annotations(DELETES, "Delete Board Item"))
async def miro_delete_item(ctx: ToolContext, params: BoardItemInput) -> str:
    """Delete any item from a Miro board."""
    await ctx.client.delete_item(params.board_id, params.item_id)
    return format_success(f"Item {params.item_id} deleted")


# ─── Tags ────────────────────────────────────────────────────────────────────


@registry.tool(name="miro_list_tags", annotations=annotations(READ_ONLY, "List Board Tags"))
async def miro_list_tags(ctx: ToolContext, params: ListTagsInput) -> str:
    """List all tags on a Miro board with their IDs, titles, and colors."""
    page = await ctx.client.list_tags(params.board_id, limit=params.limit, cursor=params.cursor)
    return format_response(page, params.format, "tags", limit=ctx.config.character_limit)


@registry.tool(name="miro_create_tag", annotations=annotations(CREATES, "Create Tag"))
async def miro_create_tag(ctx: ToolContext, params: CreateTagInput) -> str:
    """Create a tag on a Miro board.

    Args:
      - boardId: Board ID
      - title: Tag title (required)
      - fillColor: Tag color (e.g., "red", "yellow", "green", "blue", "cyan", "magenta", "gray", "violet", "light_green")
    """
    tag = await ctx.client.create_tag(params.board_id, compact({"title": params.title, "fillColor": params.fill_color}))
    return format_success("Tag created", "tag", tag)


@registry.tool(name="miro_get_tag", annotations=annotations(READ_ONLY, "Get Tag"))
async def miro_get_tag(ctx: ToolContext, params: GetTagInput) -> str:
    """Get a specific tag from a Miro board."""
    tag = await ctx.client.get_tag(params.board_id, params.tag_id)
    return format_response(tag, params.format, "tag")


@registry.tool(name="miro_update_tag", annotations=annotations(UPDATES, "Update Tag"))
async def miro_update_tag(ctx: ToolContext, params: UpdateTagInput) -> str:
    """Change the title or color of a tag."""
    body = compact({"title": params.title, "fillColor": params.fill_color})
    tag = await ctx.client.update_tag(params.board_id, params.tag_id, body)
    return format_success("Tag updated", "tag", tag)


@registry.tool(name="miro_delete_tag", annotations=annotations(DELETES, "Delete Tag"))
async def miro_delete_tag(ctx: ToolContext, params: TagInput) -> str:
    """Delete a tag from a Miro board. The tag is removed from every item carrying it."""
    await ctx.client.delete_tag(params.board_id, params.tag_id)
    return format_success(f"Tag {params.tag_id} deleted")


@registry.tool(name="miro_attach_tag", annotations=annotations(UPDATES, "Attach Tag to Item"))
async def miro_attach_tag(ctx: ToolContext, params: ItemTagInput) -> str:
    """Attach an existing tag to an item on a Miro board."""
    await ctx.client.attach_tag_to_item(params.board_id, params.item_id, params.tag_id)
    return format_success(f"Tag {params.tag_id} attached to item {params.item_id}")


@registry.tool(name="miro_remove_tag", annotations=annotations(DELETES, "Remove Tag from Item"))
async def miro_remove_tag(ctx: ToolContext, params: ItemTagInput) -> str:
    """Remove a tag from an item. The tag itself stays on the board."""
    await ctx.client.remove_tag_from_item(params.board_id, params.item_id, params.tag_id)
    return format_success(f"Tag {params.tag_id} removed from item {params.item_id}")


@registry.tool(name="miro_get_items_by_tag", annotations=annotations(READ_ONLY, "Get Items by Tag"))
async def miro_get_items_by_tag(ctx: ToolContext, params: ItemsByTagInput) -> str:
    """Get all items carrying a specific tag, paginated."""
    page = await ctx.client.get_items_by_tag(params.board_id, params.tag_id, limit=params.limit, cursor=params.cursor)
    return format_response(page, params.format, "items", limit=ctx.config.character_limit)


@registry.tool(name="miro_get_item_tags", annotations=annotations(READ_ONLY, "Get Item Tags"))
async def miro_get_item_tags(ctx: ToolContext, params: ItemTagsInput) -> str:
    """Get all tags attached to a specific item."""
    tags = await ctx.client.get_tags_from_item(params.board_id, params.item_id)
    if params.format == "markdown":
        return format_response(Page(data=tags), "markdown", "tags", limit=ctx.config.character_limit)
    return format_response({"tags": tags}, "json", "tags")
