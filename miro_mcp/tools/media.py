"""Image, embed, app card and document tools."""

from typing import Optional

from pydantic import AnyHttpUrl, Field

from ..formatters import format_response, format_success
from ..models import AppCardStatus, EmbedMode
from ..registry import ToolContext, registry
from .common import (
    CREATES,
    DELETES,
    READ_ONLY,
    UPDATES,
    BoardItemInput,
    annotations,
    geometry,
    item_payload,
    position,
)
from .widgets import GetWidgetInput, MoveMixin, PlacementMixin


class UrlPlacementMixin(PlacementMixin):
    url: AnyHttpUrl = Field(..., description="Publicly accessible URL")


# ─── Images ──────────────────────────────────────────────────────────────────


class CreateImageInput(UrlPlacementMixin):
    width: Optional[float] = Field(default=None, description="Width in pixels", gt=0)
    height: Optional[float] = Field(default=None, description="Height in pixels", gt=0)
    title: Optional[str] = Field(default=None, description="Image title")


class UpdateImageInput(MoveMixin):
    width: Optional[float] = Field(default=None, description="New width", gt=0)
    height: Optional[float] = Field(default=None, description="New height", gt=0)
    title: Optional[str] = Field(default=None, description="New image title")


@registry.tool(name="miro_create_image", annotations=annotations(CREATES, "Create Image"))
async def miro_create_image(ctx: ToolContext, params: CreateImageInput) -> str:
    """Add an image to a Miro board from a publicly accessible URL."""
    body = item_payload(
        data={"url": str(params.url), "title": params.title},
        pos=position(params.x, params.y),
        geom=geometry(params.width, params.height),
    )
    image = await ctx.client.create_image_from_url(params.board_id, body)
    return format_success("Image created", "image", image)


@registry.tool(name="miro_get_image", annotations=annotations(READ_ONLY, "Get Image"))
async def miro_get_image(ctx: ToolContext, params: GetWidgetInput) -> str:
    """Get an image item from a Miro board."""
    image = await ctx.client.get_image(params.board_id, params.item_id)
    return format_response(image, params.format, "image")


@registry.tool(name="miro_update_image", annotations=annotations(UPDATES, "Update Image"))
async def miro_update_image(ctx: ToolContext, params: UpdateImageInput) -> str:
    """Update an image's title, position, or size."""
    body = item_payload(
        data={"title": params.title},
        pos=position(params.x, params.y),
        geom=geometry(params.width, params.height),
    )
    image = await ctx.client.update_image(params.board_id, params.item_id, body)
    return format_success("Image updated", "image", image)


@registry.tool(name="miro_delete_image", annotations=annotations(DELETES, "Delete Image"))
async def miro_delete_image(ctx: ToolContext, params: BoardItemInput) -> str:
    """Delete an image from a Miro board."""
    await ctx.client.delete_image(params.board_id, params.item_id)
    return format_success(f"Image {params.item_id} deleted")


# ─── Embeds ──────────────────────────────────────────────────────────────────


class CreateEmbedInput(UrlPlacementMixin):
    width: Optional[float] = Field(default=None, description="Width in pixels", gt=0)
    height: Optional[float] = Field(default=None, description="Height in pixels", gt=0)
    mode: Optional[EmbedMode] = Field(default=None, description="Display mode")


class UpdateEmbedInput(MoveMixin):
    width: Optional[float] = Field(default=None, description="New width", gt=0)
    height: Optional[float] = Field(default=None, description="New height", gt=0)


@registry.tool(name="miro_create_embed", annotations=annotations(CREATES, "Create Embed"))
async def miro_create_embed(ctx: ToolContext, params: CreateEmbedInput) -> str:
    """Embed external content (video, document, web page from a supported service) on a board.

    Args:
      - boardId: Board ID
      - url: URL to embed
      - x, y: Coordinates (default: 0)
      - width, height: Size in pixels
      - mode: Display mode (inline, modal)
    """
    body = item_payload(
        data={"url": str(params.url), "mode": params.mode},
        pos=position(params.x, params.y),
        geom=geometry(params.width, params.height),
    )
    embed = await ctx.client.create_embed(params.board_id, body)
    return format_success("Embed created", "embed", embed)


@registry.tool(name="miro_get_embed", annotations=annotations(READ_ONLY, "Get Embed"))
async def miro_get_embed(ctx: ToolContext, params: GetWidgetInput) -> str:
    """Get an embed item from a Miro board."""
    embed = await ctx.client.get_embed(params.board_id, params.item_id)
    return format_response(embed, params.format, "embed")


@registry.tool(name="miro_update_embed", annotations=annotations(UPDATES, "Update Embed"))
async def miro_update_embed(ctx: ToolContext, params: UpdateEmbedInput) -> str:
    """Move or resize an embed."""
    body = item_payload(pos=position(params.x, params.y), geom=geometry(params.width, params.height))
    embed = await ctx.client.update_embed(params.board_id, params.item_id, body)
    return format_success("Embed updated", "embed", embed)


@registry.tool(name="miro_delete_embed", annotations=annotations(DELETES, "Delete Embed"))
async def miro_delete_embed(ctx: ToolContext, params: BoardItemInput) -> str:
    """Delete an embed from a Miro board."""
    await ctx.client.delete_embed(params.board_id, params.item_id)
    return format_success(f"Embed {params.item_id} deleted")


# ─── App Cards ───────────────────────────────────────────────────────────────


class CreateAppCardInput(PlacementMixin):
    title: str = Field(..., description="Card title", min_length=1)
    description: Optional[str] = Field(default=None, description="Card description")
    status: Optional[AppCardStatus] = Field(default=None, description="Card status")


class UpdateAppCardInput(MoveMixin):
    title: Optional[str] = Field(default=None, description="New card title")
    description: Optional[str] = Field(default=None, description="New card description")
    status: Optional[AppCardStatus] = Field(default=None, description="New card status")


@registry.tool(name="miro_create_app_card", annotations=annotations(CREATES, "Create App Card"))
async def miro_create_app_card(ctx: ToolContext, params: CreateAppCardInput) -> str:
    """Create an app card (a card linked to an external app) on a Miro board."""
    body = item_payload(
        data={"title": params.title, "description": params.description, "status": params.status},
        pos=position(params.x, params.y),
    )
    app_card = await ctx.client.create_app_card(params.board_id, body)
    return format_success("App card created", "appCard", app_card)


@registry.tool(name="miro_get_app_card", annotations=annotations(READ_ONLY, "Get App Card"))
async def miro_get_app_card(ctx: ToolContext, params: GetWidgetInput) -> str:
    """Get an app card from a Miro board."""
    app_card = await ctx.client.get_app_card(params.board_id, params.item_id)
    return format_response(app_card, params.format, "app_card")


@registry.tool(name="miro_update_app_card", annotations=annotations(UPDATES, "Update App Card"))
async def miro_update_app_card(ctx: ToolContext, params: UpdateAppCardInput) -> str:
    """Update an app card's title, description, status, or position."""
    body = item_payload(
        data={"title": params.title, "description": params.description, "status": params.status},
        pos=position(params.x, params.y),
    )
    app_card = await ctx.client.update_app_card(params.board_id, params.item_id, body)
    return format_success("App card updated", "appCard", app_card)


@registry.tool(name="miro_delete_app_card", annotations=annotations(DELETES, "Delete App Card"))
async def miro_delete_app_card(ctx: ToolContext, params: BoardItemInput) -> str:
    """Delete an app card from a Miro board."""
    await ctx.client.delete_app_card(params.board_id, params.item_id)
    return format_success(f"App card {params.item_id} deleted")


# ─── Documents ───────────────────────────────────────────────────────────────


class CreateDocumentInput(UrlPlacementMixin):
    title: Optional[str] = Field(default=None, description="Document title")


@registry.tool(name="miro_create_document", annotations=annotations(CREATES, "Create Document"))
async def miro_create_document(ctx: ToolContext, params: CreateDocumentInput) -> str:
    """Add a document (PDF, etc.) to a Miro board from a publicly accessible URL."""
    body = item_payload(data={"url": str(params.url), "title": params.title}, pos=position(params.x, params.y))
    document = await ctx.client.create_document_from_url(params.board_id, body)
    return format_success("Document created", "document", document)


@registry.tool(name="miro_get_document", annotations=annotations(READ_ONLY, "Get Document"))
async def miro_get_document(ctx: ToolContext, params: GetWidgetInput) -> str:
    """Get a document item from a Miro board."""
    document = await ctx.client.get_document(params.board_id, params.item_id)
    return format_response(document, params.format, "document")


@registry.tool(name="miro_delete_document", annotations=annotations(DELETES, "Delete Document"))
async def miro_delete_document(ctx: ToolContext, params: BoardItemInput) -> str:
    """Delete a document from a Miro board."""
    await ctx.client.delete_document(params.board_id, params.item_id)
    return format_success(f"Document {params.item_id} deleted")
