import asyncio
import json

import pytest
from pydantic import Field

from miro_mcp.config import ServerConfig
from miro_mcp.registry import ToolContext, ToolDispatcher, ToolRegistry, registry
from miro_mcp.tools.common import READ_ONLY, BoardInput, ToolInput, annotations

EXPECTED_TOOLS = {
    "miro_test_connection",
    # boards
    "miro_list_boards", "miro_get_board", "miro_create_board", "miro_update_board", "miro_delete_board",
    "miro_copy_board",
    # members
    "miro_list_board_members", "miro_get_board_member", "miro_share_board", "miro_update_board_member",
    "miro_remove_board_member",
    # items
    "miro_list_items", "miro_get_item", "miro_update_item_position", "miro_delete_item",
    # widgets
    "miro_create_sticky_note", "miro_get_sticky_note", "miro_update_sticky_note", "miro_delete_sticky_note",
    "miro_create_shape", "miro_get_shape", "miro_update_shape", "miro_delete_shape",
    "miro_create_text", "miro_get_text", "miro_update_text", "miro_delete_text",
    "miro_create_card", "miro_get_card", "miro_update_card", "miro_delete_card",
    "miro_create_frame", "miro_get_frame", "miro_update_frame", "miro_delete_frame", "miro_get_frame_items",
    "miro_create_image", "miro_get_image", "miro_update_image", "miro_delete_image",
    "miro_create_embed", "miro_get_embed", "miro_update_embed", "miro_delete_embed",
    "miro_create_app_card", "miro_get_app_card", "miro_update_app_card", "miro_delete_app_card",
    "miro_create_document", "miro_get_document", "miro_delete_document",
    # connectors
    "miro_list_connectors", "miro_create_connector", "miro_get_connector", "miro_update_connector",
    "miro_delete_connector",
    # tags
    "miro_list_tags", "miro_create_tag", "miro_get_tag", "miro_update_tag", "miro_delete_tag",
    "miro_attach_tag", "miro_remove_tag", "miro_get_items_by_tag", "miro_get_item_tags",
}


def test_every_tool_is_registered():
    assert set(registry.names()) == EXPECTED_TOOLS
    assert len(registry) == len(EXPECTED_TOOLS)


def test_tool_definitions_are_complete():
    for tool in registry.mcp_tools():
        assert tool.description, tool.name
        assert tool.inputSchema["type"] == "object", tool.name
        assert tool.annotations is not None and tool.annotations.title, tool.name


def test_schemas_use_camel_case_names():
    schema = registry.get("miro_create_sticky_note").input_schema
    assert {"boardId", "content", "fillColor"} <= set(schema["properties"])
    assert "boardId" in schema["required"]
    assert "board_id" not in schema["properties"]


def test_read_tools_are_marked_read_only():
    assert registry.get("miro_list_boards").read_only
    assert not registry.get("miro_delete_board").read_only
    assert registry.get("miro_delete_board").annotations["destructiveHint"] is True


def test_duplicate_registration_is_rejected():
    tools = ToolRegistry()

    @tools.tool(name="dup")
    async def first(ctx: ToolContext, params: BoardInput) -> str:
        """First."""
        return ""

    with pytest.raises(ValueError):

        @tools.tool(name="dup")
        async def second(ctx: ToolContext, params: BoardInput) -> str:
            """Second."""
            return ""


def test_handler_must_declare_input_model():
    tools = ToolRegistry()
    with pytest.raises(TypeError):

        @tools.tool(name="untyped")
        async def untyped(ctx, params) -> str:
            return ""


def test_unknown_tool(call, fake_miro):
    result, body = call("miro_does_not_exist", {})
    assert result.isError
    assert "Unknown tool" in body["error"]
    assert len(result.content) == 1
    assert fake_miro.requests == []


def test_missing_required_argument_is_rejected_before_any_call(call, fake_miro):
    result, body = call("miro_get_board", {})
    assert result.isError
    assert body["error"].startswith("Error: Invalid input for miro_get_board")
    assert "boardId" in body["error"]
    assert fake_miro.requests == []


def test_out_of_range_limit_is_rejected(call, fake_miro):
    result, _ = call("miro_list_boards", {"limit": 0})
    assert result.isError
    result, _ = call("miro_list_boards", {"limit": 101})
    assert result.isError
    assert fake_miro.requests == []


def test_unknown_argument_is_rejected(call, fake_miro):
    result, _ = call("miro_get_board", {"boardId": "b1", "colour": "red"})
    assert result.isError
    assert fake_miro.requests == []


def test_bad_enum_value_is_rejected(call, fake_miro):
    result, _ = call("miro_list_items", {"boardId": "b1", "type": "spreadsheet"})
    assert result.isError
    assert fake_miro.requests == []


class _EchoInput(ToolInput):
    text: str = Field(..., description="Text to echo")


def _private_dispatcher(client, config):
    tools = ToolRegistry()

    @tools.tool(name="explode", annotations=annotations(READ_ONLY, "Explode"))
    async def explode(ctx: ToolContext, params: _EchoInput) -> str:
        """Always fails."""
        raise RuntimeError("kaboom")

    @tools.tool(name="echo", annotations=annotations(READ_ONLY, "Echo"))
    async def echo(ctx: ToolContext, params: _EchoInput) -> str:
        """Echo the text back."""
        return params.text

    return ToolDispatcher(tools, client, config)


def test_unexpected_exception_becomes_error_result(client, config):
    dispatcher = _private_dispatcher(client, config)
    result = asyncio.run(dispatcher.dispatch("explode", {"text": "x"}))
    assert result.isError
    assert len(result.content) == 1
    body = json.loads(result.content[0].text)
    assert body["error"] == "Error: kaboom"
    assert body["details"]["type"] == "RuntimeError"


def test_success_text_is_truncated_to_character_limit(client):
    config = ServerConfig(character_limit=200)
    dispatcher = _private_dispatcher(client, config)
    result = asyncio.run(dispatcher.dispatch("echo", {"text": "y" * 1000}))
    assert not result.isError
    assert len(result.content[0].text) <= 200
    assert "truncated" in result.content[0].text


def test_inputs_strip_whitespace(client, config):
    dispatcher = _private_dispatcher(client, config)
    result = asyncio.run(dispatcher.dispatch("echo", {"text": "  hi  "}))
    assert result.content[0].text == "hi"
