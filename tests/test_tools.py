import json


def test_create_sticky_note_end_to_end(call, fake_miro):
    fake_miro.route("POST", "/boards/b1/sticky_notes", status=201, json={"id": "s1", "type": "sticky_note"})

    result, body = call("miro_create_sticky_note", {"boardId": "b1", "content": "hello", "x": 10, "y": 20})

    assert not result.isError
    assert len(result.content) == 1
    assert len(fake_miro.requests) == 1
    request = fake_miro.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/v2/boards/b1/sticky_notes"
    assert fake_miro.body() == {"data": {"content": "hello"}, "position": {"x": 10, "y": 20}}
    assert body == {"success": True, "message": "Sticky note created", "stickyNote": {"id": "s1", "type": "sticky_note"}}


def test_create_sticky_note_defaults_to_origin(call, fake_miro):
    fake_miro.route("POST", "/boards/b1/sticky_notes", json={"id": "s1"})
    call("miro_create_sticky_note", {"boardId": "b1", "content": "hi", "shape": "square", "fillColor": "yellow"})
    assert fake_miro.body() == {
        "data": {"content": "hi", "shape": "square"},
        "style": {"fillColor": "yellow"},
        "position": {"x": 0, "y": 0},
    }


def test_update_needs_both_coordinates_to_move(call, fake_miro):
    fake_miro.route("PATCH", "/boards/b1/sticky_notes/s1", json={"id": "s1"})
    call("miro_update_sticky_note", {"boardId": "b1", "itemId": "s1", "content": "new", "x": 5})
    assert fake_miro.body() == {"data": {"content": "new"}}


def test_rate_limit_is_reported_as_retryable(call, fake_miro):
    fake_miro.route("GET", "/boards", status=429, json={"message": "Too many"}, headers={"Retry-After": "30"})

    result, body = call("miro_list_boards", {})

    assert result.isError
    assert len(result.content) == 1
    assert "(retryable)" in body["error"]
    assert body["details"]["retryAfter"] == 30
    assert body["details"]["statusCode"] == 429
    assert len(fake_miro.requests) == 1


def test_unauthorized_token_is_classified(call, fake_miro):
    fake_miro.route("GET", "/boards/b1", status=401, json={"message": "invalid token"})
    result, body = call("miro_get_board", {"boardId": "b1"})
    assert result.isError
    assert body["details"]["type"] == "AuthenticationError"
    assert body["details"]["statusCode"] == 401
    assert "(retryable)" not in body["error"]


def test_not_found_is_reported(call, fake_miro):
    result, body = call("miro_get_board", {"boardId": "missing"})
    assert result.isError
    assert body["error"] == "Error: Not found"
    assert body["details"]["statusCode"] == 404


def test_list_boards_markdown(call, fake_miro):
    boards = [{"id": f"b{i}", "name": f"Board {i}", "viewLink": f"https://miro.com/app/board/b{i}"} for i in range(3)]
    fake_miro.route("GET", "/boards", json={"data": boards, "total": 3})

    result, body = call("miro_list_boards", {"format": "markdown", "limit": 3})

    assert body is None
    text = result.content[0].text
    assert text.startswith("## Boards")
    assert "| b2 | Board 2 |" in text
    assert "Next cursor" not in text
    assert fake_miro.requests[0].url.params["limit"] == "3"


def test_list_boards_json_keeps_cursor(call, fake_miro):
    fake_miro.route("GET", "/boards", json={"data": [{"id": "b1"}], "cursor": "c1"})
    _, body = call("miro_list_boards", {"cursor": "c0"})
    assert body == {"data": [{"id": "b1"}], "size": 1, "cursor": "c1"}
    assert fake_miro.requests[0].url.params["cursor"] == "c0"


def test_list_items_filters_by_type(call, fake_miro):
    fake_miro.route("GET", "/boards/b1/items", json={"data": []})
    result, body = call("miro_list_items", {"boardId": "b1", "type": "sticky_note"})
    assert not result.isError
    assert body == {"data": [], "size": 0}
    assert fake_miro.requests[0].url.params["type"] == "sticky_note"


def test_create_board_with_sharing_policy(call, fake_miro):
    fake_miro.route("POST", "/boards", status=201, json={"id": "b9", "name": "Plan"})
    result, body = call("miro_create_board", {"name": "Plan", "access": "view"})
    assert body["board"]["id"] == "b9"
    assert fake_miro.body() == {"name": "Plan", "sharingPolicy": {"access": "view"}}


def test_delete_board(call, fake_miro):
    fake_miro.route("DELETE", "/boards/b1", status=204)
    result, body = call("miro_delete_board", {"boardId": "b1"})
    assert not result.isError
    assert body == {"success": True, "message": "Board b1 deleted"}


def test_share_board_splits_emails(call, fake_miro):
    fake_miro.route("POST", "/boards/b1/members", json={})
    _, body = call("miro_share_board", {"boardId": "b1", "emails": "a@x.io, b@x.io,", "role": "editor"})
    assert fake_miro.body() == {"emails": ["a@x.io", "b@x.io"], "role": "editor"}
    assert body["message"] == "Board shared with 2 user(s)"


def test_share_board_requires_an_email(call, fake_miro):
    result, _ = call("miro_share_board", {"boardId": "b1", "emails": " , "})
    assert result.isError
    assert fake_miro.requests == []


def test_create_connector_body(call, fake_miro):
    fake_miro.route("POST", "/boards/b1/connectors", json={"id": "c1"})
    call("miro_create_connector", {
        "boardId": "b1",
        "startItemId": "i1",
        "endItemId": "i2",
        "shape": "curved",
        "endStrokeCap": "arrow",
        "caption": "depends on",
    })
    assert fake_miro.body() == {
        "startItem": {"id": "i1"},
        "endItem": {"id": "i2"},
        "shape": "curved",
        "style": {"endStrokeCap": "arrow"},
        "captions": [{"content": "depends on"}],
    }


def test_create_image_from_url(call, fake_miro):
    fake_miro.route("POST", "/boards/b1/images", json={"id": "img1"})
    _, body = call("miro_create_image", {"boardId": "b1", "url": "https://example.com/cat.png", "width": 300})
    assert body["image"] == {"id": "img1"}
    assert fake_miro.body() == {
        "data": {"url": "https://example.com/cat.png"},
        "position": {"x": 0, "y": 0},
        "geometry": {"width": 300},
    }


def test_create_image_rejects_non_url(call, fake_miro):
    result, _ = call("miro_create_image", {"boardId": "b1", "url": "not a url"})
    assert result.isError
    assert fake_miro.requests == []


def test_tag_lifecycle_calls(call, fake_miro):
    fake_miro.route("POST", "/boards/b1/tags", json={"id": "t1", "title": "Urgent", "fillColor": "red"})
    fake_miro.route("POST", "/boards/b1/items/i1/tags/t1", status=204)
    fake_miro.route("GET", "/boards/b1/items/i1/tags", json={"data": [{"id": "t1", "title": "Urgent"}]})

    _, created = call("miro_create_tag", {"boardId": "b1", "title": "Urgent", "fillColor": "red"})
    _, attached = call("miro_attach_tag", {"boardId": "b1", "itemId": "i1", "tagId": "t1"})
    _, tags = call("miro_get_item_tags", {"boardId": "b1", "itemId": "i1"})

    assert created["tag"]["id"] == "t1"
    assert attached == {"success": True, "message": "Tag t1 attached to item i1"}
    assert tags == {"tags": [{"id": "t1", "title": "Urgent"}]}
    assert [r.method for r in fake_miro.requests] == ["POST", "POST", "GET"]


def test_item_tags_markdown(call, fake_miro):
    fake_miro.route("GET", "/boards/b1/items/i1/tags", json={"data": [{"id": "t1", "title": "Urgent", "fillColor": "red"}]})
    result, _ = call("miro_get_item_tags", {"boardId": "b1", "itemId": "i1", "format": "markdown"})
    assert "| t1 | Urgent | red |" in result.content[0].text


def test_move_item_into_frame(call, fake_miro):
    fake_miro.route("PATCH", "/boards/b1/items/i1", json={"id": "i1"})
    _, body = call("miro_update_item_position", {"boardId": "b1", "itemId": "i1", "x": 1, "y": 2, "parentId": "f1"})
    assert fake_miro.body() == {"position": {"x": 1.0, "y": 2.0}, "parent": {"id": "f1"}}
    assert body["message"] == "Item position updated"


def test_connection_tool(call, fake_miro):
    fake_miro.route("GET", "/users/me", json={"id": "u1", "name": "Ada"})
    result, body = call("miro_test_connection", {})
    assert not result.isError
    assert body["connected"] is True


def test_get_frame_items(call, fake_miro):
    fake_miro.route("GET", "/boards/b1/frames/f1/items", json={"data": [{"id": "i1", "type": "text"}]})
    _, body = call("miro_get_frame_items", {"boardId": "b1", "frameId": "f1"})
    assert body["size"] == 1
    assert fake_miro.requests[0].url.params["limit"] == "20"


def test_error_text_is_json(call, fake_miro):
    fake_miro.route("DELETE", "/boards/b1", status=500, json={"error": "internal"})
    result, _ = call("miro_delete_board", {"boardId": "b1"})
    assert result.isError
    assert json.loads(result.content[0].text)["error"] == "Error: internal"


def test_connection_tool_fails_on_rejected_token(call, fake_miro):
    fake_miro.route("GET", "/users/me", status=401, json={"message": "invalid token"})
    result, body = call("miro_test_connection", {})
    assert result.isError
    assert body["details"]["type"] == "AuthenticationError"
    assert body["details"]["statusCode"] == 401


def _big_items(count):
    return [{"id": f"i{n}", "type": "text", "data": {"content": "x" * 600}} for n in range(count)]


def test_oversized_page_drops_records_and_keeps_cursor(call, fake_miro, config):
    fake_miro.route("GET", "/boards/b1/items", json={"data": _big_items(100), "total": 400, "cursor": "NEXT"})

    result, body = call("miro_list_items", {"boardId": "b1", "limit": 100})

    assert not result.isError
    assert len(result.content[0].text) <= config.character_limit
    assert body["cursor"] == "NEXT"
    assert body["total"] == 400
    assert 0 < body["size"] < 100
    assert body["size"] == len(body["data"])
    assert body["omitted"] == 100 - body["size"]
    assert body["data"][0]["id"] == "i0"


def test_update_connector_style(call, fake_miro):
    fake_miro.route("PATCH", "/boards/b1/connectors/c1", json={"id": "c1"})
    result, _ = call("miro_update_connector", {
        "boardId": "b1",
        "connectorId": "c1",
        "strokeWidth": "3",
        "strokeColor": "#000000",
    })
    assert not result.isError
    assert fake_miro.body() == {"style": {"strokeColor": "#000000", "strokeWidth": "3"}}
