import json

from miro_mcp.errors import AuthenticationError, MiroApiError, RateLimitError
from miro_mcp.formatters import (
    NO_ITEMS,
    format_error,
    format_key,
    format_markdown,
    format_response,
    format_success,
    to_json,
    truncate,
)
from miro_mcp.models import Page


def _boards():
    return [
        {"id": f"b{i}", "name": f"Board {i}", "description": "", "viewLink": f"https://miro.com/app/board/b{i}"}
        for i in range(1, 4)
    ]


def test_empty_page_renders_placeholder():
    text = format_markdown(Page(data=[]), "boards")
    assert "## Boards" in text
    assert "**Showing:** 0" in text
    assert NO_ITEMS in text
    assert "|" not in text


def test_board_page_table():
    text = format_markdown(Page(data=_boards(), total=3), "boards")
    lines = text.splitlines()
    assert "**Total:** 3 | **Showing:** 3" in lines
    assert "| ID | Name | Description | View Link |" in lines
    assert "| b1 | Board 1 | - | [Open](https://miro.com/app/board/b1) |" in lines
    assert "Next cursor" not in text
    assert len([line for line in lines if line.startswith("| b")]) == 3


def test_page_with_cursor_shows_it():
    text = format_markdown(Page(data=_boards()[:1], cursor="abc"), "boards")
    assert "**Next cursor:** `abc`" in text


def test_items_table_shows_content_and_position():
    item = {"id": "i1", "type": "sticky_note", "data": {"content": "hello"}, "position": {"x": 1, "y": 2}}
    text = format_markdown({"data": [item]}, "items")
    assert "| i1 | sticky_note | hello | (1, 2) |" in text


def test_unknown_kind_uses_generic_table():
    records = [{"a": 1, "b": 2, "c": 3, "d": 4, "e": 5, "f": 6}]
    text = format_markdown(Page(data=records), "widgets")
    assert "| a | b | c | d | e |" in text
    assert "| 1 | 2 | 3 | 4 | 5 |" in text


def test_single_object_markdown():
    board = {"id": "b1", "name": "Plan", "teamId": None, "owner": {"id": "u1"}}
    text = format_markdown(board, "board")
    assert text.startswith("## Board")
    assert "**Id:** b1" in text
    assert "**Name:** Plan" in text
    assert "Team Id" not in text
    assert "```json" in text


def test_format_response_json_is_page_payload():
    text = format_response(Page(data=_boards()[:1]), "json", "boards")
    assert json.loads(text) == {"data": _boards()[:1], "size": 1}


def test_format_success_envelope():
    assert json.loads(format_success("Board created", "board", {"id": "b1"})) == {
        "success": True,
        "message": "Board created",
        "board": {"id": "b1"},
    }
    assert json.loads(format_success("Board b1 deleted")) == {"success": True, "message": "Board b1 deleted"}


def test_format_error_marks_retryable():
    body = json.loads(format_error(RateLimitError("Rate limit exceeded", retry_after=30)))
    assert body["error"] == "Error: Rate limit exceeded (retryable)"
    assert body["details"] == {"type": "RateLimitError", "statusCode": 429, "retryable": True, "retryAfter": 30}


def test_format_error_not_retryable():
    body = json.loads(format_error(AuthenticationError("bad token", status_code=401)))
    assert body["error"] == "Error: bad token"
    assert body["details"]["type"] == "AuthenticationError"
    assert body["details"]["retryable"] is False

    body = json.loads(format_error(MiroApiError("Board not found", status_code=404)))
    assert "(retryable)" not in body["error"]


def test_format_error_unexpected_exception():
    body = json.loads(format_error(KeyError("x")))
    assert body["error"].startswith("Error: ")
    assert body["details"] == {"type": "KeyError"}


def test_truncate():
    assert truncate("short", 100) == "short"
    text = truncate("x" * 1000, 200)
    assert len(text) <= 200
    assert "truncated" in text


def test_format_key():
    assert format_key("viewLink") == "View Link"
    assert format_key("created_at") == "Created At"
    assert format_key("id") == "Id"


def test_to_json_indents():
    assert to_json({"a": 1}) == '{\n  "a": 1\n}'


def _wide_page(count, cursor="c9"):
    return Page(data=[{"id": f"r{n}", "name": "n" * 200} for n in range(count)], cursor=cursor)


def test_format_response_fits_page_to_limit():
    text = format_response(_wide_page(50), "json", "boards", limit=3000)
    body = json.loads(text)
    assert len(text) <= 3000
    assert body["cursor"] == "c9"
    assert body["size"] == len(body["data"]) < 50
    assert body["omitted"] == 50 - body["size"]


def test_format_response_leaves_small_page_alone():
    body = json.loads(format_response(_wide_page(2), "json", "boards", limit=50000))
    assert body["size"] == 2
    assert "omitted" not in body


def test_format_response_limit_ignores_single_objects():
    board = {"id": "b1", "description": "d" * 500}
    assert format_response(board, "json", "board", limit=100) == to_json(board)


def test_markdown_page_fit_keeps_cursor_and_reports_omitted():
    text = format_response(_wide_page(50), "markdown", "boards", limit=3000)
    assert len(text) <= 3000
    assert "**Next cursor:** `c9`" in text
    assert "**Omitted:**" in text
    assert "truncated" not in text
