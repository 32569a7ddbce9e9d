"""Render tool results as JSON or Markdown text."""

import json
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from .errors import MiroApiError, error_details
from .models import Page

NO_ITEMS = "_No items found._"
GENERIC_COLUMNS = 5
PREVIEW_CHARS = 50


def to_json(data: Any) -> str:
    """Pretty-print structured data."""
    if isinstance(data, Page):
        data = data.to_payload()
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def format_success(message: str, entity_key: Optional[str] = None, payload: Any = None) -> str:
    """Envelope text for a mutating operation."""
    body: Dict[str, Any] = {"success": True, "message": message}
    if entity_key is not None:
        body[entity_key] = payload
    return to_json(body)


def format_error(exc: BaseException) -> str:
    """Envelope text for any failed tool invocation."""
    if isinstance(exc, MiroApiError):
        message = f"Error: {exc.message}"
        if exc.retryable:
            message += " (retryable)"
    else:
        message = f"Error: {exc}" if str(exc) else f"Error: {type(exc).__name__}"
    return to_json({"error": message, "details": error_details(exc)})


def format_response(data: Any, fmt: str, entity_label: str, limit: Optional[int] = None) -> str:
    """Render a successful read result in the requested format.

    With ``limit``, a ``Page`` that renders too long loses trailing records
    (counted in ``omitted``) until it fits; its cursor is kept.
    """
    if fmt == "markdown":
        def render(value: Any) -> str:
            return format_markdown(value, entity_label)
    else:
        render = to_json
    text = render(data)
    if limit is not None and isinstance(data, Page) and len(text) > limit:
        return fit_page(data, render, limit)
    return text


def _head(page: Page, count: int) -> Page:
    return Page(
        data=page.data[:count],
        total=page.total,
        cursor=page.cursor,
        links=page.links,
        omitted=(page.omitted or 0) + len(page.data) - count,
    )


def fit_page(page: Page, render: Callable[[Page], str], limit: int) -> str:
    """Render the longest leading slice of ``page`` that fits in ``limit``."""
    best = None
    low, high = 0, len(page.data) - 1
    while low <= high:
        mid = (low + high) // 2
        text = render(_head(page, mid))
        if len(text) <= limit:
            best = text
            low = mid + 1
        else:
            high = mid - 1
    if best is None:
        return truncate(render(_head(page, 0)), limit)
    return best


def truncate(text: str, limit: int) -> str:
    """Cap a response at ``limit`` characters, saying so when it happens."""
    if len(text) <= limit:
        return text
    notice = (
        f"\n\n... [Response truncated at {limit} characters. "
        "Use a smaller limit or the pagination cursor to see the rest.]"
    )
    return text[: max(limit - len(notice), 0)] + notice


# ─── Markdown ────────────────────────────────────────────────────────────────


def _cell(value: Any) -> str:
    if value is None or value == "":
        return "-"
    text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False, default=str)
    return text.replace("|", "\\|").replace("\n", " ")


def _position(item: Dict[str, Any]) -> str:
    pos = item.get("position")
    if isinstance(pos, dict) and "x" in pos and "y" in pos:
        return f"({pos['x']}, {pos['y']})"
    return "-"


def _item_content(item: Dict[str, Any]) -> str:
    data = item.get("data")
    if isinstance(data, dict):
        for key in ("content", "title"):
            if data.get(key) is not None:
                return str(data[key])[:PREVIEW_CHARS]
    return "-"


def _endpoint_id(item: Dict[str, Any], key: str) -> Any:
    endpoint = item.get(key)
    return endpoint.get("id") if isinstance(endpoint, dict) else None


@dataclass(frozen=True)
class TableLayout:
    """Column headers and cell extractors for one known entity kind."""

    headers: Sequence[str]
    cells: Callable[[Dict[str, Any]], List[Any]]


TABLE_LAYOUTS: Dict[str, TableLayout] = {
    "boards": TableLayout(
        ("ID", "Name", "Description", "View Link"),
        lambda b: [b.get("id"), b.get("name"), b.get("description"), f"[Open]({b.get('viewLink') or '-'})"],
    ),
    "items": TableLayout(
        ("ID", "Type", "Content/Title", "Position"),
        lambda i: [i.get("id"), i.get("type"), _item_content(i), _position(i)],
    ),
    "members": TableLayout(
        ("ID", "Name", "Email", "Role"),
        lambda m: [m.get("id"), m.get("name"), m.get("email"), m.get("role")],
    ),
    "tags": TableLayout(
        ("ID", "Title", "Color"),
        lambda t: [t.get("id"), t.get("title"), t.get("fillColor")],
    ),
    "connectors": TableLayout(
        ("ID", "Start Item", "End Item", "Shape"),
        lambda c: [c.get("id"), _endpoint_id(c, "startItem"), _endpoint_id(c, "endItem"), c.get("shape")],
    ),
}


def _table(headers: Sequence[str], rows: List[List[Any]]) -> str:
    lines = [f"| {' | '.join(headers)} |", f"|{'|'.join('---' for _ in headers)}|"]
    for row in rows:
        lines.append(f"| {' | '.join(_cell(v) for v in row)} |")
    return "\n".join(lines)


def _generic_table(records: List[Any]) -> str:
    """Fallback for shapes without a layout: first keys of the first record."""
    if not records:
        return NO_ITEMS
    first = records[0] if isinstance(records[0], dict) else {"value": records[0]}
    keys = list(first.keys())[:GENERIC_COLUMNS]
    rows = []
    for record in records:
        record = record if isinstance(record, dict) else {"value": record}
        rows.append([record.get(k) for k in keys])
    return _table(keys, rows)


def _records_table(records: List[Dict[str, Any]], entity_label: str) -> str:
    layout = TABLE_LAYOUTS.get(entity_label)
    if layout is None:
        return _generic_table(records)
    return _table(layout.headers, [layout.cells(r) for r in records])


def format_key(key: str) -> str:
    """``viewLink`` / ``view_link`` -> ``View Link``."""
    spaced = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", key).replace("_", " ")
    return " ".join(word[:1].upper() + word[1:] for word in spaced.split())


def _label(entity_label: str) -> str:
    return entity_label.replace("_", " ")[:1].upper() + entity_label.replace("_", " ")[1:]


def _format_page(page: Page, entity_label: str) -> str:
    lines = [f"## {_label(entity_label)}", ""]
    if page.total is not None:
        lines.append(f"**Total:** {page.total} | **Showing:** {page.size}")
    else:
        lines.append(f"**Showing:** {page.size}")
    if page.cursor:
        lines.append(f"**Next cursor:** `{page.cursor}`")
    if page.omitted:
        lines.append(f"**Omitted:** {page.omitted} record(s) over the response size limit; request a smaller `limit`")
    lines.append("")

    if not page.data:
        lines.append(NO_ITEMS)
    else:
        lines.append(_records_table(page.data, entity_label))
    return "\n".join(lines)


def _format_object(data: Dict[str, Any], entity_label: str) -> str:
    singular = entity_label[:-1] if entity_label.endswith("s") else entity_label
    lines = [f"## {_label(singular)}", ""]
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, (dict, list)):
            lines.append(f"**{format_key(key)}:**")
            lines.append("```json")
            lines.append(to_json(value))
            lines.append("```")
        else:
            lines.append(f"**{format_key(key)}:** {value}")
    return "\n".join(lines)


def format_markdown(data: Any, entity_label: str) -> str:
    if isinstance(data, dict) and isinstance(data.get("data"), list):
        data = Page.model_validate(data)
    if isinstance(data, Page):
        return _format_page(data, entity_label)
    if isinstance(data, list):
        return _generic_table(data) if data else NO_ITEMS
    if isinstance(data, dict):
        return _format_object(data, entity_label)
    return str(data)
