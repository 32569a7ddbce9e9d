"""Input model bases, tool annotations and payload helpers shared by all tools."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..config import MAX_PAGE_SIZE
from ..models import ResponseFormat

# ─── Annotations ─────────────────────────────────────────────────────────────

READ_ONLY = {
    "readOnlyHint": True,
    "destructiveHint": False,
    "idempotentHint": True,
    "openWorldHint": True,
}

CREATES = {
    "readOnlyHint": False,
    "destructiveHint": False,
    "idempotentHint": False,
    "openWorldHint": True,
}

UPDATES = {
    "readOnlyHint": False,
    "destructiveHint": False,
    "idempotentHint": True,
    "openWorldHint": True,
}

DELETES = {
    "readOnlyHint": False,
    "destructiveHint": True,
    "idempotentHint": True,
    "openWorldHint": True,
}


def annotations(base: Dict[str, Any], title: str) -> Dict[str, Any]:
    return {"title": title, **base}


# ─── Input Bases ─────────────────────────────────────────────────────────────


class ToolInput(BaseModel):
    """Tool arguments use camelCase on the wire (``boardId``)."""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class BoardInput(ToolInput):
    board_id: str = Field(..., description="Board ID", min_length=1)


class BoardItemInput(BoardInput):
    item_id: str = Field(..., description="Item ID", min_length=1)


class FormatMixin(ToolInput):
    format: ResponseFormat = Field(default="json", description="Response format: 'json' or 'markdown'")


class PaginationMixin(ToolInput):
    limit: Optional[int] = Field(
        default=None,
        description=f"Number of results to return (1-{MAX_PAGE_SIZE}); defaults to the configured page size",
        ge=1,
        le=MAX_PAGE_SIZE,
    )
    cursor: Optional[str] = Field(default=None, description="Pagination cursor from a previous response")


# ─── Payload Helpers ─────────────────────────────────────────────────────────


def compact(values: Dict[str, Any]) -> Dict[str, Any]:
    """Drop unset (``None`` or empty-string) entries."""
    return {k: v for k, v in values.items() if v is not None and v != ""}


def position(x: Optional[float], y: Optional[float]) -> Optional[Dict[str, float]]:
    """A position only when both coordinates are given."""
    if x is None or y is None:
        return None
    return {"x": x, "y": y}


def geometry(width: Optional[float] = None, height: Optional[float] = None) -> Optional[Dict[str, float]]:
    return compact({"width": width, "height": height}) or None


def item_payload(
    data: Optional[Dict[str, Any]] = None,
    style: Optional[Dict[str, Any]] = None,
    pos: Optional[Dict[str, float]] = None,
    geom: Optional[Dict[str, float]] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """Assemble a board item request body, omitting empty sections."""
    return compact({
        "data": compact(data or {}) or None,
        "style": compact(style or {}) or None,
        "position": pos,
        "geometry": geom,
        **extra,
    })
