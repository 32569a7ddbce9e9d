"""Shared vocabularies and the paginated list result.

Entity payloads (boards, sticky notes, shapes, ...) stay plain dicts: this
server forwards them, it does not interpret them.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ItemType(str, Enum):
    """Kinds of item that live on a board."""

    STICKY_NOTE = "sticky_note"
    SHAPE = "shape"
    TEXT = "text"
    CARD = "card"
    IMAGE = "image"
    FRAME = "frame"
    CONNECTOR = "connector"
    EMBED = "embed"
    APP_CARD = "app_card"
    DOCUMENT = "document"


ResponseFormat = Literal["json", "markdown"]

BoardSort = Literal["default", "last_modified", "last_opened", "last_created", "alphabetically"]
SharingAccess = Literal["private", "view", "comment", "edit"]
MemberRole = Literal["viewer", "commenter", "editor", "coowner"]

StickyNoteShape = Literal["square", "rectangle"]
TextAlign = Literal["left", "center", "right"]
FrameFormat = Literal["custom", "desktop", "phone", "a4", "letter", "square", "freeform"]
EmbedMode = Literal["inline", "modal"]
AppCardStatus = Literal["disconnected", "connected", "disabled"]
ConnectorShape = Literal["straight", "elbowed", "curved"]

ShapeType = Literal[
    "rectangle",
    "round_rectangle",
    "circle",
    "triangle",
    "rhombus",
    "parallelogram",
    "trapezoid",
    "pentagon",
    "hexagon",
    "octagon",
    "wedge_round_rectangle_callout",
    "star",
    "flow_chart_predefined_process",
    "cloud",
    "cross",
    "can",
    "right_arrow",
    "left_arrow",
    "left_right_arrow",
    "left_brace",
    "right_brace",
]

StrokeCap = Literal[
    "none",
    "stealth",
    "diamond",
    "diamond_filled",
    "oval",
    "oval_filled",
    "arrow",
    "triangle",
    "triangle_filled",
    "erd_one",
    "erd_many",
    "erd_one_or_many",
    "erd_only_one",
    "erd_zero_or_many",
    "erd_zero_or_one",
]


class Page(BaseModel):
    """One page of a list endpoint: ``{data, total?, size, cursor?}``.

    ``size`` always equals ``len(data)``; ``cursor`` is present only when
    more results exist and must be passed back unmodified. ``omitted`` counts
    trailing records dropped locally to fit the response size limit.
    """
    model_config = ConfigDict(extra="ignore")

    data: List[Dict[str, Any]] = Field(default_factory=list)
    total: Optional[int] = None
    size: int = 0
    cursor: Optional[str] = None
    links: Optional[Dict[str, Any]] = None
    omitted: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, values: Any) -> Any:
        if isinstance(values, dict):
            values = dict(values)
            data = values.get("data") or []
            values["data"] = data
            values["size"] = len(data)
            if not values.get("cursor"):
                values["cursor"] = None
        return values

    @property
    def has_more(self) -> bool:
        return self.cursor is not None

    def to_payload(self) -> Dict[str, Any]:
        """Wire-shaped dict, omitting absent optional fields."""
        payload: Dict[str, Any] = {"data": self.data}
        if self.total is not None:
            payload["total"] = self.total
        payload["size"] = self.size
        if self.cursor is not None:
            payload["cursor"] = self.cursor
        if self.links:
            payload["links"] = self.links
        if self.omitted:
            payload["omitted"] = self.omitted
        return payload
