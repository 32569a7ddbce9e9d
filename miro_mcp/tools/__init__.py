"""Tool modules. Importing this package registers every tool on ``registry``."""

from . import boards, connectors, items, media, widgets

__all__ = ["boards", "connectors", "items", "media", "widgets"]
