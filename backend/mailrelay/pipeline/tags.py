"""Closed set of structural tag kinds kept through sanitization."""
from __future__ import annotations

from enum import Enum
from typing import Optional


class TagKind(str, Enum):
    PARAGRAPH = "p"
    LINE_BREAK = "br"
    BOLD = "b"
    ITALIC = "i"
    LINK = "a"
    TABLE = "table"
    TABLE_ROW = "tr"
    TABLE_CELL = "td"
    TABLE_HEADER_CELL = "th"
    TABLE_BODY = "tbody"
    TABLE_HEAD = "thead"
    ORDERED_LIST = "ol"
    UNORDERED_LIST = "ul"
    LIST_ITEM = "li"

    @classmethod
    def of(cls, name: Optional[str]) -> Optional["TagKind"]:
        """Return the kind for a tag name, or None when the tag is not allowed."""
        if not name:
            return None
        try:
            return cls(name.lower())
        except ValueError:
            return None


ALLOWED_TAGS = frozenset(kind.value for kind in TagKind)

# Elements whose content is never visible text
NON_CONTENT_TAGS = ["script", "style"]

CELL_TAGS = [TagKind.TABLE_CELL.value, TagKind.TABLE_HEADER_CELL.value]
