"""EmailRenderer: turns an HTML email body into ordered, size-bounded text blocks.

Notes:
- Pure and synchronous: every call parses its own tree and touches no
  process-wide state.
- Configuration is an immutable RenderConfig passed in; nothing is read
  from globals.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..config import Settings
from ..exceptions import InvalidBudgetError
from ..pipeline.chunking import split_text
from ..pipeline.markup import (
    convert_emphasis,
    convert_line_breaks,
    convert_links,
    convert_lists,
    ensure_element_spacing,
    extract_text,
    parse_html,
    remove_email_footer,
    strip_unwanted_tags,
)
from ..pipeline.normalization import cleanup_text
from ..pipeline.tables import DEFAULT_MAX_COL_WIDTH, convert_tables

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderConfig:
    char_limit: int = 1800
    footer_marker_class: str = "gmail_signature_prefix"
    table_max_col_width: int = DEFAULT_MAX_COL_WIDTH

    def __post_init__(self) -> None:
        if self.char_limit <= 0:
            raise InvalidBudgetError(f"char_limit must be positive, got {self.char_limit}")
        if self.table_max_col_width <= 3:
            raise InvalidBudgetError(
                f"table_max_col_width must leave room for an ellipsis, got {self.table_max_col_width}"
            )

    @classmethod
    def from_settings(cls, settings: Settings) -> "RenderConfig":
        return cls(
            char_limit=settings.MSG_CHAR_LIMIT,
            footer_marker_class=settings.FOOTER_MARKER_CLASS,
            table_max_col_width=settings.TABLE_MAX_COL_WIDTH,
        )


class EmailRenderer:
    def __init__(self, config: Optional[RenderConfig] = None) -> None:
        self.config = config or RenderConfig()

    # Public entry -----------------------------------------------------------
    def render_text(self, html: str) -> str:
        """Run the tree stages, extract the text and normalize its whitespace."""
        soup = parse_html(html)
        if remove_email_footer(soup, self.config.footer_marker_class):
            logger.debug("Removed email footer at .%s", self.config.footer_marker_class)
        strip_unwanted_tags(soup)
        tables = convert_tables(soup, self.config.table_max_col_width)
        convert_links(soup)
        convert_emphasis(soup)
        convert_lists(soup)
        convert_line_breaks(soup)
        ensure_element_spacing(soup)
        text = cleanup_text(extract_text(soup))
        logger.debug("Rendered %d chars of HTML into %d chars (%d tables)", len(html or ""), len(text), tables)
        return text

    def render_message(self, html: str, title: Optional[str] = None) -> str:
        """Render the body and prepend a bold title paragraph when one is given."""
        body = self.render_text(html)
        title = (title or "").strip()
        if not title:
            return body
        return "\n\n".join(part for part in (f"**{title}**", body) if part)

    def split(self, text: str) -> List[str]:
        """Split into blocks within the budget, dropping blocks that are blank."""
        blocks = [b.strip() for b in split_text(text, self.config.char_limit)]
        return [b for b in blocks if b]

    def render_blocks(self, html: str, title: Optional[str] = None) -> List[str]:
        return self.split(self.render_message(html, title))
