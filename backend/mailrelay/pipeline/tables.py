"""Fixed-width rendering of HTML tables into fenced monospaced blocks.

Each table becomes:

    ```
    Name  | Qty
    ------+----
    Apple | 3
    ```

Column widths are the longest cell per column, capped; longer cells are
truncated with an ellipsis so a single wide cell cannot blow up the layout.
"""
from __future__ import annotations

from typing import List

from bs4 import BeautifulSoup, Tag

from .markup import collapse_whitespace
from .tags import CELL_TAGS, TagKind

FENCE = "```"
ELLIPSIS = "..."
DEFAULT_MAX_COL_WIDTH = 25


def extract_rows(table: Tag) -> List[List[str]]:
    """Return the table's rows as lists of cleaned cell texts, skipping empty rows."""
    rows: List[List[str]] = []
    for tr in table.find_all(TagKind.TABLE_ROW.value):
        # Rows and cells of inner tables belong to the enclosing cell's text
        if tr.find_parent(TagKind.TABLE.value) is not table:
            continue
        cells = [
            collapse_whitespace(cell.get_text())
            for cell in tr.find_all(CELL_TAGS)
            if cell.find_parent(TagKind.TABLE_ROW.value) is tr
        ]
        if any(cells):
            rows.append(cells)
    return rows


def column_widths(rows: List[List[str]], max_width: int = DEFAULT_MAX_COL_WIDTH) -> List[int]:
    widths: List[int] = []
    for cells in rows:
        for idx, cell in enumerate(cells):
            if idx == len(widths):
                widths.append(0)
            widths[idx] = max(widths[idx], len(cell))
    return [min(w, max_width) for w in widths]


def _fit_cell(cell: str, width: int, max_width: int) -> str:
    if len(cell) > max_width:
        cell = cell[: max_width - len(ELLIPSIS)] + ELLIPSIS
    return cell.ljust(width)


def render_table(rows: List[List[str]], max_width: int = DEFAULT_MAX_COL_WIDTH) -> str:
    """Render rows as a fenced fixed-width block. Returns "" for no rows.

    The first row is treated as the header: when more rows follow, it is
    underlined with dashes joined by `-+-`.
    """
    if not rows:
        return ""
    widths = column_widths(rows, max_width)
    lines: List[str] = []
    for idx, cells in enumerate(rows):
        lines.append(" | ".join(_fit_cell(cell, widths[i], max_width) for i, cell in enumerate(cells)))
        if idx == 0 and len(rows) > 1:
            lines.append("-+-".join("-" * w for w in widths))
    return f"{FENCE}\n" + "\n".join(lines) + f"\n{FENCE}"


def convert_tables(soup: BeautifulSoup, max_width: int = DEFAULT_MAX_COL_WIDTH) -> int:
    """Replace every table in the tree with its fenced rendering.

    Tables without a single non-empty row are removed. Returns the number of
    tables rendered.
    """
    rendered = 0
    for table in soup.find_all(TagKind.TABLE.value):
        if table.decomposed:
            continue
        # Inner tables are flattened into their outermost table's cells
        if table.find_parent(TagKind.TABLE.value) is not None:
            continue
        block = render_table(extract_rows(table), max_width)
        if block:
            table.replace_with(f"\n{block}\n")
            rendered += 1
        else:
            table.decompose()
    return rendered
