"""Greedy packing of normalized text into size-bounded message blocks.

Cascade, from coarse to fine:
1) paragraphs (blank-line separated), joined back with a blank line;
2) a paragraph over the limit is packed line by line;
3) a line over the limit is packed word by word;
4) a single word over the limit is cut to exactly the limit (lossy).

The last piece of an oversized unit stays open, so following units keep
filling it. A fenced (```) paragraph over the limit is packed by its inner
lines and every piece gets its own fence, so no block ends inside an open
code block.
"""
from __future__ import annotations

import re
from typing import Callable, List

from ..exceptions import InvalidBudgetError
from .normalization import FENCE, is_fenced

_PARAGRAPH_RE = re.compile(r"\n\n+")

PARAGRAPH_SEP = "\n\n"
LINE_SEP = "\n"
WORD_SEP = " "


def _pack(units: List[str], separator: str, max_length: int, split_oversized: Callable[[str], List[str]]) -> List[str]:
    pieces: List[str] = []
    current = ""
    for unit in units:
        if len(current) + len(unit) + len(separator) <= max_length:
            current = f"{current}{separator}{unit}" if current else unit
            continue
        if current:
            pieces.append(current)
        if len(unit) <= max_length:
            current = unit
            continue
        parts = split_oversized(unit)
        pieces.extend(parts[:-1])
        current = parts[-1] if parts else ""
    if current:
        pieces.append(current)
    return pieces


def split_words(line: str, max_length: int) -> List[str]:
    return _pack(line.split(), WORD_SEP, max_length, lambda word: [word[:max_length]])


def split_lines(paragraph: str, max_length: int) -> List[str]:
    return _pack(
        paragraph.split(LINE_SEP),
        LINE_SEP,
        max_length,
        lambda line: split_words(line, max_length),
    )


def split_fenced(paragraph: str, max_length: int) -> List[str]:
    """Split an oversized fenced block into several closed fenced blocks."""
    opening = f"{FENCE}{LINE_SEP}"
    closing = f"{LINE_SEP}{FENCE}"
    budget = max_length - len(opening) - len(closing)
    if budget <= 0:
        return split_lines(paragraph, max_length)
    inner = paragraph[len(FENCE): -len(FENCE)].strip(LINE_SEP)
    return [f"{opening}{piece}{closing}" for piece in split_lines(inner, budget)]


def _split_paragraph(paragraph: str, max_length: int) -> List[str]:
    if is_fenced(paragraph):
        return split_fenced(paragraph, max_length)
    return split_lines(paragraph, max_length)


def split_text(text: str, max_length: int) -> List[str]:
    """Pack text into ordered blocks of at most `max_length` characters.

    Returns `[""]` for empty input so callers always get at least one block.
    Raises InvalidBudgetError when `max_length` is not positive.
    """
    if max_length <= 0:
        raise InvalidBudgetError(f"max_length must be positive, got {max_length}")
    blocks = _pack(
        _PARAGRAPH_RE.split(text),
        PARAGRAPH_SEP,
        max_length,
        lambda paragraph: _split_paragraph(paragraph, max_length),
    )
    return blocks or [""]
