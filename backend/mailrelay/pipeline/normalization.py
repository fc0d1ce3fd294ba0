from __future__ import annotations

import re
from typing import List

# Non-greedy so consecutive fenced blocks stay separate
_FENCED_RE = re.compile(r"(```[\s\S]*?```)")
_BLANK_RUN_RE = re.compile(r"\n\s*\n\s*\n")
_SPACE_RUN_RE = re.compile(r"[ \t]+")

FENCE = "```"


def is_fenced(segment: str) -> bool:
    return len(segment) >= 2 * len(FENCE) and segment.startswith(FENCE) and segment.endswith(FENCE)


def split_segments(text: str) -> List[str]:
    """Split text into alternating prose and fenced segments, in order."""
    return [part for part in _FENCED_RE.split(text) if part]


def normalize_prose(text: str) -> str:
    text = _BLANK_RUN_RE.sub("\n\n", text)
    text = text.strip()
    return _SPACE_RUN_RE.sub(" ", text)


def cleanup_text(text: str) -> str:
    """Collapse whitespace outside fenced blocks and trim the result.

    Steps:
    1) Split on fenced spans; fenced spans are kept byte-for-byte.
    2) Prose: 3+ newlines -> one blank line, trim, space/tab runs -> one space.
    3) Join the non-empty segments with a blank line, so every fenced block
       is a paragraph of its own.

    Running it on its own output changes nothing.
    """
    parts: List[str] = []
    for segment in split_segments(text):
        cleaned = segment if is_fenced(segment) else normalize_prose(segment)
        if cleaned:
            parts.append(cleaned)
    return "\n\n".join(parts)
