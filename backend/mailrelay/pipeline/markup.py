"""Tree stages of the HTML-to-text transform.

Every function takes a parsed BeautifulSoup tree and rewrites it in place.
They are meant to run in this order (tables are handled in `tables.py`
between sanitizing and links):

    remove_email_footer -> strip_unwanted_tags -> [convert_tables]
    -> convert_links -> convert_emphasis -> convert_lists
    -> convert_line_breaks -> ensure_element_spacing -> extract_text

Rendered constructs are replaced by plain text nodes, so later stages only
ever see the elements that are still left to render.
"""
from __future__ import annotations

from bs4 import BeautifulSoup, Tag
from bs4.element import Comment, Declaration, Doctype, ProcessingInstruction

from .tags import NON_CONTENT_TAGS, TagKind

_MARKUP_NODES = (Comment, Declaration, Doctype, ProcessingInstruction)


def parse_html(html: str) -> BeautifulSoup:
    """Build a fresh, permissive document tree.

    lxml applies the implied end tags (`</li>`, `</td>`, `</tr>`, `</p>`), so
    optional closing tags don't nest siblings into each other. The
    `<html><body>` wrappers it adds are unwrapped by the sanitizer.
    """
    return BeautifulSoup(html or "", "lxml")


def collapse_whitespace(text: str) -> str:
    """Trim and collapse every whitespace run to a single space."""
    return " ".join(text.split())


def remove_email_footer(soup: BeautifulSoup, marker_class: str) -> bool:
    """Cut the signature: the first marker span and everything after it at its level.

    Only the first match is used and only its own siblings are removed;
    content after the marker's ancestors is left alone.
    """
    marker = soup.find("span", class_=marker_class)
    if marker is None:
        return False
    for sibling in list(marker.next_siblings):
        sibling.extract()
    marker.decompose()
    return True


def strip_unwanted_tags(soup: BeautifulSoup) -> None:
    """Unwrap every element that is not an allowed structural tag.

    Child content stays in place. The one exception: comments, doctypes
    and the bodies of `<script>`/`<style>` are not visible text and are
    dropped together with their tags.
    """
    for node in list(soup.descendants):
        if isinstance(node, _MARKUP_NODES):
            node.extract()
    for tag in soup.find_all(NON_CONTENT_TAGS):
        tag.decompose()
    for tag in soup.find_all(True):
        if TagKind.of(tag.name) is None:
            tag.unwrap()


def convert_links(soup: BeautifulSoup) -> None:
    """`<a href=u>t</a>` -> `t (u)`; text only -> `t`; no text -> removed."""
    for link in soup.find_all(TagKind.LINK.value):
        if link.decomposed:
            continue
        href = (link.get("href") or "").strip()
        text = link.get_text().strip()
        if text and href:
            link.replace_with(f"{text} ({href})")
        elif text:
            link.replace_with(text)
        else:
            link.decompose()


def _emphasize(text: str, marker: str) -> str:
    core = text.strip()
    if not core:
        return text
    lead = text[: len(text) - len(text.lstrip())]
    trail = text[len(text.rstrip()):]
    return f"{lead}{marker}{core}{marker}{trail}"


def convert_emphasis(soup: BeautifulSoup) -> None:
    """Bold -> `**text**`, then italic -> `*text*`.

    Empty or whitespace-only emphasis is left as its plain text, so `<b></b>`
    renders as nothing rather than `****`.
    """
    for kind, marker in ((TagKind.BOLD, "**"), (TagKind.ITALIC, "*")):
        for tag in soup.find_all(kind.value):
            tag.replace_with(_emphasize(tag.get_text(), marker))


def convert_lists(soup: BeautifulSoup) -> None:
    """Render lists as blank-line-delimited `1. item` / `- item` blocks.

    Empty items are skipped without breaking the numbering; lists with no
    remaining items disappear.
    """
    for kind in (TagKind.ORDERED_LIST, TagKind.UNORDERED_LIST):
        for lst in soup.find_all(kind.value):
            if lst.decomposed:
                continue
            items = [
                collapse_whitespace(li.get_text())
                for li in lst.find_all(TagKind.LIST_ITEM.value, recursive=False)
            ]
            items = [item for item in items if item]
            if kind is TagKind.ORDERED_LIST:
                lines = [f"{n}. {item}" for n, item in enumerate(items, start=1)]
            else:
                lines = [f"- {item}" for item in items]
            if lines:
                lst.replace_with("\n\n" + "\n".join(lines) + "\n\n")
            else:
                lst.decompose()


def convert_line_breaks(soup: BeautifulSoup) -> None:
    for paragraph in soup.find_all(TagKind.PARAGRAPH.value):
        paragraph.insert_before("\n\n")
        paragraph.insert_after("\n\n")
        paragraph.unwrap()
    for br in soup.find_all(TagKind.LINE_BREAK.value):
        br.replace_with("\n")


def ensure_element_spacing(soup: BeautifulSoup) -> int:
    """Put a space between sibling elements that touch, so their texts don't merge.

    `</td><td>` in serialized form is exactly an element whose next sibling is
    an element. Returns the number of spaces inserted.
    """
    inserted = 0
    for tag in soup.find_all(True):
        if isinstance(tag.next_sibling, Tag):
            tag.insert_after(" ")
            inserted += 1
    return inserted


def extract_text(soup: BeautifulSoup) -> str:
    return soup.get_text()
