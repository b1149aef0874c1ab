"""
Flatten SPL narrative markup into plain text.

SPL section text is HL7 narrative block markup: paragraphs, ordered and
unordered lists, tables and inline <content> runs, nested to any depth.
Every node is classified by the kind of children it carries and handed
to the flattener for that kind:

- TEXT: no child elements, the node's own text
- BLOCKS: paragraph, list or table children. Only the first kind
  present (paragraphs, then lists, then tables) is rendered, one block
  per child, separated by a blank line
- INLINE: anything else, text and children in document order joined
  by single spaces (superscript, subscript and line-break markers are
  dropped)

Element names are compared by local name, so documents with and without
the urn:hl7-org:v3 namespace flatten the same way.

Usage:
    from dailymed_mcp.spl.text import flatten

    flatten(section_text_element)
"""

from enum import Enum
from typing import Sequence

from lxml import etree

BLOCK_TAGS = {"paragraph", "list", "table"}

# Inline formatting markers skipped by the generic flattener
INLINE_MARKERS = {"sup", "sub", "br"}

BULLET = "• "
CELL_SEPARATOR = " | "
BLOCK_SEPARATOR = "\n\n"


class ContentKind(Enum):
    TEXT = "text"
    BLOCKS = "blocks"
    INLINE = "inline"


# ============================================================================
# Element helpers
# ============================================================================

def local_name(element: etree._Element) -> str:
    """Tag name without namespace ('' for comments and processing instructions)."""
    if not isinstance(element.tag, str):
        return ""
    return etree.QName(element).localname


def child_elements(element: etree._Element) -> list[etree._Element]:
    """Child elements, skipping comments and processing instructions."""
    return [child for child in element if isinstance(child.tag, str)]


def children_named(element: etree._Element | None, name: str) -> list[etree._Element]:
    """All direct children with the given local name."""
    if element is None:
        return []
    return [child for child in child_elements(element) if local_name(child) == name]


def first_child(element: etree._Element | None, name: str) -> etree._Element | None:
    """First direct child with the given local name, or None."""
    matches = children_named(element, name)
    return matches[0] if matches else None


def _clean(text: str | None) -> str:
    """Collapse whitespace runs and trim."""
    if not text:
        return ""
    return " ".join(text.split())


def content_kind(element: etree._Element) -> ContentKind:
    names = {local_name(child) for child in child_elements(element)}
    if not names:
        return ContentKind.TEXT
    if names & BLOCK_TAGS:
        return ContentKind.BLOCKS
    return ContentKind.INLINE


# ============================================================================
# Flatteners
# ============================================================================

def flatten(node: etree._Element | str | Sequence | None) -> str:
    """
    Flatten any node of an SPL document to text.

    Accepts an element, a plain string, a sequence of either, or None.
    Missing structure yields an empty string; this never raises.
    """
    if node is None:
        return ""
    if isinstance(node, str):
        return node.strip()
    if isinstance(node, etree._Element):
        return _FLATTENERS[content_kind(node)](node)
    return " ".join(part for part in (flatten(item) for item in node) if part).strip()


def _flatten_text(element: etree._Element) -> str:
    return _clean(element.text)


def _flatten_blocks(element: etree._Element) -> str:
    paragraphs = children_named(element, "paragraph")
    if paragraphs:
        return flatten_paragraphs(paragraphs)

    lists = children_named(element, "list")
    if lists:
        return _join_blocks(flatten_list(child) for child in lists)

    return _join_blocks(flatten_table(child) for child in children_named(element, "table"))


def _join_blocks(blocks) -> str:
    return BLOCK_SEPARATOR.join(block for block in blocks if block).strip()


def _flatten_inline(element: etree._Element) -> str:
    parts = [_clean(element.text)]
    for child in child_elements(element):
        if local_name(child) not in INLINE_MARKERS:
            parts.append(flatten(child))
        parts.append(_clean(child.tail))
    return " ".join(part for part in parts if part).strip()


_FLATTENERS = {
    ContentKind.TEXT: _flatten_text,
    ContentKind.BLOCKS: _flatten_blocks,
    ContentKind.INLINE: _flatten_inline,
}


def flatten_paragraphs(paragraphs: Sequence[etree._Element]) -> str:
    """Paragraphs separated by a blank line."""
    return _join_blocks(flatten(p) for p in paragraphs)


def flatten_list(list_element: etree._Element) -> str:
    """
    Flatten a <list> to one line per item.

    Items are numbered ("1. ") when listType="ordered" and bulleted
    otherwise. Numbering follows item position even when an empty item
    is left out.
    """
    ordered = list_element.get("listType", "unordered") == "ordered"

    lines = []
    for position, item in enumerate(children_named(list_element, "item"), start=1):
        text = flatten(item)
        if not text:
            continue
        marker = f"{position}. " if ordered else BULLET
        lines.append(marker + text)
    return "\n".join(lines)


def _table_rows(container: etree._Element | None) -> list[str]:
    rows = []
    for tr in children_named(container, "tr"):
        cells = [flatten(cell) for cell in child_elements(tr) if local_name(cell) in ("th", "td")]
        if any(cells):
            rows.append(CELL_SEPARATOR.join(cells))
    return rows


def flatten_table(table: etree._Element) -> str:
    """
    Flatten a <table> to pipe-separated rows.

    Layout: optional caption, header rows, one dashed separator line,
    body rows, footer rows. Rows placed directly under <table> count as
    body rows.
    """
    lines = []

    caption = flatten(first_child(table, "caption"))
    if caption:
        lines.append(caption)

    header_rows = []
    for thead in children_named(table, "thead"):
        header_rows.extend(_table_rows(thead))
    if header_rows:
        lines.extend(header_rows)
        lines.append("-" * max(len(row) for row in header_rows))

    for tbody in children_named(table, "tbody"):
        lines.extend(_table_rows(tbody))
    lines.extend(_table_rows(table))

    for tfoot in children_named(table, "tfoot"):
        lines.extend(_table_rows(tfoot))

    return "\n".join(lines)
