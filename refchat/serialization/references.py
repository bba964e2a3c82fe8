"""Conversion between documents and canonical strings.

Block tokens serialize as ((uid)) and page tokens as [[Title]]; paragraphs
are joined with newlines. Blocks round-trip by uid, pages by title text.

Parsing is two-phase: `scan` splits a string into text and marker segments,
then `deserialize` resolves each block marker through a PreviewResolver, in
document order, one at a time.
"""

import logging
import re
from typing import Literal, Union

from pydantic import BaseModel

from refchat.domain.document import (
    Atom,
    Document,
    Paragraph,
    ReferenceToken,
    TextRun,
)
from refchat.graph.base import PreviewResolver
from refchat.serialization.preview import format_block_preview, missing_block_preview

logger = logging.getLogger(__name__)

BLOCK_ID_PATTERN = r"[A-Za-z0-9_-]+"
# A page title cannot start with a bracket, so "[[[Title]]" matches at the inner "[["
PAGE_TITLE_PATTERN = r"[^\[\]\n](?:(?!\]\]).)*"
MARKER_RE = re.compile(
    rf"\(\((?P<block>{BLOCK_ID_PATTERN})\)\)|\[\[(?P<page>{PAGE_TITLE_PATTERN})\]\]"
)


class TextSegment(BaseModel):
    type: Literal["text"] = "text"
    text: str


class BlockMarker(BaseModel):
    type: Literal["block"] = "block"
    id: str


class PageMarker(BaseModel):
    type: Literal["page"] = "page"
    title: str


Segment = Union[TextSegment, BlockMarker, PageMarker]


def serialize(document: Document) -> str:
    """Render a document as its canonical string."""
    normalized = document.normalized()
    return "\n".join(_serialize_paragraph(paragraph) for paragraph in normalized.paragraphs)


def _serialize_paragraph(paragraph: Paragraph) -> str:
    return "".join(_serialize_node(node) for node in paragraph.content)


def _serialize_node(node: TextRun | ReferenceToken) -> str:
    if isinstance(node, TextRun):
        return node.text
    if node.kind == "block":
        return f"(({node.id}))"
    if node.kind == "page":
        return f"[[{node.preview_text}]]"
    raise TypeError(f"Unknown reference kind: {node.kind}")


def scan(text: str) -> list[Segment]:
    """Split a canonical string into text, block marker and page marker segments.

    Markers with an empty or malformed id/title are left as text.
    """
    segments: list[Segment] = []
    last_index = 0
    for match in MARKER_RE.finditer(text):
        if match.start() > last_index:
            segments.append(TextSegment(text=text[last_index : match.start()]))
        if match.group("block") is not None:
            segments.append(BlockMarker(id=match.group("block")))
        else:
            segments.append(PageMarker(title=match.group("page")))
        last_index = match.end()
    if last_index < len(text):
        segments.append(TextSegment(text=text[last_index:]))
    return segments


def page_token(title: str) -> ReferenceToken:
    return ReferenceToken(kind="page", id=title, preview_text=title)


def parse_document(text: str) -> Document:
    """Parse a canonical string without resolving block previews."""
    items: list[Atom] = []
    for segment in scan(text):
        if isinstance(segment, TextSegment):
            items.append(segment.text)
        elif isinstance(segment, PageMarker):
            items.append(page_token(segment.title))
        else:
            items.append(
                ReferenceToken(
                    kind="block", id=segment.id, preview_text=missing_block_preview(segment.id)
                )
            )
    return _document_from_items(items)


async def deserialize(
    text: str, resolver: PreviewResolver, preview_length: int | None = None
) -> Document:
    """Parse a canonical string, resolving each block reference's preview.

    Args:
        text: Canonical string
        resolver: Source of block previews
        preview_length: Maximum preview length for block tokens

    Returns:
        The document. A block whose lookup fails is kept as "[Block <uid>]" text.
    """
    items: list[Atom] = []
    for segment in scan(text):
        if isinstance(segment, TextSegment):
            items.append(segment.text)
        elif isinstance(segment, PageMarker):
            items.append(page_token(segment.title))
        else:
            items.append(await _resolve_block(segment.id, resolver, preview_length))
    return _document_from_items(items)


async def _resolve_block(
    uid: str, resolver: PreviewResolver, preview_length: int | None
) -> Atom:
    try:
        preview = await resolver.resolve_reference_preview(uid)
    except Exception as e:
        logger.error(f"Error loading reference {uid}: {e}")
        return f"[{missing_block_preview(uid)}]"

    if preview is None:
        return ReferenceToken(kind="block", id=uid, preview_text=missing_block_preview(uid))
    return ReferenceToken(
        kind="block", id=uid, preview_text=format_block_preview(preview.text, preview_length)
    )


def _document_from_items(items: list[Atom]) -> Document:
    document = Document()
    document.replace(0, 0, items)
    return document
