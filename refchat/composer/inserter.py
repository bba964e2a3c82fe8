"""Replacement of a trigger span by the selected reference or template.

Every operation either applies completely or leaves the document untouched.
"""

import logging
from datetime import date

from pydantic import BaseModel

from refchat.domain.document import Atom, Document, ReferenceToken
from refchat.domain.search import SearchResult
from refchat.domain.template import PromptTemplate
from refchat.triggers.detector import TriggerContext

logger = logging.getLogger(__name__)

DATE_PLACEHOLDER = "[DATE]"


class InsertionOutcome(BaseModel):
    """Result of an insertion attempt.

    Attributes:
        applied: False when the trigger span could not be found
        cursor: Cursor offset after the insertion (unchanged when not applied)
        token: The inserted reference token, if any
    """

    applied: bool
    cursor: int
    token: ReferenceToken | None = None


def token_for_result(result: SearchResult) -> ReferenceToken:
    """Block hits keep their preview; pages and daily notes are shown by title."""
    if result.kind == "block":
        return ReferenceToken(kind="block", id=result.id, preview_text=result.preview_text)
    return ReferenceToken(
        kind="page", id=result.id, preview_text=result.title or result.preview_text
    )


def locate_trigger_span(
    document: Document, trigger: TriggerContext, cursor: int
) -> tuple[int, int] | None:
    """Find the trigger character plus filter text in the current document.

    The document may have changed since the trigger was detected, so the span is
    looked up at the recorded anchor first, then at the last occurrence before
    the cursor, then at the first occurrence after it.
    """
    if not trigger.active:
        return None

    text = document.plain_text()
    marker = trigger.marker
    anchor = trigger.anchor_offset
    if anchor >= 0 and text[anchor : anchor + len(marker)] == marker:
        return anchor, anchor + len(marker)

    cursor = max(0, min(cursor, len(text)))
    start = text.rfind(marker, 0, cursor)
    if start == -1:
        start = text.find(marker, cursor)
    if start == -1:
        return None
    return start, start + len(marker)


def insert_reference(
    document: Document,
    trigger: TriggerContext,
    result: SearchResult,
    cursor: int,
    separator: str = " ",
) -> InsertionOutcome:
    """Swap the trigger span for a reference token followed by the separator."""
    span = locate_trigger_span(document, trigger, cursor)
    if span is None:
        logger.warning(f"Unable to locate search term in document: {trigger.marker!r}")
        return InsertionOutcome(applied=False, cursor=cursor)

    token = token_for_result(result)
    start, end = span
    new_cursor = document.replace(start, end, [token, separator])
    return InsertionOutcome(applied=True, cursor=new_cursor, token=token)


def expand_template(template: PromptTemplate, today: date) -> str:
    return template.prompt.replace(DATE_PLACEHOLDER, today.isoformat())


def apply_template(
    document: Document,
    trigger: TriggerContext,
    template: PromptTemplate,
    cursor: int,
    today: date,
) -> InsertionOutcome:
    """Swap the command span for the expanded template text.

    Content before the command is kept, right-trimmed and joined to the prompt
    with a single space; content after the command is kept as is.
    """
    span = locate_trigger_span(document, trigger, cursor)
    if span is None:
        logger.warning(f"Unable to locate command in document: {trigger.marker!r}")
        return InsertionOutcome(applied=False, cursor=cursor)

    start, end = span
    before: list[Atom] = document.slice(0, start)
    while before and isinstance(before[-1], str) and before[-1].isspace():
        before.pop()

    prompt = expand_template(template, today)
    items: list[Atom] = before + ([" "] if before else []) + [prompt]
    new_cursor = document.replace(0, end, items)
    return InsertionOutcome(applied=True, cursor=new_cursor)
