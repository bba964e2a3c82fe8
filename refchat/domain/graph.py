"""Note graph domain models."""

import re

from pydantic import BaseModel

MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

DAILY_NOTE_TITLE_PATTERN = re.compile(
    rf"^(?:{'|'.join(MONTHS)}) \d{{1,2}}(?:st|nd|rd|th), \d{{4}}$"
)


class GraphPage(BaseModel):
    """A page of the note graph, identified by uid and titled."""

    uid: str
    title: str

    @property
    def is_daily_note(self) -> bool:
        return bool(DAILY_NOTE_TITLE_PATTERN.match(self.title))


class GraphBlock(BaseModel):
    """A block of the note graph.

    Attributes:
        uid: Block uid, as used in ((uid)) references
        string: Raw block content
        page_uid: uid of the page the block lives on
    """

    uid: str
    string: str
    page_uid: str = ""


class BlockPreview(BaseModel):
    """Display text for a block reference."""

    text: str
