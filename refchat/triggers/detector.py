"""Detection of "/" command and "@" mention contexts around the cursor."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, computed_field

from refchat.domain.document import OBJECT_REPLACEMENT

TriggerKind = Literal["slash", "at"]

TRIGGER_CHARS: dict[str, str] = {"slash": "/", "at": "@"}

# Hard stops for an "@" context; newlines are allowed inside the filter
AT_STOP_CHARS = (" ", "\t", OBJECT_REPLACEMENT)


class TriggerContext(BaseModel):
    """Where the cursor sits relative to a command or mention invocation.

    Attributes:
        active: Whether the cursor is inside a trigger context
        kind: "slash" or "at" when active
        anchor_offset: Offset of the trigger character
        filter_text: Text typed between the trigger character and the cursor
    """

    model_config = ConfigDict(frozen=True)

    active: bool = False
    kind: TriggerKind | None = None
    anchor_offset: int = -1
    filter_text: str = ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def marker(self) -> str:
        """The literal trigger span: trigger character plus filter text."""
        if self.kind is None:
            return ""
        return TRIGGER_CHARS[self.kind] + self.filter_text

    @computed_field  # type: ignore[prop-decorator]
    @property
    def query(self) -> str:
        """Filter text as sent to search: newlines removed, whitespace trimmed."""
        return self.filter_text.replace("\n", "").strip()

    @property
    def end_offset(self) -> int:
        return self.anchor_offset + len(self.marker)


INACTIVE = TriggerContext()


def detect_trigger(text: str, cursor: int) -> TriggerContext:
    """Find the trigger context the cursor is in, if any.

    Args:
        text: Plain text of the document (tokens rendered as U+FFFC)
        cursor: Cursor offset, clamped to the text

    Returns:
        The active context anchored nearest to the cursor, or INACTIVE
    """
    cursor = max(0, min(cursor, len(text)))

    candidates = [
        context
        for context in (_scan_slash(text, cursor), _scan_at(text, cursor))
        if context is not None
    ]
    if not candidates:
        return INACTIVE
    return max(candidates, key=lambda context: context.anchor_offset)


def _at_boundary(text: str, index: int) -> bool:
    return index == 0 or text[index - 1].isspace()


def _scan_slash(text: str, cursor: int) -> TriggerContext | None:
    for index in range(cursor - 1, -1, -1):
        char = text[index]
        if char == "/":
            # The nearest slash decides; a slash inside a word is not a command
            if not _at_boundary(text, index):
                return None
            return TriggerContext(
                active=True,
                kind="slash",
                anchor_offset=index,
                filter_text=text[index + 1 : cursor],
            )
        if char.isspace() or char == OBJECT_REPLACEMENT:
            return None
    return None


def _scan_at(text: str, cursor: int) -> TriggerContext | None:
    for index in range(cursor - 1, -1, -1):
        char = text[index]
        if char == "@" and _at_boundary(text, index):
            return TriggerContext(
                active=True,
                kind="at",
                anchor_offset=index,
                filter_text=text[index + 1 : cursor],
            )
        if char in AT_STOP_CHARS:
            return None
    return None
