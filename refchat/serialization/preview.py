"""Preview text for block references."""

import re

from refchat.config import settings

EMPTY_BLOCK_PREVIEW = "Empty block"


def format_block_preview(block_string: str, max_length: int | None = None) -> str:
    """Strip reference and markup syntax from a block and truncate it for display.

    Args:
        block_string: Raw block content
        max_length: Maximum preview length, including the trailing "..."

    Returns:
        Preview text suitable for a reference token
    """
    if max_length is None:
        max_length = settings.block_preview_length
    if not block_string:
        return EMPTY_BLOCK_PREVIEW

    clean_text = re.sub(r"\[\[([^\]]+)\]\]", r"\1", block_string)
    clean_text = re.sub(r"\(\(([^)]+)\)\)", "", clean_text)
    clean_text = re.sub(r"#\w+", "", clean_text)
    clean_text = re.sub(r"\*\*([^*]+)\*\*", r"\1", clean_text)
    clean_text = re.sub(r"__([^_]+)__", r"\1", clean_text)
    clean_text = clean_text.strip()

    if len(clean_text) <= max_length:
        return clean_text
    return clean_text[: max(max_length - 3, 0)] + "..."


def missing_block_preview(uid: str) -> str:
    return f"Block {uid}"
