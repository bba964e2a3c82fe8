"""Composer module tying trigger detection, search, menus and insertion together."""

from refchat.composer.composer import Composer
from refchat.composer.inserter import InsertionOutcome, apply_template, insert_reference

__all__ = [
    "Composer",
    "InsertionOutcome",
    "apply_template",
    "insert_reference",
]
