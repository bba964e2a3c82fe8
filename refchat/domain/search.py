"""Search domain models."""

from typing import Literal

from pydantic import BaseModel

SearchResultKind = Literal["block", "page", "daily-note"]


class SearchResult(BaseModel):
    """A single hit produced by a search provider. Never mutated locally."""

    id: str
    kind: SearchResultKind
    title: str = ""
    preview_text: str = ""


class SearchResponse(BaseModel):
    results: list[SearchResult] = []
