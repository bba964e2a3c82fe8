from typing import List, Protocol

from refchat.domain.graph import BlockPreview
from refchat.domain.search import SearchResponse
from refchat.domain.template import PromptTemplate


class PreviewResolver(Protocol):
    async def resolve_reference_preview(self, uid: str) -> BlockPreview | None:
        """Get the display preview of a block, or None if the block does not exist.

        May raise on lookup failure; callers substitute a placeholder.
        """
        ...


class SearchProvider(Protocol):
    async def search(self, query: str, limit: int) -> SearchResponse:
        """Search pages, daily notes and blocks matching a query."""
        ...


class TemplateCatalog(Protocol):
    def templates(self) -> List[PromptTemplate]:
        """Get the templates offered by the slash-command menu."""
        ...
