import asyncio
from typing import Dict, List

from refchat.domain.graph import BlockPreview
from refchat.domain.search import SearchResponse, SearchResult
from refchat.graph.base import PreviewResolver, SearchProvider


class FakePreviewResolver(PreviewResolver):
    """Fake resolver with predefined block previews."""

    def __init__(self, previews: Dict[str, str], failing: set[str] | None = None) -> None:
        self._previews = previews
        self._failing = failing or set()
        self.calls: List[str] = []

    async def resolve_reference_preview(self, uid: str) -> BlockPreview | None:
        self.calls.append(uid)
        if uid in self._failing:
            raise ConnectionError(f"lookup failed for {uid}")
        if uid not in self._previews:
            return None
        return BlockPreview(text=self._previews[uid])


class FakeSearchProvider(SearchProvider):
    """Fake search that records queries and can hold a query until released."""

    def __init__(
        self,
        results: Dict[str, List[SearchResult]] | None = None,
        fail: bool = False,
    ) -> None:
        self._results = results or {}
        self._fail = fail
        self._gates: Dict[str, asyncio.Event] = {}
        self.queries: List[str] = []

    def hold(self, query: str) -> asyncio.Event:
        """Block searches for `query` until the returned event is set."""
        gate = asyncio.Event()
        self._gates[query] = gate
        return gate

    async def search(self, query: str, limit: int) -> SearchResponse:
        self.queries.append(query)
        if query in self._gates:
            await self._gates[query].wait()
        if self._fail:
            raise TimeoutError("search timed out")
        return SearchResponse(results=self._results.get(query, [])[:limit])
