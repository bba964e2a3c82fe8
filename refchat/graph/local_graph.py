import json
from pathlib import Path
from typing import Dict

from refchat.config import settings
from refchat.domain.graph import BlockPreview, GraphBlock, GraphPage
from refchat.domain.search import SearchResponse, SearchResult
from refchat.graph.base import PreviewResolver, SearchProvider
from refchat.serialization.preview import format_block_preview


class LocalGraph(PreviewResolver, SearchProvider):
    """Local note graph that stores pages and blocks in a JSON file."""

    def __init__(self, filepath: str | Path | None = None) -> None:
        """Initialize LocalGraph.

        Args:
            filepath: Path to graph file. If provided and exists, will auto-load.
                     If provided and doesn't exist, will save to this path when save() is called.
                     If not provided, creates empty graph in memory only.
        """
        self._filepath = str(filepath) if filepath else None

        if self._filepath and Path(self._filepath).exists():
            with open(self._filepath, "r") as f:
                data = json.load(f)
            self._pages = {uid: GraphPage(**page) for uid, page in data["pages"].items()}
            self._blocks = {uid: GraphBlock(**block) for uid, block in data["blocks"].items()}
        else:
            self._pages = {}
            self._blocks = {}

    @classmethod
    def from_data(
        cls,
        pages: Dict[str, GraphPage] | None = None,
        blocks: Dict[str, GraphBlock] | None = None,
    ) -> "LocalGraph":
        """Create LocalGraph from provided data (useful for testing).

        Args:
            pages: Pages dictionary keyed by uid
            blocks: Blocks dictionary keyed by uid

        Returns:
            LocalGraph instance with provided data
        """
        instance = cls(filepath=None)
        instance._pages = pages or {}
        instance._blocks = blocks or {}
        return instance

    async def resolve_reference_preview(self, uid: str) -> BlockPreview | None:
        """Get the raw content of a block as its preview."""
        block = self._blocks.get(uid)
        if block is None:
            return None
        return BlockPreview(text=block.string)

    async def search(self, query: str, limit: int) -> SearchResponse:
        """Search pages by title, then blocks by content."""
        needle = query.strip().lower()
        if not needle or limit <= 0:
            return SearchResponse(results=[])

        ranked_pages = []
        for page in self._pages.values():
            rank = self._title_rank(page.title, query.strip())
            if rank is not None:
                ranked_pages.append((rank, page.title.lower(), page))
        ranked_pages.sort(key=lambda item: (item[0], item[1]))
        results = [self._page_result(page) for _, _, page in ranked_pages]

        for block in self._blocks.values():
            if len(results) >= limit:
                break
            if needle in block.string.lower():
                results.append(self._block_result(block))

        return SearchResponse(results=results[:limit])

    @staticmethod
    def _title_rank(title: str, query: str) -> int | None:
        if not title:
            return None
        if title == query:
            return 0
        title_lower = title.lower()
        query_lower = query.lower()
        if title_lower == query_lower:
            return 1
        if title_lower.startswith(query_lower):
            return 2
        if query_lower in title_lower:
            return 3
        return None

    def _page_result(self, page: GraphPage) -> SearchResult:
        return SearchResult(
            id=page.uid,
            kind="daily-note" if page.is_daily_note else "page",
            title=page.title,
            preview_text=page.title,
        )

    def _block_result(self, block: GraphBlock) -> SearchResult:
        page = self._pages.get(block.page_uid)
        return SearchResult(
            id=block.uid,
            kind="block",
            title=page.title if page else "",
            preview_text=format_block_preview(block.string, settings.block_preview_length),
        )

    def add_page(self, page: GraphPage) -> None:
        """Add a new page or update an existing one."""
        self._pages[page.uid] = page

    def add_block(self, block: GraphBlock) -> None:
        """Add a new block or update an existing one."""
        self._blocks[block.uid] = block

    def save(self, filepath: str | None = None) -> None:
        """Save the graph to a JSON file.

        Args:
            filepath: Path to save to. If not provided, uses the filepath from initialization.
        """
        save_path = filepath or self._filepath
        if not save_path:
            raise ValueError(
                "No filepath provided and no default filepath set during initialization"
            )

        data = {
            "pages": {uid: page.model_dump() for uid, page in self._pages.items()},
            "blocks": {uid: block.model_dump() for uid, block in self._blocks.items()},
        }
        with open(str(save_path), "w") as f:
            json.dump(data, f)
