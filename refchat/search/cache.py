"""Bounded cache of search results keyed by filter text."""

from collections import OrderedDict

from refchat.config import settings
from refchat.domain.search import SearchResult


class SearchCache:
    """Search results keyed by trimmed, lower-cased filter text.

    Entries are evicted oldest-inserted first once the cache holds more than
    `capacity` entries.
    """

    def __init__(self, capacity: int | None = None) -> None:
        self.capacity = capacity if capacity is not None else settings.search_cache_capacity
        self._entries: OrderedDict[str, list[SearchResult]] = OrderedDict()

    @staticmethod
    def normalize_key(filter_text: str) -> str:
        return filter_text.strip().lower()

    def get(self, filter_text: str) -> list[SearchResult] | None:
        return self._entries.get(self.normalize_key(filter_text))

    def put(self, filter_text: str, results: list[SearchResult]) -> None:
        self._entries[self.normalize_key(filter_text)] = list(results)
        while len(self._entries) > self.capacity:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> list[str]:
        return list(self._entries.keys())

    def __contains__(self, filter_text: object) -> bool:
        return isinstance(filter_text, str) and self.normalize_key(filter_text) in self._entries

    def __len__(self) -> int:
        return len(self._entries)
