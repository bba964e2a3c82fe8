"""Debounced, cached search feeding the mention menu."""

import asyncio
import logging
from typing import Callable

from refchat.config import settings
from refchat.domain.search import SearchResult
from refchat.graph.base import SearchProvider
from refchat.search.cache import SearchCache
from refchat.search.debouncer import Debouncer

logger = logging.getLogger(__name__)

ResultsCallback = Callable[[str, list[SearchResult]], None]
LoadingCallback = Callable[[bool], None]


class SearchPipeline:
    """Coalesces rapid filter changes into one search per quiet period.

    Results are delivered through `on_results(filter_text, results)` only while
    `filter_text` is still the current filter; late results for an older filter
    are cached but never delivered.
    """

    def __init__(
        self,
        provider: SearchProvider,
        *,
        cache: SearchCache | None = None,
        debouncer: Debouncer | None = None,
        limit: int | None = None,
        on_results: ResultsCallback | None = None,
        on_loading: LoadingCallback | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            provider: External search collaborator
            cache: Shared result cache; a private one is created if omitted
            debouncer: Timer owner; defaults to the configured debounce delay
            limit: Maximum number of results requested per search
            on_results: Receives results for the current filter text
            on_loading: Receives loading state transitions
        """
        self.provider = provider
        self.cache = cache if cache is not None else SearchCache()
        self.debouncer = (
            debouncer if debouncer is not None else Debouncer(settings.search_debounce_seconds)
        )
        self.limit = limit if limit is not None else settings.search_result_limit
        self.on_results = on_results
        self.on_loading = on_loading

        self.current_filter: str | None = None
        self.loading = False
        self._in_flight: set[asyncio.Task] = set()

    def request(self, filter_text: str) -> None:
        """Ask for results for the latest filter text."""
        self.current_filter = filter_text

        if not filter_text.strip():
            self.debouncer.cancel()
            self._set_loading(False)
            self._deliver(filter_text, [])
            return

        cached = self.cache.get(filter_text)
        if cached is not None:
            self.debouncer.cancel()
            self._set_loading(False)
            self._deliver(filter_text, cached)
            return

        self._set_loading(True)
        self.debouncer.schedule(lambda: self._start(filter_text))

    def reset(self) -> None:
        """Forget the current filter so that any in-flight result is dropped."""
        self.debouncer.cancel()
        self.current_filter = None
        self._set_loading(False)

    async def wait_idle(self) -> None:
        """Wait until no search is scheduled or running."""
        while self.debouncer.pending or self._in_flight:
            if self._in_flight:
                await asyncio.gather(*list(self._in_flight), return_exceptions=True)
            else:
                await asyncio.sleep(self.debouncer.delay)

    def _start(self, filter_text: str) -> None:
        task = asyncio.get_running_loop().create_task(self._run(filter_text))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _run(self, filter_text: str) -> None:
        try:
            response = await self.provider.search(filter_text.strip(), self.limit)
        except Exception as e:
            logger.error(f"Error in search for '{filter_text}': {e}")
            results: list[SearchResult] = []
        else:
            results = response.results
            self.cache.put(filter_text, results)

        if filter_text != self.current_filter:
            logger.debug(f"Dropping stale results for '{filter_text}'")
            return

        self._set_loading(False)
        self._deliver(filter_text, results)

    def _set_loading(self, loading: bool) -> None:
        if loading == self.loading:
            return
        self.loading = loading
        if self.on_loading:
            self.on_loading(loading)

    def _deliver(self, filter_text: str, results: list[SearchResult]) -> None:
        if self.on_results:
            self.on_results(filter_text, list(results))
